"""
Manager endpoints for customer records. Every route requires Basic auth
against the managers table.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import (
    get_auth_service,
    get_customer_save_body,
    get_customer_service,
    get_manager_authorizer,
)
from ..exceptions import CustomerServiceException, map_to_http_exception
from ..middleware import basic_auth, require_header
from ..schemas import CustomerResponse, CustomerSave, PurgeResponse
from ..services import AuthService, CustomerService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
    dependencies=[Depends(basic_auth(get_manager_authorizer))],
)


def _http_error(exc: CustomerServiceException) -> HTTPException:
    logger.warning(f"Customer Service: {type(exc).__name__}: {exc}")
    return map_to_http_exception(exc)


@router.get(
    "",
    response_model=List[CustomerResponse],
    summary="Retrieve a list of all customers",
)
def list_customers(service: CustomerService = Depends(get_customer_service)):
    try:
        return service.all()
    except CustomerServiceException as e:
        raise _http_error(e)


@router.get(
    "/active",
    response_model=List[CustomerResponse],
    summary="Retrieve active customers only",
)
def list_active_customers(service: CustomerService = Depends(get_customer_service)):
    try:
        return service.all_active()
    except CustomerServiceException as e:
        raise _http_error(e)


@router.post(
    "",
    response_model=CustomerResponse,
    summary="Create a customer, or update it when a nonzero id is given",
    dependencies=[Depends(require_header("Content-Type", "application/json"))],
)
def save_customer(
    customer: CustomerSave = Depends(get_customer_save_body),
    service: CustomerService = Depends(get_customer_service),
):
    logger.info(f"Customer Service: Saving customer id={customer.id} phone={customer.phone}")
    try:
        return service.save(customer)
    except CustomerServiceException as e:
        raise _http_error(e)


@router.delete(
    "/tokens/expired",
    response_model=PurgeResponse,
    summary="Delete every expired customer token",
)
def purge_expired_tokens(auth_service: AuthService = Depends(get_auth_service)):
    try:
        removed = auth_service.purge_expired_tokens()
    except CustomerServiceException as e:
        raise _http_error(e)
    return PurgeResponse(removed=removed)


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Retrieve a single customer by ID",
)
def get_customer(
    customer_id: int, service: CustomerService = Depends(get_customer_service)
):
    try:
        return service.by_id(customer_id)
    except CustomerServiceException as e:
        raise _http_error(e)


@router.delete(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Delete a customer by ID and return the deleted record",
)
def delete_customer(
    customer_id: int, service: CustomerService = Depends(get_customer_service)
):
    logger.info(f"Customer Service: Attempting to delete customer with ID: {customer_id}")
    try:
        return service.remove_by_id(customer_id)
    except CustomerServiceException as e:
        raise _http_error(e)


@router.post(
    "/{customer_id}/block",
    response_model=CustomerResponse,
    summary="Block a customer",
)
def block_customer(
    customer_id: int, service: CustomerService = Depends(get_customer_service)
):
    try:
        return service.block_by_id(customer_id)
    except CustomerServiceException as e:
        raise _http_error(e)


@router.delete(
    "/{customer_id}/block",
    response_model=CustomerResponse,
    summary="Unblock a customer",
)
def unblock_customer(
    customer_id: int, service: CustomerService = Depends(get_customer_service)
):
    try:
        return service.unblock_by_id(customer_id)
    except CustomerServiceException as e:
        raise _http_error(e)
