"""
Public customer API: self registration and the token flow.

The token endpoints answer failures with ``{"status": "fail", "reason": ...}``
bodies instead of the usual ``detail`` envelope.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..dependencies import get_auth_service, get_customer_service
from ..exceptions import (
    CustomerServiceException,
    InvalidPasswordError,
    NoSuchUserError,
    TokenExpiredError,
    map_to_http_exception,
)
from ..schemas import (
    CustomerCreate,
    CustomerResponse,
    CustomerSave,
    FailResponse,
    TokenRequest,
    TokenResponse,
    TokenValidateRequest,
    TokenValidateResponse,
)
from ..services import AuthService, CustomerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/customers", tags=["Customer API"])


def _fail(status_code: int, reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=FailResponse(reason=reason).model_dump()
    )


@router.post(
    "",
    response_model=CustomerResponse,
    summary="Register a new customer",
)
def register_customer(
    customer: CustomerCreate, service: CustomerService = Depends(get_customer_service)
):
    logger.info(f"Customer Service: Registering customer with phone: {customer.phone}")
    try:
        return service.save(
            CustomerSave(
                name=customer.name, phone=customer.phone, password=customer.password
            )
        )
    except CustomerServiceException as e:
        logger.warning(f"Customer Service: Registration failed for {customer.phone}: {e}")
        raise map_to_http_exception(e)


@router.post(
    "/token",
    response_model=TokenResponse,
    responses={400: {"model": FailResponse}, 500: {"model": FailResponse}},
    summary="Exchange phone and password for a token",
)
def issue_token(
    credentials: TokenRequest, auth_service: AuthService = Depends(get_auth_service)
):
    try:
        token = auth_service.token_for_customer(credentials.login, credentials.password)
    except (NoSuchUserError, InvalidPasswordError) as e:
        logger.warning(f"Customer Service: Token refused for login {credentials.login!r}: {e}")
        return _fail(status.HTTP_400_BAD_REQUEST, "invalid credentials")
    except CustomerServiceException:
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")
    return TokenResponse(token=token)


@router.post(
    "/token/validate",
    response_model=TokenValidateResponse,
    responses={
        400: {"model": FailResponse},
        404: {"model": FailResponse},
        500: {"model": FailResponse},
    },
    summary="Resolve a token to the customer it was issued for",
)
def validate_token(
    body: TokenValidateRequest, auth_service: AuthService = Depends(get_auth_service)
):
    try:
        customer_id = auth_service.authenticate_customer(body.token)
    except NoSuchUserError:
        return _fail(status.HTTP_404_NOT_FOUND, "not found")
    except TokenExpiredError:
        return _fail(status.HTTP_400_BAD_REQUEST, "expired")
    except CustomerServiceException:
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")
    return TokenValidateResponse(customer_id=customer_id)
