# customer_service/dependencies.py

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .db import get_db
from .middleware import Authorizer
from .schemas import CustomerSave
from .services import AuthService, CustomerService


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    return CustomerService(db)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_manager_authorizer(
    auth_service: AuthService = Depends(get_auth_service),
) -> Authorizer:
    return auth_service.auth


async def get_customer_save_body(request: Request) -> CustomerSave:
    """
    Reads the save payload only after the router and route gates have passed.
    A declared body parameter would be decoded before any dependency runs.
    """
    try:
        return CustomerSave.model_validate_json(await request.body())
    except ValidationError as e:
        raise RequestValidationError(
            [
                {**error, "loc": ("body", *error["loc"])}
                for error in e.errors(include_url=False)
            ]
        )
