# customer_service/schemas.py

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _check_password_bytes(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes in UTF-8")
    return value


class CustomerBase(BaseModel):
    name: str = Field(
        ..., min_length=1, max_length=255, description="Name of the customer."
    )
    phone: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Customer's phone number, used as the login.",
    )


class CustomerCreate(CustomerBase):
    password: str = Field(..., min_length=1, description="Customer's password.")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        return _check_password_bytes(value)


# Legacy save payload: id 0 (or missing) inserts, any other id updates that customer
class CustomerSave(CustomerBase):
    id: int = Field(0, ge=0, description="ID of the customer to update, 0 to create.")
    password: Optional[str] = Field(
        None, min_length=1, description="Customer's password."
    )
    active: bool = Field(True, description="Whether the customer is active.")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        return _check_password_bytes(value)

    @model_validator(mode="after")
    def password_required_on_create(self):
        if self.id == 0 and self.password is None:
            raise ValueError("password is required when creating a customer")
        return self


# Schema for responding with Customer data. The password hash is never included.
class CustomerResponse(CustomerBase):
    id: int = Field(..., description="Unique ID of the customer.")
    active: bool = Field(..., description="Whether the customer is active.")
    created: datetime = Field(
        ..., description="Timestamp of when the customer record was created."
    )

    model_config = ConfigDict(from_attributes=True)  # Enable ORM mode for Pydantic V2


class TokenRequest(BaseModel):
    login: str = Field(..., description="Customer's phone number.")
    password: str = Field(..., description="Customer's password.")


class TokenResponse(BaseModel):
    status: Literal["ok"] = "ok"
    token: str


class TokenValidateRequest(BaseModel):
    token: str


class TokenValidateResponse(BaseModel):
    status: Literal["ok"] = "ok"
    customer_id: int = Field(..., alias="customerId")

    model_config = ConfigDict(populate_by_name=True)


class FailResponse(BaseModel):
    status: Literal["fail"] = "fail"
    reason: str


class PurgeResponse(BaseModel):
    status: Literal["ok"] = "ok"
    removed: int
