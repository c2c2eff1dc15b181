"""Domain errors raised by the customer and auth services."""

from http import HTTPStatus

from fastapi import HTTPException, status


class CustomerServiceException(Exception):
    """Base exception for customer service."""

    pass


class NotFoundError(CustomerServiceException):
    """Raised when no matching row exists."""

    pass


class AlreadyExistsError(CustomerServiceException):
    """Raised when a customer with the same phone is already registered."""

    pass


class InternalError(CustomerServiceException):
    """Raised when the store or the randomness source fails."""

    pass


class NoSuchUserError(CustomerServiceException):
    """Raised when a login or token does not belong to any customer."""

    pass


class InvalidPasswordError(CustomerServiceException):
    """Raised when the password does not match the stored hash."""

    pass


class TokenExpiredError(CustomerServiceException):
    """Raised when a token is past its expiry."""

    pass


def reason(status_code: int) -> str:
    return HTTPStatus(status_code).phrase


# HTTP exception mappers
def map_to_http_exception(exc: CustomerServiceException) -> HTTPException:
    """Map service exceptions to HTTP exceptions."""
    if isinstance(exc, NotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=reason(status.HTTP_404_NOT_FOUND),
        )
    if isinstance(exc, AlreadyExistsError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Phone already registered.",
        )
    if isinstance(exc, (NoSuchUserError, InvalidPasswordError, TokenExpiredError)):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=reason(status.HTTP_400_BAD_REQUEST),
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=reason(status.HTTP_500_INTERNAL_SERVER_ERROR),
    )
