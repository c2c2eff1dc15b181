"""
Request interceptors wrapped around the route handlers.

RequestLoggingMiddleware is installed on the app and sees every request. The
Basic-auth and header gates are FastAPI dependencies: each one either raises an
HTTPException, which ends the request with that response, or returns and lets
the request move on to the next dependency and finally the handler.
"""

import base64
import logging
import time
from typing import Callable, Optional, Tuple

from fastapi import Depends, Header, HTTPException, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from .exceptions import reason

logger = logging.getLogger(__name__)

Authorizer = Callable[[str, str], bool]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs a START and an END line for every request. Never alters the response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method, path = request.method, request.url.path
        logger.info(f"START: {method} {path}")
        start = time.perf_counter()
        status_code = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            latency_ms = (time.perf_counter() - start) * 1000
            logger.info(f"END: {method} {path} {status_code} ({latency_ms:.1f} ms)")


def parse_basic_credentials(value: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Extracts (login, password) from an ``Authorization: Basic <base64>`` value.

    Returns None when the header is missing, is not exactly two space separated
    parts with the Basic scheme, is not valid base64/UTF-8, or does not decode
    to exactly two colon separated fields.
    """
    if not value:
        return None

    parts = value.split(" ")
    if len(parts) != 2 or parts[0].lower() != "basic":
        return None

    try:
        decoded = base64.b64decode(parts[1], validate=True).decode("utf-8")
    except ValueError:
        return None

    credentials = decoded.split(":")
    if len(credentials) != 2:
        return None

    return credentials[0], credentials[1]


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=reason(status.HTTP_401_UNAUTHORIZED),
        headers={"WWW-Authenticate": "Basic"},
    )


def basic_auth(get_authorizer: Callable[..., Authorizer]):
    """
    Builds a dependency that lets a request through only when its Basic
    credentials satisfy the authorizer provided by ``get_authorizer`` (itself a
    dependency, so it can pull in a database session).
    """

    def gate(
        authorization: Optional[str] = Header(None),
        authorize: Authorizer = Depends(get_authorizer),
    ) -> str:
        credentials = parse_basic_credentials(authorization)
        if credentials is None:
            logger.warning("Customer Service: Rejected request with missing or malformed Basic credentials.")
            raise _unauthorized()

        login, password = credentials
        if not authorize(login, password):
            logger.warning(f"Customer Service: Rejected Basic credentials for login {login!r}.")
            raise _unauthorized()
        return login

    return gate


def require_header(name: str, value: str):
    """Dependency rejecting with 400 any request whose header ``name`` is not exactly ``value``."""

    def gate(request: Request):
        if request.headers.get(name) != value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=reason(status.HTTP_400_BAD_REQUEST),
            )

    return gate
