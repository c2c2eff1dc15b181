"""
Authentication of managers (Basic auth) and customers (opaque tokens).

Managers are checked by plain equality against the managers table. Customers
exchange phone + password for a random 512 character hex token, which is later
resolved back to the customer id until it expires.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import (
    InternalError,
    InvalidPasswordError,
    NoSuchUserError,
    TokenExpiredError,
)
from ..models import Customer, CustomerToken, Manager
from ..security import generate_token, verify_password

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def auth(self, login: str, password: str) -> bool:
        """True iff exactly one manager matches login and password. Fails closed."""
        try:
            matches = (
                self.db.query(Manager)
                .filter(Manager.login == login, Manager.password == password)
                .count()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Customer Service: Manager lookup failed for login '{login}': {e}",
                exc_info=True,
            )
            return False
        return matches == 1

    def token_for_customer(self, phone: str, password: str) -> str:
        try:
            customer = self.db.query(Customer).filter(Customer.phone == phone).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Customer Service: Customer lookup failed for phone {phone}: {e}",
                exc_info=True,
            )
            raise InternalError("internal error") from e

        if customer is None:
            raise NoSuchUserError("no such user")

        if not verify_password(password, customer.password):
            raise InvalidPasswordError("invalid password")

        try:
            token = generate_token()
        except (OSError, NotImplementedError) as e:
            logger.critical(
                f"Customer Service: Randomness source unavailable: {e}", exc_info=True
            )
            raise InternalError("internal error") from e

        try:
            self.db.add(CustomerToken(token=token, customer_id=customer.id))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Customer Service: Could not store token for customer {customer.id}: {e}",
                exc_info=True,
            )
            raise InternalError("internal error") from e

        logger.info(f"Customer Service: Issued token for customer {customer.id}.")
        return token

    def authenticate_customer(self, token: str) -> int:
        try:
            row = (
                self.db.query(CustomerToken.customer_id, CustomerToken.expire)
                .filter(CustomerToken.token == token)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Customer Service: Token lookup failed: {e}", exc_info=True)
            raise InternalError("internal error") from e

        if row is None:
            raise NoSuchUserError("no such user")

        if datetime.now(timezone.utc) > _as_utc(row.expire):
            raise TokenExpiredError("token expired")

        return row.customer_id

    def purge_expired_tokens(self) -> int:
        """Deletes every token past its expiry and returns how many were removed."""
        try:
            removed = (
                self.db.query(CustomerToken)
                .filter(CustomerToken.expire < datetime.now(timezone.utc))
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Customer Service: Could not purge expired tokens: {e}", exc_info=True
            )
            raise InternalError("internal error") from e

        logger.info(f"Customer Service: Purged {removed} expired tokens.")
        return removed
