# tests/test_auth_service.py

import re
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from customer_service.exceptions import (
    InternalError,
    InvalidPasswordError,
    NoSuchUserError,
    TokenExpiredError,
)
from customer_service.models import Customer, CustomerToken
from customer_service.security import get_password_hash
from customer_service.services import AuthService

HEX_TOKEN = re.compile(r"^[0-9a-f]{512}$")


@pytest.fixture(scope="function")
def customer(db_session_for_test: Session) -> Customer:
    db_customer = Customer(
        name="Bob", phone="777", password=get_password_hash("correct horse")
    )
    db_session_for_test.add(db_customer)
    db_session_for_test.commit()
    db_session_for_test.refresh(db_customer)
    return db_customer


def expire_token(db: Session, token: str):
    row = db.query(CustomerToken).filter(CustomerToken.token == token).one()
    row.expire = datetime.now(timezone.utc) - timedelta(seconds=1)
    db.commit()


# --- Manager Auth ---
def test_auth_accepts_known_manager(db_session_for_test: Session, manager):
    assert AuthService(db_session_for_test).auth("admin", "secret") is True


@pytest.mark.parametrize(
    "login, password",
    [("admin", "wrong"), ("nobody", "secret"), ("", ""), ("ADMIN", "secret")],
)
def test_auth_rejects_other_pairs(db_session_for_test: Session, manager, login, password):
    assert AuthService(db_session_for_test).auth(login, password) is False


def test_auth_fails_closed_on_store_error():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))

    assert AuthService(db).auth("admin", "secret") is False
    db.rollback.assert_called_once()


# --- Token Issuance ---
def test_token_for_customer_issues_hex_token(db_session_for_test: Session, customer):
    token = AuthService(db_session_for_test).token_for_customer("777", "correct horse")

    assert HEX_TOKEN.match(token)
    assert len(bytes.fromhex(token)) == 256

    stored = db_session_for_test.query(CustomerToken).filter(CustomerToken.token == token).one()
    assert stored.customer_id == customer.id
    assert stored.expire is not None


def test_token_for_customer_never_repeats(db_session_for_test: Session, customer):
    service = AuthService(db_session_for_test)
    first = service.token_for_customer("777", "correct horse")
    second = service.token_for_customer("777", "correct horse")

    assert first != second
    # Both stay valid: several live tokens per customer are allowed
    assert service.authenticate_customer(first) == customer.id
    assert service.authenticate_customer(second) == customer.id


def test_token_for_unknown_phone(db_session_for_test: Session, customer):
    with pytest.raises(NoSuchUserError):
        AuthService(db_session_for_test).token_for_customer("000", "correct horse")


def test_token_for_wrong_password(db_session_for_test: Session, customer):
    with pytest.raises(InvalidPasswordError):
        AuthService(db_session_for_test).token_for_customer("777", "wrong")
    assert db_session_for_test.query(CustomerToken).count() == 0


def test_token_for_customer_with_malformed_hash(db_session_for_test: Session):
    db_session_for_test.add(Customer(name="Legacy", phone="888", password="not-a-hash"))
    db_session_for_test.commit()

    with pytest.raises(InvalidPasswordError):
        AuthService(db_session_for_test).token_for_customer("888", "not-a-hash")


def test_token_for_customer_store_error():
    db = MagicMock()
    db.query.side_effect = SQLAlchemyError("boom")

    with pytest.raises(InternalError):
        AuthService(db).token_for_customer("777", "correct horse")


def test_token_for_customer_randomness_failure(db_session_for_test: Session, customer):
    with patch(
        "customer_service.services.auth.generate_token",
        side_effect=OSError("no entropy"),
    ):
        with pytest.raises(InternalError):
            AuthService(db_session_for_test).token_for_customer("777", "correct horse")


def test_token_for_customer_insert_failure(db_session_for_test: Session, customer):
    service = AuthService(db_session_for_test)
    with patch.object(db_session_for_test, "commit", side_effect=SQLAlchemyError("disk full")):
        with pytest.raises(InternalError):
            service.token_for_customer("777", "correct horse")


# --- Token Validation ---
def test_authenticate_fresh_token(db_session_for_test: Session, customer):
    service = AuthService(db_session_for_test)
    token = service.token_for_customer("777", "correct horse")

    assert service.authenticate_customer(token) == customer.id
    # Reading a token does not consume it
    assert service.authenticate_customer(token) == customer.id


def test_authenticate_expired_token(db_session_for_test: Session, customer):
    service = AuthService(db_session_for_test)
    token = service.token_for_customer("777", "correct horse")
    expire_token(db_session_for_test, token)

    with pytest.raises(TokenExpiredError):
        service.authenticate_customer(token)


def test_authenticate_unknown_token(db_session_for_test: Session):
    with pytest.raises(NoSuchUserError):
        AuthService(db_session_for_test).authenticate_customer("ab" * 256)


def test_authenticate_store_error():
    db = MagicMock()
    db.query.side_effect = SQLAlchemyError("boom")

    with pytest.raises(InternalError):
        AuthService(db).authenticate_customer("ab" * 256)


def test_token_expiry_comes_from_configured_lifetime(db_session_for_test: Session, customer):
    with patch("customer_service.config.TOKEN_LIFETIME_SECONDS", 60):
        token = AuthService(db_session_for_test).token_for_customer("777", "correct horse")

    expire = (
        db_session_for_test.query(CustomerToken.expire)
        .filter(CustomerToken.token == token)
        .scalar()
    )
    if expire.tzinfo is None:
        expire = expire.replace(tzinfo=timezone.utc)
    remaining = expire - datetime.now(timezone.utc)
    assert timedelta(seconds=0) < remaining <= timedelta(seconds=60)


# --- Expired Token Purge ---
def test_purge_expired_tokens(db_session_for_test: Session, customer):
    service = AuthService(db_session_for_test)
    live = service.token_for_customer("777", "correct horse")
    stale = service.token_for_customer("777", "correct horse")
    expire_token(db_session_for_test, stale)

    assert service.purge_expired_tokens() == 1

    assert service.authenticate_customer(live) == customer.id
    with pytest.raises(NoSuchUserError):
        service.authenticate_customer(stale)


def test_deleting_customer_removes_tokens(db_session_for_test: Session, customer):
    token = AuthService(db_session_for_test).token_for_customer("777", "correct horse")

    db_session_for_test.delete(customer)
    db_session_for_test.commit()

    assert db_session_for_test.query(CustomerToken).filter(CustomerToken.token == token).count() == 0
