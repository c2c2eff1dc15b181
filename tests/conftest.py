# tests/conftest.py

import base64
import logging
import os

# Point the service at an in-memory SQLite database before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("MANAGER_LOGIN", None)
os.environ.pop("MANAGER_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient

from customer_service.db import Base, SessionLocal, engine, get_db
from customer_service.main import app
from customer_service.models import Manager

# Suppress noisy logs from SQLAlchemy/FastAPI/Uvicorn during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
logging.getLogger("fastapi").setLevel(logging.WARNING)

MANAGER_LOGIN = "admin"
MANAGER_PASSWORD = "secret"


def basic_header(login: str, password: str) -> dict:
    encoded = base64.b64encode(f"{login}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {encoded}"}


# --- Pytest Fixtures ---
@pytest.fixture(scope="function")
def db_session_for_test():
    # Fresh schema for every test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    try:
        yield db
    finally:
        db.close()
        app.dependency_overrides.pop(get_db, None)
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def manager(db_session_for_test):
    db_manager = Manager(login=MANAGER_LOGIN, password=MANAGER_PASSWORD)
    db_session_for_test.add(db_manager)
    db_session_for_test.commit()
    return db_manager


@pytest.fixture(scope="function")
def auth_headers(manager) -> dict:
    return basic_header(MANAGER_LOGIN, MANAGER_PASSWORD)


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as test_client:
        yield test_client
