# customer_service/main.py

import logging
import sys
import time

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from . import config
from .db import Base, SessionLocal, engine
from .middleware import RequestLoggingMiddleware
from .models import Manager
from .routers import api, customers

# --- Standard Logging Configuration ---
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

# --- FastAPI Application Setup ---
app = FastAPI(
    title="Customer Service API",
    description="Manages customer records and token based customer authentication.",
    version="1.0.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(customers.router)
app.include_router(api.router)


def ensure_manager(login: str, password: str):
    """Creates the bootstrap manager if no manager with that login exists yet."""
    db = SessionLocal()
    try:
        if db.query(Manager).filter(Manager.login == login).first() is None:
            db.add(Manager(login=login, password=password))
            db.commit()
            logger.info(f"Customer Service: Created bootstrap manager '{login}'.")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Customer Service: Could not create bootstrap manager '{login}': {e}",
            exc_info=True,
        )
    finally:
        db.close()


# --- FastAPI Event Handlers ---
@app.on_event("startup")
async def startup_event():
    max_retries = config.DB_STARTUP_MAX_RETRIES
    retry_delay_seconds = config.DB_STARTUP_RETRY_DELAY_SECONDS
    for i in range(max_retries):
        try:
            logger.info(
                f"Customer Service: Attempting to connect to the database and create tables (attempt {i+1}/{max_retries})..."
            )
            Base.metadata.create_all(bind=engine)
            logger.info(
                "Customer Service: Successfully connected to the database and ensured tables exist."
            )
            break  # Exit loop if successful
        except OperationalError as e:
            logger.warning(f"Customer Service: Failed to connect to the database: {e}")
            if i < max_retries - 1:
                logger.info(
                    f"Customer Service: Retrying in {retry_delay_seconds} seconds..."
                )
                time.sleep(retry_delay_seconds)
            else:
                logger.critical(
                    f"Customer Service: Failed to connect to the database after {max_retries} attempts. Exiting application."
                )
                sys.exit(1)  # Critical failure: exit if DB connection is unavailable

    if config.MANAGER_LOGIN and config.MANAGER_PASSWORD:
        ensure_manager(config.MANAGER_LOGIN, config.MANAGER_PASSWORD)

    logger.warning(
        "Customer Service: Manager passwords are stored and compared in plaintext."
    )


# --- Root Endpoint ---
@app.get("/", status_code=status.HTTP_200_OK, summary="Root endpoint")
async def read_root():
    return {"message": "Welcome to the Customer Service!"}


# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    return {"status": "ok", "service": "customer-service"}
