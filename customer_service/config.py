# customer_service/config.py

import os

POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_DB = os.getenv("POSTGRES_DB", "customers")
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "postgresql://"
    f"{POSTGRES_USER}:{POSTGRES_PASSWORD}@"
    f"{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

# Deadlines for the store. statement_timeout only applies to PostgreSQL.
DB_CONNECT_TIMEOUT_SECONDS = int(os.getenv("DB_CONNECT_TIMEOUT_SECONDS", "5"))
DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "5000"))
DB_POOL_TIMEOUT_SECONDS = int(os.getenv("DB_POOL_TIMEOUT_SECONDS", "5"))

DB_STARTUP_MAX_RETRIES = int(os.getenv("DB_STARTUP_MAX_RETRIES", "10"))
DB_STARTUP_RETRY_DELAY_SECONDS = int(os.getenv("DB_STARTUP_RETRY_DELAY_SECONDS", "5"))

TOKEN_LIFETIME_SECONDS = int(os.getenv("TOKEN_LIFETIME_SECONDS", "3600"))

# Optional bootstrap manager for the Basic-auth protected routes
MANAGER_LOGIN = os.getenv("MANAGER_LOGIN")
MANAGER_PASSWORD = os.getenv("MANAGER_PASSWORD")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
