# customer_service/db.py

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from . import config


def build_engine(database_url: str):
    """
    Creates the engine every service talks to. The connection, pool checkout and
    (on PostgreSQL) each statement are bounded by the configured deadlines.
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        options = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # In-memory databases only live as long as their single connection
            options["poolclass"] = StaticPool
        return create_engine(database_url, **options)

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_timeout=config.DB_POOL_TIMEOUT_SECONDS,
        connect_args={
            "connect_timeout": config.DB_CONNECT_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={config.DB_STATEMENT_TIMEOUT_MS}",
        },
    )


engine = build_engine(config.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
