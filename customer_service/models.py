# customer_service/models.py

from datetime import datetime, timedelta, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, true
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func  # For auto-populating timestamps

from . import config
from .db import Base


def token_expiry():
    """Expiry assigned to every new token row at insert time."""
    return datetime.now(timezone.utc) + timedelta(seconds=config.TOKEN_LIFETIME_SECONDS)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), unique=True, index=True, nullable=False)  # Login
    password = Column(String(255), nullable=False)  # bcrypt hash
    active = Column(Boolean, nullable=False, default=True, server_default=true())
    created = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Issued tokens go away with their customer
    tokens = relationship(
        "CustomerToken", back_populates="customer", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}', phone='{self.phone}', active={self.active})>"


class Manager(Base):
    __tablename__ = "managers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    login = Column(String(255), unique=True, index=True, nullable=False)
    # TODO: store a bcrypt hash here and switch AuthService.auth to bcrypt.checkpw
    # once existing manager rows have been migrated.
    password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Manager(id={self.id}, login='{self.login}')>"


class CustomerToken(Base):
    __tablename__ = "customers_tokens"

    token = Column(String(512), primary_key=True)
    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expire = Column(DateTime(timezone=True), nullable=False, default=token_expiry)
    created = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    customer = relationship("Customer", back_populates="tokens")

    def __repr__(self):
        return f"<CustomerToken(customer_id={self.customer_id}, expire={self.expire})>"
