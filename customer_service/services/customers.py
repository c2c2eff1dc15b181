# customer_service/services/customers.py

import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import (
    AlreadyExistsError,
    InternalError,
    InvalidPasswordError,
    NotFoundError,
)
from ..models import Customer
from ..schemas import CustomerSave
from ..security import get_password_hash

logger = logging.getLogger(__name__)


class CustomerService:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, customer_id: int) -> Customer:
        try:
            customer = self.db.query(Customer).filter(Customer.id == customer_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Customer Service: Error fetching customer {customer_id}: {e}",
                exc_info=True,
            )
            raise InternalError("internal error") from e

        if customer is None:
            logger.warning(f"Customer Service: Customer with ID {customer_id} not found.")
            raise NotFoundError(f"customer {customer_id} not found")
        return customer

    def _commit(self, action: str):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Customer Service: Phone already registered while trying to {action}.")
            raise AlreadyExistsError("phone already registered") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Customer Service: Could not {action}: {e}", exc_info=True)
            raise InternalError("internal error") from e

    def _list(self, *criteria) -> List[Customer]:
        try:
            return self.db.query(Customer).filter(*criteria).order_by(Customer.id).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Customer Service: Error listing customers: {e}", exc_info=True)
            raise InternalError("internal error") from e

    def by_id(self, customer_id: int) -> Customer:
        return self._get(customer_id)

    def all(self) -> List[Customer]:
        customers = self._list()
        logger.info(f"Customer Service: Retrieved {len(customers)} customers.")
        return customers

    def all_active(self) -> List[Customer]:
        customers = self._list(Customer.active.is_(True))
        logger.info(f"Customer Service: Retrieved {len(customers)} active customers.")
        return customers

    def save(self, item: CustomerSave) -> Customer:
        """
        Inserts a new customer when item.id is 0, otherwise updates name, phone,
        active flag and (if given) password of the existing customer.
        """
        try:
            password_hash = (
                get_password_hash(item.password) if item.password is not None else None
            )
        except ValueError as e:
            raise InvalidPasswordError(str(e)) from e

        if item.id == 0:
            customer = Customer(
                name=item.name,
                phone=item.phone,
                password=password_hash,
                active=item.active,
            )
            self.db.add(customer)
            self._commit("create customer")
            self.db.refresh(customer)
            logger.info(
                f"Customer Service: Customer '{customer.phone}' (ID: {customer.id}) created successfully."
            )
            return customer

        customer = self._get(item.id)
        customer.name = item.name
        customer.phone = item.phone
        customer.active = item.active
        if password_hash is not None:
            customer.password = password_hash
        self._commit(f"update customer {item.id}")
        self.db.refresh(customer)
        logger.info(f"Customer Service: Customer {customer.id} updated successfully.")
        return customer

    def remove_by_id(self, customer_id: int) -> Customer:
        customer = self._get(customer_id)
        self.db.delete(customer)
        self._commit(f"delete customer {customer_id}")
        logger.info(f"Customer Service: Customer {customer_id} deleted successfully.")
        return customer

    def _set_active(self, customer_id: int, active: bool) -> Customer:
        customer = self._get(customer_id)
        customer.active = active
        self._commit(f"set active={active} on customer {customer_id}")
        self.db.refresh(customer)
        logger.info(f"Customer Service: Customer {customer_id} active set to {active}.")
        return customer

    def block_by_id(self, customer_id: int) -> Customer:
        return self._set_active(customer_id, False)

    def unblock_by_id(self, customer_id: int) -> Customer:
        return self._set_active(customer_id, True)
