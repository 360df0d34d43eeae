# booking_engine/services/customer/customer_service.py
"""Global customer directory keyed by phone"""
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from booking_engine.models.customer import Customer, CustomerEstablishmentLink
from booking_engine.services.customer.required_fields import normalize_phone

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("name", "last_name", "email", "birth_date")


class CustomerService:
    """Handles customer lookup and upsert"""

    @staticmethod
    def find_by_phone(db: Session, phone: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.phone == normalize_phone(phone)).first()

    @staticmethod
    def upsert_by_phone(db: Session, data: Dict[str, Any]) -> Customer:
        """
        Update the customer with this phone, or create it.

        Creation runs in a SAVEPOINT; if a concurrent request inserted the
        same phone first, the unique constraint fires and the row is updated
        instead. Last write wins on the mutable fields.
        """
        phone = normalize_phone(data["phone"])
        updates = {k: data[k] for k in MUTABLE_FIELDS if data.get(k) not in (None, "")}

        customer = CustomerService.find_by_phone(db, phone)
        if customer:
            CustomerService._apply(customer, updates)
            return customer

        try:
            with db.begin_nested():
                customer = Customer(phone=phone, **updates)
                db.add(customer)
            logger.info(f"Created customer {customer.id}")
            return customer
        except IntegrityError:
            logger.info(f"Customer with phone ending {phone[-4:]} created concurrently, updating instead")

        customer = CustomerService.find_by_phone(db, phone)
        if customer is None:
            raise RuntimeError("Customer insert conflicted but no existing row was found")
        CustomerService._apply(customer, updates)
        return customer

    @staticmethod
    def attach_to_establishment(db: Session, customer_id, establishment_id) -> None:
        """Link the customer to the establishment if not linked yet"""
        if CustomerService.is_linked(db, customer_id, establishment_id):
            return

        try:
            with db.begin_nested():
                db.add(CustomerEstablishmentLink(customer_id=customer_id, establishment_id=establishment_id))
        except IntegrityError:
            # linked by a concurrent booking
            pass

    @staticmethod
    def is_linked(db: Session, customer_id, establishment_id) -> bool:
        """Whether the customer has booked with this establishment before"""
        return db.query(CustomerEstablishmentLink.id).filter(
            CustomerEstablishmentLink.customer_id == customer_id,
            CustomerEstablishmentLink.establishment_id == establishment_id
        ).first() is not None

    @staticmethod
    def _apply(customer: Customer, updates: Dict[str, Any]) -> None:
        for key, value in updates.items():
            setattr(customer, key, value)
