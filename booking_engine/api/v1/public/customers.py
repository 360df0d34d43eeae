# ============================================================================
# booking_engine/api/v1/public/customers.py
# Public booking page - returning customer lookup
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from booking_engine.config.database import get_db
from booking_engine.schemas.booking import CustomerMatch, CustomerSearchResponse
from booking_engine.services.customer.customer_service import CustomerService
from booking_engine.services.customer.required_fields import normalize_phone
from booking_engine.services.establishment.establishment_service import EstablishmentService

router = APIRouter(prefix="/customers", tags=["public-customers"])


@router.get("/search", response_model=CustomerSearchResponse)
async def search_customer(
        phone: Optional[str] = Query(None, description="Phone in any format"),
        establishment: Optional[str] = Query(None, description="Establishment slug, booking slug or id"),
        db: Session = Depends(get_db)
):
    """
    Find a customer by phone to prefill the booking form.

    ``is_existing_customer`` tells whether the customer has booked with the
    given establishment before; it is false when no establishment is given.
    """
    if not normalize_phone(phone):
        return CustomerSearchResponse()

    customer = CustomerService.find_by_phone(db, phone)
    if customer is None:
        return CustomerSearchResponse()

    is_existing = False
    if establishment:
        target = EstablishmentService.get_establishment(db, establishment)
        is_existing = CustomerService.is_linked(db, customer.id, target.id)

    return CustomerSearchResponse(customer=CustomerMatch(
        id=str(customer.id),
        name=customer.name,
        last_name=customer.last_name,
        email=customer.email,
        phone=customer.phone,
        birth_date=customer.birth_date,
        is_existing_customer=is_existing,
    ))
