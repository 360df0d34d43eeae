# ============================================================================
# booking_engine/api/v1/public/booking.py
# Public booking page - appointment creation and coupon preview
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from booking_engine.config.database import get_db
from booking_engine.models.appointment import AppointmentStatus
from booking_engine.schemas.booking import (
    AppointmentResponse,
    BookingRequest,
    BookingResponse,
    CouponValidateRequest,
    CouponValidation,
)
from booking_engine.services.appointment.booking_service import BookingService
from booking_engine.services.coupon.coupon_service import CouponService
from booking_engine.services.establishment.establishment_service import EstablishmentService
from booking_engine.utils.local_time import local_now

router = APIRouter(tags=["public-booking"])


@router.post("/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
        request: BookingRequest,
        db: Session = Depends(get_db)
):
    """
    Book an appointment.

    409 when the slot was taken meanwhile, 422 when the establishment's plan
    limit is reached, 400 for invalid input.
    """
    establishment = EstablishmentService.get_establishment(db, request.establishment)
    service = EstablishmentService.get_service(db, establishment, request.service)

    appointment = BookingService.book(
        db,
        establishment,
        service,
        request.customer,
        request.date,
        request.time,
        coupon_code=request.coupon_code,
    )

    requires_payment = appointment.status == AppointmentStatus.PENDING_PAYMENT.value
    return BookingResponse(
        message="Appointment created, awaiting booking fee payment" if requires_payment
        else "Appointment created successfully",
        appointment=AppointmentResponse(**appointment.to_dict()),
        requires_payment=requires_payment,
    )


@router.post("/coupons/validate", response_model=CouponValidation)
async def validate_coupon(
        request: CouponValidateRequest,
        db: Session = Depends(get_db)
):
    """Preview a coupon discount for a service without using it"""
    establishment = EstablishmentService.get_establishment(db, request.establishment)
    service = EstablishmentService.get_service(db, establishment, request.service)

    return CouponService.validate(
        db,
        request.code,
        establishment.id,
        service.final_price,
        local_now(establishment).date(),
    )
