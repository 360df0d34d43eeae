# booking_engine/services/appointment/booking_service.py
"""
Booking transactor: the only path that creates appointments.

The availability resolver is advisory. Here the slot is re-checked inside
the same transaction that inserts the appointment, after taking a row lock
on the establishment, so concurrent bookings for one establishment are
serialized and a slot never exceeds its capacity.
"""
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session
import logging

from booking_engine.core.errors import ConflictError, ValidationError
from booking_engine.models.appointment import Appointment, AppointmentStatus
from booking_engine.models.establishment import Establishment
from booking_engine.schemas.availability import SlotState
from booking_engine.schemas.booking import CustomerInput
from booking_engine.services.availability.availability_service import AvailabilityService
from booking_engine.services.coupon.coupon_service import CouponService
from booking_engine.services.customer.customer_service import CustomerService
from booking_engine.services.customer.required_fields import validate_customer_fields
from booking_engine.services.notification.notification_dispatcher import NotificationDispatcher
from booking_engine.services.payment.payment_requirement import PaymentRequirement
from booking_engine.services.plan.plan_quota_service import PlanQuotaService
from booking_engine.utils.local_time import local_now

logger = logging.getLogger(__name__)


class BookingService:
    """Creates appointments atomically"""

    @staticmethod
    def book(
            db: Session,
            establishment: Establishment,
            service,
            customer: CustomerInput,
            target_date: date,
            start_time: time,
            coupon_code: Optional[str] = None,
            now: Optional[datetime] = None
    ) -> Appointment:
        """
        Book ``service`` at ``target_date`` ``start_time`` for ``customer``.

        Raises:
            ValidationError: inactive/foreign service or invalid customer data
            ConflictError: slot not available at commit time
            QuotaError: plan's monthly appointment limit reached
        """
        now = now or local_now(establishment)

        if service.establishment_id != establishment.id or not service.is_active:
            raise ValidationError("Service not found for this establishment", field="service")

        customer_data = customer.provided_fields()
        validate_customer_fields(establishment.required_fields, customer_data, now.date())

        try:
            BookingService._lock_establishment(db, establishment.id)

            state = AvailabilityService.check_slot(db, establishment, service, target_date, start_time, now=now)
            if state != SlotState.AVAILABLE:
                raise ConflictError(state.value)

            PlanQuotaService.ensure_within_quota(db, establishment, now)

            customer_row = CustomerService.upsert_by_phone(db, customer_data)
            db.flush()
            CustomerService.attach_to_establishment(db, customer_row.id, establishment.id)

            price = Decimal(service.final_price)
            discount = Decimal("0.00")
            applied_code = None
            if coupon_code:
                coupon = CouponService.find_valid_coupon(
                    db, establishment.id, coupon_code, now.date(), for_update=True
                )
                if coupon:
                    discount = coupon.calculate_discount(price)
                    applied_code = coupon.code
                    CouponService.redeem(coupon)
                else:
                    logger.info(f"Ignoring invalid coupon {coupon_code!r} for establishment {establishment.id}")

            booking_fee = PaymentRequirement.booking_fee_for(establishment, price - discount)
            status = AppointmentStatus.PENDING_PAYMENT if booking_fee is not None else AppointmentStatus.CONFIRMED

            appointment = Appointment(
                establishment_id=establishment.id,
                customer_id=customer_row.id,
                service_id=service.id,
                scheduled_at=datetime.combine(target_date, start_time),
                duration_minutes=service.duration_minutes,
                price=price,
                discount_amount=discount,
                discount_code=applied_code,
                booking_fee_amount=booking_fee,
                status=status.value,
            )
            db.add(appointment)
            db.commit()

        except Exception:
            db.rollback()
            raise

        db.refresh(appointment)
        logger.info(
            f"Booked appointment {appointment.id} for establishment {establishment.id} "
            f"at {appointment.scheduled_at} ({appointment.status})"
        )

        NotificationDispatcher.appointment_created(appointment)
        return appointment

    @staticmethod
    def _lock_establishment(db: Session, establishment_id) -> None:
        """
        SELECT ... FOR UPDATE on the tenant row. Held until commit/rollback.
        On SQLite the transaction already holds the write lock (BEGIN IMMEDIATE)
        and the FOR UPDATE clause is dropped by the dialect.
        """
        db.query(Establishment.id).filter(
            Establishment.id == establishment_id
        ).with_for_update().one()
