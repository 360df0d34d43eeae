import threading
from datetime import date, datetime, time
from decimal import Decimal
from unittest.mock import patch

import pytest

from booking_engine.config.database import SessionLocal
from booking_engine.core.errors import ConflictError, QuotaError, ValidationError
from booking_engine.models import Appointment, AppointmentStatus, Customer, CustomerEstablishmentLink, Establishment, Service
from booking_engine.schemas.booking import CustomerInput
from booking_engine.services.appointment.booking_service import BookingService
from conftest import MONDAY, MONDAY_MORNING

TEN = time(10, 0)


def customer(**overrides):
    fields = {"name": "Maria", "phone": "(51) 98065-1119"}
    fields.update(overrides)
    return CustomerInput(**fields)


@pytest.fixture
def studio(make_establishment, make_service):
    establishment = make_establishment()
    service = make_service(establishment, duration_minutes=60, price=Decimal("100.00"))
    return establishment, service


class TestBook:
    def test_creates_confirmed_appointment(self, db, studio):
        establishment, service = studio

        appointment = BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)

        assert appointment.status == AppointmentStatus.CONFIRMED.value
        assert appointment.scheduled_at == datetime(2026, 3, 2, 10, 0)
        assert appointment.duration_minutes == 60
        assert appointment.price == Decimal("100.00")
        assert appointment.discount_amount == Decimal("0.00")
        assert appointment.booking_fee_amount is None
        assert db.query(Appointment).count() == 1

    def test_snapshots_duration_and_promotion_price(self, db, make_establishment, make_service):
        establishment = make_establishment()
        service = make_service(establishment, duration_minutes=90, has_promotion=True, promotion_price=Decimal("80.00"))

        appointment = BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)

        service.duration_minutes = 30
        db.commit()
        db.refresh(appointment)
        assert appointment.duration_minutes == 90
        assert appointment.price == Decimal("80.00")

    def test_occupied_slot_conflicts(self, db, studio, make_appointment):
        establishment, service = studio
        make_appointment(establishment, service, datetime(2026, 3, 2, 10, 0))

        with pytest.raises(ConflictError) as exc_info:
            BookingService.book(db, establishment, service, customer(), MONDAY, time(10, 30), now=MONDAY_MORNING)

        assert exc_info.value.reason == "occupied"
        assert db.query(Appointment).count() == 1
        assert db.query(Customer).filter(Customer.phone == "51980651119").count() == 0

    @pytest.mark.parametrize("target,start,reason", [
        (MONDAY, time(7, 0), "past"),
        (MONDAY, time(10, 15), "closed"),
        (date(2026, 3, 7), TEN, "closed"),
    ])
    def test_unbookable_slots(self, db, studio, target, start, reason):
        establishment, service = studio

        with pytest.raises(ConflictError) as exc_info:
            BookingService.book(db, establishment, service, customer(), target, start, now=MONDAY_MORNING)
        assert exc_info.value.reason == reason

    def test_blocked_date_conflicts(self, db, studio, block_date):
        establishment, service = studio
        block_date(establishment, MONDAY)

        with pytest.raises(ConflictError) as exc_info:
            BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)
        assert exc_info.value.reason == "blocked"

    def test_inactive_service_rejected(self, db, make_establishment, make_service):
        establishment = make_establishment()
        service = make_service(establishment, is_active=False)

        with pytest.raises(ValidationError):
            BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)

    def test_foreign_service_rejected(self, db, studio, make_establishment, make_service):
        establishment, _ = studio
        foreign = make_service(make_establishment())

        with pytest.raises(ValidationError):
            BookingService.book(db, establishment, foreign, customer(), MONDAY, TEN, now=MONDAY_MORNING)

    def test_missing_required_field(self, db, make_establishment, make_service):
        establishment = make_establishment(required_fields=["name", "phone", "email"])
        service = make_service(establishment)

        with pytest.raises(ValidationError) as exc_info:
            BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)

        assert "email" in exc_info.value.details["errors"]
        assert db.query(Appointment).count() == 0

    def test_notification_dispatched_after_commit(self, db, studio):
        establishment, service = studio

        with patch("booking_engine.services.appointment.booking_service.NotificationDispatcher") as dispatcher:
            appointment = BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)

        dispatcher.appointment_created.assert_called_once_with(appointment)

    def test_no_notification_on_conflict(self, db, studio, make_appointment):
        establishment, service = studio
        make_appointment(establishment, service, datetime(2026, 3, 2, 10, 0))

        with patch("booking_engine.services.appointment.booking_service.NotificationDispatcher") as dispatcher:
            with pytest.raises(ConflictError):
                BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)

        dispatcher.appointment_created.assert_not_called()


class TestQuota:
    def test_limit_reached(self, db, make_plan, make_establishment, make_service, make_appointment):
        plan = make_plan(monthly_appointment_limit=5, unlimited_appointments=False)
        establishment = make_establishment(plan_id=plan.id)
        service = make_service(establishment)
        for day in (3, 4, 5, 6, 9):
            make_appointment(establishment, service, datetime(2026, 3, day, 9, 0))

        with pytest.raises(QuotaError) as exc_info:
            BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)

        assert exc_info.value.limit == 5
        assert db.query(Appointment).count() == 5

    def test_cancelled_and_other_months_do_not_count(self, db, make_plan, make_establishment, make_service, make_appointment):
        plan = make_plan(monthly_appointment_limit=2, unlimited_appointments=False)
        establishment = make_establishment(plan_id=plan.id)
        service = make_service(establishment)
        make_appointment(establishment, service, datetime(2026, 3, 3, 9, 0))
        make_appointment(establishment, service, datetime(2026, 3, 4, 9, 0), status=AppointmentStatus.CANCELLED)
        make_appointment(establishment, service, datetime(2026, 2, 27, 9, 0))
        make_appointment(establishment, service, datetime(2026, 4, 1, 9, 0))

        appointment = BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)
        assert appointment.id is not None

    def test_unlimited_plan(self, db, make_plan, make_establishment, make_service, make_appointment):
        plan = make_plan(monthly_appointment_limit=1, unlimited_appointments=True)
        establishment = make_establishment(plan_id=plan.id)
        service = make_service(establishment)
        make_appointment(establishment, service, datetime(2026, 3, 3, 9, 0))

        BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)


class TestCustomerUpsert:
    def test_same_phone_reuses_customer(self, db, studio):
        establishment, service = studio

        first = BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)
        second = BookingService.book(
            db, establishment, service,
            customer(name="Maria Clara", phone="51980651119", email="maria@studio.com.br"),
            MONDAY, time(14, 0), now=MONDAY_MORNING,
        )

        assert first.customer_id == second.customer_id
        stored = db.query(Customer).one()
        assert stored.phone == "51980651119"
        assert stored.name == "Maria Clara"
        assert stored.email == "maria@studio.com.br"

    def test_links_customer_once_per_establishment(self, db, studio, make_establishment, make_service):
        establishment, service = studio
        other = make_establishment()
        other_service = make_service(other)

        BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)
        BookingService.book(db, establishment, service, customer(), MONDAY, time(15, 0), now=MONDAY_MORNING)
        BookingService.book(db, other, other_service, customer(), MONDAY, TEN, now=MONDAY_MORNING)

        assert db.query(Customer).count() == 1
        assert db.query(CustomerEstablishmentLink).count() == 2


class TestCouponsAndFees:
    def test_coupon_discount_and_usage(self, db, studio, make_coupon):
        establishment, service = studio
        coupon = make_coupon(establishment, code="WELCOME10", value=Decimal("10"))

        appointment = BookingService.book(
            db, establishment, service, customer(), MONDAY, TEN, coupon_code="welcome10", now=MONDAY_MORNING
        )

        assert appointment.discount_amount == Decimal("10.00")
        assert appointment.discount_code == "WELCOME10"
        assert appointment.final_price == Decimal("90.00")
        db.refresh(coupon)
        assert coupon.used_count == 1

    def test_invalid_coupon_does_not_block_booking(self, db, studio, make_coupon):
        establishment, service = studio
        make_coupon(establishment, code="OLD", valid_until=date(2026, 2, 1))

        appointment = BookingService.book(
            db, establishment, service, customer(), MONDAY, TEN, coupon_code="OLD", now=MONDAY_MORNING
        )

        assert appointment.discount_amount == Decimal("0.00")
        assert appointment.discount_code is None

    def test_booking_fee_makes_appointment_pending_payment(self, db, make_establishment, make_service, make_coupon):
        establishment = make_establishment(
            booking_fee_enabled=True,
            booking_fee_type="percentage",
            booking_fee_percentage=Decimal("50"),
            payment_access_token="APP_USR-token",
        )
        service = make_service(establishment, price=Decimal("100.00"))
        make_coupon(establishment, code="FIXED20", type="fixed", value=Decimal("20"))

        appointment = BookingService.book(
            db, establishment, service, customer(), MONDAY, TEN, coupon_code="FIXED20", now=MONDAY_MORNING
        )

        assert appointment.status == AppointmentStatus.PENDING_PAYMENT.value
        assert appointment.booking_fee_amount == Decimal("40.00")

    def test_fee_without_payment_account_is_ignored(self, db, make_establishment, make_service):
        establishment = make_establishment(booking_fee_enabled=True, booking_fee_amount=Decimal("15"))
        service = make_service(establishment)

        appointment = BookingService.book(db, establishment, service, customer(), MONDAY, TEN, now=MONDAY_MORNING)

        assert appointment.status == AppointmentStatus.CONFIRMED.value
        assert appointment.booking_fee_amount is None


class TestConcurrentBooking:
    @pytest.mark.parametrize("capacity,attempts", [(1, 2), (1, 5), (2, 5)])
    def test_never_overbooks(self, db, make_establishment, make_service, capacity, attempts):
        establishment = make_establishment(slots_per_hour=capacity)
        service = make_service(establishment)
        establishment_id, service_id = establishment.id, service.id
        db.close()

        barrier = threading.Barrier(attempts, timeout=10)
        outcomes = []
        lock = threading.Lock()

        def attempt(index):
            session = SessionLocal()
            try:
                est = session.get(Establishment, establishment_id)
                svc = session.get(Service, service_id)
                session.commit()
                barrier.wait()
                BookingService.book(
                    session, est, svc,
                    customer(name=f"Customer {index}", phone=f"5551988{index:04d}"),
                    MONDAY, TEN, now=MONDAY_MORNING,
                )
                result = "booked"
            except ConflictError as e:
                result = e.reason
            finally:
                session.close()
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(attempts)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert outcomes.count("booked") == min(attempts, capacity)
        assert outcomes.count("occupied") == attempts - min(attempts, capacity)

        check = SessionLocal()
        try:
            assert check.query(Appointment).filter(Appointment.establishment_id == establishment_id).count() == capacity
        finally:
            check.close()
