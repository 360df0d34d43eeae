"""
Shared fixtures: a file-backed SQLite database (so several sessions and
threads see the same data), a session per test and small model factories.
"""
import os
import tempfile
from datetime import date, datetime, time
from decimal import Decimal

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="booking_engine_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["AVAILABILITY_CACHE_TTL_SECONDS"] = "0"
os.environ["NOTIFICATIONS_ENABLED"] = "false"
os.environ["DEFAULT_TIMEZONE"] = "America/Sao_Paulo"

from booking_engine.config.database import SessionLocal, create_tables, engine  # noqa: E402
from booking_engine.models import (  # noqa: E402
    Appointment,
    AppointmentStatus,
    Base,
    BlockedDate,
    BlockedTime,
    Coupon,
    Customer,
    Establishment,
    Plan,
    Service,
)
from booking_engine.models.establishment import default_working_hours  # noqa: E402

# Monday
MONDAY = date(2026, 3, 2)
MONDAY_MORNING = datetime(2026, 3, 2, 8, 0)


@pytest.fixture(scope="session", autouse=True)
def _schema():
    create_tables(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        with engine.begin() as conn:
            for table in reversed(Base.metadata.sorted_tables):
                conn.execute(table.delete())


@pytest.fixture
def make_plan(db):
    def _make(**overrides):
        fields = {"name": "Basic", "monthly_appointment_limit": None, "unlimited_appointments": True}
        fields.update(overrides)
        plan = Plan(**fields)
        db.add(plan)
        db.commit()
        return plan
    return _make


@pytest.fixture
def make_establishment(db):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "name": f"Studio {counter['n']}",
            "slug": f"studio-{counter['n']}",
            "timezone": "America/Sao_Paulo",
            "working_hours": default_working_hours(),
            "slots_per_hour": 1,
            "required_fields": ["name", "phone"],
        }
        fields.update(overrides)
        establishment = Establishment(**fields)
        db.add(establishment)
        db.commit()
        return establishment
    return _make


@pytest.fixture
def make_service(db):
    def _make(establishment, **overrides):
        fields = {
            "establishment_id": establishment.id,
            "name": "Haircut",
            "price": Decimal("100.00"),
            "duration_minutes": 60,
            "is_active": True,
        }
        fields.update(overrides)
        service = Service(**fields)
        db.add(service)
        db.commit()
        return service
    return _make


@pytest.fixture
def make_customer(db):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {"name": "Ana", "phone": f"5551999{counter['n']:05d}"}
        fields.update(overrides)
        customer = Customer(**fields)
        db.add(customer)
        db.commit()
        return customer
    return _make


@pytest.fixture
def make_appointment(db, make_customer):
    def _make(establishment, service, scheduled_at, status=AppointmentStatus.CONFIRMED, **overrides):
        customer = overrides.pop("customer", None) or make_customer()
        fields = {
            "establishment_id": establishment.id,
            "customer_id": customer.id,
            "service_id": service.id,
            "scheduled_at": scheduled_at,
            "duration_minutes": service.duration_minutes,
            "price": Decimal(service.price),
            "status": status.value,
        }
        fields.update(overrides)
        appointment = Appointment(**fields)
        db.add(appointment)
        db.commit()
        return appointment
    return _make


@pytest.fixture
def block_date(db):
    def _make(establishment, blocked_date, is_recurring=False, reason=None):
        row = BlockedDate(
            establishment_id=establishment.id,
            blocked_date=blocked_date,
            is_recurring=is_recurring,
            reason=reason,
        )
        db.add(row)
        db.commit()
        return row
    return _make


@pytest.fixture
def block_time(db):
    def _make(establishment, blocked_date, start, end, reason=None):
        row = BlockedTime(
            establishment_id=establishment.id,
            blocked_date=blocked_date,
            start_time=start,
            end_time=end,
            reason=reason,
        )
        db.add(row)
        db.commit()
        return row
    return _make


@pytest.fixture
def make_coupon(db):
    def _make(establishment, **overrides):
        fields = {
            "establishment_id": establishment.id,
            "code": "WELCOME10",
            "name": "Welcome",
            "type": "percentage",
            "value": Decimal("10"),
            "used_count": 0,
            "is_active": True,
        }
        fields.update(overrides)
        coupon = Coupon(**fields)
        db.add(coupon)
        db.commit()
        return coupon
    return _make


def hhmm(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()
