# booking_engine/models/establishment.py
"""
Establishment Model - tenant root
Owns services, blocked dates/times, coupons and appointments.
"""
from sqlalchemy import Column, String, Boolean, DateTime, JSON, Integer, Numeric, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from booking_engine.models.base import Base

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

DEFAULT_REQUIRED_FIELDS = ["name", "phone"]


def default_working_hours():
    """Mon-Fri 09:00-18:00, closed on weekends"""
    return {
        day: {"is_open": day not in ("saturday", "sunday"), "start_time": "09:00", "end_time": "18:00"}
        for day in WEEKDAYS
    }


class Establishment(Base):
    __tablename__ = "establishments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id = Column(Uuid, ForeignKey("plans.id"), nullable=True)

    name = Column(String(200), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    booking_slug = Column(String(120), nullable=True, unique=True)
    timezone = Column(String(50), nullable=True)  # falls back to DEFAULT_TIMEZONE

    # Booking rules
    working_hours = Column(JSON, default=default_working_hours)
    slots_per_hour = Column(Integer, default=1, nullable=False)
    earliest_booking_time = Column(String(20), nullable=True)  # same_day, +1 day, next_week...
    latest_booking_time = Column(String(20), nullable=True)  # no_limit, +1 week, +3 months...
    required_fields = Column(JSON, default=lambda: list(DEFAULT_REQUIRED_FIELDS))

    # Booking fee (PIX) configuration
    booking_fee_enabled = Column(Boolean, default=False)
    booking_fee_type = Column(String(20), default="fixed")  # fixed, percentage
    booking_fee_amount = Column(Numeric(8, 2), default=0)
    booking_fee_percentage = Column(Numeric(5, 2), default=0)
    payment_access_token = Column(String(255), nullable=True)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    plan = relationship("Plan", back_populates="establishments")
    services = relationship("Service", back_populates="establishment", cascade="all, delete-orphan")
    blocked_dates = relationship("BlockedDate", back_populates="establishment", cascade="all, delete-orphan")
    blocked_times = relationship("BlockedTime", back_populates="establishment", cascade="all, delete-orphan")
    coupons = relationship("Coupon", back_populates="establishment", cascade="all, delete-orphan")
    appointments = relationship("Appointment", back_populates="establishment", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Establishment(id={self.id}, slug={self.slug})>"

    @property
    def capacity(self) -> int:
        """Concurrent appointments allowed to overlap a given instant"""
        return self.slots_per_hour or 1

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "booking_slug": self.booking_slug,
            "timezone": self.timezone,
            "working_hours": self.working_hours,
            "slots_per_hour": self.slots_per_hour,
            "earliest_booking_time": self.earliest_booking_time,
            "latest_booking_time": self.latest_booking_time,
            "required_fields": self.required_fields,
            "booking_fee_enabled": self.booking_fee_enabled,
            "booking_fee_type": self.booking_fee_type,
            "is_active": self.is_active,
        }
