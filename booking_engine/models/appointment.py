# ===== booking_engine/models/appointment.py =====
from sqlalchemy import Column, String, Integer, Numeric, Text, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import timedelta
from decimal import Decimal
import enum
import uuid

from booking_engine.models.base import Base


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    STARTED = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Every status except cancelled holds calendar capacity
CAPACITY_STATUSES = tuple(s.value for s in AppointmentStatus if s is not AppointmentStatus.CANCELLED)


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # References
    establishment_id = Column(Uuid, ForeignKey("establishments.id", ondelete="CASCADE"), nullable=False)
    customer_id = Column(Uuid, ForeignKey("customers.id"), nullable=False)
    service_id = Column(Uuid, ForeignKey("services.id"), nullable=False)

    # Establishment-local wall-clock time
    scheduled_at = Column(DateTime, nullable=False)
    # Snapshotted from the service at booking time, never recomputed
    duration_minutes = Column(Integer, nullable=False)

    price = Column(Numeric(10, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    discount_code = Column(String(50), nullable=True)
    booking_fee_amount = Column(Numeric(10, 2), nullable=True)

    # Status tracking
    status = Column(String(20), nullable=False, default=AppointmentStatus.CONFIRMED.value)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    establishment = relationship("Establishment", back_populates="appointments")
    customer = relationship("Customer", back_populates="appointments")
    service = relationship("Service")

    __table_args__ = (
        Index("ix_appointments_establishment_scheduled", "establishment_id", "scheduled_at"),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, scheduled_at={self.scheduled_at}, status={self.status})>"

    @property
    def ends_at(self):
        return self.scheduled_at + timedelta(minutes=self.duration_minutes)

    @property
    def final_price(self) -> Decimal:
        return Decimal(self.price or 0) - Decimal(self.discount_amount or 0)

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "establishment_id": str(self.establishment_id),
            "customer_id": str(self.customer_id),
            "service_id": str(self.service_id),
            "scheduled_at": self.scheduled_at.isoformat(),
            "ends_at": self.ends_at.isoformat(),
            "duration_minutes": self.duration_minutes,
            "status": self.status,
            "price": float(self.price or 0),
            "discount_amount": float(self.discount_amount or 0),
            "discount_code": self.discount_code,
            "final_price": float(self.final_price),
            "booking_fee_amount": float(self.booking_fee_amount) if self.booking_fee_amount is not None else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "cancellation_reason": self.cancellation_reason,
        }
