# ===== booking_engine/models/availability.py =====
from sqlalchemy import Column, String, Boolean, Time, Date, ForeignKey, CheckConstraint, UniqueConstraint, Index, Uuid
from sqlalchemy.orm import relationship, validates
import uuid

from booking_engine.models.base import Base


class BlockedDate(Base):
    """Whole-day closures (holidays, vacation). Recurring rows match every year."""
    __tablename__ = "blocked_dates"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    establishment_id = Column(Uuid, ForeignKey("establishments.id", ondelete="CASCADE"), nullable=False)

    blocked_date = Column(Date, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)  # annual holidays
    reason = Column(String, nullable=True)

    establishment = relationship("Establishment", back_populates="blocked_dates")

    __table_args__ = (
        UniqueConstraint("establishment_id", "blocked_date", name="uq_blocked_dates_establishment_date"),
    )

    def matches(self, target_date) -> bool:
        if self.is_recurring:
            return (self.blocked_date.month, self.blocked_date.day) == (target_date.month, target_date.day)
        return self.blocked_date == target_date


class BlockedTime(Base):
    """Blocked time range [start_time, end_time) on a single date"""
    __tablename__ = "blocked_times"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    establishment_id = Column(Uuid, ForeignKey("establishments.id", ondelete="CASCADE"), nullable=False)

    blocked_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    reason = Column(String, nullable=True)

    establishment = relationship("Establishment", back_populates="blocked_times")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_blocked_times_range"),
        Index("ix_blocked_times_establishment_date", "establishment_id", "blocked_date"),
    )

    @validates("end_time")
    def _validate_end_time(self, key, value):
        if self.start_time is not None and value is not None and not self.start_time < value:
            raise ValueError("Blocked time start_time must be before end_time")
        return value
