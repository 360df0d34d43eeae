# booking_engine/models/plan.py
from sqlalchemy import Column, String, Boolean, Integer, Numeric, Uuid
from sqlalchemy.orm import relationship
import uuid

from booking_engine.models.base import Base


class Plan(Base):
    """Subscription plan; read-only from the booking engine's perspective"""
    __tablename__ = "plans"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), default=0)

    monthly_appointment_limit = Column(Integer, nullable=True)  # NULL = unlimited
    unlimited_appointments = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)

    establishments = relationship("Establishment", back_populates="plan")

    def __repr__(self):
        return f"<Plan(id={self.id}, name={self.name})>"

    @property
    def appointment_limit(self):
        """Finite monthly limit, or None when the plan is unlimited"""
        if self.unlimited_appointments or not self.monthly_appointment_limit:
            return None
        return self.monthly_appointment_limit

    def can_create_appointment(self, current_monthly_count: int) -> bool:
        limit = self.appointment_limit
        return limit is None or current_monthly_count < limit
