# booking_engine/models/service.py
"""
Service Model - bookable services of an establishment
Source of truth for duration and price; both are snapshotted onto the
appointment at booking time.
"""
from sqlalchemy import Column, String, Numeric, Integer, ForeignKey, Boolean, DateTime, Text, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from decimal import Decimal
import uuid

from booking_engine.models.base import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    establishment_id = Column(
        Uuid,
        ForeignKey("establishments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Core service details
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Pricing
    price = Column(Numeric(10, 2), nullable=False, default=0)
    has_promotion = Column(Boolean, default=False)
    promotion_price = Column(Numeric(10, 2), nullable=True)

    duration_minutes = Column(Integer, nullable=False)

    # Status
    is_active = Column(Boolean, default=True, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    establishment = relationship("Establishment", back_populates="services")

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_services_duration_positive"),
    )

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, establishment_id={self.establishment_id})>"

    @property
    def final_price(self) -> Decimal:
        """Price after the service's own promotion, if any"""
        if self.has_promotion and self.promotion_price is not None:
            return Decimal(self.promotion_price)
        return Decimal(self.price or 0)

    @property
    def formatted_duration(self) -> str:
        """Return human-readable duration string"""
        hours = self.duration_minutes // 60
        minutes = self.duration_minutes % 60

        if hours > 0 and minutes > 0:
            return f"{hours}h {minutes}m"
        elif hours > 0:
            return f"{hours}h"
        else:
            return f"{minutes}m"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "establishment_id": str(self.establishment_id),
            "name": self.name,
            "description": self.description,
            "price": float(self.price) if self.price is not None else None,
            "final_price": float(self.final_price),
            "duration_minutes": self.duration_minutes,
            "formatted_duration": self.formatted_duration,
            "is_active": self.is_active,
        }
