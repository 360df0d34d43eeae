# booking_engine/models/coupon.py
from sqlalchemy import Column, String, Boolean, Integer, Numeric, Date, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from decimal import Decimal, ROUND_HALF_UP
from datetime import date
import uuid

from booking_engine.models.base import Base

TWO_PLACES = Decimal("0.01")


class Coupon(Base):
    __tablename__ = "coupons"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    establishment_id = Column(Uuid, ForeignKey("establishments.id", ondelete="CASCADE"), nullable=False)

    code = Column(String(50), nullable=False)  # stored upper-case
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False, default="percentage")  # percentage, fixed
    value = Column(Numeric(8, 2), nullable=False)

    usage_limit = Column(Integer, nullable=True)
    used_count = Column(Integer, default=0, nullable=False)
    valid_from = Column(Date, nullable=True)
    valid_until = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    establishment = relationship("Establishment", back_populates="coupons")

    __table_args__ = (
        UniqueConstraint("establishment_id", "code", name="uq_coupons_establishment_code"),
    )

    def is_valid(self, on_date: date) -> bool:
        """Active, inside its validity window and not exhausted"""
        if not self.is_active:
            return False
        if self.valid_from and on_date < self.valid_from:
            return False
        if self.valid_until and on_date > self.valid_until:
            return False
        if self.usage_limit is not None and (self.used_count or 0) >= self.usage_limit:
            return False
        return True

    def calculate_discount(self, price: Decimal) -> Decimal:
        """Discount for the given price, never more than the price itself"""
        price = Decimal(price)
        if self.type == "percentage":
            discount = price * Decimal(self.value) / Decimal(100)
        else:
            discount = Decimal(self.value)
        return min(discount, price).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    @property
    def discount_text(self) -> str:
        if self.type == "percentage":
            return f"{self.value}% off"
        return f"R$ {Decimal(self.value):.2f} off"
