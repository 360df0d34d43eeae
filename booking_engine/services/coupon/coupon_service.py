# booking_engine/services/coupon/coupon_service.py
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session
import logging

from booking_engine.models.coupon import Coupon
from booking_engine.schemas.booking import CouponValidation

logger = logging.getLogger(__name__)


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class CouponService:
    """Discount coupons scoped to an establishment"""

    @staticmethod
    def find_coupon(db: Session, establishment_id, code: str, for_update: bool = False) -> Optional[Coupon]:
        query = db.query(Coupon).filter(
            Coupon.establishment_id == establishment_id,
            Coupon.code == normalize_code(code)
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def find_valid_coupon(
            db: Session,
            establishment_id,
            code: str,
            on_date: date,
            for_update: bool = False
    ) -> Optional[Coupon]:
        """Coupon matching the code if it can be used on the given date"""
        coupon = CouponService.find_coupon(db, establishment_id, code, for_update=for_update)
        if coupon and coupon.is_valid(on_date):
            return coupon
        return None

    @staticmethod
    def validate(db: Session, code: str, establishment_id, price: Decimal, on_date: date) -> CouponValidation:
        """Preview a coupon against a service price without consuming it"""
        coupon = CouponService.find_valid_coupon(db, establishment_id, code, on_date)
        if not coupon:
            logger.info(f"Coupon {normalize_code(code)!r} rejected for establishment {establishment_id}")
            return CouponValidation(valid=False, message="Invalid or expired coupon")

        price = Decimal(price)
        discount = coupon.calculate_discount(price)
        return CouponValidation(
            valid=True,
            message="Coupon applied",
            code=coupon.code,
            name=coupon.name,
            type=coupon.type,
            discount_amount=discount,
            discount_text=coupon.discount_text,
            original_price=price,
            final_price=price - discount,
        )

    @staticmethod
    def redeem(coupon: Coupon) -> None:
        """Count one use; caller commits with the appointment"""
        coupon.used_count = (coupon.used_count or 0) + 1
