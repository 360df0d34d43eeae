# booking_engine/services/payment/payment_requirement.py
"""
Booking fee (deposit) rules. Collecting the payment itself happens outside
the booking engine; here we only decide whether one is due and how much.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

TWO_PLACES = Decimal("0.01")


class PaymentRequirement:

    @staticmethod
    def requires_booking_fee(establishment) -> bool:
        """Fee enabled and a payment account configured to receive it"""
        return bool(establishment.booking_fee_enabled and establishment.payment_access_token)

    @staticmethod
    def booking_fee_for(establishment, price: Decimal) -> Optional[Decimal]:
        if not PaymentRequirement.requires_booking_fee(establishment):
            return None

        if establishment.booking_fee_type == "percentage":
            fee = Decimal(price) * Decimal(establishment.booking_fee_percentage or 0) / Decimal(100)
        else:
            fee = Decimal(establishment.booking_fee_amount or 0)
        return fee.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
