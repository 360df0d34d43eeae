# booking_engine/models/__init__.py
from .base import Base
from .plan import Plan
from .establishment import Establishment, WEEKDAYS
from .service import Service
from .availability import BlockedDate, BlockedTime
from .customer import Customer, CustomerEstablishmentLink
from .coupon import Coupon
from .appointment import Appointment, AppointmentStatus, CAPACITY_STATUSES

__all__ = [
    "Base",
    "Plan",
    "Establishment",
    "WEEKDAYS",
    "Service",
    "BlockedDate",
    "BlockedTime",
    "Customer",
    "CustomerEstablishmentLink",
    "Coupon",
    "Appointment",
    "AppointmentStatus",
    "CAPACITY_STATUSES",
]
