# booking_engine/schemas/__init__.py
from .availability import (
    SlotState,
    DayState,
    DayWindow,
    SlotStatus,
    TimeSlotResponse,
    DayAvailabilityResponse,
    MonthAvailabilityResponse,
)

from .booking import (
    CustomerInput,
    BookingRequest,
    AppointmentResponse,
    BookingResponse,
    CouponValidateRequest,
    CouponValidation,
    CustomerMatch,
    CustomerSearchResponse,
    AppointmentStatusUpdate,
    BookingRulesUpdate,
)

from .task_payloads import (
    AppointmentCreatedPayload,
    AppointmentStatusChangedPayload,
)

__all__ = [
    "SlotState",
    "DayState",
    "DayWindow",
    "SlotStatus",
    "TimeSlotResponse",
    "DayAvailabilityResponse",
    "MonthAvailabilityResponse",
    "CustomerInput",
    "BookingRequest",
    "AppointmentResponse",
    "BookingResponse",
    "CouponValidateRequest",
    "CouponValidation",
    "CustomerMatch",
    "CustomerSearchResponse",
    "AppointmentStatusUpdate",
    "BookingRulesUpdate",
    "AppointmentCreatedPayload",
    "AppointmentStatusChangedPayload",
]
