# booking_engine/schemas/booking.py
from __future__ import annotations
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import date as date_type, datetime, time as time_type
from decimal import Decimal


def _parse_hhmm(value):
    if isinstance(value, time_type):
        return value
    if isinstance(value, str):
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                return datetime.strptime(value.strip(), fmt).time()
            except ValueError:
                continue
    raise ValueError("Time must be in HH:MM format")


class CustomerInput(BaseModel):
    """Customer data collected by the booking page"""
    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    last_name: Optional[str] = Field(None, max_length=255)
    birth_date: Optional[date_type] = None

    def provided_fields(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if v not in (None, "")}


class BookingRequest(BaseModel):
    """Public booking submission"""
    establishment: str = Field(..., description="Establishment slug, booking slug or id")
    service: str = Field(..., description="Service id")
    date: date_type = Field(..., description="Appointment date (YYYY-MM-DD)")
    time: time_type = Field(..., description="Start time (HH:MM)")
    customer: CustomerInput
    coupon_code: Optional[str] = Field(None, max_length=50)

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return _parse_hhmm(v)


class AppointmentResponse(BaseModel):
    id: str
    establishment_id: str
    customer_id: str
    service_id: str
    scheduled_at: str
    ends_at: str
    duration_minutes: int
    status: str
    price: float
    discount_amount: float
    discount_code: Optional[str]
    final_price: float
    booking_fee_amount: Optional[float]
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    cancellation_reason: Optional[str] = None


class BookingResponse(BaseModel):
    success: bool = True
    message: str = "Appointment created successfully"
    appointment: AppointmentResponse
    requires_payment: bool = False


class CouponValidateRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    establishment: str
    service: str


class CouponValidation(BaseModel):
    """Outcome of a coupon check against a price"""
    valid: bool
    message: Optional[str] = None
    code: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    discount_amount: Decimal = Decimal("0.00")
    discount_text: Optional[str] = None
    original_price: Optional[Decimal] = None
    final_price: Optional[Decimal] = None


class AppointmentStatusUpdate(BaseModel):
    event: str = Field(..., description="confirm, payment_confirmed, start, complete, cancel")
    cancellation_reason: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=1000)


class BookingRulesUpdate(BaseModel):
    """
    Establishment booking rules. Horizon policies are checked against the
    known values when saved.
    """
    earliest_booking_time: Optional[str] = None
    latest_booking_time: Optional[str] = None
    slots_per_hour: Optional[int] = Field(None, ge=1, le=100)
    required_fields: Optional[List[str]] = None
    working_hours: Optional[Dict[str, Dict[str, Any]]] = None


class CustomerMatch(BaseModel):
    """Customer found by phone, used to prefill the booking form"""
    id: str
    name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: str
    birth_date: Optional[date_type] = None
    is_existing_customer: bool = False


class CustomerSearchResponse(BaseModel):
    customer: Optional[CustomerMatch] = None
