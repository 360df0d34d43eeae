# booking_engine/schemas/task_payloads.py
from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone


class AppointmentCreatedPayload(BaseModel):
    """Event handed to the messaging subsystem when a booking commits"""
    appointment_id: str = Field(..., description="Appointment ID")
    establishment_id: str = Field(..., description="Establishment ID")
    customer_id: str = Field(..., description="Customer ID")
    service_id: str = Field(..., description="Service ID")
    scheduled_at: str = Field(..., description="Establishment-local start (ISO)")
    status: str = Field(..., description="Initial status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AppointmentStatusChangedPayload(BaseModel):
    """Event handed to the messaging subsystem after a status transition"""
    appointment_id: str = Field(..., description="Appointment ID")
    establishment_id: str = Field(..., description="Establishment ID")
    old_status: str = Field(..., description="Status before the transition")
    new_status: str = Field(..., description="Status after the transition")
    cancellation_reason: Optional[str] = Field(None, description="Reason when cancelled")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
