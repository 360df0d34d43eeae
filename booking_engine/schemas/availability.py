# booking_engine/schemas/availability.py
from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date as date_type, time as time_type
from enum import Enum


class SlotState(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    PAST = "past"
    BLOCKED = "blocked"
    CLOSED = "closed"  # single-slot check only: slot outside working hours


class DayState(str, Enum):
    PAST = "past"
    CLOSED = "closed"
    BLOCKED = "blocked"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class DayWindow(BaseModel):
    """Working-hour window of one calendar day"""
    open: bool = Field(..., description="Whether the establishment works that day")
    start: Optional[time_type] = Field(None, description="Opening time")
    end: Optional[time_type] = Field(None, description="Closing time")

    @classmethod
    def closed(cls) -> "DayWindow":
        return cls(open=False)


class SlotStatus(BaseModel):
    """Classification of one candidate start time"""
    time: time_type
    status: SlotState

    @property
    def available(self) -> bool:
        return self.status == SlotState.AVAILABLE


class TimeSlotResponse(BaseModel):
    time: str = Field(..., description="HH:MM start time")
    available: bool
    status: SlotState


class DayAvailabilityResponse(BaseModel):
    establishment_id: str
    service_id: str
    date: date_type
    time_slots: List[TimeSlotResponse] = Field(default_factory=list)


class MonthAvailabilityResponse(BaseModel):
    establishment_id: str
    service_id: str
    year: int
    month: int
    day_status: Dict[str, DayState] = Field(default_factory=dict)
