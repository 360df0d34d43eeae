# ============================================================================
# booking_engine/api/v1/public/availability.py
# Public booking page - slot and calendar availability
# ============================================================================
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from booking_engine.config.database import get_db
from booking_engine.schemas.availability import (
    DayAvailabilityResponse,
    MonthAvailabilityResponse,
    TimeSlotResponse,
)
from booking_engine.services.availability.availability_cache import AvailabilityCache
from booking_engine.services.availability.availability_service import AvailabilityService
from booking_engine.services.establishment.establishment_service import EstablishmentService

router = APIRouter(prefix="/availability", tags=["public-availability"])


@router.get("/day", response_model=DayAvailabilityResponse)
async def get_day_availability(
        establishment: str = Query(..., description="Establishment slug, booking slug or id"),
        service: str = Query(..., description="Service id"),
        date: date = Query(..., description="Date (YYYY-MM-DD)"),
        db: Session = Depends(get_db)
):
    """Time slots of one day with their status"""
    establishment_row = EstablishmentService.get_establishment(db, establishment)
    service_row = EstablishmentService.get_service(db, establishment_row, service)

    slots = AvailabilityService.resolve_day(db, establishment_row, service_row, date)

    return DayAvailabilityResponse(
        establishment_id=str(establishment_row.id),
        service_id=str(service_row.id),
        date=date,
        time_slots=[
            TimeSlotResponse(time=slot.time.strftime("%H:%M"), available=slot.available, status=slot.status)
            for slot in slots
        ],
    )


@router.get("/month", response_model=MonthAvailabilityResponse)
async def get_month_availability(
        establishment: str = Query(..., description="Establishment slug, booking slug or id"),
        service: str = Query(..., description="Service id"),
        year: int = Query(..., ge=1, le=9999),
        month: int = Query(..., ge=1, le=12),
        db: Session = Depends(get_db)
):
    """Day-level status for a whole month; cached briefly in Redis"""
    establishment_row = EstablishmentService.get_establishment(db, establishment)
    service_row = EstablishmentService.get_service(db, establishment_row, service)

    day_status = await AvailabilityCache.get_month(establishment_row.id, service_row.id, year, month)
    if day_status is None:
        resolved = AvailabilityService.resolve_month(db, establishment_row, service_row, year, month)
        day_status = {key: state.value for key, state in resolved.items()}
        await AvailabilityCache.set_month(establishment_row.id, service_row.id, year, month, day_status)

    return MonthAvailabilityResponse(
        establishment_id=str(establishment_row.id),
        service_id=str(service_row.id),
        year=year,
        month=month,
        day_status=day_status,
    )
