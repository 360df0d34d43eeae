# ============================================================================
# booking_engine/api/v1/dashboard/appointments.py
# Establishment dashboard - appointment lifecycle
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from booking_engine.api.dependencies import get_current_establishment
from booking_engine.config.database import get_db
from booking_engine.models.establishment import Establishment
from booking_engine.schemas.booking import AppointmentResponse, AppointmentStatusUpdate
from booking_engine.services.appointment.appointment_service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["dashboard-appointments"])


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
        update: AppointmentStatusUpdate,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        establishment: Establishment = Depends(get_current_establishment),
        db: Session = Depends(get_db)
):
    """
    Apply a lifecycle event: confirm, payment_confirmed, start, complete
    or cancel (cancel requires a reason).
    """
    appointment = AppointmentService.transition(
        db,
        establishment.id,
        appointment_id,
        update.event,
        reason=update.cancellation_reason,
        notes=update.notes,
    )
    return AppointmentResponse(**appointment.to_dict())
