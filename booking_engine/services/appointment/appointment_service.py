# ============================================================================
# booking_engine/services/appointment/appointment_service.py
# ============================================================================
"""Appointment lifecycle transitions"""
from datetime import datetime
from typing import Callable, Dict, NamedTuple, Optional, Tuple
import logging

from sqlalchemy.orm import Session

from booking_engine.core.errors import InvalidTransitionError, ValidationError
from booking_engine.models.appointment import Appointment, AppointmentStatus
from booking_engine.services.notification.notification_dispatcher import NotificationDispatcher
from booking_engine.utils.local_time import local_now

logger = logging.getLogger(__name__)


class AppointmentEvent:
    CONFIRM = "confirm"
    PAYMENT_CONFIRMED = "payment_confirmed"
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"


def _mark_started(appointment: Appointment, now: datetime, reason: Optional[str]) -> None:
    appointment.started_at = now


def _mark_completed(appointment: Appointment, now: datetime, reason: Optional[str]) -> None:
    if appointment.started_at is None:
        appointment.started_at = appointment.scheduled_at
    appointment.completed_at = now


def _mark_cancelled(appointment: Appointment, now: datetime, reason: Optional[str]) -> None:
    if not reason or not reason.strip():
        raise ValidationError("A cancellation reason is required", field="cancellation_reason")
    appointment.cancellation_reason = reason.strip()


class Transition(NamedTuple):
    to_status: AppointmentStatus
    side_effect: Optional[Callable[[Appointment, datetime, Optional[str]], None]] = None


S = AppointmentStatus

# (from status, event) -> transition; anything missing is rejected
TRANSITIONS: Dict[Tuple[AppointmentStatus, str], Transition] = {
    (S.PENDING_PAYMENT, AppointmentEvent.PAYMENT_CONFIRMED): Transition(S.CONFIRMED),
    (S.PENDING, AppointmentEvent.CONFIRM): Transition(S.CONFIRMED),
    (S.CONFIRMED, AppointmentEvent.START): Transition(S.STARTED, _mark_started),
    (S.STARTED, AppointmentEvent.COMPLETE): Transition(S.COMPLETED, _mark_completed),
}
for _status in (S.PENDING, S.PENDING_PAYMENT, S.CONFIRMED, S.STARTED):
    TRANSITIONS[(_status, AppointmentEvent.CANCEL)] = Transition(S.CANCELLED, _mark_cancelled)


class AppointmentService:
    """Handles appointment operations"""

    @staticmethod
    def transition(
            db: Session,
            establishment_id,
            appointment_id,
            event: str,
            reason: Optional[str] = None,
            notes: Optional[str] = None,
            now: Optional[datetime] = None
    ) -> Appointment:
        """
        Apply a lifecycle event to an appointment of the establishment.

        Raises:
            ValidationError: unknown appointment or missing cancellation reason
            InvalidTransitionError: event not allowed from the current status
        """
        try:
            appointment = db.query(Appointment).filter(
                Appointment.id == appointment_id,
                Appointment.establishment_id == establishment_id
            ).with_for_update().first()
            if not appointment:
                raise ValidationError("Appointment not found", field="appointment")

            old_status = appointment.status
            transition = TRANSITIONS.get((AppointmentStatus(old_status), event))
            if transition is None:
                raise InvalidTransitionError(old_status, event)

            now = now or local_now(appointment.establishment)
            if transition.side_effect:
                transition.side_effect(appointment, now, reason)
            if notes:
                appointment.notes = notes
            appointment.status = transition.to_status.value

            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(appointment)
        logger.info(f"Appointment {appointment.id}: {old_status} -> {appointment.status} ({event})")

        NotificationDispatcher.appointment_status_changed(appointment, old_status)
        return appointment
