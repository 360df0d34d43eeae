# booking_engine/tasks/notification_tasks.py
"""
Appointment events consumed by the messaging subsystem.

The tasks validate the payload, attach the details a message template needs
(customer name and phone, service name) and log the event. Delivery over
WhatsApp lives in the messaging subsystem, which subscribes to these tasks'
queue.
"""
from typing import Any, Dict
import logging
import uuid

from booking_engine.config.celery_config import celery_app
from booking_engine.config.database import SessionLocal
from booking_engine.config.settings import get_settings
from booking_engine.models.appointment import Appointment
from booking_engine.schemas.task_payloads import (
    AppointmentCreatedPayload,
    AppointmentStatusChangedPayload,
)

logger = logging.getLogger(__name__)

MAX_RETRIES = get_settings().MAX_RETRY_ATTEMPTS


def _message_context(db, appointment_id: str) -> Dict[str, Any]:
    appointment = db.query(Appointment).filter_by(id=uuid.UUID(appointment_id)).first()
    if not appointment:
        return {}
    return {
        "customer_name": appointment.customer.full_name if appointment.customer else None,
        "customer_phone": appointment.customer.phone if appointment.customer else None,
        "service_name": appointment.service.name if appointment.service else None,
        "service_duration": appointment.service.formatted_duration if appointment.service else None,
        "scheduled_at": appointment.scheduled_at.isoformat(),
    }


@celery_app.task(bind=True, max_retries=MAX_RETRIES)
def appointment_created(self, payload: Dict[str, Any]):
    """Announce a newly booked appointment"""
    event = AppointmentCreatedPayload(**payload)
    db = SessionLocal()
    try:
        context = _message_context(db, event.appointment_id)
        if not context:
            logger.error(f"Appointment {event.appointment_id} not found")
            return {"status": "failed", "reason": "appointment_not_found"}

        logger.info(
            f"AppointmentCreated {event.appointment_id} "
            f"establishment={event.establishment_id} status={event.status} "
            f"service={context['service_name']} at={context['scheduled_at']}"
        )
        return {"status": "success", "event": "appointment_created", **context}

    except Exception as exc:
        logger.error(f"AppointmentCreated handling failed for {event.appointment_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=MAX_RETRIES)
def appointment_status_changed(self, payload: Dict[str, Any]):
    """Announce a lifecycle transition (confirmation, cancellation...)"""
    event = AppointmentStatusChangedPayload(**payload)
    db = SessionLocal()
    try:
        context = _message_context(db, event.appointment_id)
        if not context:
            logger.error(f"Appointment {event.appointment_id} not found")
            return {"status": "failed", "reason": "appointment_not_found"}

        logger.info(
            f"AppointmentStatusChanged {event.appointment_id} "
            f"{event.old_status} -> {event.new_status}"
            + (f" reason={event.cancellation_reason!r}" if event.cancellation_reason else "")
        )
        return {
            "status": "success",
            "event": "appointment_status_changed",
            "old_status": event.old_status,
            "new_status": event.new_status,
            **context,
        }

    except Exception as exc:
        logger.error(f"AppointmentStatusChanged handling failed for {event.appointment_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))
    finally:
        db.close()
