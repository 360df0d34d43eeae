# booking_engine/services/notification/notification_dispatcher.py
"""
Fire-and-forget appointment events for the messaging subsystem.

Events are enqueued only after the database commit. A broker outage must
never turn a committed booking into an error response, so enqueue failures
are logged and dropped.
"""
from typing import Optional
import logging

from booking_engine.config.settings import get_settings
from booking_engine.schemas.task_payloads import (
    AppointmentCreatedPayload,
    AppointmentStatusChangedPayload,
)

logger = logging.getLogger(__name__)


class NotificationDispatcher:

    @staticmethod
    def appointment_created(appointment) -> Optional[str]:
        """Enqueue AppointmentCreated; returns the task id when enqueued"""
        if not get_settings().NOTIFICATIONS_ENABLED:
            return None

        payload = AppointmentCreatedPayload(
            appointment_id=str(appointment.id),
            establishment_id=str(appointment.establishment_id),
            customer_id=str(appointment.customer_id),
            service_id=str(appointment.service_id),
            scheduled_at=appointment.scheduled_at.isoformat(),
            status=appointment.status,
        )

        from booking_engine.tasks.notification_tasks import appointment_created

        try:
            task = appointment_created.delay(payload.model_dump(mode="json"))
            logger.info(f"Queued AppointmentCreated for {appointment.id} (task {task.id})")
            return task.id
        except Exception as e:
            logger.error(f"Failed to enqueue AppointmentCreated for {appointment.id}: {e}")
            return None

    @staticmethod
    def appointment_status_changed(appointment, old_status: str) -> Optional[str]:
        """Enqueue AppointmentStatusChanged; returns the task id when enqueued"""
        if not get_settings().NOTIFICATIONS_ENABLED:
            return None

        payload = AppointmentStatusChangedPayload(
            appointment_id=str(appointment.id),
            establishment_id=str(appointment.establishment_id),
            old_status=old_status,
            new_status=appointment.status,
            cancellation_reason=appointment.cancellation_reason,
        )

        from booking_engine.tasks.notification_tasks import appointment_status_changed

        try:
            task = appointment_status_changed.delay(payload.model_dump(mode="json"))
            logger.info(
                f"Queued AppointmentStatusChanged for {appointment.id}: "
                f"{old_status} -> {appointment.status} (task {task.id})"
            )
            return task.id
        except Exception as e:
            logger.error(f"Failed to enqueue AppointmentStatusChanged for {appointment.id}: {e}")
            return None
