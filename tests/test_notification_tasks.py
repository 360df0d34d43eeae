from datetime import datetime
import uuid

from booking_engine.tasks.notification_tasks import appointment_created, appointment_status_changed


def payload_for(appointment, **extra):
    payload = {
        "appointment_id": str(appointment.id),
        "establishment_id": str(appointment.establishment_id),
        "customer_id": str(appointment.customer_id),
        "service_id": str(appointment.service_id),
        "scheduled_at": appointment.scheduled_at.isoformat(),
        "status": appointment.status,
    }
    payload.update(extra)
    return payload


class TestNotificationTasks:
    def test_created_event_carries_message_context(self, db, make_establishment, make_service, make_customer, make_appointment):
        establishment = make_establishment()
        service = make_service(establishment, name="Manicure")
        client = make_customer(name="Joana", last_name="Silva", phone="51911112222")
        appointment = make_appointment(establishment, service, datetime(2026, 3, 2, 10, 0), customer=client)
        payload = payload_for(appointment)
        db.close()

        result = appointment_created.apply(args=[payload]).get()

        assert result["status"] == "success"
        assert result["service_name"] == "Manicure"
        assert result["customer_phone"] == "51911112222"

    def test_status_changed_event(self, db, make_establishment, make_service, make_appointment):
        establishment = make_establishment()
        appointment = make_appointment(establishment, make_service(establishment), datetime(2026, 3, 2, 10, 0))
        payload = {
            "appointment_id": str(appointment.id),
            "establishment_id": str(establishment.id),
            "old_status": "confirmed",
            "new_status": "cancelled",
            "cancellation_reason": "Rain",
        }
        db.close()

        result = appointment_status_changed.apply(args=[payload]).get()

        assert result["status"] == "success"
        assert result["new_status"] == "cancelled"

    def test_missing_appointment(self, db):
        payload = {
            "appointment_id": str(uuid.uuid4()),
            "establishment_id": str(uuid.uuid4()),
            "customer_id": str(uuid.uuid4()),
            "service_id": str(uuid.uuid4()),
            "scheduled_at": "2026-03-02T10:00:00",
            "status": "confirmed",
        }

        result = appointment_created.apply(args=[payload]).get()

        assert result == {"status": "failed", "reason": "appointment_not_found"}
