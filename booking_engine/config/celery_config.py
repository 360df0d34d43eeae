# booking_engine/config/celery_config.py
"""Celery application factory"""
from celery import Celery

from booking_engine.config.settings import get_settings

settings = get_settings()


def create_celery_app() -> Celery:
    """Create and configure the Celery application"""
    app = Celery(
        "booking_engine",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["booking_engine.tasks.notification_tasks"],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_acks_late=True,
        task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
        task_routes={
            "booking_engine.tasks.notification_tasks.*": {"queue": "notifications"},
        },
        result_expires=3600,
    )

    return app


celery_app = create_celery_app()
