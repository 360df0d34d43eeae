# booking_engine/services/plan/plan_quota_service.py
from datetime import datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.orm import Session
import logging

from booking_engine.core.errors import QuotaError
from booking_engine.models.appointment import Appointment, CAPACITY_STATUSES

logger = logging.getLogger(__name__)


class PlanQuotaService:
    """Monthly appointment limits from the establishment's plan"""

    @staticmethod
    def get_monthly_limit(establishment) -> Optional[int]:
        """None means unlimited (or no plan attached)"""
        plan = establishment.plan
        if plan is None:
            return None
        return plan.appointment_limit

    @staticmethod
    def count_month_appointments(db: Session, establishment_id, now: datetime) -> int:
        """Non-cancelled appointments scheduled in the calendar month of ``now``"""
        month_start = datetime(now.year, now.month, 1)
        month_end = month_start + relativedelta(months=1)
        return db.query(func.count(Appointment.id)).filter(
            Appointment.establishment_id == establishment_id,
            Appointment.scheduled_at >= month_start,
            Appointment.scheduled_at < month_end,
            Appointment.status.in_(CAPACITY_STATUSES)
        ).scalar() or 0

    @staticmethod
    def ensure_within_quota(db: Session, establishment, now: datetime) -> None:
        limit = PlanQuotaService.get_monthly_limit(establishment)
        if limit is None:
            return

        count = PlanQuotaService.count_month_appointments(db, establishment.id, now)
        if not establishment.plan.can_create_appointment(count):
            logger.warning(f"Establishment {establishment.id} reached its monthly limit ({count}/{limit})")
            raise QuotaError(limit)
