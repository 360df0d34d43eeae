# ===== booking_engine/services/availability/availability_service.py =====
"""
Availability resolution for the public booking page.

Composes calendar rules, blocked dates/times and existing appointments into
per-slot and per-day statuses. Read only: the output is advisory and the
booking path re-checks the slot inside its own transaction.
"""
from calendar import monthrange
from collections import OrderedDict
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session
import logging

from booking_engine.config.settings import get_settings
from booking_engine.core.errors import ValidationError
from booking_engine.models.appointment import Appointment, CAPACITY_STATUSES
from booking_engine.schemas.availability import DayState, SlotState, SlotStatus
from booking_engine.services.availability import booking_horizon
from booking_engine.services.availability.calendar_rules import day_window, is_open_on
from booking_engine.services.availability.interval_blocker import (
    date_is_blocked,
    is_date_blocked,
    load_blocked_dates,
    load_blocked_times,
    overlaps,
    overlaps_any_blocked_time,
)
from booking_engine.services.availability.slot_generator import generate_slots, slot_end
from booking_engine.utils.local_time import local_now

logger = logging.getLogger(__name__)

Interval = Tuple[datetime, datetime]


class AvailabilityService:
    """Slot and calendar availability for an establishment's service"""

    @staticmethod
    def resolve_day(
            db: Session,
            establishment,
            service,
            target_date: date,
            now: Optional[datetime] = None
    ) -> List[SlotStatus]:
        """
        Classify every candidate slot of a day.

        Priority per slot: past > blocked (date) > blocked (time range)
        > occupied > available. Slots are returned in ascending time order.
        """
        now = now or local_now(establishment)
        return AvailabilityService._resolve_day(db, establishment, service, target_date, now)

    @staticmethod
    def _resolve_day(
            db: Session,
            establishment,
            service,
            target_date: date,
            now: datetime,
            date_blocked: Optional[bool] = None
    ) -> List[SlotStatus]:
        window = day_window(establishment, target_date)
        slots = generate_slots(window, service.duration_minutes, get_settings().SLOT_STEP_MINUTES)
        if not window.open:
            return []

        if date_blocked is None:
            date_blocked = is_date_blocked(db, establishment, target_date)
        blocked_times = load_blocked_times(db, establishment.id, target_date)
        booked = AvailabilityService._load_booked_intervals(db, establishment.id, target_date)

        is_today = target_date == now.date()

        return [
            SlotStatus(
                time=start,
                status=AvailabilityService._classify(
                    establishment,
                    target_date,
                    start,
                    service.duration_minutes,
                    now=now,
                    check_past=is_today,
                    date_blocked=date_blocked,
                    blocked_times=blocked_times,
                    booked=booked,
                ),
            )
            for start in slots
        ]

    @staticmethod
    def check_slot(
            db: Session,
            establishment,
            service,
            target_date: date,
            start: time,
            now: Optional[datetime] = None
    ) -> SlotState:
        """
        Status of a single requested slot, as the booking path sees it.

        Unlike ``resolve_day`` any start at or before ``now`` is past, dates
        outside the booking horizon are rejected (too early reads as past,
        too late as blocked) and a start that is not one of the day's
        generated slots is closed.
        """
        now = now or local_now(establishment)
        slot_start = datetime.combine(target_date, start)

        if slot_start <= now:
            return SlotState.PAST
        if booking_horizon.is_too_early(establishment, target_date, now.date()):
            return SlotState.PAST
        if booking_horizon.is_too_late(establishment, target_date, now.date()):
            return SlotState.BLOCKED

        window = day_window(establishment, target_date)
        slots = generate_slots(window, service.duration_minutes, get_settings().SLOT_STEP_MINUTES)
        if start not in slots:
            return SlotState.CLOSED

        return AvailabilityService._classify(
            establishment,
            target_date,
            start,
            service.duration_minutes,
            now=now,
            check_past=False,
            date_blocked=is_date_blocked(db, establishment, target_date),
            blocked_times=load_blocked_times(db, establishment.id, target_date),
            booked=AvailabilityService._load_booked_intervals(db, establishment.id, target_date),
        )

    @staticmethod
    def resolve_month(
            db: Session,
            establishment,
            service,
            year: int,
            month: int,
            now: Optional[datetime] = None
    ) -> Dict[str, DayState]:
        """
        Day-level status for every date of a month, keyed by ISO date.

        past: before today or before the earliest allowed date
        blocked: after the latest allowed date, or a blocked date
        closed: weekday not open
        available / unavailable: at least one / no available slot
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month: {month}", field="month")
        if not 1 <= year <= 9999:
            raise ValidationError(f"Invalid year: {year}", field="year")

        now = now or local_now(establishment)
        today = now.date()
        earliest = booking_horizon.earliest_booking_date(establishment, today)
        latest = booking_horizon.latest_booking_date(establishment, today)
        blocked_dates = load_blocked_dates(db, establishment.id)

        day_status: Dict[str, DayState] = OrderedDict()

        for day in range(1, monthrange(year, month)[1] + 1):
            current = date(year, month, day)
            key = current.isoformat()

            if current < today or current < earliest:
                day_status[key] = DayState.PAST
                continue

            if latest is not None and current > latest:
                day_status[key] = DayState.BLOCKED
                continue

            is_blocked = date_is_blocked(blocked_dates, current)

            if current != today:
                if not is_open_on(establishment, current):
                    day_status[key] = DayState.CLOSED
                    continue
                if is_blocked:
                    day_status[key] = DayState.BLOCKED
                    continue

            slots = AvailabilityService._resolve_day(
                db, establishment, service, current, now, date_blocked=is_blocked
            )
            has_available = any(slot.available for slot in slots)
            day_status[key] = DayState.AVAILABLE if has_available else DayState.UNAVAILABLE

        return day_status

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _classify(
            establishment,
            target_date: date,
            start: time,
            duration_minutes: int,
            now: datetime,
            check_past: bool,
            date_blocked: bool,
            blocked_times,
            booked: List[Interval]
    ) -> SlotState:
        slot_start = datetime.combine(target_date, start)

        if check_past and slot_start <= now:
            return SlotState.PAST
        if date_blocked:
            return SlotState.BLOCKED
        if overlaps_any_blocked_time(blocked_times, start, slot_end(start, duration_minutes)):
            return SlotState.BLOCKED

        slot_finish = slot_start + timedelta(minutes=duration_minutes)
        if count_overlapping(booked, slot_start, slot_finish) >= establishment.capacity:
            return SlotState.OCCUPIED

        return SlotState.AVAILABLE

    @staticmethod
    def _load_booked_intervals(db: Session, establishment_id, target_date: date) -> List[Interval]:
        """
        Occupied [scheduled_at, scheduled_at + duration) intervals touching a day.

        Appointments that started the previous day can run past midnight,
        so the lookup starts one day early and filters by end time.
        """
        day_start = datetime.combine(target_date, time.min)
        day_end = day_start + timedelta(days=1)

        rows = db.query(Appointment.scheduled_at, Appointment.duration_minutes).filter(
            Appointment.establishment_id == establishment_id,
            Appointment.scheduled_at >= day_start - timedelta(days=1),
            Appointment.scheduled_at < day_end,
            Appointment.status.in_(CAPACITY_STATUSES)
        ).all()

        intervals = []
        for scheduled_at, duration_minutes in rows:
            ends_at = scheduled_at + timedelta(minutes=duration_minutes)
            if ends_at > day_start:
                intervals.append((scheduled_at, ends_at))
        return intervals


def count_overlapping(booked: List[Interval], start: datetime, end: datetime) -> int:
    """Number of booked intervals overlapping [start, end)"""
    return sum(1 for booked_start, booked_end in booked if overlaps(booked_start, booked_end, start, end))
