# booking_engine/services/availability/interval_blocker.py
"""
Blocked dates, blocked time ranges and the booking horizon.

All ranges are half-open: [start, end). Touching endpoints do not overlap.
"""
from datetime import date, datetime, time
from typing import Iterable, List, Union

from sqlalchemy import or_
from sqlalchemy.orm import Session

from booking_engine.models.availability import BlockedDate, BlockedTime
from booking_engine.services.availability import booking_horizon


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """[a_start, a_end) and [b_start, b_end) share at least one instant"""
    return a_start < b_end and b_start < a_end


# ---------------------------------------------------------------------------
# Blocked dates
# ---------------------------------------------------------------------------

def load_blocked_dates(db: Session, establishment_id) -> List[BlockedDate]:
    """Every blocked date of an establishment (used for month views)"""
    return db.query(BlockedDate).filter(
        BlockedDate.establishment_id == establishment_id
    ).all()


def date_is_blocked(blocked_dates: Iterable[BlockedDate], target_date: date) -> bool:
    return any(blocked.matches(target_date) for blocked in blocked_dates)


def is_date_blocked(db: Session, establishment, target_date: date) -> bool:
    """Exact date match, or a recurring row with the same month and day"""
    candidates = db.query(BlockedDate).filter(
        BlockedDate.establishment_id == establishment.id,
        or_(
            BlockedDate.blocked_date == target_date,
            BlockedDate.is_recurring.is_(True),
        )
    ).all()
    return date_is_blocked(candidates, target_date)


# ---------------------------------------------------------------------------
# Blocked times
# ---------------------------------------------------------------------------

def load_blocked_times(db: Session, establishment_id, target_date: date) -> List[BlockedTime]:
    return db.query(BlockedTime).filter(
        BlockedTime.establishment_id == establishment_id,
        BlockedTime.blocked_date == target_date
    ).order_by(BlockedTime.start_time.asc()).all()


def overlaps_any_blocked_time(blocked_times: Iterable[BlockedTime], start: time, end: time) -> bool:
    return any(overlaps(blocked.start_time, blocked.end_time, start, end) for blocked in blocked_times)


def overlaps_blocked_time(db: Session, establishment, target_date: date, start: time, end: time) -> bool:
    """True if [start, end) on target_date intersects any blocked time"""
    exists = db.query(BlockedTime.id).filter(
        BlockedTime.establishment_id == establishment.id,
        BlockedTime.blocked_date == target_date,
        BlockedTime.start_time < end,
        BlockedTime.end_time > start
    ).first()
    return exists is not None


# ---------------------------------------------------------------------------
# Booking horizon
# ---------------------------------------------------------------------------

def within_booking_horizon(establishment, target_date: date, now: Union[date, datetime]) -> bool:
    """earliest allowed date <= target_date <= latest allowed date"""
    today = now.date() if isinstance(now, datetime) else now
    return booking_horizon.within_booking_horizon(establishment, target_date, today)
