# booking_engine/services/availability/booking_horizon.py
"""
Earliest / latest bookable date policies.

Policies are stored as their canonical strings on the establishment. The
settings endpoint parses them strictly (``parse_*``); resolution falls back
to the permissive value for anything unrecognized (``coerce_*``) and logs a
warning, so a bad row never takes the public booking page down.
"""
from datetime import date
from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta, MO
import logging

from booking_engine.core.errors import ValidationError

logger = logging.getLogger(__name__)


class EarliestBookingPolicy(str, Enum):
    SAME_DAY = "same_day"
    PLUS_1_DAY = "+1 day"
    PLUS_2_DAYS = "+2 days"
    PLUS_3_DAYS = "+3 days"
    PLUS_7_DAYS = "+7 days"
    PLUS_1_MONTH = "+1 month"
    NEXT_WEEK = "next_week"
    NEXT_MONTH = "next_month"


class LatestBookingPolicy(str, Enum):
    NO_LIMIT = "no_limit"
    PLUS_1_WEEK = "+1 week"
    PLUS_2_WEEKS = "+2 weeks"
    PLUS_1_MONTH = "+1 month"
    PLUS_2_MONTHS = "+2 months"
    PLUS_3_MONTHS = "+3 months"
    PLUS_6_MONTHS = "+6 months"


_EARLIEST_OFFSETS = {
    EarliestBookingPolicy.SAME_DAY: relativedelta(),
    EarliestBookingPolicy.PLUS_1_DAY: relativedelta(days=1),
    EarliestBookingPolicy.PLUS_2_DAYS: relativedelta(days=2),
    EarliestBookingPolicy.PLUS_3_DAYS: relativedelta(days=3),
    EarliestBookingPolicy.PLUS_7_DAYS: relativedelta(weeks=1),
    EarliestBookingPolicy.PLUS_1_MONTH: relativedelta(months=1),
    # strictly after today, so a Monday moves to the following Monday
    EarliestBookingPolicy.NEXT_WEEK: relativedelta(days=1, weekday=MO),
    EarliestBookingPolicy.NEXT_MONTH: relativedelta(months=1, day=1),
}

_LATEST_OFFSETS = {
    LatestBookingPolicy.PLUS_1_WEEK: relativedelta(weeks=1),
    LatestBookingPolicy.PLUS_2_WEEKS: relativedelta(weeks=2),
    LatestBookingPolicy.PLUS_1_MONTH: relativedelta(months=1),
    LatestBookingPolicy.PLUS_2_MONTHS: relativedelta(months=2),
    LatestBookingPolicy.PLUS_3_MONTHS: relativedelta(months=3),
    LatestBookingPolicy.PLUS_6_MONTHS: relativedelta(months=6),
}


def parse_earliest_policy(value: Optional[str]) -> EarliestBookingPolicy:
    """Strict parse used when saving establishment settings"""
    if value is None or value == "":
        return EarliestBookingPolicy.SAME_DAY
    try:
        return EarliestBookingPolicy(value)
    except ValueError:
        raise ValidationError(
            f"Unknown earliest booking policy: {value!r}",
            field="earliest_booking_time",
            allowed=[p.value for p in EarliestBookingPolicy],
        )


def parse_latest_policy(value: Optional[str]) -> LatestBookingPolicy:
    """Strict parse used when saving establishment settings"""
    if value is None or value == "":
        return LatestBookingPolicy.NO_LIMIT
    try:
        return LatestBookingPolicy(value)
    except ValueError:
        raise ValidationError(
            f"Unknown latest booking policy: {value!r}",
            field="latest_booking_time",
            allowed=[p.value for p in LatestBookingPolicy],
        )


def coerce_earliest_policy(value: Optional[str]) -> EarliestBookingPolicy:
    try:
        return parse_earliest_policy(value)
    except ValidationError:
        logger.warning(f"Unrecognized earliest booking policy {value!r}, treating as same_day")
        return EarliestBookingPolicy.SAME_DAY


def coerce_latest_policy(value: Optional[str]) -> LatestBookingPolicy:
    try:
        return parse_latest_policy(value)
    except ValidationError:
        logger.warning(f"Unrecognized latest booking policy {value!r}, treating as no_limit")
        return LatestBookingPolicy.NO_LIMIT


def earliest_booking_date(establishment, today: date) -> date:
    """First date a customer may book"""
    policy = coerce_earliest_policy(establishment.earliest_booking_time)
    return today + _EARLIEST_OFFSETS[policy]


def latest_booking_date(establishment, today: date) -> Optional[date]:
    """Last date a customer may book, or None for no limit"""
    policy = coerce_latest_policy(establishment.latest_booking_time)
    if policy is LatestBookingPolicy.NO_LIMIT:
        return None
    return today + _LATEST_OFFSETS[policy]


def is_too_early(establishment, target_date: date, today: date) -> bool:
    return target_date < earliest_booking_date(establishment, today)


def is_too_late(establishment, target_date: date, today: date) -> bool:
    latest = latest_booking_date(establishment, today)
    return latest is not None and target_date > latest


def within_booking_horizon(establishment, target_date: date, today: date) -> bool:
    """earliest <= target_date <= latest (no latest means no upper bound)"""
    return not is_too_early(establishment, target_date, today) and not is_too_late(
        establishment, target_date, today
    )
