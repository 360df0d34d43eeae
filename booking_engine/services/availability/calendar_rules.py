# booking_engine/services/availability/calendar_rules.py
"""
Working-hour window of an establishment for a calendar day.

Pure functions over the establishment's ``working_hours`` JSON; no database
access, so results can be cached per (establishment, date).
"""
from datetime import date, datetime, time
from typing import Any, Dict, Optional, Union

from booking_engine.core.errors import ConfigError, ValidationError
from booking_engine.models.establishment import WEEKDAYS
from booking_engine.schemas.availability import DayWindow

TIME_FORMATS = ("%H:%M", "%H:%M:%S")


def weekday_name(target_date: date) -> str:
    """Locale-independent weekday key (monday..sunday)"""
    return WEEKDAYS[target_date.weekday()]


def parse_time(value: Union[str, time, None], field: str = "time") -> time:
    """
    Parse ``HH:MM`` / ``HH:MM:SS`` strings.

    Raises:
        ConfigError: if the value is missing or unparsable
    """
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        for fmt in TIME_FORMATS:
            try:
                return datetime.strptime(value.strip(), fmt).time()
            except ValueError:
                continue
    raise ConfigError(f"Invalid working hours {field}: {value!r}", field=field)


def _is_open(entry: Dict[str, Any]) -> bool:
    # older records use "active" instead of "is_open"
    if "is_open" in entry:
        return bool(entry["is_open"])
    return bool(entry.get("active", False))


def day_entry(working_hours: Optional[Dict[str, Any]], target_date: date) -> Optional[Dict[str, Any]]:
    if not working_hours:
        return None
    entry = working_hours.get(weekday_name(target_date))
    return entry if isinstance(entry, dict) else None


def window_from_entry(entry: Optional[Dict[str, Any]], day: str) -> DayWindow:
    """Parse one weekday entry of ``working_hours``"""
    if entry is None or not _is_open(entry):
        return DayWindow.closed()

    start = parse_time(entry.get("start_time", entry.get("start")), "start_time")
    end = parse_time(entry.get("end_time", entry.get("end")), "end_time")

    if start >= end:
        raise ConfigError(
            f"Working hours for {day} start at {start:%H:%M} but end at {end:%H:%M}",
            weekday=day,
        )

    return DayWindow(open=True, start=start, end=end)


def day_window(establishment, target_date: date) -> DayWindow:
    """
    Get the working-hour window for a date.

    Args:
        establishment: object with a ``working_hours`` mapping
        target_date: calendar date

    Returns:
        DayWindow(open=False) when the weekday is missing or closed,
        otherwise the parsed start/end times.

    Raises:
        ConfigError: if start/end are unparsable or start >= end
    """
    entry = day_entry(establishment.working_hours, target_date)
    return window_from_entry(entry, weekday_name(target_date))


def is_open_on(establishment, target_date: date) -> bool:
    """Whether the weekday is configured as open (does not validate the hours)"""
    entry = day_entry(establishment.working_hours, target_date)
    return entry is not None and _is_open(entry)


def validate_working_hours(working_hours: Dict[str, Any]) -> None:
    """
    Validate a full working-hours map before saving it.

    Raises:
        ValidationError: on an unknown weekday key or a malformed open day
    """
    unknown = set(working_hours) - set(WEEKDAYS)
    if unknown:
        raise ValidationError(
            f"Unknown weekday keys in working hours: {sorted(unknown)}",
            field="working_hours",
        )

    for day in WEEKDAYS:
        entry = working_hours.get(day)
        try:
            window_from_entry(entry if isinstance(entry, dict) else None, day)
        except ConfigError as e:
            raise ValidationError(e.message, field="working_hours", day=day)


def merge_working_hours(current: Optional[Dict[str, Any]], changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply a partial working-hours update on top of the stored map.

    Days the update leaves out keep their stored entry; days with no stored
    entry become closed. The result always has all seven weekdays.

    Raises:
        ValidationError: if the merged map is invalid
    """
    validate_working_hours(changes)
    current = current or {}
    merged = {}
    for day in WEEKDAYS:
        entry = changes.get(day, current.get(day))
        merged[day] = dict(entry) if isinstance(entry, dict) else {"is_open": False}
    validate_working_hours(merged)
    return merged
