# booking_engine/services/availability/slot_generator.py
"""Candidate start times that fit a service inside the working-hour window"""
from datetime import date, datetime, time, timedelta
from typing import Iterator

from booking_engine.core.errors import ValidationError
from booking_engine.schemas.availability import DayWindow

DEFAULT_STEP_MINUTES = 30

# Any date works; slots never cross midnight because end <= window.end
_ANCHOR = date(2000, 1, 1)


class SlotSequence:
    """
    Finite, ordered and restartable sequence of start times.

    Each ``iter()`` walks the window again, so the same object can be
    consumed more than once.
    """

    def __init__(self, window: DayWindow, duration_minutes: int, step_minutes: int = DEFAULT_STEP_MINUTES):
        if duration_minutes is None or duration_minutes <= 0:
            raise ValidationError("Service duration must be a positive number of minutes")
        if step_minutes <= 0:
            raise ValidationError("Slot step must be a positive number of minutes")

        self.window = window
        self.duration = timedelta(minutes=duration_minutes)
        self.step = timedelta(minutes=step_minutes)

    def __iter__(self) -> Iterator[time]:
        if not self.window.open:
            return

        current = datetime.combine(_ANCHOR, self.window.start)
        day_end = datetime.combine(_ANCHOR, self.window.end)

        while current + self.duration <= day_end:
            yield current.time()
            current += self.step

    def __contains__(self, candidate: time) -> bool:
        return any(slot == candidate for slot in self)

    def __len__(self) -> int:
        return sum(1 for _ in self)


def generate_slots(window: DayWindow, service_duration_minutes: int, step_minutes: int = DEFAULT_STEP_MINUTES) -> SlotSequence:
    """
    Start times t with t + duration <= window.end, from window.start in
    step_minutes increments. A closed window yields nothing.
    """
    return SlotSequence(window, service_duration_minutes, step_minutes)


def slot_end(start: time, duration_minutes: int) -> time:
    """End time of a slot that is known to fit inside the day"""
    return (datetime.combine(_ANCHOR, start) + timedelta(minutes=duration_minutes)).time()
