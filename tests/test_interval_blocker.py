from datetime import date, datetime, time

import pytest

from booking_engine.services.availability.interval_blocker import (
    is_date_blocked,
    overlaps,
    overlaps_blocked_time,
    within_booking_horizon,
)
from conftest import MONDAY, MONDAY_MORNING


class TestOverlaps:
    @pytest.mark.parametrize("a,b,expected", [
        ((9, 10), (10, 11), False),  # touching
        ((10, 11), (9, 10), False),
        ((9, 10), (9, 10), True),
        ((9, 11), (10, 12), True),
        ((10, 12), (9, 11), True),
        ((9, 12), (10, 11), True),  # containment
        ((9, 10), (11, 12), False),
    ])
    def test_half_open_overlap_is_symmetric(self, a, b, expected):
        a_start, a_end = time(a[0]), time(a[1])
        b_start, b_end = time(b[0]), time(b[1])
        assert overlaps(a_start, a_end, b_start, b_end) is expected
        assert overlaps(b_start, b_end, a_start, a_end) is expected


class TestBlockedDates:
    def test_exact_date(self, db, make_establishment, block_date):
        establishment = make_establishment()
        block_date(establishment, MONDAY)

        assert is_date_blocked(db, establishment, MONDAY)
        assert not is_date_blocked(db, establishment, date(2026, 3, 3))

    def test_recurring_date_matches_other_years(self, db, make_establishment, block_date):
        establishment = make_establishment()
        block_date(establishment, date(2024, 12, 25), is_recurring=True, reason="Christmas")

        assert is_date_blocked(db, establishment, date(2023, 12, 25))
        assert is_date_blocked(db, establishment, date(2025, 12, 25))
        assert not is_date_blocked(db, establishment, date(2025, 12, 24))

    def test_non_recurring_does_not_repeat(self, db, make_establishment, block_date):
        establishment = make_establishment()
        block_date(establishment, date(2024, 12, 25))

        assert not is_date_blocked(db, establishment, date(2025, 12, 25))

    def test_scoped_by_establishment(self, db, make_establishment, block_date):
        blocked = make_establishment()
        other = make_establishment()
        block_date(blocked, MONDAY)

        assert not is_date_blocked(db, other, MONDAY)


class TestBlockedTimes:
    def test_overlap_and_touching(self, db, make_establishment, block_time):
        establishment = make_establishment()
        block_time(establishment, MONDAY, time(12, 0), time(13, 0), reason="Lunch")

        assert overlaps_blocked_time(db, establishment, MONDAY, time(11, 30), time(12, 30))
        assert overlaps_blocked_time(db, establishment, MONDAY, time(12, 15), time(12, 45))
        assert not overlaps_blocked_time(db, establishment, MONDAY, time(11, 0), time(12, 0))
        assert not overlaps_blocked_time(db, establishment, MONDAY, time(13, 0), time(14, 0))
        assert not overlaps_blocked_time(db, establishment, date(2026, 3, 3), time(12, 0), time(13, 0))


class TestHorizon:
    def test_accepts_datetime_or_date(self, make_establishment):
        establishment = make_establishment(earliest_booking_time="+1 day")

        assert not within_booking_horizon(establishment, MONDAY, MONDAY_MORNING)
        assert within_booking_horizon(establishment, date(2026, 3, 3), MONDAY)
