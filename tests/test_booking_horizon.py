from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from booking_engine.core.errors import ValidationError
from booking_engine.services.availability.booking_horizon import (
    EarliestBookingPolicy,
    LatestBookingPolicy,
    earliest_booking_date,
    is_too_early,
    is_too_late,
    latest_booking_date,
    parse_earliest_policy,
    parse_latest_policy,
)
from conftest import MONDAY


def rules(earliest=None, latest=None):
    return SimpleNamespace(earliest_booking_time=earliest, latest_booking_time=latest)


class TestEarliest:
    @pytest.mark.parametrize("policy,today,expected", [
        ("same_day", MONDAY, MONDAY),
        (None, MONDAY, MONDAY),
        ("+1 day", MONDAY, date(2026, 3, 3)),
        ("+2 days", MONDAY, date(2026, 3, 4)),
        ("+3 days", MONDAY, date(2026, 3, 5)),
        ("+7 days", MONDAY, date(2026, 3, 9)),
        ("+1 month", MONDAY, date(2026, 4, 2)),
        ("next_week", MONDAY, date(2026, 3, 9)),
        ("next_week", date(2026, 3, 8), date(2026, 3, 9)),  # Sunday
        ("next_week", date(2026, 3, 4), date(2026, 3, 9)),  # Wednesday
        ("next_month", MONDAY, date(2026, 4, 1)),
        ("next_month", date(2026, 12, 31), date(2027, 1, 1)),
    ])
    def test_earliest_date(self, policy, today, expected):
        assert earliest_booking_date(rules(earliest=policy), today) == expected

    def test_month_offset_clamps_to_month_end(self):
        assert earliest_booking_date(rules(earliest="+1 month"), date(2026, 1, 31)) == date(2026, 2, 28)

    def test_unknown_policy_is_permissive_at_runtime(self, caplog):
        assert earliest_booking_date(rules(earliest="tomorrow-ish"), MONDAY) == MONDAY
        assert "tomorrow-ish" in caplog.text

    def test_too_early_is_monotonic(self):
        establishment = rules(earliest="+3 days")
        too_early = [is_too_early(establishment, MONDAY + timedelta(days=d), MONDAY) for d in range(-5, 10)]
        # once a date is allowed every later date is allowed too
        first_allowed = too_early.index(False)
        assert all(too_early[:first_allowed])
        assert not any(too_early[first_allowed:])


class TestLatest:
    def test_no_limit(self):
        assert latest_booking_date(rules(latest="no_limit"), MONDAY) is None
        assert latest_booking_date(rules(), MONDAY) is None
        assert not is_too_late(rules(), date(2100, 1, 1), MONDAY)

    @pytest.mark.parametrize("policy,expected", [
        ("+1 week", date(2026, 3, 9)),
        ("+2 weeks", date(2026, 3, 16)),
        ("+1 month", date(2026, 4, 2)),
        ("+2 months", date(2026, 5, 2)),
        ("+3 months", date(2026, 6, 2)),
        ("+6 months", date(2026, 9, 2)),
    ])
    def test_latest_date(self, policy, expected):
        establishment = rules(latest=policy)
        assert latest_booking_date(establishment, MONDAY) == expected
        assert not is_too_late(establishment, expected, MONDAY)
        assert is_too_late(establishment, expected + timedelta(days=1), MONDAY)

    def test_unknown_policy_means_no_limit_at_runtime(self):
        assert latest_booking_date(rules(latest="forever"), MONDAY) is None


class TestStrictParsing:
    def test_known_values(self):
        assert parse_earliest_policy("next_week") is EarliestBookingPolicy.NEXT_WEEK
        assert parse_latest_policy("+3 months") is LatestBookingPolicy.PLUS_3_MONTHS

    def test_empty_maps_to_default(self):
        assert parse_earliest_policy("") is EarliestBookingPolicy.SAME_DAY
        assert parse_latest_policy(None) is LatestBookingPolicy.NO_LIMIT

    def test_unknown_values_rejected(self):
        with pytest.raises(ValidationError):
            parse_earliest_policy("+5 days")
        with pytest.raises(ValidationError) as exc_info:
            parse_latest_policy("+1 year")
        assert "no_limit" in exc_info.value.details["allowed"]
