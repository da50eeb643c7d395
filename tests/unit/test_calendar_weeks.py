#!/usr/bin/env python3
"""
Tests for ISO-8601 week indexing.

Tests cover:
- Week assignment around year boundaries
- Week start (Monday) computation and round trips
- Invalid week numbers and keys
- UTC day/month/year keys
"""

from datetime import date, datetime, timezone

import pytest

from Velocity.errors import InvalidWeekError, VelocityError
from Velocity.time_log.calendar_weeks import (
    day_key,
    iso_week_of,
    iso_week_of_date,
    iter_week_starts,
    month_key,
    parse_week_key,
    week_start,
    week_start_of_date,
    weeks_in_year,
    year_key,
)
from Velocity.time_log.models import IsoWeek


def _ms(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


# ============================================================================
# Week Assignment Tests
# ============================================================================


class TestIsoWeekOf:
    """Tests for iso_week_of."""

    def test_dec_31_2020_is_week_53(self):
        assert iso_week_of(_ms(2020, 12, 31, 12)) == IsoWeek(2020, 53)

    def test_jan_1_2021_belongs_to_previous_iso_year(self):
        assert iso_week_of(_ms(2021, 1, 1, 9)).key == "2020-W53"

    def test_first_week_of_2021(self):
        assert iso_week_of(_ms(2021, 1, 4)) == IsoWeek(2021, 1)
        assert iso_week_of(_ms(2021, 1, 5, 8)) == IsoWeek(2021, 1)

    def test_late_december_can_belong_to_next_year(self):
        assert iso_week_of(_ms(2024, 12, 30, 10)) == IsoWeek(2025, 1)

    def test_uses_utc_not_local_time(self):
        # 23:30 UTC Sunday stays in the Sunday's week
        assert iso_week_of(_ms(2024, 3, 17, 23, 30)).key == "2024-W11"
        assert iso_week_of(_ms(2024, 3, 18, 0, 0)).key == "2024-W12"

    def test_key_is_zero_padded(self):
        assert iso_week_of(_ms(2024, 1, 3)).key == "2024-W01"


# ============================================================================
# Week Start Tests
# ============================================================================


class TestWeekStart:
    """Tests for week_start and weeks_in_year."""

    def test_week_53_of_2020_starts_dec_28(self):
        assert week_start(2020, 53) == date(2020, 12, 28)

    def test_week_1_monday_can_fall_in_previous_year(self):
        assert week_start(2021, 1) == date(2021, 1, 4)
        assert week_start(2026, 1) == date(2025, 12, 29)

    def test_week_start_is_monday(self):
        for week in (1, 10, 26, 52):
            assert week_start(2024, week).weekday() == 0

    @pytest.mark.parametrize("year", [2015, 2019, 2020, 2021, 2024, 2026, 2032])
    def test_round_trip_every_week(self, year):
        for week in range(1, weeks_in_year(year) + 1):
            assert iso_week_of_date(week_start(year, week)) == IsoWeek(year, week)

    def test_weeks_in_year(self):
        assert weeks_in_year(2020) == 53
        assert weeks_in_year(2015) == 53
        assert weeks_in_year(2021) == 52
        assert weeks_in_year(2024) == 52

    def test_week_53_of_short_year_is_rejected(self):
        with pytest.raises(InvalidWeekError) as exc_info:
            week_start(2021, 53)

        assert exc_info.value.context["weeks_in_year"] == 52

    @pytest.mark.parametrize("week", [0, -1, 54])
    def test_out_of_range_week_is_rejected(self, week):
        with pytest.raises(InvalidWeekError):
            week_start(2020, week)

    def test_invalid_week_is_a_value_error(self):
        with pytest.raises(ValueError):
            week_start(2022, 60)
        with pytest.raises(VelocityError):
            week_start(2022, 60)

    def test_week_start_of_date(self):
        assert week_start_of_date(date(2024, 3, 13)) == date(2024, 3, 11)
        assert week_start_of_date(date(2024, 3, 11)) == date(2024, 3, 11)
        assert week_start_of_date(date(2024, 3, 17)) == date(2024, 3, 11)

    def test_iter_week_starts_is_inclusive(self):
        mondays = list(iter_week_starts(date(2020, 12, 21), date(2021, 1, 4)))

        assert mondays == [date(2020, 12, 21), date(2020, 12, 28), date(2021, 1, 4)]


# ============================================================================
# Week Key Tests
# ============================================================================


class TestParseWeekKey:
    """Tests for parse_week_key."""

    def test_parses_valid_key(self):
        assert parse_week_key("2020-W53") == IsoWeek(2020, 53)

    @pytest.mark.parametrize("key", ["2020-53", "2020-W1", "W53-2020", "", None])
    def test_rejects_malformed_keys(self, key):
        with pytest.raises(InvalidWeekError):
            parse_week_key(key)

    def test_rejects_nonexistent_week(self):
        with pytest.raises(InvalidWeekError):
            parse_week_key("2021-W53")


class TestCalendarKeys:
    """Tests for day, month, and year keys."""

    def test_keys_use_utc_date(self):
        ts = _ms(2024, 3, 31, 23, 30)

        assert day_key(ts) == "2024-03-31"
        assert month_key(ts) == "2024-03"
        assert year_key(ts) == "2024"

    def test_month_key_is_zero_padded(self):
        assert month_key(_ms(2024, 1, 15)) == "2024-01"
