"""Tests for civil-day classification."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from nutrigotchi.core.exceptions import ConfigurationError, InvalidInputError
from nutrigotchi.engine.calendar import CivilCalendar, classify_day
from nutrigotchi.models.enums import DayRelation


class TestClassifyDay:
    """Tests for the classify_day function."""

    def test_no_stored_date(self, today: date) -> None:
        """Test a missing date is the first action."""
        assert classify_day(None, today) is DayRelation.FIRST

    def test_same_day(self, today: date) -> None:
        """Test the same civil date."""
        assert classify_day(today, today) is DayRelation.SAME_DAY

    def test_yesterday(self, today: date) -> None:
        """Test exactly one day back is consecutive."""
        assert classify_day(today - timedelta(days=1), today) is DayRelation.CONSECUTIVE

    def test_two_days_back(self, today: date) -> None:
        """Test a skipped day is a gap."""
        assert classify_day(today - timedelta(days=2), today) is DayRelation.GAP

    def test_future_date_is_gap(self, today: date) -> None:
        """Test a stored date after today counts as a gap."""
        assert classify_day(today + timedelta(days=1), today) is DayRelation.GAP

    def test_across_month_boundary(self) -> None:
        """Test consecutive days across a month boundary."""
        assert classify_day(date(2025, 2, 28), date(2025, 3, 1)) is DayRelation.CONSECUTIVE


class TestCivilCalendar:
    """Tests for the CivilCalendar class."""

    def test_utc_evening_is_next_day_in_jakarta(self, calendar: CivilCalendar) -> None:
        """Test 18:00 UTC falls on the next Jakarta day."""
        instant = datetime(2025, 1, 1, 18, 0, tzinfo=timezone.utc)
        assert calendar.today(instant) == date(2025, 1, 2)

    def test_just_before_local_midnight(self, calendar: CivilCalendar) -> None:
        """Test 16:59 UTC is still the same Jakarta day."""
        instant = datetime(2025, 1, 1, 16, 59, tzinfo=timezone.utc)
        assert calendar.today(instant) == date(2025, 1, 1)

    def test_other_timezone(self) -> None:
        """Test the calendar honours its own timezone."""
        calendar = CivilCalendar("America/New_York")
        instant = datetime(2025, 1, 2, 3, 0, tzinfo=timezone.utc)
        assert calendar.today(instant) == date(2025, 1, 1)

    def test_naive_instant_rejected(self, calendar: CivilCalendar) -> None:
        """Test naive datetimes raise InvalidInputError."""
        with pytest.raises(InvalidInputError) as exc_info:
            calendar.today(datetime(2025, 1, 1, 12, 0))

        assert exc_info.value.details["field"] == "occurred_at"

    def test_unknown_timezone(self) -> None:
        """Test an unknown timezone raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            CivilCalendar("Nowhere/Special")

    def test_classify_uses_local_day(self, calendar: CivilCalendar) -> None:
        """Test classify compares against the local civil day."""
        instant = datetime(2025, 1, 1, 18, 0, tzinfo=timezone.utc)
        assert calendar.classify(date(2025, 1, 1), instant) is DayRelation.CONSECUTIVE

    def test_repr(self, calendar: CivilCalendar) -> None:
        """Test calendar repr output."""
        assert repr(calendar) == "CivilCalendar('Asia/Jakarta')"
