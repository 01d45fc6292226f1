"""Civil calendar shared by every date comparison in the engine.

Streaks and the daily quota both compare a stored civil date with
"today". Both must use the same day definition, so the engine resolves
every instant through one CivilCalendar bound to one timezone. Mixing a
UTC today with a localized stored date produces off-by-one streaks around
midnight.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from nutrigotchi.core.constants import DEFAULT_TIMEZONE
from nutrigotchi.core.exceptions import ConfigurationError, InvalidInputError
from nutrigotchi.models.enums import DayRelation


def classify_day(stored: date | None, today: date) -> DayRelation:
    """Classify a stored civil date relative to today.

    Args:
        stored: The previously recorded date, or None if there is none.
        today: Today's civil date.

    Returns:
        FIRST, SAME_DAY, CONSECUTIVE or GAP.
    """
    if stored is None:
        return DayRelation.FIRST
    if stored == today:
        return DayRelation.SAME_DAY
    if stored == today - timedelta(days=1):
        return DayRelation.CONSECUTIVE
    return DayRelation.GAP


class CivilCalendar:
    """Maps instants to civil dates in a fixed timezone.

    Example:
        >>> from datetime import datetime, timezone
        >>> cal = CivilCalendar("Asia/Jakarta")
        >>> cal.today(datetime(2025, 1, 1, 18, 0, tzinfo=timezone.utc))
        datetime.date(2025, 1, 2)
    """

    def __init__(self, timezone: str = DEFAULT_TIMEZONE) -> None:
        """Initialize the calendar.

        Args:
            timezone: IANA timezone name.

        Raises:
            ConfigurationError: If the timezone is unknown.
        """
        try:
            self._zone = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(f"Unknown timezone: {timezone!r}", config_key="timezone") from exc
        self.timezone = timezone

    def __repr__(self) -> str:
        return f"CivilCalendar({self.timezone!r})"

    def today(self, instant: datetime) -> date:
        """Civil date of an instant.

        Raises:
            InvalidInputError: If the instant is naive.
        """
        if instant.tzinfo is None or instant.utcoffset() is None:
            raise InvalidInputError("Instant must be timezone-aware", field="occurred_at", value=instant.isoformat())
        return instant.astimezone(self._zone).date()

    def classify(self, stored: date | None, instant: datetime) -> DayRelation:
        """Classify a stored date relative to the civil day of ``instant``."""
        return classify_day(stored, self.today(instant))


__all__ = [
    "CivilCalendar",
    "classify_day",
]
