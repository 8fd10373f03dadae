# chronorift/local_calendar.py
"""Civil (wall clock) time in the game server's timezone"""
import logging
from datetime import date, datetime, time, timezone
from typing import NamedTuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from chronorift.utils import ConfigurationError

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')


class LocalTime(NamedTuple):
    hour: int
    weekday: int  # Monday == 0

    @property
    def weekday_name(self) -> str:
        return WEEKDAY_NAMES[self.weekday]


class LocalCalendarClassifier:
    """Maps UTC instants onto the local civil calendar, applying DST rules for the instant's date"""

    def __init__(self, timezone_name: str = 'America/New_York'):
        """
        Initialize the classifier

        Args:
            timezone_name: IANA zone name (default: America/New_York)

        Raises:
            ConfigurationError: If the zone (or the tz database itself) is unavailable.
                Falling back to a fixed offset would silently corrupt DST-period results.
        """
        try:
            self.tz = ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            logger.error(f"Timezone {timezone_name!r} is not available: {e}")
            raise ConfigurationError(f"Timezone {timezone_name!r} is not available") from e
        self.timezone_name = timezone_name
        logger.info(f"LocalCalendarClassifier initialized for {timezone_name}")

    def to_local(self, instant: datetime) -> datetime:
        # If datetime is naive (no timezone), assume it's UTC
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return instant.astimezone(self.tz)

    def classify(self, instant: datetime) -> LocalTime:
        local = self.to_local(instant)
        return LocalTime(hour=local.hour, weekday=local.weekday())

    def local_date(self, instant: datetime) -> date:
        return self.to_local(instant).date()

    def at_local_hour(self, day: date, hour: int) -> datetime:
        """Return the UTC instant of `hour`:00 local wall clock time on civil date `day`"""
        local = datetime.combine(day, time(hour), tzinfo=self.tz)
        return local.astimezone(timezone.utc)
