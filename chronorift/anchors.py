# chronorift/anchors.py
"""Weekly re-anchor events (Thursday 04:00 local by default)"""
import logging
from datetime import date, datetime, timedelta

from chronorift.local_calendar import LocalCalendarClassifier, WEEKDAY_NAMES

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def count_weekday(first: date, last: date, weekday: int) -> int:
    """Number of civil dates in [first, last] falling on `weekday` (Monday == 0)"""
    if last < first:
        return 0
    first_match = first + timedelta(days=(weekday - first.weekday()) % 7)
    if first_match > last:
        return 0
    return (last - first_match).days // 7 + 1


class AnchorEventCounter:
    """
    Counts re-anchor events between two instants.

    An event happens once a week, at `hour`:00 local wall clock time on `weekday`.
    Each event shifts the day's starting slot one extra step backward.
    """

    def __init__(self, classifier: LocalCalendarClassifier, weekday: int = 3, hour: int = 4):
        self.classifier = classifier
        self.weekday = weekday
        self.hour = hour
        logger.info(f"AnchorEventCounter initialized: {WEEKDAY_NAMES[weekday]} {hour:02d}:00 {classifier.timezone_name}")

    def event_time(self, day: date) -> datetime:
        """Candidate event instant for a civil date (local hour, not a fixed UTC offset)"""
        return self.classifier.at_local_hour(day, self.hour)

    def count(self, from_time: datetime, to_time: datetime) -> int:
        """
        Count events whose instant lies in [from_time, to_time], both ends inclusive.

        Closed form: trim the civil date range to the days whose event falls inside the
        interval, then count the matching weekdays in it.
        """
        return self._count(from_time, to_time, include_start=True, include_end=True)

    def count_exclusive(self, from_time: datetime, to_time: datetime) -> int:
        """Count events strictly inside (from_time, to_time)"""
        return self._count(from_time, to_time, include_start=False, include_end=False)

    def signed_count(self, reference: datetime, target: datetime) -> int:
        """
        Events between the reference and the target, negative when the target precedes it.

        The difference of signed counts for two targets t1 <= t2 is always the number
        of events in (t1, t2].
        """
        if target >= reference:
            return self.count(reference, target)
        return -self.count_exclusive(target, reference)

    def _count(self, from_time: datetime, to_time: datetime, include_start: bool, include_end: bool) -> int:
        if to_time < from_time:
            return 0

        first = self.classifier.local_date(from_time)
        first_event = self.event_time(first)
        if first_event < from_time or (not include_start and first_event == from_time):
            first += ONE_DAY

        last = self.classifier.local_date(to_time)
        last_event = self.event_time(last)
        if last_event > to_time or (not include_end and last_event == to_time):
            last -= ONE_DAY

        return count_weekday(first, last, self.weekday)

    def count_by_scan(self, from_time: datetime, to_time: datetime) -> int:
        """
        Day-by-day reference implementation of `count`.

        O(elapsed days); only meant for checking the closed form.
        """
        if to_time < from_time:
            return 0

        count = 0
        day = self.classifier.local_date(from_time)
        last = self.classifier.local_date(to_time)
        while day <= last:
            event_time = self.event_time(day)
            if from_time <= event_time <= to_time:
                if self.classifier.classify(event_time).weekday == self.weekday:
                    count += 1
            day += ONE_DAY
        return count
