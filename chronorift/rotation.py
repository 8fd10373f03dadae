# chronorift/rotation.py
"""Hourly spawn rotation anchored to a known reference spawn"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from chronorift.anchors import AnchorEventCounter
from chronorift.local_calendar import LocalCalendarClassifier
from chronorift.utils import ConfigurationError, RotationSettings

logger = logging.getLogger(__name__)

ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class SpawnLocation:
    chest: str
    ore: str


@dataclass(frozen=True)
class ReferenceAnchor:
    """At `time`, rotation slot `index` was active"""
    time: datetime
    index: int


@dataclass(frozen=True)
class SpawnPrediction:
    time: datetime
    slot_index: int
    location: SpawnLocation
    suppressed: bool

    @property
    def chest(self) -> str:
        return self.location.chest

    @property
    def ore(self) -> str:
        return self.location.ore

    def to_dict(self) -> Dict:
        return {
            'time': self.time.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'slot_index': self.slot_index,
            'chest': self.chest,
            'ore': self.ore,
            'suppressed': self.suppressed,
        }


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RotationEngine:
    """
    Predicts the active spawn slot for any hour, past or future.

    The rotation moves one slot forward every hour, but each elapsed day (counted in
    24 hour blocks from the reference) starts the day one slot further back, and each
    weekly re-anchor event pushes it back one more step. Both corrections are summed
    before wrapping.
    """

    def __init__(self, locations: Sequence[Tuple[str, str]], anchor: ReferenceAnchor,
                 classifier: LocalCalendarClassifier, counter: AnchorEventCounter,
                 suppressed_hour: int = 22, clock: Optional[Callable[[], datetime]] = None):
        if not locations:
            raise ConfigurationError("At least one spawn location pair is required")
        if not 0 <= anchor.index < len(locations):
            raise ConfigurationError(f"Reference index {anchor.index} outside [0, {len(locations)})")
        if anchor.time.tzinfo is None:
            raise ConfigurationError("Reference time must be timezone-aware")

        self.locations = tuple(SpawnLocation(chest, ore) for chest, ore in locations)
        self.anchor = ReferenceAnchor(anchor.time.astimezone(timezone.utc), anchor.index)
        self.classifier = classifier
        self.counter = counter
        self.suppressed_hour = suppressed_hour
        self.clock = clock or utc_now
        logger.info(f"RotationEngine initialized: {len(self.locations)} slots, "
                    f"slot {self.anchor.index} active at {self.anchor.time.isoformat()}")

    @classmethod
    def from_settings(cls, settings: RotationSettings, clock: Optional[Callable[[], datetime]] = None):
        classifier = LocalCalendarClassifier(settings.timezone_name)
        counter = AnchorEventCounter(classifier, weekday=settings.anchor_weekday, hour=settings.anchor_hour)
        anchor = ReferenceAnchor(settings.reference_time, settings.reference_index)
        return cls(settings.locations, anchor, classifier, counter,
                   suppressed_hour=settings.suppressed_hour, clock=clock)

    @property
    def slot_count(self) -> int:
        return len(self.locations)

    def resolve_now(self, now: Optional[datetime] = None) -> datetime:
        if now is None:
            now = self.clock()
        # If datetime is naive (no timezone), assume it's UTC
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    def hours_elapsed(self, instant: datetime) -> int:
        """Whole hours from the reference to `instant`, floored (negative before the reference)"""
        return (self.resolve_now(instant) - self.anchor.time) // ONE_HOUR

    def is_suppressed(self, instant: datetime) -> bool:
        return self.classifier.classify(instant).hour == self.suppressed_hour

    def compute_slot(self, hour_offset: int = 0, now: Optional[datetime] = None) -> SpawnPrediction:
        """
        Calculate the spawn `hour_offset` hours from the hour containing `now`.

        Args:
            hour_offset: Hours ahead (or behind, when negative) of the current hour
            now: Instant to compute from; the engine's clock is read once when omitted

        Returns:
            SpawnPrediction for the top of that hour
        """
        hours_elapsed = self.hours_elapsed(self.resolve_now(now)) + hour_offset

        days_elapsed = hours_elapsed // 24
        hour_of_day = hours_elapsed % 24

        spawn_time = self.anchor.time + hours_elapsed * ONE_HOUR
        extra_anchors = self.counter.signed_count(self.anchor.time, spawn_time)

        anchor_index = (self.anchor.index - days_elapsed - extra_anchors) % self.slot_count
        slot_index = (anchor_index + hour_of_day) % self.slot_count

        return SpawnPrediction(
            time=spawn_time,
            slot_index=slot_index,
            location=self.locations[slot_index],
            suppressed=self.is_suppressed(spawn_time),
        )

    def slot_at(self, instant: datetime) -> SpawnPrediction:
        return self.compute_slot(0, now=instant)

    def predictions(self, start: int, count: int, now: Optional[datetime] = None) -> List[SpawnPrediction]:
        now = self.resolve_now(now)
        return [self.compute_slot(offset, now=now) for offset in range(start, start + count)]
