# chronorift/scheduler.py
"""Spawn timing: next boundary search and the forward-looking schedule"""
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from chronorift.local_calendar import LocalCalendarClassifier
from chronorift.rotation import RotationEngine, SpawnPrediction
from chronorift.utils import RotationSettings, validate_step_minutes

logger = logging.getLogger(__name__)


def next_boundary(now: datetime, step_minutes: int, classifier: LocalCalendarClassifier,
                  suppressed_hour: int = 22) -> datetime:
    """
    Next spawn time strictly after `now`.

    Rounds up to the next multiple of `step_minutes` past the top of the hour, then
    steps forward until the local hour is no longer the suppressed hour.
    """
    validate_step_minutes(step_minutes)

    # If datetime is naive (no timezone), assume it's UTC
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)

    next_time = now.replace(second=0, microsecond=0)
    minutes = now.minute
    increment = step_minutes - (minutes % step_minutes)
    next_time = next_time + timedelta(minutes=increment)

    # The suppressed window is one local hour, so this runs at most 60 / step_minutes times
    while classifier.classify(next_time).hour == suppressed_hour:
        next_time = next_time + timedelta(minutes=step_minutes)

    return next_time


def format_countdown(remaining: timedelta) -> str:
    """HH:MM:SS when at least an hour remains, MM:SS otherwise"""
    total_seconds = max(int(remaining.total_seconds()), 0)
    hours = (total_seconds // 3600) % 24
    minutes = (total_seconds // 60) % 60
    seconds = total_seconds % 60
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


class ScheduleCursor:
    """Pages forward through hourly predictions; each call picks up where the last one stopped"""

    def __init__(self, engine: RotationEngine, start: int = 0):
        self.engine = engine
        self._offset = start
        self._lock = threading.Lock()

    @property
    def offset(self) -> int:
        return self._offset

    def advance(self, count: int, now: Optional[datetime] = None) -> List[SpawnPrediction]:
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValueError(f"count must be a positive integer, got {count!r}")

        with self._lock:
            start = self._offset
            self._offset += count

        logger.debug(f"Schedule cursor advanced: offsets {start}..{start + count - 1}")
        return self.engine.predictions(start, count, now=now)

    def reset(self):
        with self._lock:
            self._offset = 0
        logger.debug("Schedule cursor reset")


class SpawnScheduler:
    """Answers the spawn queries: slot at an hour offset, next spawn boundary, next N predictions"""

    def __init__(self, engine: RotationEngine, step_minutes: int = 20):
        """
        Initialize the spawn scheduler

        Args:
            engine: Rotation engine computing the active slot
            step_minutes: Spawn interval in minutes, must divide 60 (default: 20)
        """
        validate_step_minutes(step_minutes)
        self.engine = engine
        self.step_minutes = step_minutes
        self.cursor = ScheduleCursor(engine)
        logger.info(f"SpawnScheduler initialized: spawns every {step_minutes} minutes, "
                    f"none during local hour {engine.suppressed_hour}")

    @classmethod
    def from_settings(cls, settings: RotationSettings, clock=None):
        return cls(RotationEngine.from_settings(settings, clock=clock), step_minutes=settings.step_minutes)

    def slot_at_offset(self, hour_offset: int, now: Optional[datetime] = None) -> SpawnPrediction:
        return self.engine.compute_slot(hour_offset, now=now)

    def next_spawn_time(self, now: Optional[datetime] = None) -> datetime:
        now = self.engine.resolve_now(now)
        return next_boundary(now, self.step_minutes, self.engine.classifier, self.engine.suppressed_hour)

    def next_spawn_location(self, now: Optional[datetime] = None) -> SpawnPrediction:
        """Prediction for the hour of the next spawn boundary"""
        now = self.engine.resolve_now(now)
        next_time = self.next_spawn_time(now)
        offset = self.engine.hours_elapsed(next_time) - self.engine.hours_elapsed(now)
        return self.engine.compute_slot(offset, now=now)

    def time_until_next_spawn(self, now: Optional[datetime] = None) -> timedelta:
        now = self.engine.resolve_now(now)
        return self.next_spawn_time(now) - now

    def next_predictions(self, count: int, now: Optional[datetime] = None) -> List[SpawnPrediction]:
        return self.cursor.advance(count, now=now)
