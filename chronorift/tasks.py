# chronorift/tasks.py
"""Background tasks that poll the spawn scheduler"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from chronorift.rotation import SpawnPrediction
from chronorift.scheduler import SpawnScheduler, format_countdown

logger = logging.getLogger(__name__)

SPAWNING_NOW = 'Spawning now'

# "Spawning now" stays up for at least this long after a spawn starts
SPAWN_DISPLAY_WINDOW = timedelta(minutes=1)

# A boundary this close counts as reached
SPAWN_REACHED_THRESHOLD = timedelta(seconds=1)


@dataclass(frozen=True)
class CountdownSnapshot:
    now: datetime
    next_spawn_time: datetime
    countdown: str
    spawning_now: bool
    next_location: SpawnPrediction

    def to_dict(self) -> Dict:
        return {
            'now': self.now.isoformat(),
            'next_spawn_time': self.next_spawn_time.isoformat(),
            'countdown': self.countdown,
            'spawning_now': self.spawning_now,
            'next_location': self.next_location.to_dict(),
        }


class SpawnCountdown:
    """Tracks the countdown to the next spawn, latching 'Spawning now' for a minute after each spawn"""

    def __init__(self, scheduler: SpawnScheduler):
        self.scheduler = scheduler
        self.spawn_started: Optional[datetime] = None
        self.latest: Optional[CountdownSnapshot] = None
        self._lock = threading.Lock()

    def refresh(self, now: Optional[datetime] = None) -> CountdownSnapshot:
        now = self.scheduler.engine.resolve_now(now)
        next_time = self.scheduler.next_spawn_time(now)
        next_location = self.scheduler.next_spawn_location(now)

        with self._lock:
            spawning_now = False

            if self.spawn_started is not None:
                if now - self.spawn_started < SPAWN_DISPLAY_WINDOW:
                    spawning_now = True
                else:
                    # One minute has passed; go back to counting down
                    self.spawn_started = None

            if not spawning_now and next_time - now <= SPAWN_REACHED_THRESHOLD:
                self.spawn_started = now
                spawning_now = True
                logger.info(f"Spawn reached at {next_time.isoformat()}: "
                            f"{next_location.chest} / {next_location.ore}")

            countdown = SPAWNING_NOW if spawning_now else format_countdown(next_time - now)
            snapshot = CountdownSnapshot(
                now=now,
                next_spawn_time=next_time,
                countdown=countdown,
                spawning_now=spawning_now,
                next_location=next_location,
            )
            self.latest = snapshot

        return snapshot


def refresh_countdown(countdown: SpawnCountdown):
    """
    Refresh the countdown snapshot
    This runs periodically in the background
    """
    try:
        snapshot = countdown.refresh()
        logger.debug(f"Countdown refreshed: {snapshot.countdown} until {snapshot.next_spawn_time.isoformat()}")
    except Exception as e:
        logger.error(f"Error refreshing spawn countdown: {e}")
        import traceback
        logger.error(f"Traceback: {traceback.format_exc()}")
