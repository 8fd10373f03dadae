# chronorift/utils.py
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Tuple

# Set up logging
logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised at startup when the rotation settings cannot produce correct answers"""


@dataclass(frozen=True)
class RotationSettings:
    timezone_name: str
    reference_time: datetime
    reference_index: int
    locations: Tuple[Tuple[str, str], ...]
    step_minutes: int
    suppressed_hour: int
    anchor_weekday: int
    anchor_hour: int


def parse_instant(value) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    A trailing 'Z' is accepted. Naive values are assumed to be UTC.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))

    # If datetime is naive (no timezone), assume it's UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_locations(raw) -> Tuple[Tuple[str, str], ...]:
    """
    Parse the rotation locations.

    Accepts either a JSON string or an already decoded list of [chest, ore] pairs.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"SPAWN_LOCATIONS is not valid JSON: {e}")
            raise ConfigurationError(f"SPAWN_LOCATIONS is not valid JSON: {e}") from e

    if not isinstance(raw, (list, tuple)) or not raw:
        raise ConfigurationError("At least one spawn location pair is required")

    pairs: List[Tuple[str, str]] = []
    for entry in raw:
        if isinstance(entry, dict):
            entry = (entry.get('chest'), entry.get('ore'))
        if not isinstance(entry, (list, tuple)) or len(entry) != 2 or not all(isinstance(p, str) and p for p in entry):
            raise ConfigurationError(f"Invalid spawn location entry: {entry!r}")
        pairs.append((entry[0], entry[1]))
    return tuple(pairs)


def _as_int(config, key) -> int:
    try:
        return int(config[key])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be an integer, got {config[key]!r}") from e


def load_settings(config) -> RotationSettings:
    """
    Build validated rotation settings from a Flask config mapping (or any dict).

    Malformed values fail here, at startup, instead of surfacing later as a
    silently wrong rotation.
    """
    try:
        reference_time = parse_instant(config['SPAWN_REFERENCE_TIME'])
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid SPAWN_REFERENCE_TIME {config['SPAWN_REFERENCE_TIME']!r}: {e}")
        raise ConfigurationError(f"Invalid SPAWN_REFERENCE_TIME: {e}") from e

    settings = RotationSettings(
        timezone_name=config['SPAWN_TIMEZONE'],
        reference_time=reference_time,
        reference_index=_as_int(config, 'SPAWN_REFERENCE_INDEX'),
        locations=parse_locations(config['SPAWN_LOCATIONS']),
        step_minutes=_as_int(config, 'SPAWN_INTERVAL_MINUTES'),
        suppressed_hour=_as_int(config, 'SPAWN_SUPPRESSED_HOUR'),
        anchor_weekday=_as_int(config, 'SPAWN_ANCHOR_WEEKDAY'),
        anchor_hour=_as_int(config, 'SPAWN_ANCHOR_HOUR'),
    )
    validate_settings(settings)
    logger.info(f"Rotation settings loaded: {len(settings.locations)} slots, "
                f"reference {settings.reference_time.isoformat()} -> index {settings.reference_index}, "
                f"every {settings.step_minutes} min in {settings.timezone_name}")
    return settings


def validate_settings(settings: RotationSettings):
    if not settings.locations:
        raise ConfigurationError("At least one spawn location pair is required")

    if not 0 <= settings.reference_index < len(settings.locations):
        raise ConfigurationError(
            f"SPAWN_REFERENCE_INDEX must be in [0, {len(settings.locations)}), got {settings.reference_index}")

    validate_step_minutes(settings.step_minutes)

    if not 0 <= settings.suppressed_hour <= 23:
        raise ConfigurationError(f"SPAWN_SUPPRESSED_HOUR must be 0-23, got {settings.suppressed_hour}")

    if not 0 <= settings.anchor_hour <= 23:
        raise ConfigurationError(f"SPAWN_ANCHOR_HOUR must be 0-23, got {settings.anchor_hour}")

    if not 0 <= settings.anchor_weekday <= 6:
        raise ConfigurationError(f"SPAWN_ANCHOR_WEEKDAY must be 0 (Mon) - 6 (Sun), got {settings.anchor_weekday}")


def validate_step_minutes(step_minutes: int):
    if step_minutes <= 0:
        raise ConfigurationError(f"Spawn interval must be positive, got {step_minutes} minutes")
    if 60 % step_minutes != 0:
        raise ConfigurationError(f"Spawn interval must divide 60 evenly, got {step_minutes} minutes")
