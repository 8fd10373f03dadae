# config.py
import json
import os
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))

# Known info: On April 10th, 2025, at midnight EDT, the chest spawn was at Sealed Sanctuary.
DEFAULT_SPAWN_LOCATIONS = [
    ["Orc Village", "Sealed Sanctuary"],
    ["Sealed Sanctuary", "Shrine of Devotion"],
    ["Shrine of Devotion", "Arkeum Post"],
    ["Arkeum Post", "Orc Village"],
]


class Config:
    # Rotation ground truth
    SPAWN_TIMEZONE = os.environ.get('SPAWN_TIMEZONE', 'America/New_York')
    SPAWN_REFERENCE_TIME = os.environ.get('SPAWN_REFERENCE_TIME', '2025-04-10T04:00:00Z')
    SPAWN_REFERENCE_INDEX = os.environ.get('SPAWN_REFERENCE_INDEX', '1')
    SPAWN_LOCATIONS = os.environ.get('SPAWN_LOCATIONS') or json.dumps(DEFAULT_SPAWN_LOCATIONS)

    # Spawn cadence and the nightly maintenance hour (local time)
    SPAWN_INTERVAL_MINUTES = os.environ.get('SPAWN_INTERVAL_MINUTES', '20')
    SPAWN_SUPPRESSED_HOUR = os.environ.get('SPAWN_SUPPRESSED_HOUR', '22')

    # Weekly re-anchor: Thursday (Mon=0) at 04:00 local
    SPAWN_ANCHOR_WEEKDAY = os.environ.get('SPAWN_ANCHOR_WEEKDAY', '3')
    SPAWN_ANCHOR_HOUR = os.environ.get('SPAWN_ANCHOR_HOUR', '4')

    SCHEDULE_PAGE_SIZE = int(os.environ.get('SCHEDULE_PAGE_SIZE', '3'))
    REFRESH_INTERVAL_SECONDS = int(os.environ.get('REFRESH_INTERVAL_SECONDS', '1'))
    SCHEDULER_ENABLED = os.environ.get('SCHEDULER_ENABLED', 'true').lower() in ('1', 'true', 'yes', 'on')

    LOG_FILE = os.environ.get('LOG_FILE') or os.path.join(basedir, 'chronorift.log')
