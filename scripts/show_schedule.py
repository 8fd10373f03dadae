#!/usr/bin/env python3
"""
Print the next spawn and the upcoming hourly spawn schedule.
Bypasses the HTTP layer and queries the rotation directly.
"""

import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Config
from chronorift import create_app
from chronorift.scheduler import format_countdown
from chronorift.utils import parse_instant


class ScriptConfig(Config):
    SCHEDULER_ENABLED = False


def main():
    hours = int(sys.argv[1]) if len(sys.argv) > 1 else 24
    now = parse_instant(sys.argv[2]) if len(sys.argv) > 2 else None

    app = create_app(ScriptConfig)
    scheduler = app.extensions['chronorift']
    classifier = scheduler.engine.classifier
    now = scheduler.engine.resolve_now(now)

    print("=" * 80)
    print("NEXT SPAWN")
    print("=" * 80)
    local_now = classifier.to_local(now)
    print(f"Now (UTC):   {now.isoformat()}")
    print(f"Now (local): {local_now.isoformat()} [{classifier.timezone_name}, {local_now.strftime('%a')}]")

    next_time = scheduler.next_spawn_time(now)
    location = scheduler.next_spawn_location(now)
    print(f"Next spawn:  {classifier.to_local(next_time).strftime('%B %d %I:%M %p')} "
          f"(in {format_countdown(next_time - now)})")
    if location.suppressed:
        print("  No Spawns Scheduled")
    else:
        print(f"  Chest: {location.chest}")
        print(f"  Ore:   {location.ore}")
    print()

    print("=" * 80)
    print(f"SCHEDULE (next {hours} hours)")
    print("=" * 80)
    for prediction in scheduler.engine.predictions(0, hours, now=now):
        local = classifier.to_local(prediction.time)
        label = local.strftime('%a %b %d %I:%M %p')
        if prediction.suppressed:
            print(f"{label}  No Spawns Scheduled")
        else:
            print(f"{label}  [{prediction.slot_index}] Chest: {prediction.chest:<20} Ore: {prediction.ore}")

    print()
    print(f"Generated at {datetime.now().isoformat()}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
