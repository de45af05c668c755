#!/usr/bin/env python3
"""
Fill the attendance ledger with plausible weekday shifts for one subject.

The subject must already be enrolled. Days that already hold events are left
untouched, so the script can be re-run over an overlapping range.

Usage:
    STORAGE_BACKEND=dynamodb python scripts/generate_dummy_data.py <subject_id> [--days 30]
"""

import argparse
import random
import sys
from datetime import date, datetime, time, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from attendance.events import EventKind
from configs.settings import Settings
from core.errors import TimeclockError
from core.system import TimeclockSystem


def generate_shift(system: TimeclockSystem, subject_id: str, day: date) -> bool:
    """Append one shift on ``day``. Returns False if the day already has events."""
    tz = system.settings.tzinfo

    def at(hour: int, minute: int) -> datetime:
        return datetime.combine(day, time(hour, minute), tzinfo=tz)

    day_start = datetime.combine(day, time.min, tzinfo=tz)
    day_end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    if system.store.query(subject_id, start=day_start, end=day_end):
        return False

    punch_in = at(7, random.randint(30, 59))
    break_start = at(12, random.randint(0, 15))
    break_end = break_start + timedelta(minutes=random.choice((15, 30, 45)))
    punch_out = at(16, random.randint(30, 59))

    system.store.append(subject_id, EventKind.PUNCH_IN, punch_in)
    system.store.append(subject_id, EventKind.BREAK_START, break_start)
    system.store.append(subject_id, EventKind.BREAK_END, break_end)
    system.store.append(subject_id, EventKind.PUNCH_OUT, punch_out)
    return True


def seed_shifts(system: TimeclockSystem, subject_id: str, days: int, today: date) -> int:
    """Seed the weekdays among the ``days`` before ``today``; returns the number created."""
    system.get_identity(subject_id)

    created = 0
    for offset in range(days, 0, -1):
        day = today - timedelta(days=offset)
        # Skip weekends
        if day.weekday() >= 5:
            continue
        if generate_shift(system, subject_id, day):
            created += 1
    return created


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("subject_id")
    parser.add_argument("--days", type=int, default=30)
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    if settings.storage_backend != "dynamodb":
        parser.error("STORAGE_BACKEND must be 'dynamodb'; the in-memory store is discarded on exit")

    system = TimeclockSystem(settings=settings)
    today = datetime.now(settings.tzinfo).date()
    try:
        created = seed_shifts(system, args.subject_id, args.days, today)
    except TimeclockError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    print(f"Generated {created} shifts for {args.subject_id}.")


if __name__ == "__main__":
    main()
