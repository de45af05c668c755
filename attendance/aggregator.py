"""
Interval pairing and per-day hour totals.

Events are fetched once per category for the whole reporting window, bucketed
by local calendar date and paired with a single greedy left-to-right sweep per
date. The sweep takes events two at a time: a pair is an interval only when
it is exactly opening -> closing, otherwise it contributes nothing. Either
way both events are consumed, so ``in, in, out`` on one date totals zero
hours and a trailing unpaired event is ignored.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Dict, List, Sequence, Tuple

from attendance.events import (
    BREAK_KINDS,
    PUNCH_KINDS,
    AttendanceEvent,
    EventKind,
)
from attendance.store import EventStore
from core.errors import InvalidWindow

SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True)
class Interval:
    start: AttendanceEvent
    end: AttendanceEvent

    @property
    def duration_seconds(self) -> float:
        return (self.end.timestamp - self.start.timestamp).total_seconds()


@dataclass(frozen=True)
class DayAggregate:
    date: date
    worked_hours: float = 0.0
    break_hours: float = 0.0


def pair_intervals(
    events: Sequence[AttendanceEvent], opening: EventKind, closing: EventKind
) -> List[Interval]:
    intervals: List[Interval] = []
    for current, following in zip(events[0::2], events[1::2]):
        if current.kind == opening and following.kind == closing:
            intervals.append(Interval(current, following))
    return intervals


def sum_hours(intervals: Sequence[Interval]) -> float:
    return sum(max(interval.duration_seconds, 0.0) for interval in intervals) / SECONDS_PER_HOUR


def daterange(start: date, end: date) -> List[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def week_bounds(today: date, first_weekday: int = 6) -> Tuple[date, date]:
    """
    The seven-day week containing ``today``; ``first_weekday`` follows
    ``date.weekday()`` numbering (0 = Monday, 6 = Sunday).
    """
    offset = (today.weekday() - first_weekday) % 7
    start = today - timedelta(days=offset)
    return start, start + timedelta(days=6)


class HoursAggregator:
    def __init__(self, store: EventStore, tz: tzinfo) -> None:
        self.store = store
        self.tz = tz

    def aggregate(self, subject_id: str, window_start: date, window_end: date) -> List[DayAggregate]:
        """One DayAggregate per date in the inclusive window, oldest first."""
        if window_start > window_end:
            raise InvalidWindow(
                f"Window start {window_start.isoformat()} is after end {window_end.isoformat()}"
            )

        start = local_midnight(window_start, self.tz)
        end = local_midnight(window_end + timedelta(days=1), self.tz)

        worked = self._hours_by_date(
            subject_id, PUNCH_KINDS, EventKind.PUNCH_IN, EventKind.PUNCH_OUT, start, end
        )
        breaks = self._hours_by_date(
            subject_id, BREAK_KINDS, EventKind.BREAK_START, EventKind.BREAK_END, start, end
        )
        return [
            DayAggregate(
                date=day,
                worked_hours=worked.get(day, 0.0),
                break_hours=breaks.get(day, 0.0),
            )
            for day in daterange(window_start, window_end)
        ]

    def aggregate_day(self, subject_id: str, day: date) -> DayAggregate:
        return self.aggregate(subject_id, day, day)[0]

    def _hours_by_date(
        self,
        subject_id: str,
        kinds: Sequence[EventKind],
        opening: EventKind,
        closing: EventKind,
        start: datetime,
        end: datetime,
    ) -> Dict[date, float]:
        by_date: Dict[date, List[AttendanceEvent]] = defaultdict(list)
        events = self.store.query(subject_id, kinds=kinds, start=start, end=end)
        for event in sorted(events, key=lambda e: e.sort_key):
            by_date[event.timestamp.astimezone(self.tz).date()].append(event)

        return {
            day: sum_hours(pair_intervals(day_events, opening, closing))
            for day, day_events in by_date.items()
        }
