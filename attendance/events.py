from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class EventKind(str, Enum):
    PUNCH_IN = "PunchIn"
    PUNCH_OUT = "PunchOut"
    BREAK_START = "BreakStart"
    BREAK_END = "BreakEnd"


PUNCH_KINDS = (EventKind.PUNCH_IN, EventKind.PUNCH_OUT)
BREAK_KINDS = (EventKind.BREAK_START, EventKind.BREAK_END)


@dataclass(frozen=True)
class AttendanceEvent:
    subject_id: str
    kind: EventKind
    timestamp: datetime
    # Insertion order, used to break ties between equal timestamps.
    sequence: int = 0

    @property
    def sort_key(self):
        return (self.timestamp, self.sequence)


def ensure_aware(timestamp: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalise everything to UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)
