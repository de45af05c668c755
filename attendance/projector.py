from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from attendance.events import BREAK_KINDS, PUNCH_KINDS, AttendanceEvent, EventKind
from attendance.store import EventStore


@dataclass(frozen=True)
class PunchState:
    is_punched_in: bool = False
    is_on_break: bool = False
    last_punch_in: Optional[datetime] = None
    last_punch_out: Optional[datetime] = None
    last_break_start: Optional[datetime] = None
    last_break_end: Optional[datetime] = None


def derive_state(
    last_punch: Optional[AttendanceEvent], last_break: Optional[AttendanceEvent]
) -> PunchState:
    """
    Current flags from the latest punch and break events.

    A break never outlives a punch-out: ``is_on_break`` also requires the
    subject to be punched in.
    """
    is_punched_in = last_punch is not None and last_punch.kind == EventKind.PUNCH_IN
    break_open = last_break is not None and last_break.kind == EventKind.BREAK_START

    punch_at = last_punch.timestamp if last_punch is not None else None
    break_at = last_break.timestamp if last_break is not None else None

    return PunchState(
        is_punched_in=is_punched_in,
        is_on_break=break_open and is_punched_in,
        last_punch_in=punch_at if is_punched_in else None,
        last_punch_out=None if is_punched_in else punch_at,
        last_break_start=break_at if break_open else None,
        last_break_end=None if break_open else break_at,
    )


class StateProjector:
    def __init__(self, store: EventStore) -> None:
        self.store = store

    def project(self, subject_id: str) -> PunchState:
        last_punch = self.store.latest(subject_id, PUNCH_KINDS)
        last_break = self.store.latest(subject_id, BREAK_KINDS)
        return derive_state(last_punch, last_break)
