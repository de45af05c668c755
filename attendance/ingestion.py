from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List

from attendance.events import BREAK_KINDS, PUNCH_KINDS, AttendanceEvent, EventKind
from attendance.store import EventStore
from core.errors import InvalidInput, NotPunchedIn

logger = logging.getLogger(__name__)

PUNCH_ACTIONS = {"in": EventKind.PUNCH_IN, "out": EventKind.PUNCH_OUT}
BREAK_ACTIONS = {"start": EventKind.BREAK_START, "end": EventKind.BREAK_END}

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventIngestion:
    """Turns punch/break commands into server-stamped ledger events."""

    def __init__(self, store: EventStore, clock: Clock = utc_now) -> None:
        self.store = store
        self.clock = clock

    def record_punch(self, subject_id: str, action: str) -> List[AttendanceEvent]:
        """
        Append a punch. Punching out also closes an open break at the same
        instant so the subject cannot stay on break after leaving.
        """
        kind = _parse_action(action, PUNCH_ACTIONS)
        _require_subject(subject_id)

        now = self.clock()
        appended = [self.store.append(subject_id, kind, now)]
        logger.info("Recorded %s for subject %s", kind.value, subject_id)

        if kind == EventKind.PUNCH_OUT:
            last_break = self.store.latest(subject_id, BREAK_KINDS)
            if last_break is not None and last_break.kind == EventKind.BREAK_START:
                appended.append(self.store.append(subject_id, EventKind.BREAK_END, now))
                logger.info("Closed open break for subject %s on punch-out", subject_id)
        return appended

    def record_break(self, subject_id: str, action: str) -> AttendanceEvent:
        kind = _parse_action(action, BREAK_ACTIONS)
        _require_subject(subject_id)

        last_punch = self.store.latest(subject_id, PUNCH_KINDS)
        if last_punch is None or last_punch.kind != EventKind.PUNCH_IN:
            raise NotPunchedIn("Must be punched in to take a break")

        event = self.store.append(subject_id, kind, self.clock())
        logger.info("Recorded %s for subject %s", kind.value, subject_id)
        return event


def _parse_action(action: str, actions: dict) -> EventKind:
    try:
        return actions[action]
    except (KeyError, TypeError):
        raise InvalidInput(f"Invalid action: {action!r}") from None


def _require_subject(subject_id: str) -> None:
    if not subject_id:
        raise InvalidInput("subject_id is required")
