from __future__ import annotations

import itertools
import threading
from bisect import insort
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from attendance.events import AttendanceEvent, EventKind, ensure_aware
from attendance.store import EventStore


class InMemoryEventStore(EventStore):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._events: Dict[str, List[AttendanceEvent]] = defaultdict(list)

    def append(self, subject_id: str, kind: EventKind, timestamp: datetime) -> AttendanceEvent:
        kind = EventKind(kind)
        with self._lock:
            event = AttendanceEvent(
                subject_id=subject_id,
                kind=kind,
                timestamp=ensure_aware(timestamp),
                sequence=next(self._counter),
            )
            insort(self._events[subject_id], event, key=lambda e: e.sort_key)
        return event

    def query(
        self,
        subject_id: str,
        kinds: Optional[Sequence[EventKind]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[AttendanceEvent]:
        start = ensure_aware(start) if start is not None else None
        end = ensure_aware(end) if end is not None else None
        with self._lock:
            events = list(self._events.get(subject_id, ()))
        return [
            event
            for event in events
            if (kinds is None or event.kind in kinds)
            and (start is None or event.timestamp >= start)
            and (end is None or event.timestamp < end)
        ]

    def latest(self, subject_id: str, kinds: Sequence[EventKind]) -> Optional[AttendanceEvent]:
        with self._lock:
            events = self._events.get(subject_id, ())
            for event in reversed(events):
                if event.kind in kinds:
                    return event
        return None
