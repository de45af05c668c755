from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from attendance.events import AttendanceEvent, EventKind


class EventStore(ABC):
    """
    Append-only attendance ledger.

    Implementations return events ascending by (timestamp, insertion order)
    and raise StoreUnavailable for any backend failure.
    """

    @abstractmethod
    def append(self, subject_id: str, kind: EventKind, timestamp: datetime) -> AttendanceEvent:
        ...

    @abstractmethod
    def query(
        self,
        subject_id: str,
        kinds: Optional[Sequence[EventKind]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[AttendanceEvent]:
        """Events with ``start <= timestamp < end``; either bound may be open."""

    @abstractmethod
    def latest(self, subject_id: str, kinds: Sequence[EventKind]) -> Optional[AttendanceEvent]:
        """Most recent event among ``kinds``, looking back without limit."""
