"""
DynamoDB-backed attendance event store.

Events live in a single table keyed by ``subject_id`` (partition) and
``event_key`` (sort). The sort key is the fixed-width UTC timestamp followed
by a zero-padded insertion sequence, so DynamoDB's lexicographic ordering is
exactly the ledger ordering, ties included.
"""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError

from attendance.events import AttendanceEvent, EventKind, ensure_aware
from attendance.store import EventStore
from aws.config import EVENTS_TABLE, get_boto3_session_kwargs
from core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def format_timestamp(timestamp: datetime) -> str:
    return ensure_aware(timestamp).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


class DynamoDBEventStore(EventStore):
    """
    Attributes:
        table_name: Name of the DynamoDB events table
        region: AWS region
    """

    def __init__(
        self,
        table_name: str = EVENTS_TABLE,
        region: Optional[str] = None,
        table: Any = None,
    ) -> None:
        """
        Args:
            table_name: Name of the DynamoDB table to use
            region: AWS region for DynamoDB
            table: Pre-built boto3 Table resource, mainly for tests
        """
        self.table_name = table_name
        if table is None:
            dynamodb = boto3.resource("dynamodb", **get_boto3_session_kwargs(region))
            table = dynamodb.Table(table_name)
        self.table = table
        self._seq_lock = threading.Lock()
        self._last_seq = 0

    def _next_sequence(self) -> int:
        with self._seq_lock:
            self._last_seq = max(self._last_seq + 1, time.time_ns())
            return self._last_seq

    def append(self, subject_id: str, kind: EventKind, timestamp: datetime) -> AttendanceEvent:
        kind = EventKind(kind)
        timestamp = ensure_aware(timestamp)
        sequence = self._next_sequence()
        iso_timestamp = format_timestamp(timestamp)
        try:
            self.table.put_item(
                Item={
                    "subject_id": subject_id,
                    "event_key": f"{iso_timestamp}#{sequence:020d}",
                    "kind": kind.value,
                    "timestamp": iso_timestamp,
                    "sequence": sequence,
                }
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to append %s for subject %s: %s", kind.value, subject_id, exc)
            raise StoreUnavailable(f"Failed to write to DynamoDB: {exc}") from exc
        return AttendanceEvent(subject_id, kind, timestamp, sequence)

    def query(
        self,
        subject_id: str,
        kinds: Optional[Sequence[EventKind]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[AttendanceEvent]:
        key_condition = Key("subject_id").eq(subject_id)
        # "#" sorts before every digit, so "<ts>#" bounds all keys at <ts>.
        if start is not None and end is not None:
            key_condition &= Key("event_key").between(
                f"{format_timestamp(start)}#", f"{format_timestamp(end)}#"
            )
        elif start is not None:
            key_condition &= Key("event_key").gte(f"{format_timestamp(start)}#")
        elif end is not None:
            key_condition &= Key("event_key").lt(f"{format_timestamp(end)}#")

        kwargs: Dict[str, Any] = {"KeyConditionExpression": key_condition}
        if kinds is not None:
            kwargs["FilterExpression"] = Attr("kind").is_in([EventKind(k).value for k in kinds])

        return [self._from_item(item) for item in self._query_all(kwargs)]

    def latest(self, subject_id: str, kinds: Sequence[EventKind]) -> Optional[AttendanceEvent]:
        kwargs: Dict[str, Any] = {
            "KeyConditionExpression": Key("subject_id").eq(subject_id),
            "FilterExpression": Attr("kind").is_in([EventKind(k).value for k in kinds]),
            "ScanIndexForward": False,
        }
        # Filters apply after the page is read, so keep paging until a hit.
        for item in self._query_all(kwargs, first_only=True):
            return self._from_item(item)
        return None

    def _query_all(self, kwargs: Dict[str, Any], first_only: bool = False) -> List[dict]:
        items: List[dict] = []
        try:
            response = self.table.query(**kwargs)
            items.extend(response.get("Items", []))
            while "LastEvaluatedKey" in response and not (first_only and items):
                response = self.table.query(
                    ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs
                )
                items.extend(response.get("Items", []))
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to query DynamoDB table %s: %s", self.table_name, exc)
            raise StoreUnavailable(f"Failed to query DynamoDB: {exc}") from exc
        return items[:1] if first_only else items

    @staticmethod
    def _from_item(item: dict) -> AttendanceEvent:
        return AttendanceEvent(
            subject_id=item["subject_id"],
            kind=EventKind(item["kind"]),
            timestamp=parse_timestamp(item["timestamp"]),
            sequence=int(item["sequence"]),
        )
