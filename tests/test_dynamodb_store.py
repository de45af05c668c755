import boto3
import pytest
from botocore.stub import Stubber

from attendance.dynamodb_store import DynamoDBEventStore, format_timestamp, parse_timestamp
from attendance.events import PUNCH_KINDS, EventKind
from conftest import at
from core.errors import StoreUnavailable


@pytest.fixture
def table(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    resource = boto3.resource("dynamodb", region_name="us-east-1")
    return resource.Table("AttendanceEvents")


@pytest.fixture
def stubbed(table):
    store = DynamoDBEventStore(table_name="AttendanceEvents", table=table)
    with Stubber(table.meta.client) as stubber:
        yield store, stubber
        stubber.assert_no_pending_responses()


def item(kind, timestamp, sequence):
    iso = format_timestamp(timestamp)
    return {
        "subject_id": {"S": "w1"},
        "event_key": {"S": f"{iso}#{sequence:020d}"},
        "kind": {"S": kind.value},
        "timestamp": {"S": iso},
        "sequence": {"N": str(sequence)},
    }


def test_timestamp_format_round_trips_and_sorts():
    assert parse_timestamp(format_timestamp(at(20, 8, 5))) == at(20, 8, 5)
    key = f"{format_timestamp(at(20, 8))}#{1:020d}"
    assert f"{format_timestamp(at(20, 8))}#" < key < f"{format_timestamp(at(20, 8, 1))}#"


def test_append_writes_sortable_key(stubbed):
    store, stubber = stubbed
    stubber.add_response("put_item", {})
    first = store.append("w1", EventKind.PUNCH_IN, at(20, 8))
    stubber.add_response("put_item", {})
    second = store.append("w1", EventKind.PUNCH_OUT, at(20, 8))

    assert first.timestamp == at(20, 8)
    assert second.sequence > first.sequence


def test_append_failure_is_store_unavailable(stubbed):
    store, stubber = stubbed
    stubber.add_client_error("put_item", service_error_code="ProvisionedThroughputExceededException")
    with pytest.raises(StoreUnavailable):
        store.append("w1", EventKind.PUNCH_IN, at(20, 8))


def test_query_follows_pagination(stubbed):
    store, stubber = stubbed
    stubber.add_response(
        "query",
        {
            "Items": [item(EventKind.PUNCH_IN, at(20, 8), 1)],
            "LastEvaluatedKey": {"subject_id": {"S": "w1"}, "event_key": {"S": "x"}},
        },
    )
    stubber.add_response("query", {"Items": [item(EventKind.PUNCH_OUT, at(20, 16), 2)]})

    events = store.query("w1", kinds=PUNCH_KINDS, start=at(20, 0), end=at(21, 0))
    assert [(e.kind, e.timestamp, e.sequence) for e in events] == [
        (EventKind.PUNCH_IN, at(20, 8), 1),
        (EventKind.PUNCH_OUT, at(20, 16), 2),
    ]


def test_query_failure_is_store_unavailable(stubbed):
    store, stubber = stubbed
    stubber.add_client_error("query", service_error_code="ResourceNotFoundException")
    with pytest.raises(StoreUnavailable):
        store.query("w1")


def test_latest_pages_past_filtered_out_items(stubbed):
    store, stubber = stubbed
    stubber.add_response(
        "query",
        {
            "Items": [],
            "LastEvaluatedKey": {"subject_id": {"S": "w1"}, "event_key": {"S": "x"}},
        },
    )
    stubber.add_response(
        "query",
        {
            "Items": [item(EventKind.PUNCH_OUT, at(20, 16), 5)],
            "LastEvaluatedKey": {"subject_id": {"S": "w1"}, "event_key": {"S": "y"}},
        },
    )

    latest = store.latest("w1", PUNCH_KINDS)
    assert latest.kind == EventKind.PUNCH_OUT
    assert latest.sequence == 5


def test_latest_with_no_events(stubbed):
    store, stubber = stubbed
    stubber.add_response("query", {"Items": []})
    assert store.latest("w1", PUNCH_KINDS) is None
