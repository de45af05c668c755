import pytest

from attendance.events import EventKind
from attendance.ingestion import EventIngestion
from conftest import NOW
from core.errors import InvalidInput, NotPunchedIn


@pytest.fixture
def ingestion(store, clock):
    return EventIngestion(store, clock=clock)


def kinds(store, subject_id="w1"):
    return [event.kind for event in store.query(subject_id)]


def test_punch_is_stamped_by_server_clock(ingestion, store):
    (event,) = ingestion.record_punch("w1", "in")
    assert event.kind == EventKind.PUNCH_IN
    assert event.timestamp == NOW


@pytest.mark.parametrize("action", ["IN", "start", "", None])
def test_unrecognized_punch_action(ingestion, store, action):
    with pytest.raises(InvalidInput):
        ingestion.record_punch("w1", action)
    assert store.query("w1") == []


def test_missing_subject(ingestion):
    with pytest.raises(InvalidInput):
        ingestion.record_punch("", "in")


def test_punch_out_closes_open_break(ingestion, store, clock):
    clock.set(8)
    ingestion.record_punch("w1", "in")
    clock.set(12)
    ingestion.record_break("w1", "start")
    clock.set(16)
    appended = ingestion.record_punch("w1", "out")

    assert [e.kind for e in appended] == [EventKind.PUNCH_OUT, EventKind.BREAK_END]
    assert appended[0].timestamp == appended[1].timestamp
    assert kinds(store) == [
        EventKind.PUNCH_IN,
        EventKind.BREAK_START,
        EventKind.PUNCH_OUT,
        EventKind.BREAK_END,
    ]


def test_punch_out_without_open_break(ingestion, store, clock):
    clock.set(8)
    ingestion.record_punch("w1", "in")
    ingestion.record_break("w1", "start")
    ingestion.record_break("w1", "end")
    appended = ingestion.record_punch("w1", "out")
    assert [e.kind for e in appended] == [EventKind.PUNCH_OUT]


def test_break_requires_punch_in(ingestion, store):
    with pytest.raises(NotPunchedIn):
        ingestion.record_break("w1", "start")

    ingestion.record_punch("w1", "in")
    ingestion.record_punch("w1", "out")
    with pytest.raises(NotPunchedIn):
        ingestion.record_break("w1", "end")
    assert EventKind.BREAK_START not in kinds(store)


def test_unrecognized_break_action(ingestion):
    ingestion.record_punch("w1", "in")
    with pytest.raises(InvalidInput):
        ingestion.record_break("w1", "pause")
