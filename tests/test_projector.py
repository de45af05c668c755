from attendance.events import EventKind
from attendance.projector import PunchState, StateProjector
from conftest import at


def project(store, *events):
    for kind, timestamp in events:
        store.append("w1", kind, timestamp)
    return StateProjector(store).project("w1")


def test_no_events(store):
    assert project(store) == PunchState()


def test_punched_in(store):
    state = project(store, (EventKind.PUNCH_IN, at(21, 8)))
    assert state.is_punched_in
    assert not state.is_on_break
    assert state.last_punch_in == at(21, 8)
    assert state.last_punch_out is None


def test_punched_out(store):
    state = project(store, (EventKind.PUNCH_IN, at(21, 8)), (EventKind.PUNCH_OUT, at(21, 16)))
    assert not state.is_punched_in
    assert state.last_punch_in is None
    assert state.last_punch_out == at(21, 16)


def test_on_break(store):
    state = project(
        store,
        (EventKind.PUNCH_IN, at(21, 8)),
        (EventKind.BREAK_START, at(21, 12)),
    )
    assert state.is_on_break
    assert state.last_break_start == at(21, 12)
    assert state.last_break_end is None


def test_break_cannot_outlive_punch_out(store):
    state = project(
        store,
        (EventKind.PUNCH_IN, at(21, 8)),
        (EventKind.BREAK_START, at(21, 12)),
        (EventKind.PUNCH_OUT, at(21, 13)),
    )
    assert not state.is_punched_in
    assert not state.is_on_break
    # The raw break record is still reported.
    assert state.last_break_start == at(21, 12)


def test_lookback_is_not_limited_to_today(store):
    state = project(store, (EventKind.PUNCH_IN, at(1, 8)))
    assert state.is_punched_in
    assert state.last_punch_in == at(1, 8)
