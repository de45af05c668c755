from datetime import date

import pytest

from core.errors import SubjectNotFound
from scripts import generate_dummy_data, setup_dynamodb

TODAY = date(2026, 10, 21)


def test_seeded_shift_counts_hours(system, worker):
    assert generate_dummy_data.generate_shift(system, "w1", date(2026, 10, 20))

    day = system.aggregator.aggregate_day("w1", date(2026, 10, 20))
    assert 8.0 < day.worked_hours < 10.0
    assert 0.0 < day.break_hours < 1.0


def test_reseeding_keeps_existing_days(system, worker, store):
    assert generate_dummy_data.seed_shifts(system, "w1", days=7, today=TODAY) == 5
    seeded = len(store.query("w1"))

    assert generate_dummy_data.seed_shifts(system, "w1", days=7, today=TODAY) == 0
    assert len(store.query("w1")) == seeded
    day = system.aggregator.aggregate_day("w1", date(2026, 10, 20))
    assert day.worked_hours > 8.0


def test_seeding_requires_enrolled_subject(system, store):
    with pytest.raises(SubjectNotFound):
        generate_dummy_data.seed_shifts(system, "ghost", days=7, today=TODAY)
    assert store.query("ghost") == []


def test_seeding_refuses_memory_backend(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    with pytest.raises(SystemExit):
        generate_dummy_data.main(["w1"])


@pytest.fixture
def table_calls(monkeypatch):
    calls = []

    def fake_delete(table_name, region=None):
        calls.append(("delete", table_name))
        return {"status": "deleted", "message": f"Table '{table_name}' deleted successfully"}

    def fake_create(events_table, identities_table, region=None):
        calls.append(("create", events_table, identities_table))
        return [{"status": "created", "message": "created"}]

    def fake_info(table_name, region=None):
        return {
            "status": "success",
            "table_name": table_name,
            "table_status": "ACTIVE",
            "item_count": 0,
            "table_size_bytes": 0,
            "arn": f"arn:aws:dynamodb:::table/{table_name}",
        }

    monkeypatch.setenv("EVENTS_TABLE", "Events")
    monkeypatch.setenv("IDENTITIES_TABLE", "People")
    monkeypatch.setattr(setup_dynamodb, "delete_table", fake_delete)
    monkeypatch.setattr(setup_dynamodb, "create_timeclock_tables", fake_create)
    monkeypatch.setattr(setup_dynamodb, "get_table_info", fake_info)
    return calls


def test_setup_creates_tables(table_calls):
    setup_dynamodb.main([])
    assert table_calls == [("create", "Events", "People")]


def test_setup_reset_drops_tables_first(table_calls):
    setup_dynamodb.main(["--reset"])
    assert table_calls == [
        ("delete", "Events"),
        ("delete", "People"),
        ("create", "Events", "People"),
    ]
