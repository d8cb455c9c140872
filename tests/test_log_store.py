"""Proxy event log store."""
from datetime import datetime

from shareproxy.services.log_store import LogStore


def test_unknown_id_returns_empty_list(log_store):
    assert log_store.get("never-seen") == []


def test_entries_keep_insertion_order(log_store):
    log_store.add("req-1", "first")
    log_store.add("req-2", "other")
    log_store.add("req-1", "second")

    assert [e.message for e in log_store.get("req-1")] == ["first", "second"]
    assert [e.message for e in log_store.get("req-2")] == ["other"]


def test_entries_are_timestamped(log_store):
    entry = log_store.add("req-1", "hello")
    parsed = datetime.fromisoformat(entry.timestamp)
    assert parsed.tzinfo is not None


def test_get_returns_a_copy(log_store):
    log_store.add("req-1", "first")
    log_store.get("req-1").clear()
    assert len(log_store.get("req-1")) == 1


def test_clear_wipes_every_id(log_store):
    log_store.add("req-1", "a")
    log_store.add("req-2", "b")
    log_store.clear()
    assert log_store.get("req-1") == []
    assert log_store.get("req-2") == []


def test_ids_expire_after_last_append(clock):
    store = LogStore(max_ids=10, ttl_seconds=60, clock=clock)
    store.add("req-1", "a")
    clock.advance(45)
    store.add("req-1", "b")
    clock.advance(45)
    assert [e.message for e in store.get("req-1")] == ["a", "b"]

    clock.advance(61)
    assert store.get("req-1") == []


def test_capacity_evicts_oldest_id(clock):
    store = LogStore(max_ids=2, ttl_seconds=60, clock=clock)
    store.add("req-1", "a")
    store.add("req-2", "b")
    store.add("req-3", "c")

    assert store.get("req-1") == []
    assert store.stats()["items"] == 2
