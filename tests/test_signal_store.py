from sqlalchemy import inspect

from outreach_planner.core.signal import Outreach, SignalStatus, StoredSignal
from outreach_planner.storage.signal_store import INDEX_KEY, signal_key

from conftest import FULL_OUTREACH, company_entity, make_signal


def _stored(signal_id="sig_001", **overrides):
    fields = {
        "signal": make_signal(id=signal_id),
        "outreach": Outreach.from_completion(FULL_OUTREACH),
        "status": SignalStatus.GENERATED,
    }
    fields.update(overrides)
    return StoredSignal(**fields)


def test_kv_get_missing_key(kv):
    result = kv.get("ns", "missing")

    assert result.exists is False
    assert result.data is None


def test_kv_set_get_delete(kv):
    kv.set("ns", "key", {"a": [1, 2]})
    assert kv.get("ns", "key").data == {"a": [1, 2]}

    kv.set("ns", "key", [])
    result = kv.get("ns", "key")
    assert result.exists is True
    assert result.data == []

    kv.delete("ns", "key")
    assert kv.get("ns", "key").exists is False


def test_kv_namespaces_are_separate(kv):
    kv.set("one", "key", "first")
    kv.set("two", "key", "second")

    assert kv.get("one", "key").data == "first"
    assert kv.get("two", "key").data == "second"


def test_stored_signal_round_trip(store, kv):
    stored = _stored(
        entities=[company_entity(name="Acme Corp")],
        linkt_signal={"id": "sig_001", "icp_id": "icp_1"},
        landing_page_html="<!DOCTYPE html><html></html>",
    )

    store.save(stored)

    raw = kv.get(store.namespace, signal_key("sig_001"))
    assert raw.exists is True
    assert raw.data == stored.to_record()
    assert store.get("sig_001") == stored


def test_index_is_newest_first(store):
    store.save(_stored("sig_a"))
    store.save(_stored("sig_b"))
    store.save(_stored("sig_c"))

    assert store.get_index() == ["sig_c", "sig_b", "sig_a"]


def test_resave_does_not_duplicate_index(store):
    store.save(_stored("sig_a"))
    store.save(_stored("sig_b"))
    store.save(_stored("sig_a", outreach=Outreach()))

    assert store.get_index() == ["sig_b", "sig_a"]
    assert store.get("sig_a").outreach == Outreach()


def test_delete_removes_record_and_index_entry(store):
    store.save(_stored("sig_a"))
    store.save(_stored("sig_b"))

    store.delete("sig_a")

    assert store.get("sig_a") is None
    assert store.get_index() == ["sig_b"]


def test_delete_unknown_id(store):
    store.save(_stored("sig_a"))

    store.delete("nope")

    assert store.get_index() == ["sig_a"]


def test_list_skips_ids_without_records(store, kv):
    store.save(_stored("sig_a"))
    kv.set(store.namespace, INDEX_KEY, ["ghost", "sig_a"])

    listed = store.list_signals()

    assert [s.signal.id for s in listed] == ["sig_a"]


def test_list_empty_store(store):
    assert store.list_signals() == []
    assert store.get_index() == []


def test_init_db_creates_kv_table(session_factory):
    db = session_factory()
    try:
        tables = inspect(db.get_bind()).get_table_names()
    finally:
        db.close()

    assert "kv_entries" in tables
