from datetime import datetime

import pytest

from proxynode.db.sqlite import sqlite_db

pytestmark = pytest.mark.unit


def test_get_missing_node_returns_none(temp_db):
    del temp_db
    assert sqlite_db.get_node("missing") is None


def test_upsert_creates_then_overwrites_only_given_fields(temp_db):
    del temp_db
    sqlite_db.upsert_node("n1", {"_id": "n1", "name": "alpha", "type": "management", "port": 443, "services": ["b", "a"]})
    doc = sqlite_db.get_node("n1")
    assert doc == {"_id": "n1", "name": "alpha", "type": "management", "port": 443, "services": ["b", "a"]}

    sqlite_db.upsert_node("n1", {"name": "beta"})
    doc = sqlite_db.get_node("n1")
    assert doc["name"] == "beta"
    assert doc["port"] == 443
    assert doc["services"] == ["b", "a"]


def test_update_does_not_create(temp_db):
    del temp_db
    assert sqlite_db.update_node("ghost", {"memory": 0.5}) is None
    assert sqlite_db.get_node("ghost") is None


def test_update_returns_updated_doc(temp_db):
    del temp_db
    sqlite_db.upsert_node("n1", {"name": "alpha"})
    ts = datetime(2026, 1, 2, 3, 4, 5, 678901)
    doc = sqlite_db.update_node("n1", {"timestamp": ts, "memory": 0.25, "load1": 1.5, "load5": 1.0, "load15": 0.5})
    assert doc["memory"] == 0.25
    assert doc["load1"] == 1.5
    assert datetime.fromisoformat(doc["timestamp"]) == ts
    assert doc["name"] == "alpha"


def test_unknown_field_rejected(temp_db):
    del temp_db
    with pytest.raises(ValueError):
        sqlite_db.upsert_node("n1", {"hostname": "x"})


def test_list_nodes_ordered_by_name(temp_db):
    del temp_db
    sqlite_db.upsert_node("n2", {"name": "zulu"})
    sqlite_db.upsert_node("n1", {"name": "alpha"})
    assert [doc["name"] for doc in sqlite_db.list_nodes()] == ["alpha", "zulu"]


def test_events_round_trip_by_topic(temp_db):
    del temp_db
    first = sqlite_db.create_event("node.change")
    sqlite_db.create_event("other.topic", {"x": 1})
    second = sqlite_db.create_event("node.change", {"id": "n1"})

    items = sqlite_db.list_events(topic="node.change")
    assert [item["id"] for item in items] == [first, second]
    assert items[1]["data"] == {"id": "n1"}
    assert [item["id"] for item in sqlite_db.list_events(topic="node.change", after_id=first)] == [second]
