import pytest

from proxynode.db.sqlite import sqlite_db
from proxynode.services.event_bus import NODE_CHANGE_TOPIC, EventBus

pytestmark = pytest.mark.unit


def test_publish_persists_and_notifies_listeners(temp_db):
    del temp_db
    bus = EventBus()
    received = []
    bus.subscribe(NODE_CHANGE_TOPIC, lambda topic, data: received.append((topic, data)))
    bus.subscribe("other", lambda topic, data: received.append((topic, data)))

    event_id = bus.publish(NODE_CHANGE_TOPIC)

    assert received == [(NODE_CHANGE_TOPIC, None)]
    assert [item["id"] for item in sqlite_db.list_events(topic=NODE_CHANGE_TOPIC)] == [event_id]


def test_publish_is_best_effort(monkeypatch, temp_db):
    del temp_db
    bus = EventBus()
    received = []

    def _broken_listener(topic, data):
        raise RuntimeError("listener down")

    def _raise_create(topic, data=None):
        raise RuntimeError("store down")

    bus.subscribe(NODE_CHANGE_TOPIC, _broken_listener)
    bus.subscribe(NODE_CHANGE_TOPIC, lambda topic, data: received.append(topic))
    monkeypatch.setattr("proxynode.services.event_bus.sqlite_db.create_event", _raise_create)

    assert bus.publish(NODE_CHANGE_TOPIC) is None
    assert received == [NODE_CHANGE_TOPIC]


def test_unsubscribe_stops_delivery(temp_db):
    del temp_db
    bus = EventBus()
    received = []

    def _listener(topic, data):
        received.append(topic)

    bus.subscribe(NODE_CHANGE_TOPIC, _listener)
    bus.unsubscribe(NODE_CHANGE_TOPIC, _listener)
    bus.publish(NODE_CHANGE_TOPIC)

    assert received == []
