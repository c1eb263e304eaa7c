"""
Test MQTT Pub/Sub (Without Real Broker)
========================================

Exercises the wire schemas, the zone event publisher and the snapshot
subscriber by short-circuiting the network layer: publishers record what
they would send, subscribers are fed raw payloads directly.

Usage:
    pytest test_mqtt_pubsub.py
"""

import json
import logging

import pytest

from atlas_mqtt import (
    LogEvent,
    ZoneEventPublisher,
    ZoneSubscriber,
    create_logger,
    snapshot_topic,
    zone_topic,
)
from atlas_mqtt.schemas import (
    Timestamp,
    ZoneEventMessage,
    ZoneEventType,
    ZonePayload,
    ZoneSnapshotMessage,
    zone_from_dict,
    zone_to_dict,
)
from atlas_zone import AdZone, CircleGeometry, GeoPoint, RectangleGeometry


DUBAI = GeoPoint(lat=25.2048, lng=55.2708)


def circle(zone_id="c1", radius=20.0, **kwargs):
    return AdZone(id=zone_id, name="Circle", center=DUBAI,
                  geometry=CircleGeometry(radius=radius), **kwargs)


def rect(zone_id="r1", width=100.0, height=50.0, **kwargs):
    return AdZone(id=zone_id, name="Rect", center=DUBAI,
                  geometry=RectangleGeometry(width=width, height=height), **kwargs)


# ===== Schemas =====

def test_zone_payload_carries_only_own_dimensions():
    circle_dict = zone_to_dict(circle(price_per_1k=2.5))
    assert circle_dict == {
        'id': 'c1',
        'name': 'Circle',
        'shape': 'CIRCLE',
        'center': {'lat': 25.2048, 'lng': 55.2708},
        'radius': 20.0,
        'is_active': False,
        'price_per_1k': 2.5,
    }

    rect_dict = zone_to_dict(rect())
    assert 'radius' not in rect_dict
    assert (rect_dict['width'], rect_dict['height']) == (100.0, 50.0)


def test_zone_from_dict_restores_domain_value():
    zone = rect(is_active=True, price_per_1k=4.0)
    assert zone_from_dict(zone_to_dict(zone)) == zone


def test_zone_payload_rejects_missing_dimension():
    data = zone_to_dict(rect())
    del data['height']
    with pytest.raises(ValueError):
        ZonePayload.from_dict(data)


def test_zone_payload_rejects_unknown_shape():
    data = zone_to_dict(circle())
    data['shape'] = 'TRIANGLE'
    with pytest.raises(ValueError):
        ZonePayload.from_dict(data)


@pytest.mark.parametrize("flag", ["false", "true", 0, 1, None])
def test_zone_payload_rejects_non_boolean_is_active(flag):
    data = zone_to_dict(circle())
    data['is_active'] = flag
    with pytest.raises(ValueError):
        ZonePayload.from_dict(data)


def test_snapshot_with_string_is_active_is_rejected():
    snapshot = ZoneSnapshotMessage.from_zones([circle()]).to_dict()
    snapshot['zones'][0]['is_active'] = "false"
    with pytest.raises(ValueError):
        ZoneSnapshotMessage.from_dict(snapshot)


def test_payload_with_invalid_geometry_fails_on_to_zone():
    data = zone_to_dict(circle())
    data['radius'] = -5
    payload = ZonePayload.from_dict(data)
    with pytest.raises(ValueError):
        payload.to_zone()


def test_zone_event_message_serialization():
    zone = circle()
    msg = ZoneEventMessage.create(
        ZoneEventType.PAYMENT_INITIATED,
        zone.id,
        zone=ZonePayload.from_zone(zone),
        months=3,
        total_usd="9.43"
    )

    data = json.loads(json.dumps(msg.to_dict()))
    assert data['event_type'] == 'payment.initiated'
    assert data['months'] == 3
    assert data['total_usd'] == "9.43"
    assert data['zone']['radius'] == 20.0

    restored = ZoneEventMessage.from_dict(data)
    assert restored == msg


def test_deleted_event_needs_no_zone():
    msg = ZoneEventMessage.create(ZoneEventType.DELETED, "c1")
    data = msg.to_dict()
    assert 'zone' not in data
    assert ZoneEventMessage.from_dict(data).zone_id == "c1"


@pytest.mark.parametrize("kwargs", [
    {'event_type': ZoneEventType.ADDED, 'zone_id': 'c1'},
    {'event_type': ZoneEventType.DELETED, 'zone_id': ''},
    {'event_type': ZoneEventType.UPDATED, 'zone_id': 'other',
     'zone': ZonePayload.from_zone(circle())},
    {'event_type': ZoneEventType.PAYMENT_INITIATED, 'zone_id': 'c1',
     'zone': ZonePayload.from_zone(circle()), 'months': 0, 'total_usd': '0.00'},
    {'event_type': ZoneEventType.PAYMENT_INITIATED, 'zone_id': 'c1',
     'zone': ZonePayload.from_zone(circle()), 'months': 3},
])
def test_zone_event_message_invariants(kwargs):
    with pytest.raises(ValueError):
        ZoneEventMessage.create(**kwargs)


def test_zone_event_from_dict_missing_field():
    data = ZoneEventMessage.create(ZoneEventType.DELETED, "c1").to_dict()
    del data['timestamp']
    with pytest.raises(ValueError):
        ZoneEventMessage.from_dict(data)


def test_snapshot_round_trip_and_duplicates():
    snapshot = ZoneSnapshotMessage.from_zones([circle(), rect()])
    assert snapshot.zone_count == 2

    restored = ZoneSnapshotMessage.from_dict(json.loads(json.dumps(snapshot.to_dict())))
    assert restored.to_zones() == [circle(), rect()]

    with pytest.raises(ValueError):
        ZoneSnapshotMessage.from_zones([circle(), circle()])


def test_timestamp():
    assert Timestamp.now().to_datetime().tzinfo is not None
    with pytest.raises(ValueError):
        Timestamp(value="")
    with pytest.raises(ValueError):
        Timestamp(value="yesterday").to_datetime()


def test_topics():
    assert zone_topic("ze1") == "atlas/data/zones/ze1"
    assert snapshot_topic("ze1") == "atlas/data/snapshots/ze1"


# ===== Publisher =====

@pytest.fixture
def publisher():
    return ZoneEventPublisher(
        broker_host="localhost",
        topic=zone_topic("ze1"),
        logger=create_logger("test_publisher"),
    )


def test_publish_without_broker_fails_softly(publisher):
    msg = ZoneEventMessage.create(ZoneEventType.DELETED, "c1")
    assert publisher.publish_zone_event(msg) is False

    stats = publisher.get_stats()
    assert stats['failed_count'] == 1
    assert stats['message_count'] == 0
    assert stats['connected'] is False
    assert stats['broker'] == "localhost:1883"


def test_sink_methods_emit_zone_events(publisher, monkeypatch):
    sent = []
    monkeypatch.setattr(
        publisher, "publish",
        lambda message_data, retain=False: sent.append(message_data) or True
    )
    zone = circle()

    publisher.on_add_zone(zone)
    publisher.on_update_zone(zone)
    publisher.on_initiate_payment(zone, 3, "9.43")
    publisher.on_start_campaign(zone)
    publisher.on_delete_zone(zone.id)

    assert [m['event_type'] for m in sent] == [
        'zone.added',
        'zone.updated',
        'payment.initiated',
        'campaign.started',
        'zone.deleted',
    ]
    assert sent[2]['total_usd'] == "9.43"
    assert 'zone' not in sent[4]


# ===== Subscriber =====

class Collector:
    def __init__(self):
        self.snapshots = []


@pytest.fixture
def collector():
    return Collector()


@pytest.fixture
def subscriber(collector):
    return ZoneSubscriber(
        broker_host="localhost",
        snapshot_topic=snapshot_topic("ze1"),
        on_snapshot=collector.snapshots.append,
        logger=create_logger("test_subscriber"),
    )


def encode(message) -> bytes:
    return json.dumps(message.to_dict()).encode('utf-8')


def test_subscriber_dispatches_snapshot(subscriber, collector):
    snapshot = ZoneSnapshotMessage.from_zones([circle(), rect()])

    assert subscriber.handle_payload(snapshot_topic("ze1"), encode(snapshot))
    assert collector.snapshots == [snapshot]
    assert subscriber.get_stats()['snapshots_received'] == 1


def test_subscriber_ignores_zone_events(subscriber, collector):
    event = ZoneEventMessage.create(
        ZoneEventType.ADDED, "r1", zone=ZonePayload.from_zone(rect())
    )

    assert subscriber.handle_payload(zone_topic("ze1"), encode(event)) is False
    assert collector.snapshots == []
    assert subscriber.get_stats()['rejected'] == 0


@pytest.mark.parametrize("payload", [
    b"not json",
    b"\xff\xfe",
    json.dumps({'schema_version': '1.0'}).encode(),
    json.dumps([1, 2, 3]).encode(),
])
def test_subscriber_rejects_bad_snapshots(subscriber, collector, payload):
    assert subscriber.handle_payload(snapshot_topic("ze1"), payload) is False
    assert collector.snapshots == []
    assert subscriber.get_stats()['rejected'] == 1


def test_subscriber_ignores_unknown_topic(subscriber, collector):
    snapshot = ZoneSnapshotMessage.from_zones([])
    assert subscriber.handle_payload("somewhere/else", encode(snapshot)) is False
    assert collector.snapshots == []


# ===== Structured logging =====

def test_structured_logger_emits_json(caplog):
    logger = create_logger("test_structured")

    with caplog.at_level("INFO", logger="atlas_mqtt.test_structured"):
        logger.info(
            event=LogEvent.PAYMENT_INITIATED,
            message="Published payment.initiated",
            metadata={'zone_id': 'c1', 'months': 3}
        )
        logger.error(
            event=LogEvent.SCHEMA_VALIDATION_ERROR,
            message="Bad snapshot",
            exc_info=ValueError("duplicate ids")
        )

    info, error = [json.loads(record.getMessage()) for record in caplog.records]
    assert info['event'] == "payment.initiated"
    assert info['component'] == "test_structured"
    assert info['metadata'] == {'zone_id': 'c1', 'months': 3}
    assert error['level'] == "ERROR"
    assert error['exception'] == {'type': 'ValueError', 'message': 'duplicate ids'}


def test_structured_logger_level():
    logger = create_logger("test_level")
    logger.set_level(logging.WARNING)
    assert logger.logger.level == logging.WARNING
