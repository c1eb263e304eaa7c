"""
Atlas MQTT Communication Package
================================

Bounded Context: Communication Protocol for Ad Zones

MQTT messaging between the zone editor service and its collaborators: the
backing store (snapshots in, lifecycle signals out), the payment service
(payment.initiated) and the campaign manager (campaign.started).

Architecture:
- schemas/: Immutable wire types (ZonePayload, ZoneEventMessage, ZoneSnapshotMessage)
- publishers/: ZoneEventPublisher (also a ZoneEventSink)
- subscriber.py: ZoneSubscriber (zone snapshots from the backing store)
- logging/: Structured JSON logging for observability

Topics:
    atlas/data/zones/{service_id}      ← ZoneEventMessage (published)
    atlas/data/snapshots/{service_id}  → ZoneSnapshotMessage (consumed)

Example:
    >>> from atlas_mqtt import ZoneEventPublisher, create_logger
    >>> publisher = ZoneEventPublisher(
    ...     broker_host="localhost",
    ...     topic="atlas/data/zones/zone_editor_1",
    ...     logger=create_logger("zone_publisher")
    ... )
    >>> publisher.connect()
    >>> publisher.on_add_zone(zone)
"""

__version__ = "1.0.0"

# Schemas
from .schemas import (
    SCHEMA_VERSION,
    Timestamp,
    ZonePayload,
    ZoneEventType,
    ZoneEventMessage,
    ZoneSnapshotMessage,
)

# Publishers
from .publishers import BasePublisher, ZoneEventPublisher

# Subscriber
from .subscriber import ZoneSubscriber

# Logging
from .logging import LogEvent, StructuredLogger, create_logger


def zone_topic(service_id: str) -> str:
    return f"atlas/data/zones/{service_id}"


def snapshot_topic(service_id: str) -> str:
    return f"atlas/data/snapshots/{service_id}"


__all__ = [
    '__version__',
    # Schemas
    'SCHEMA_VERSION',
    'Timestamp',
    'ZonePayload',
    'ZoneEventType',
    'ZoneEventMessage',
    'ZoneSnapshotMessage',
    # Transport
    'BasePublisher',
    'ZoneEventPublisher',
    'ZoneSubscriber',
    'zone_topic',
    'snapshot_topic',
    # Logging
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
