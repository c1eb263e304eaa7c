"""
Atlas MQTT Schemas
==================

Bounded Context: Data Structures

Immutable, typed data structures for MQTT messages.

Design:
- Frozen dataclasses (immutability)
- to_dict() / from_dict() for JSON (de)serialization
- Schema versioning for evolution

Public API
----------
    Timestamp: ISO 8601 timestamp wrapper
    ZonePayload: Wire rendition of an AdZone
    ZoneEventType / ZoneEventMessage: Side-effect signals
    ZoneSnapshotMessage: Full collection from the backing store
"""

from .common import SCHEMA_VERSION, Timestamp
from .zone import ZonePayload, zone_to_dict, zone_from_dict
from .zone_event import ZoneEventType, ZoneEventMessage
from .snapshot import ZoneSnapshotMessage

__all__ = [
    'SCHEMA_VERSION',
    'Timestamp',
    'ZonePayload',
    'zone_to_dict',
    'zone_from_dict',
    'ZoneEventType',
    'ZoneEventMessage',
    'ZoneSnapshotMessage',
]
