"""
Zone Event Message Schema
=========================

Bounded Context: Zone Event Data Structures

One message per side-effect signal leaving the zone editor or campaign gate.

Message Flow:
    ZoneEditor → ZoneEventSink → ZoneEventPublisher → MQTT → backing store /
    payment service / campaign manager

Event payloads:
    zone.added         zone
    zone.updated       zone
    zone.deleted       (zone_id only)
    payment.initiated  zone, months, total_usd
    campaign.started   zone
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .common import SCHEMA_VERSION, Timestamp
from .zone import ZonePayload


class ZoneEventType(str, Enum):
    """Zone event type enumeration."""
    ADDED = "zone.added"
    UPDATED = "zone.updated"
    DELETED = "zone.deleted"
    PAYMENT_INITIATED = "payment.initiated"
    CAMPAIGN_STARTED = "campaign.started"


# Event types that must carry the full zone
ZONE_BEARING_EVENTS = frozenset({
    ZoneEventType.ADDED,
    ZoneEventType.UPDATED,
    ZoneEventType.PAYMENT_INITIATED,
    ZoneEventType.CAMPAIGN_STARTED,
})


@dataclass(frozen=True)
class ZoneEventMessage:
    """
    Zone event message for MQTT publication.

    Attributes:
        schema_version: Message schema version (for evolution)
        timestamp: ISO 8601 timestamp of message creation
        event_type: What happened
        zone_id: Affected zone
        zone: Zone snapshot (absent for deletions)
        months: Requested duration (payment.initiated only)
        total_usd: Quoted total as a 2-decimal string (payment.initiated only)

    Invariants:
        - zone is set for every event type except zone.deleted
        - zone.id == zone_id when zone is set
        - payment.initiated carries months > 0 and total_usd

    Example:
        >>> msg = ZoneEventMessage(
        ...     schema_version="1.0",
        ...     timestamp=Timestamp.now(),
        ...     event_type=ZoneEventType.PAYMENT_INITIATED,
        ...     zone_id=zone.id,
        ...     zone=ZonePayload.from_zone(zone),
        ...     months=3,
        ...     total_usd="9.43"
        ... )
    """
    schema_version: str
    timestamp: Timestamp
    event_type: ZoneEventType
    zone_id: str
    zone: Optional[ZonePayload] = None
    months: Optional[int] = None
    total_usd: Optional[str] = None

    def __post_init__(self):
        """Validate invariants."""
        if not self.zone_id:
            raise ValueError("zone_id cannot be empty")
        if self.event_type in ZONE_BEARING_EVENTS and self.zone is None:
            raise ValueError(f"{self.event_type.value} requires a zone payload")
        if self.zone is not None and self.zone.id != self.zone_id:
            raise ValueError(
                f"zone_id mismatch: {self.zone_id} != {self.zone.id}"
            )
        if self.event_type == ZoneEventType.PAYMENT_INITIATED:
            if self.months is None or self.months <= 0:
                raise ValueError(f"payment.initiated requires months > 0, got {self.months}")
            if self.total_usd is None:
                raise ValueError("payment.initiated requires total_usd")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        result = {
            'schema_version': self.schema_version,
            'timestamp': self.timestamp.to_dict(),
            'event_type': self.event_type.value,
            'zone_id': self.zone_id,
        }
        if self.zone is not None:
            result['zone'] = self.zone.to_dict()
        if self.months is not None:
            result['months'] = self.months
        if self.total_usd is not None:
            result['total_usd'] = self.total_usd
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ZoneEventMessage':
        """
        Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            zone = None
            if data.get('zone') is not None:
                zone = ZonePayload.from_dict(data['zone'])
            months = data.get('months')
            total_usd = data.get('total_usd')

            return cls(
                schema_version=str(data['schema_version']),
                timestamp=Timestamp(value=data['timestamp']),
                event_type=ZoneEventType(data['event_type']),
                zone_id=str(data['zone_id']),
                zone=zone,
                months=None if months is None else int(months),
                total_usd=None if total_usd is None else str(total_usd)
            )
        except KeyError as e:
            raise ValueError(f"Missing required ZoneEventMessage field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid ZoneEventMessage data: {e}")

    @classmethod
    def create(
        cls,
        event_type: ZoneEventType,
        zone_id: str,
        zone: Optional[ZonePayload] = None,
        months: Optional[int] = None,
        total_usd: Optional[str] = None
    ) -> 'ZoneEventMessage':
        """Build a message stamped with the current schema version and time."""
        return cls(
            schema_version=SCHEMA_VERSION,
            timestamp=Timestamp.now(),
            event_type=event_type,
            zone_id=zone_id,
            zone=zone,
            months=months,
            total_usd=total_usd
        )
