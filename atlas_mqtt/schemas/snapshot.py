"""
Zone Snapshot Message Schema
============================

Full zone collection pushed by the backing store. Replaces the service's
in-memory collection wholesale.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from atlas_zone.model import AdZone

from .common import SCHEMA_VERSION, Timestamp
from .zone import ZonePayload


@dataclass(frozen=True)
class ZoneSnapshotMessage:
    """
    Complete zone list at one point in time.

    Invariants:
        - zone ids are unique
    """
    schema_version: str
    timestamp: Timestamp
    zones: List[ZonePayload] = field(default_factory=list)

    def __post_init__(self):
        ids = [zone.id for zone in self.zones]
        if len(ids) != len(set(ids)):
            raise ValueError("Snapshot contains duplicate zone ids")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'schema_version': self.schema_version,
            'timestamp': self.timestamp.to_dict(),
            'zones': [zone.to_dict() for zone in self.zones],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ZoneSnapshotMessage':
        try:
            return cls(
                schema_version=str(data['schema_version']),
                timestamp=Timestamp(value=data['timestamp']),
                zones=[ZonePayload.from_dict(zone) for zone in data.get('zones', [])]
            )
        except KeyError as e:
            raise ValueError(f"Missing required ZoneSnapshotMessage field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid ZoneSnapshotMessage data: {e}")

    @classmethod
    def from_zones(cls, zones: List[AdZone]) -> 'ZoneSnapshotMessage':
        return cls(
            schema_version=SCHEMA_VERSION,
            timestamp=Timestamp.now(),
            zones=[ZonePayload.from_zone(zone) for zone in zones]
        )

    def to_zones(self) -> List[AdZone]:
        """Domain values (ValueError/InvalidGeometry on invalid geometry)."""
        return [zone.to_zone() for zone in self.zones]

    @property
    def zone_count(self) -> int:
        return len(self.zones)
