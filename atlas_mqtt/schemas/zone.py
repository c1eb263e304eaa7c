"""
Zone Payload Schema
===================

Bounded Context: Zone Wire Format

Flat JSON rendition of an AdZone. Dimensions not owned by the zone's shape
are omitted on the wire (circle: radius only; rectangle: width and height).

Example:
    {
        "id": "3f2a...",
        "name": "Marina Walk",
        "shape": "CIRCLE",
        "center": {"lat": 25.08, "lng": 55.14},
        "radius": 20.0,
        "is_active": false,
        "price_per_1k": 2.5
    }
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from atlas_zone.geometry.shapes import (
    SHAPE_FIELDS,
    CircleGeometry,
    GeoPoint,
    RectangleGeometry,
    ZoneShape,
)
from atlas_zone.model import AdZone


@dataclass(frozen=True)
class ZonePayload:
    """
    Serializable zone snapshot.

    Invariants:
        - CIRCLE payloads carry radius; RECTANGLE payloads carry width and height
    """
    id: str
    name: str
    shape: ZoneShape
    lat: float
    lng: float
    radius: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    is_active: bool = False
    price_per_1k: float = 0.0

    def __post_init__(self):
        """Validate invariants."""
        for name in SHAPE_FIELDS[self.shape]:
            if getattr(self, name) is None:
                raise ValueError(f"{self.shape.value} zone payload requires '{name}'")
        if not isinstance(self.is_active, bool):
            raise ValueError(f"is_active must be a boolean, got {self.is_active!r}")

    @classmethod
    def from_zone(cls, zone: AdZone) -> 'ZonePayload':
        return cls(
            id=zone.id,
            name=zone.name,
            shape=zone.shape,
            lat=zone.center.lat,
            lng=zone.center.lng,
            radius=zone.radius,
            width=zone.width,
            height=zone.height,
            is_active=zone.is_active,
            price_per_1k=zone.price_per_1k,
        )

    def to_zone(self) -> AdZone:
        """Rebuild the domain value (re-validates geometry)."""
        if self.shape == ZoneShape.CIRCLE:
            geometry = CircleGeometry(radius=self.radius)
        else:
            geometry = RectangleGeometry(width=self.width, height=self.height)
        return AdZone(
            id=self.id,
            name=self.name,
            center=GeoPoint(lat=self.lat, lng=self.lng),
            geometry=geometry,
            is_active=self.is_active,
            price_per_1k=self.price_per_1k,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'id': self.id,
            'name': self.name,
            'shape': self.shape.value,
            'center': {'lat': self.lat, 'lng': self.lng},
        }
        for name in SHAPE_FIELDS[self.shape]:
            result[name] = getattr(self, name)
        result['is_active'] = self.is_active
        result['price_per_1k'] = self.price_per_1k
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ZonePayload':
        """
        Deserialize from dict.

        Raises:
            ValueError: If required fields are missing or invalid
        """
        try:
            shape = ZoneShape(data['shape'])
            dims = {
                name: float(data[name])
                for name in SHAPE_FIELDS[shape]
            }
            return cls(
                id=str(data['id']),
                name=str(data.get('name', '')),
                shape=shape,
                lat=float(data['center']['lat']),
                lng=float(data['center']['lng']),
                is_active=data.get('is_active', False),
                price_per_1k=float(data.get('price_per_1k', 0.0)),
                **dims
            )
        except KeyError as e:
            raise ValueError(f"Missing required zone field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid zone data: {e}")


def zone_to_dict(zone: AdZone) -> Dict[str, Any]:
    """Shortcut: AdZone -> wire dict."""
    return ZonePayload.from_zone(zone).to_dict()


def zone_from_dict(data: Dict[str, Any]) -> AdZone:
    """
    Shortcut: wire dict -> AdZone.

    Raises:
        ValueError: On malformed payloads or invalid geometry
    """
    return ZonePayload.from_dict(data).to_zone()
