"""
Geometric Shapes Module
========================

Pure geographic value types - NO state, NO side effects.

Design:
- Immutable values (frozen dataclass pattern)
- Tagged union for zone geometry: CircleGeometry | RectangleGeometry
- Dimensions in meters, validated at construction (fail-fast)
- Thread-safe by design (immutability)
"""

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from atlas_zone.errors import InvalidGeometry


class ZoneShape(str, Enum):
    """Zone shape discriminator (fixed at creation)."""
    CIRCLE = "CIRCLE"
    RECTANGLE = "RECTANGLE"


def _check_dimension(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidGeometry(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidGeometry(f"{name} must be finite and > 0, got {value}")


@dataclass(frozen=True)
class GeoPoint:
    """
    Immutable latitude/longitude pair in decimal degrees.

    Attributes:
        lat: Latitude in [-90, 90]
        lng: Longitude in [-180, 180]

    Example:
        >>> GeoPoint(lat=25.2048, lng=55.2708)
        GeoPoint(lat=25.2048, lng=55.2708)
    """

    lat: float
    lng: float

    def __post_init__(self):
        """Validate coordinate ranges."""
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError(f"GeoPoint coordinates must be finite, got ({self.lat}, {self.lng})")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude must be in [-90, 90], got {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude must be in [-180, 180], got {self.lng}")

    def to_dict(self) -> Dict[str, float]:
        return {'lat': self.lat, 'lng': self.lng}


@dataclass(frozen=True)
class CircleGeometry:
    """
    Circular zone footprint.

    Attributes:
        radius: Radius in meters (> 0)
    """

    radius: float

    def __post_init__(self):
        _check_dimension("radius", self.radius)

    @property
    def shape(self) -> ZoneShape:
        return ZoneShape.CIRCLE


@dataclass(frozen=True)
class RectangleGeometry:
    """
    Axis-aligned rectangular zone footprint.

    Width runs east-west, height north-south.

    Attributes:
        width: Width in meters (> 0)
        height: Height in meters (> 0)
    """

    width: float
    height: float

    def __post_init__(self):
        _check_dimension("width", self.width)
        _check_dimension("height", self.height)

    @property
    def shape(self) -> ZoneShape:
        return ZoneShape.RECTANGLE


Geometry = Union[CircleGeometry, RectangleGeometry]

# Dimension fields owned by each shape
SHAPE_FIELDS = {
    ZoneShape.CIRCLE: ("radius",),
    ZoneShape.RECTANGLE: ("width", "height"),
}
