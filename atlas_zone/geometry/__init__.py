"""
Geometry Layer
==============

Bounded Context: Pure geographic shapes and map math.

Responsibilities:
- Shape representation (immutable tagged union)
- Meters to lat/lng bounds conversion
- Area computation
- NO state, NO selection, NO pricing

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Fail-fast validation
- Zero side effects
"""

from atlas_zone.geometry.shapes import (
    GeoPoint,
    ZoneShape,
    CircleGeometry,
    RectangleGeometry,
    Geometry,
    SHAPE_FIELDS,
)
from atlas_zone.geometry.geomath import (
    bounds_for,
    area_of,
    areas_of,
    zone_bounds,
    round_half_up,
)

__all__ = [
    "GeoPoint",
    "ZoneShape",
    "CircleGeometry",
    "RectangleGeometry",
    "Geometry",
    "SHAPE_FIELDS",
    "bounds_for",
    "area_of",
    "areas_of",
    "zone_bounds",
    "round_half_up",
]
