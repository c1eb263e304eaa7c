"""
Zone Model Module
=================

The AdZone entity and its invariant checks.

Design:
- Frozen dataclass (updates return new values, inputs never mutate)
- Geometry is a tagged union, so exactly one dimension set exists
- Shape is derived from the geometry variant and cannot change
- No range clamps here (editor concern), only positivity
"""

import math
import numbers
import uuid
from dataclasses import dataclass, replace
from typing import Any, Optional

from atlas_zone.config import EditorConfig
from atlas_zone.errors import (
    ImmutableFieldError,
    InvalidGeometry,
    UnknownFieldError,
)
from atlas_zone.geometry.shapes import (
    SHAPE_FIELDS,
    CircleGeometry,
    GeoPoint,
    Geometry,
    RectangleGeometry,
    ZoneShape,
)

IMMUTABLE_FIELDS = frozenset({"id", "shape"})
DIMENSION_FIELDS = frozenset({"radius", "width", "height"})
UPDATABLE_FIELDS = frozenset({"name", "center", "is_active", "price_per_1k"}) | DIMENSION_FIELDS


@dataclass(frozen=True)
class AdZone:
    """
    Geographically anchored advertising zone.

    Design:
    - Value object: edits produce a new AdZone via apply_field_update()
    - Identity is `id`; equality compares every field (used to detect
      external changes to a selected zone)

    Attributes:
        id: Unique identifier, never reassigned
        name: Owner-editable label (may be empty)
        center: Zone center
        geometry: CircleGeometry or RectangleGeometry
        is_active: True once a payment has been confirmed externally
        price_per_1k: Advertiser-facing CPM rate (set externally)

    Example:
        >>> zone = AdZone(
        ...     id="z1",
        ...     name="Marina Walk",
        ...     center=GeoPoint(lat=25.08, lng=55.14),
        ...     geometry=CircleGeometry(radius=20)
        ... )
        >>> zone.shape
        <ZoneShape.CIRCLE: 'CIRCLE'>
    """

    id: str
    name: str
    center: GeoPoint
    geometry: Geometry
    is_active: bool = False
    price_per_1k: float = 0.0

    def __post_init__(self):
        """Validate invariants."""
        if not self.id:
            raise ValueError("Zone id cannot be empty")
        if not isinstance(self.center, GeoPoint):
            raise TypeError(f"center must be GeoPoint, got {type(self.center).__name__}")
        if not isinstance(self.is_active, bool):
            raise ValueError(f"is_active must be a boolean, got {self.is_active!r}")
        if not math.isfinite(self.price_per_1k) or self.price_per_1k < 0:
            raise ValueError(f"price_per_1k must be >= 0, got {self.price_per_1k}")
        validate_geometry(self)

    @property
    def shape(self) -> ZoneShape:
        return self.geometry.shape

    @property
    def radius(self) -> Optional[float]:
        return getattr(self.geometry, "radius", None)

    @property
    def width(self) -> Optional[float]:
        return getattr(self.geometry, "width", None)

    @property
    def height(self) -> Optional[float]:
        return getattr(self.geometry, "height", None)


def validate_geometry(zone: AdZone) -> None:
    """
    Check shape-specific field presence and positivity.

    Returns None when the geometry is valid.

    Raises:
        InvalidGeometry: If the geometry variant is unknown or a dimension is
            not finite and strictly positive
    """
    geometry = zone.geometry
    if isinstance(geometry, CircleGeometry):
        dimensions = (("radius", geometry.radius),)
    elif isinstance(geometry, RectangleGeometry):
        dimensions = (("width", geometry.width), ("height", geometry.height))
    else:
        raise InvalidGeometry(
            f"Zone '{zone.id}' has unsupported geometry {type(geometry).__name__}"
        )

    for name, value in dimensions:
        if not isinstance(value, numbers.Real) or not math.isfinite(value) or value <= 0:
            raise InvalidGeometry(
                f"Zone '{zone.id}' {name} must be finite and > 0, got {value}"
            )


def is_viable_area(area_sqm: int, min_area_sqm: int) -> bool:
    """True when the area meets the activation minimum (inclusive)."""
    return area_sqm >= min_area_sqm


def apply_field_update(zone: AdZone, field: str, value: Any) -> AdZone:
    """
    Return a copy of `zone` with one field replaced.

    Does not clamp dimensions; only re-validates geometry.

    Args:
        zone: Zone to update (not mutated)
        field: One of name, center, radius, width, height, is_active,
            price_per_1k
        value: New value

    Returns:
        New AdZone

    Raises:
        ImmutableFieldError: For id or shape
        UnknownFieldError: For fields the zone does not have
        InvalidGeometry: If the dimension is not valid for the zone's shape
    """
    if field in IMMUTABLE_FIELDS:
        raise ImmutableFieldError(f"Field '{field}' is fixed at creation")
    if field not in UPDATABLE_FIELDS:
        raise UnknownFieldError(field)

    if field in DIMENSION_FIELDS:
        if field not in SHAPE_FIELDS[zone.shape]:
            raise InvalidGeometry(
                f"{zone.shape.value} zone '{zone.id}' has no '{field}' dimension"
            )
        # Geometry constructors re-validate positivity
        geometry = replace(zone.geometry, **{field: value})
        return replace(zone, geometry=geometry)

    if field == "name":
        value = str(value)
    elif field == "price_per_1k":
        value = float(value)

    return replace(zone, **{field: value})


def new_zone(
    point: GeoPoint,
    shape: ZoneShape,
    config: EditorConfig,
    name: Optional[str] = None,
    zone_id: Optional[str] = None
) -> AdZone:
    """
    Build a freshly drawn zone with default dimensions centered at `point`.

    Args:
        point: Clicked map location
        shape: CIRCLE or RECTANGLE
        config: Supplies default dimensions, CPM and name
        name: Optional label (defaults to config.default_zone_name)
        zone_id: Optional id (defaults to a uuid4 hex string)

    Returns:
        Inactive AdZone
    """
    shape = ZoneShape(shape)
    if shape == ZoneShape.CIRCLE:
        geometry = CircleGeometry(radius=config.default_radius)
    else:
        geometry = RectangleGeometry(
            width=config.default_width,
            height=config.default_height
        )

    return AdZone(
        id=zone_id or uuid.uuid4().hex,
        name=config.default_zone_name if name is None else name,
        center=point,
        geometry=geometry,
        is_active=False,
        price_per_1k=config.default_price_per_1k
    )
