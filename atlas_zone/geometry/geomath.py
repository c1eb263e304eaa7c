"""
Geo Math Module
===============

Stateless conversions between physical zone dimensions and map coordinates.

Design:
- Pure functions (no state)
- Flat-earth approximation: 1° latitude ≈ 111,111 m,
  1° longitude ≈ 111,111 m × cos(latitude)
- O(1) area computation (called on every resize tick)
- Vectorized variant for collection summaries
"""

from typing import Iterable, Tuple, Union

import numpy as np

from atlas_zone.errors import InvalidGeometry
from atlas_zone.geometry.shapes import (
    CircleGeometry,
    GeoPoint,
    Geometry,
    RectangleGeometry,
)

METERS_PER_DEGREE = 111_111.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positive values."""
    return int(np.floor(value + 0.5))


def bounds_for(
    center: GeoPoint,
    width_meters: float,
    height_meters: float
) -> Tuple[GeoPoint, GeoPoint]:
    """
    Convert a rectangle's physical size into lat/lng corners.

    Args:
        center: Rectangle center
        width_meters: East-west extent in meters
        height_meters: North-south extent in meters

    Returns:
        (southwest, northeast) corners

    Raises:
        InvalidGeometry: If a dimension is not strictly positive
    """
    if not (width_meters > 0 and height_meters > 0):
        raise InvalidGeometry(
            f"Bounds need positive dimensions, got {width_meters}x{height_meters}"
        )

    lat_offset = (height_meters / 2) / METERS_PER_DEGREE
    lng_offset = (width_meters / 2) / (METERS_PER_DEGREE * np.cos(np.radians(center.lat)))

    southwest = GeoPoint(
        lat=float(center.lat - lat_offset),
        lng=float(center.lng - lng_offset)
    )
    northeast = GeoPoint(
        lat=float(center.lat + lat_offset),
        lng=float(center.lng + lng_offset)
    )
    return southwest, northeast


def _geometry_of(zone_or_geometry) -> Geometry:
    if isinstance(zone_or_geometry, (CircleGeometry, RectangleGeometry)):
        return zone_or_geometry
    return zone_or_geometry.geometry


def area_of(zone_or_geometry: Union[Geometry, "AdZone"]) -> int:
    """
    Zone footprint in whole square meters.

    Circle: round(π·r²). Rectangle: round(w·h). Rounding is half-up.

    Args:
        zone_or_geometry: AdZone or bare geometry value

    Returns:
        Area in square meters
    """
    geometry = _geometry_of(zone_or_geometry)

    if isinstance(geometry, CircleGeometry):
        return round_half_up(np.pi * geometry.radius * geometry.radius)
    if isinstance(geometry, RectangleGeometry):
        return round_half_up(geometry.width * geometry.height)

    raise InvalidGeometry(f"Unsupported geometry: {type(geometry).__name__}")


def zone_bounds(zone) -> Tuple[GeoPoint, GeoPoint]:
    """
    Bounding corners of a zone (circles use their diameter on both axes).
    """
    geometry = zone.geometry
    if isinstance(geometry, CircleGeometry):
        diameter = geometry.radius * 2
        return bounds_for(zone.center, diameter, diameter)
    return bounds_for(zone.center, geometry.width, geometry.height)


def areas_of(zones: Iterable) -> np.ndarray:
    """
    Vectorized areas for a collection of zones.

    Returns:
        int64 array, one entry per zone, same order as input
    """
    zones = list(zones)
    if not zones:
        return np.array([], dtype=np.int64)

    is_circle = np.array([isinstance(z.geometry, CircleGeometry) for z in zones])
    radius = np.array([getattr(z.geometry, 'radius', 0.0) for z in zones], dtype=float)
    width = np.array([getattr(z.geometry, 'width', 0.0) for z in zones], dtype=float)
    height = np.array([getattr(z.geometry, 'height', 0.0) for z in zones], dtype=float)

    raw = np.where(is_circle, np.pi * radius * radius, width * height)
    return np.floor(raw + 0.5).astype(np.int64)
