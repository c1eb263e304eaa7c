"""
Geometry tests: area formulas, half-up rounding, bounds conversion.
"""

import math

import numpy as np
import pytest

from atlas_zone import AdZone, CircleGeometry, GeoPoint, RectangleGeometry, InvalidGeometry
from atlas_zone.geometry.geomath import (
    METERS_PER_DEGREE,
    area_of,
    areas_of,
    bounds_for,
    round_half_up,
    zone_bounds,
)


DUBAI = GeoPoint(lat=25.2048, lng=55.2708)


def test_circle_area_r20_is_1257():
    assert area_of(CircleGeometry(radius=20)) == 1257


def test_rectangle_area_is_width_times_height():
    assert area_of(RectangleGeometry(width=40, height=25)) == 1000
    assert area_of(RectangleGeometry(width=100, height=100)) == 10000


@pytest.mark.parametrize("radius", [4, 17.5, 50, 123.4, 500])
def test_circle_area_matches_pi_r_squared(radius):
    assert area_of(CircleGeometry(radius=radius)) == math.floor(math.pi * radius * radius + 0.5)


def test_round_half_up_ties_go_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2


def test_area_of_accepts_zone():
    zone = AdZone(id="z1", name="Pier", center=DUBAI, geometry=CircleGeometry(radius=20))
    assert area_of(zone) == 1257


def test_bounds_for_height_maps_to_latitude():
    sw, ne = bounds_for(DUBAI, 200, 100)

    assert ne.lat - sw.lat == pytest.approx(100 / METERS_PER_DEGREE)
    expected_lng_span = 200 / (METERS_PER_DEGREE * math.cos(math.radians(DUBAI.lat)))
    assert ne.lng - sw.lng == pytest.approx(expected_lng_span)
    assert (sw.lat + ne.lat) / 2 == pytest.approx(DUBAI.lat)
    assert (sw.lng + ne.lng) / 2 == pytest.approx(DUBAI.lng)


def test_bounds_at_equator_are_square_for_square_zone():
    sw, ne = bounds_for(GeoPoint(lat=0.0, lng=0.0), 1000, 1000)
    assert ne.lat - sw.lat == pytest.approx(ne.lng - sw.lng)


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-5, 10)])
def test_bounds_for_rejects_non_positive(width, height):
    with pytest.raises(InvalidGeometry):
        bounds_for(DUBAI, width, height)


def test_zone_bounds_uses_circle_diameter():
    zone = AdZone(id="c", name="", center=DUBAI, geometry=CircleGeometry(radius=50))
    assert zone_bounds(zone) == bounds_for(DUBAI, 100, 100)


def test_areas_of_matches_scalar_area():
    zones = [
        AdZone(id="a", name="", center=DUBAI, geometry=CircleGeometry(radius=20)),
        AdZone(id="b", name="", center=DUBAI, geometry=RectangleGeometry(width=40, height=25)),
        AdZone(id="c", name="", center=DUBAI, geometry=CircleGeometry(radius=50)),
    ]
    areas = areas_of(zones)

    assert areas.dtype == np.int64
    assert areas.tolist() == [area_of(z) for z in zones]
    assert areas_of([]).size == 0


def test_geopoint_validates_ranges():
    with pytest.raises(ValueError):
        GeoPoint(lat=91.0, lng=0.0)
    with pytest.raises(ValueError):
        GeoPoint(lat=0.0, lng=-180.5)
    with pytest.raises(ValueError):
        GeoPoint(lat=float("nan"), lng=0.0)


@pytest.mark.parametrize("radius", [0, -1, float("nan"), float("inf"), True])
def test_circle_rejects_invalid_radius(radius):
    with pytest.raises(InvalidGeometry):
        CircleGeometry(radius=radius)
