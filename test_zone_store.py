"""
Zone store tests: sink handlers, snapshots, activation.
"""

import pytest

from atlas_zone import AdZone, CircleGeometry, FanOutSink, GeoPoint, ZoneStore

from test_zone_editor import RecordingSink


def zone(zone_id, radius=20.0):
    return AdZone(id=zone_id, name=zone_id, center=GeoPoint(lat=0.0, lng=0.0),
                  geometry=CircleGeometry(radius=radius))


def test_add_get_delete():
    store = ZoneStore()
    store.on_add_zone(zone("a"))

    assert store.get("a") == zone("a")
    assert "a" in store
    assert len(store) == 1

    store.on_delete_zone("a")
    assert store.get("a") is None
    store.on_delete_zone("a")


def test_duplicate_add_rejected():
    store = ZoneStore([zone("a")])
    with pytest.raises(ValueError):
        store.on_add_zone(zone("a"))


def test_update_ignores_deleted_zone():
    store = ZoneStore()
    store.on_update_zone(zone("ghost"))
    assert len(store) == 0


def test_snapshot_keeps_insertion_order():
    store = ZoneStore([zone("b"), zone("a"), zone("c")])
    assert [z.id for z in store] == ["b", "a", "c"]


def test_replace_all():
    store = ZoneStore([zone("a")])
    store.replace_all([zone("x"), zone("y")])
    assert [z.id for z in store.snapshot()] == ["x", "y"]


def test_activate():
    store = ZoneStore([zone("a")])

    activated = store.activate("a")

    assert activated.is_active
    assert store.get("a").is_active
    assert store.activate("missing") is None


def test_fan_out_delivers_in_order():
    order = []

    class Tagged(RecordingSink):
        def __init__(self, tag):
            super().__init__()
            self.tag = tag

        def on_delete_zone(self, zone_id):
            order.append(self.tag)

    fan_out = FanOutSink(Tagged("first"), Tagged("second"))
    fan_out.on_delete_zone("a")

    assert order == ["first", "second"]
    assert len(fan_out) == 2
