"""
Zone Store - Thread-safe in-memory zone collection.

This module provides the ZoneStore class, a stand-in for the external
collaborator that owns the zone list. It is what the editor resolves selected
ids against, and it receives the editor's optimistic add/update/delete
signals so the collection and the working session stay in step.

It is NOT a persistence layer: snapshots from the real backing store replace
its contents wholesale (replace_all).

Thread Safety:
- Uses threading.Lock for protecting the zone dict
- Reads return snapshots (list copies), never live views
- AdZone objects are immutable (frozen dataclass)
"""

import threading
from typing import Dict, Iterable, Iterator, List, Optional

from atlas_zone.model import AdZone, apply_field_update


class ZoneStore:
    """
    Ordered, thread-safe collection of zones keyed by id.

    Implements the mutation half of ZoneEventSink (add/update/delete); payment
    and campaign signals are accepted and ignored.

    Usage:
        store = ZoneStore()
        store.on_add_zone(zone)
        store.get(zone.id)        # -> AdZone
        store.activate(zone.id)   # payment confirmed externally
        store.snapshot()          # -> [AdZone, ...]
    """

    def __init__(self, zones: Iterable[AdZone] = ()):
        self._zones: Dict[str, AdZone] = {}
        self._lock = threading.Lock()
        for zone in zones:
            self._zones[zone.id] = zone

    def get(self, zone_id: str) -> Optional[AdZone]:
        """Resolve a zone by id (None when absent)."""
        with self._lock:
            return self._zones.get(zone_id)

    def snapshot(self) -> List[AdZone]:
        """Ordered copy of the current zones."""
        with self._lock:
            return list(self._zones.values())

    def replace_all(self, zones: Iterable[AdZone]) -> None:
        """Replace the whole collection (snapshot from the backing store)."""
        fresh = {zone.id: zone for zone in zones}
        with self._lock:
            self._zones = fresh

    def activate(self, zone_id: str) -> Optional[AdZone]:
        """
        Flip is_active after a confirmed payment.

        Returns:
            Updated zone, or None if the id is unknown
        """
        with self._lock:
            zone = self._zones.get(zone_id)
            if zone is None:
                return None
            activated = apply_field_update(zone, "is_active", True)
            self._zones[zone_id] = activated
            return activated

    # ===== ZoneEventSink =====

    def on_add_zone(self, zone: AdZone) -> None:
        with self._lock:
            if zone.id in self._zones:
                raise ValueError(f"Zone '{zone.id}' already exists")
            self._zones[zone.id] = zone

    def on_update_zone(self, zone: AdZone) -> None:
        # Updates for zones deleted concurrently are dropped
        with self._lock:
            if zone.id in self._zones:
                self._zones[zone.id] = zone

    def on_delete_zone(self, zone_id: str) -> None:
        with self._lock:
            self._zones.pop(zone_id, None)

    def on_initiate_payment(self, zone: AdZone, months: int, total_usd: str) -> None:
        pass

    def on_start_campaign(self, zone: AdZone) -> None:
        pass

    def __contains__(self, zone_id: str) -> bool:
        with self._lock:
            return zone_id in self._zones

    def __iter__(self) -> Iterator[AdZone]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._zones)
