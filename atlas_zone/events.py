"""
Zone Event Sink
===============

Fire-and-forget side effects the core emits to external collaborators.

Design:
- Protocol (interface), no return values consumed by the core
- FanOutSink delivers one signal to several collaborators in order
  (e.g. local ZoneStore first, then the MQTT publisher)
"""

from typing import Protocol, Sequence

from atlas_zone.model import AdZone


class ZoneEventSink(Protocol):
    """Protocol for collaborators receiving zone side effects."""

    def on_add_zone(self, zone: AdZone) -> None:
        """A zone was drawn (zone carries the clicked point and shape)."""
        ...

    def on_update_zone(self, zone: AdZone) -> None:
        """The selected zone was edited."""
        ...

    def on_delete_zone(self, zone_id: str) -> None:
        """The owner deleted a zone."""
        ...

    def on_initiate_payment(self, zone: AdZone, months: int, total_usd: str) -> None:
        """The owner picked a duration tier for activation."""
        ...

    def on_start_campaign(self, zone: AdZone) -> None:
        """An advertiser launched a campaign on an active zone."""
        ...


class FanOutSink:
    """Forward every signal to each sink, in registration order."""

    def __init__(self, *sinks: ZoneEventSink):
        self._sinks: Sequence[ZoneEventSink] = tuple(sinks)

    def on_add_zone(self, zone: AdZone) -> None:
        for sink in self._sinks:
            sink.on_add_zone(zone)

    def on_update_zone(self, zone: AdZone) -> None:
        for sink in self._sinks:
            sink.on_update_zone(zone)

    def on_delete_zone(self, zone_id: str) -> None:
        for sink in self._sinks:
            sink.on_delete_zone(zone_id)

    def on_initiate_payment(self, zone: AdZone, months: int, total_usd: str) -> None:
        for sink in self._sinks:
            sink.on_initiate_payment(zone, months, total_usd)

    def on_start_campaign(self, zone: AdZone) -> None:
        for sink in self._sinks:
            sink.on_start_campaign(zone)

    def __len__(self) -> int:
        return len(self._sinks)
