"""
Zone Event Publisher
===================

Bounded Context: Zone Event Message Production

Design:
- Inherits from BasePublisher (connection management)
- Implements ZoneEventSink: plug it straight into a ZoneEditor / CampaignGate
- One ZoneEventMessage per signal, published to a single topic

Message Flow:
    ZoneEditor → on_*() → ZoneEventMessage → ZoneEventPublisher → MQTT Broker

Example:
    >>> from atlas_mqtt.publishers import ZoneEventPublisher
    >>> from atlas_mqtt.logging import create_logger
    >>>
    >>> publisher = ZoneEventPublisher(
    ...     broker_host="localhost",
    ...     topic="atlas/data/zones/zone_editor_1",
    ...     logger=create_logger("zone_publisher")
    ... )
    >>> publisher.connect()
    >>> editor = ZoneEditor(zones=store, sink=FanOutSink(store, publisher))
"""

from typing import Dict, Any, Optional

from atlas_zone.model import AdZone

from .base import BasePublisher
from ..schemas import ZoneEventMessage, ZoneEventType, ZonePayload
from ..logging import StructuredLogger, LogEvent

_EVENT_LOG = {
    ZoneEventType.ADDED: LogEvent.ZONE_ADDED,
    ZoneEventType.UPDATED: LogEvent.ZONE_UPDATED,
    ZoneEventType.DELETED: LogEvent.ZONE_DELETED,
    ZoneEventType.PAYMENT_INITIATED: LogEvent.PAYMENT_INITIATED,
    ZoneEventType.CAMPAIGN_STARTED: LogEvent.CAMPAIGN_STARTED,
}


class ZoneEventPublisher(BasePublisher):
    """
    Publisher for zone lifecycle and handoff signals.

    Attributes:
        Same as BasePublisher
    """

    def __init__(
        self,
        broker_host: str,
        topic: str,
        logger: StructuredLogger,
        broker_port: int = 1883,
        client_id: str = "atlas_zone_publisher",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 1
    ):
        super().__init__(
            broker_host=broker_host,
            broker_port=broker_port,
            topic=topic,
            client_id=client_id,
            logger=logger,
            username=username,
            password=password,
            qos=qos
        )

    def format_message(self, zone_event_msg: ZoneEventMessage) -> Dict[str, Any]:
        return zone_event_msg.to_dict()

    def publish_zone_event(self, zone_event_msg: ZoneEventMessage) -> bool:
        """
        Publish one zone event message.

        Returns:
            True if published successfully, False otherwise
        """
        success = self.publish(self.format_message(zone_event_msg))
        if success:
            metadata = {'zone_id': zone_event_msg.zone_id}
            if zone_event_msg.months is not None:
                metadata['months'] = zone_event_msg.months
                metadata['total_usd'] = zone_event_msg.total_usd
            self.logger.info(
                event=_EVENT_LOG[zone_event_msg.event_type],
                message=f"Published {zone_event_msg.event_type.value}",
                metadata=metadata
            )
        return success

    # ===== ZoneEventSink =====

    def on_add_zone(self, zone: AdZone) -> None:
        self._emit(ZoneEventType.ADDED, zone)

    def on_update_zone(self, zone: AdZone) -> None:
        self._emit(ZoneEventType.UPDATED, zone)

    def on_delete_zone(self, zone_id: str) -> None:
        self.publish_zone_event(
            ZoneEventMessage.create(ZoneEventType.DELETED, zone_id)
        )

    def on_initiate_payment(self, zone: AdZone, months: int, total_usd: str) -> None:
        self._emit(ZoneEventType.PAYMENT_INITIATED, zone, months=months, total_usd=total_usd)

    def on_start_campaign(self, zone: AdZone) -> None:
        self._emit(ZoneEventType.CAMPAIGN_STARTED, zone)

    def _emit(self, event_type: ZoneEventType, zone: AdZone, **extra) -> None:
        self.publish_zone_event(
            ZoneEventMessage.create(
                event_type,
                zone.id,
                zone=ZonePayload.from_zone(zone),
                **extra
            )
        )
