"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for the zone service's structured logs.

Event Naming Convention:
    <component>.<category>.<action>

    component: mqtt, zone, payment, campaign, snapshot, error
    category: publish, added, received
    action: success, failed

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, metadata.zone_id
    | filter event = "payment.initiated"
    | stats count() by bin(1h)
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - mqtt.*: Broker interactions
    - zone.*: Zone lifecycle signals leaving the editor
    - payment.* / campaign.*: Handoffs to external collaborators
    - snapshot.*: Collection snapshots from the backing store
    - error.*: Error conditions
    """

    # ========== MQTT Events ==========
    MQTT_CONNECTED = "mqtt.connected"
    MQTT_DISCONNECTED = "mqtt.disconnected"
    MQTT_PUBLISH_SUCCESS = "mqtt.publish.success"
    MQTT_PUBLISH_FAILED = "mqtt.publish.failed"

    # ========== Zone Events ==========
    ZONE_ADDED = "zone.added"
    """New zone placed on the map."""

    ZONE_UPDATED = "zone.updated"
    """Optimistic edit (rename, resize, move, activation)."""

    ZONE_DELETED = "zone.deleted"

    # ========== Handoffs ==========
    PAYMENT_INITIATED = "payment.initiated"
    """Owner asked to activate a zone for N months."""

    CAMPAIGN_STARTED = "campaign.started"
    """Advertiser asked to start a campaign on an active zone."""

    # ========== Snapshots ==========
    SNAPSHOT_RECEIVED = "snapshot.received"
    """Full zone collection received from the backing store."""

    # ========== Error Events ==========
    SERIALIZATION_ERROR = "error.serialization"
    DESERIALIZATION_ERROR = "error.deserialization"
    SCHEMA_VALIDATION_ERROR = "error.schema_validation"
    MQTT_CONNECTION_ERROR = "error.mqtt_connection"
