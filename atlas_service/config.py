"""
Configuration schema for the zone editor service.

Service identity, the role the editor session runs as, editor/pricing
constants and MQTT settings. Loaded once from YAML at startup.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import yaml

from atlas_zone.config import EditorConfig
from atlas_zone.roles import UserRole


@dataclass(frozen=True)
class MQTTConfig:
    """MQTT broker configuration."""

    broker: str = "localhost"
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    qos: int = 1

    zone_event_topic: str = "atlas/data/zones/{service_id}"
    snapshot_topic: str = "atlas/data/snapshots/{service_id}"
    command_topic: str = "atlas/control/{service_id}/commands"
    status_topic: str = "atlas/control/{service_id}/status"

    def __post_init__(self):
        """Validate MQTT configuration."""
        if not self.broker:
            raise ValueError("MQTT broker cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ValueError(
                f"MQTT port must be in [1, 65535], got {self.port}"
            )

        if self.qos not in {0, 1, 2}:
            raise ValueError(
                f"MQTT QoS must be 0, 1, or 2, got {self.qos}"
            )

    def topics_for(self, service_id: str) -> dict:
        """Topic templates with {service_id} filled in."""
        return {
            'zone_events': self.zone_event_topic.format(service_id=service_id),
            'snapshots': self.snapshot_topic.format(service_id=service_id),
            'commands': self.command_topic.format(service_id=service_id),
            'status': self.status_topic.format(service_id=service_id),
        }


@dataclass(frozen=True)
class ServiceConfig:
    """
    Main configuration for ZoneEditorService.

    Immutable after construction (frozen dataclass).
    """

    service_id: str
    user_role: UserRole = UserRole.ZONE_OWNER
    editor_config: EditorConfig = field(default_factory=EditorConfig)
    mqtt_config: MQTTConfig = field(default_factory=MQTTConfig)

    def __post_init__(self):
        """Validate service configuration."""
        if not self.service_id:
            raise ValueError("service_id cannot be empty")
        if not isinstance(self.user_role, UserRole):
            raise ValueError(f"user_role must be a UserRole, got {self.user_role!r}")

    @property
    def topics(self) -> dict:
        return self.mqtt_config.topics_for(self.service_id)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "ServiceConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            service_id: "zone_editor_1"
            user_role: "ZONE_OWNER"

            editor_config:
              min_zone_area: 1000
              rate_usd_per_sqm_month: 0.0025
              duration_tiers: [1, 3, 12]
              radius_range: [4, 500]

            mqtt_config:
              broker: "localhost"
              port: 1883
              username: null
              password: null
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "ServiceConfig":
        if "service_id" not in data:
            raise ValueError("service_id is required")

        return cls(
            service_id=str(data["service_id"]),
            user_role=UserRole(data.get("user_role", UserRole.ZONE_OWNER.value)),
            editor_config=EditorConfig.from_dict(data.get("editor_config") or {}),
            mqtt_config=MQTTConfig(**(data.get("mqtt_config") or {})),
        )
