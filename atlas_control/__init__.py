"""
atlas_control - Control Plane for the zone editor service

Bounded Context: MQTT-based command-and-control
Responsibilities:
  - MQTT connection management (Control Plane)
  - Command registration, role gating and validation
  - Command execution delegation and result reporting

Architecture:
  - CommandRegistry: Explicit registration, one role set per command
  - MQTTControlPlane: MQTT client + command reception + status topic
  - QoS 1 for control commands (at-least-once delivery)
"""

from .registry import (
    CommandRegistry,
    CommandNotAvailableError,
    CommandNotPermittedError,
)
from .plane import MQTTControlPlane


def command_topic(service_id: str) -> str:
    return f"atlas/control/{service_id}/commands"


def status_topic(service_id: str) -> str:
    return f"atlas/control/{service_id}/status"


__all__ = [
    "CommandRegistry",
    "CommandNotAvailableError",
    "CommandNotPermittedError",
    "MQTTControlPlane",
    "command_topic",
    "status_topic",
]
