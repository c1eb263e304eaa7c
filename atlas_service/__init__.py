"""
atlas_service - Zone editor service

Hosts one ZoneEditor/CampaignGate session behind an MQTT control plane.
"""

from .config import MQTTConfig, ServiceConfig
from .service import ZoneEditorService

__all__ = [
    "MQTTConfig",
    "ServiceConfig",
    "ZoneEditorService",
]
