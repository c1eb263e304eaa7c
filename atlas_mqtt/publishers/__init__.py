"""
MQTT Publishers
==============

Bounded Context: Message Production

Public API
----------
    BasePublisher: Abstract publisher with connection management
    ZoneEventPublisher: Zone lifecycle / payment / campaign signals
"""

from .base import BasePublisher
from .zone_event import ZoneEventPublisher

__all__ = [
    'BasePublisher',
    'ZoneEventPublisher',
]
