"""
Structured Logging for Atlas MQTT
=================================

Bounded Context: Observability

JSON-structured logging for the zone service.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from atlas_mqtt.logging import StructuredLogger, LogEvent
    >>> logger = StructuredLogger(component="zone_publisher")
    >>> logger.info(
    ...     event=LogEvent.ZONE_ADDED,
    ...     message="Zone placed",
    ...     metadata={'zone_id': 'a1b2', 'shape': 'circle'}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, JSONFormatter, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'JSONFormatter',
    'create_logger',
]
