"""
Structured JSON Logger
=====================

Bounded Context: Observability Infrastructure

Design:
- One JSON object per line (log aggregator friendly)
- Thread-safe (standard logging module underneath)
- Typed events (LogEvent) plus free-form metadata (zone_id, topic, ...)

Example:
    >>> logger = StructuredLogger(component="zone_publisher")
    >>> logger.info(
    ...     event=LogEvent.PAYMENT_INITIATED,
    ...     message="Payment initiated",
    ...     metadata={'zone_id': 'a1b2', 'months': 3, 'total_usd': '9.43'}
    ... )

Output:
    {"timestamp": "2026-03-02T10:15:00.123456+00:00", "level": "INFO",
     "component": "zone_publisher", "event": "payment.initiated",
     "message": "Payment initiated",
     "metadata": {"zone_id": "a1b2", "months": 3, "total_usd": "9.43"}}
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from .events import LogEvent


class StructuredLogger:
    """
    JSON structured logger.

    Attributes:
        component: Component name (e.g., "zone_publisher", "snapshot_subscriber")
        logger: Underlying Python logger instance
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None
    ):
        """
        Args:
            component: Component identifier
            level: Logging level (default: INFO)
            logger_name: Custom logger name (default: atlas_mqtt.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"atlas_mqtt.{component}"
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
            'component': self.component,
            'event': event.value,
            'message': message,
        }
        if metadata:
            entry['metadata'] = metadata
        if exc_info is not None:
            entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info)
            }

        # default=str keeps Decimal / enum metadata printable
        self.logger.log(level, json.dumps(entry, default=str))

    def debug(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, event, message, metadata)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, event, message, metadata)

    def warning(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log ERROR level message.

        Example:
            >>> try:
            ...     ZoneEventMessage.from_dict(json.loads(raw))
            ... except ValueError as e:
            ...     logger.error(
            ...         event=LogEvent.DESERIALIZATION_ERROR,
            ...         message="Bad zone event",
            ...         exc_info=e,
            ...         metadata={'topic': topic}
            ...     )
        """
        self._log(logging.ERROR, event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """Pass-through formatter: StructuredLogger already emits JSON."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(component: str, level: int = logging.INFO) -> StructuredLogger:
    """Factory function to create a configured StructuredLogger."""
    return StructuredLogger(component=component, level=level)
