"""
MQTT Subscriber
==============

Bounded Context: Message Consumption

Design:
- Callback-based (runs on paho's network thread)
- Automatic deserialization with error handling (bad messages are logged
  and dropped, the loop keeps running)
- One topic: the backing store's zone snapshots

Message Flow:
    Backing store → atlas/data/snapshots/{id} → ZoneSubscriber → on_snapshot

Example:
    >>> subscriber = ZoneSubscriber(
    ...     broker_host="localhost",
    ...     snapshot_topic="atlas/data/snapshots/zone_editor_1",
    ...     on_snapshot=lambda msg: store.replace_all(msg.to_zones()),
    ...     logger=create_logger("snapshot_subscriber")
    ... )
    >>> subscriber.connect()
    >>> subscriber.start()
"""

import json
import threading
from typing import Any, Callable, Dict, Optional
import paho.mqtt.client as mqtt

from .schemas import ZoneSnapshotMessage
from .logging import StructuredLogger, LogEvent


class ZoneSubscriber:
    """
    MQTT subscriber for zone snapshots.

    Attributes:
        snapshot_topic: Topic carrying ZoneSnapshotMessage
        on_snapshot: Callback for snapshots
    """

    def __init__(
        self,
        broker_host: str,
        snapshot_topic: str,
        on_snapshot: Callable[[ZoneSnapshotMessage], None],
        logger: StructuredLogger,
        broker_port: int = 1883,
        client_id: str = "atlas_zone_subscriber",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 1
    ):
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.snapshot_topic = snapshot_topic
        self.client_id = client_id
        self.logger = logger
        self.qos = qos

        self.on_snapshot = on_snapshot

        self.client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=client_id
        )
        if username and password:
            self.client.username_pw_set(username, password)

        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect
        self.client.on_message = self._on_message

        self._connected = threading.Event()
        self._running = False
        self._stats_lock = threading.Lock()
        self._received = {'snapshots': 0, 'rejected': 0}

    @property
    def broker(self) -> str:
        return f"{self.broker_host}:{self.broker_port}"

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message=f"Failed to connect to broker ({reason_code})",
                metadata={'broker': self.broker}
            )
            return

        self._connected.set()
        # Re-subscribe on every (re)connect
        client.subscribe(self.snapshot_topic, qos=self.qos)

        self.logger.info(
            event=LogEvent.MQTT_CONNECTED,
            message="Connected to MQTT broker and subscribed to snapshots",
            metadata={
                'broker': self.broker,
                'snapshot_topic': self.snapshot_topic
            }
        )

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties) -> None:
        self._connected.clear()
        self.logger.warning(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Disconnected from MQTT broker",
            metadata={'broker': self.broker, 'reason_code': str(reason_code)}
        )

    def _on_message(self, client, userdata, msg: mqtt.MQTTMessage) -> None:
        self.handle_payload(msg.topic, msg.payload)

    def handle_payload(self, topic: str, payload: bytes) -> bool:
        """
        Decode, validate and dispatch one raw message.

        Returns:
            True if a callback was invoked, False if the message was dropped
        """
        try:
            data = json.loads(payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            self._reject(LogEvent.DESERIALIZATION_ERROR, "Failed to decode JSON message", e, topic)
            return False

        if topic == self.snapshot_topic:
            return self._handle_snapshot(data, topic)

        self.logger.warning(
            event=LogEvent.DESERIALIZATION_ERROR,
            message=f"Received message from unknown topic: {topic}"
        )
        return False

    def _handle_snapshot(self, data: Dict[str, Any], topic: str) -> bool:
        try:
            snapshot = ZoneSnapshotMessage.from_dict(data)
        except (ValueError, AttributeError) as e:
            self._reject(LogEvent.SCHEMA_VALIDATION_ERROR, "Snapshot failed schema validation", e, topic)
            return False

        with self._stats_lock:
            self._received['snapshots'] += 1
        self.logger.info(
            event=LogEvent.SNAPSHOT_RECEIVED,
            message="Received zone snapshot",
            metadata={'zone_count': snapshot.zone_count, 'timestamp': snapshot.timestamp.value}
        )
        self.on_snapshot(snapshot)
        return True

    def _reject(self, event: LogEvent, message: str, error: Exception, topic: str) -> None:
        with self._stats_lock:
            self._received['rejected'] += 1
        self.logger.error(event=event, message=message, exc_info=error, metadata={'topic': topic})

    def connect(self, timeout: float = 10.0) -> bool:
        """
        Connect to MQTT broker (network loop started here so CONNACK arrives).

        Returns:
            True if connected within `timeout`, False otherwise
        """
        try:
            self.client.connect(self.broker_host, self.broker_port)
            self.client.loop_start()
        except (OSError, ValueError) as e:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Failed to connect to broker",
                exc_info=e,
                metadata={'broker': self.broker}
            )
            return False

        if self._connected.wait(timeout=timeout):
            return True

        self.logger.error(
            event=LogEvent.MQTT_CONNECTION_ERROR,
            message="Connection timeout",
            metadata={'broker': self.broker, 'timeout': timeout}
        )
        return False

    def start(self) -> None:
        """Mark the subscriber as listening (messages already flow after connect)."""
        if not self._connected.is_set():
            self.logger.warning(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Cannot start: not connected to broker"
            )
            return
        self._running = True

    def stop(self) -> None:
        self._running = False
        self.client.loop_stop()
        self.client.disconnect()
        self.logger.info(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Subscriber stopped",
            metadata=self.get_stats()
        )

    def is_connected(self) -> bool:
        return self._connected.is_set()

    def is_running(self) -> bool:
        return self._running

    def get_stats(self) -> Dict[str, Any]:
        with self._stats_lock:
            return {
                'snapshots_received': self._received['snapshots'],
                'rejected': self._received['rejected'],
                'connected': self._connected.is_set(),
                'running': self._running,
                'broker': self.broker
            }
