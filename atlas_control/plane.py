"""
MQTTControlPlane - MQTT Control Plane for the zone editor service

Bounded Context: MQTT connection management + command reception
Responsibilities:
  - MQTT connection lifecycle (connect, disconnect)
  - Command message reception (subscribe to command topic)
  - Status publishing (publish to status topic)
  - Command delegation to CommandRegistry, result/error reporting

QoS Policy:
  - Commands: QoS 1 (at-least-once delivery)
  - Status: QoS 1 + retained (last status persisted)

Status values:
  - connected / disconnected: lifecycle
  - <handler-specific>: published by the command handlers themselves
  - rejected: unknown command or role not permitted
  - error: handler raised; data = {"command", "error"}

Threading:
  - MQTT client runs own background thread (loop_start/loop_stop)
  - Command handlers run in MQTT thread (keep them fast!)
"""

import json
import logging
from datetime import datetime, timezone
from threading import Event
from typing import Any, Dict, Optional

import paho.mqtt.client as mqtt

from atlas_zone.errors import ZoneError
from atlas_zone.roles import UserRole

from .registry import (
    CommandNotAvailableError,
    CommandNotPermittedError,
    CommandRegistry,
)

logger = logging.getLogger(__name__)


class MQTTControlPlane:
    """
    MQTT Control Plane for receiving commands and publishing status.

    Example:
        control_plane = MQTTControlPlane(
            broker_host="localhost",
            broker_port=1883,
            command_topic="atlas/control/zone_editor_1/commands",
            status_topic="atlas/control/zone_editor_1/status",
            client_id="zone_editor_1_control",
            role=UserRole.ZONE_OWNER
        )
        control_plane.command_registry.register('get_state', service.get_state, "State")
        control_plane.connect(timeout=5.0)
    """

    def __init__(
        self,
        broker_host: str,
        broker_port: int,
        command_topic: str,
        status_topic: str,
        client_id: str,
        role: Optional[UserRole] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        """
        Args:
            broker_host: MQTT broker hostname
            broker_port: MQTT broker port (typically 1883)
            command_topic: Topic for receiving commands (subscribe)
            status_topic: Topic for publishing status (publish)
            client_id: MQTT client identifier
            role: Role commands are executed as (None: no gating)
            username: Optional MQTT authentication username
            password: Optional MQTT authentication password
        """
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.command_topic = command_topic
        self.status_topic = status_topic
        self.client_id = client_id
        self.role = UserRole(role) if role is not None else None

        self.client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=client_id,
            protocol=mqtt.MQTTv311
        )
        self.client.on_connect = self._on_connect
        self.client.on_message = self._on_message
        self.client.on_disconnect = self._on_disconnect

        if username and password:
            self.client.username_pw_set(username, password)

        self._connected = Event()
        self._running = False

        self.command_registry = CommandRegistry()

    def connect(self, timeout: float = 5.0) -> bool:
        """
        Connect to MQTT broker with timeout.

        Returns:
            True if connected successfully, False otherwise
        """
        try:
            logger.info(f"🔌 Connecting to MQTT broker: {self.broker_host}:{self.broker_port}")
            self.client.connect(self.broker_host, self.broker_port, keepalive=60)
            self.client.loop_start()
            self._running = True
        except (OSError, ValueError) as e:
            logger.error(f"❌ Error connecting to MQTT: {e}")
            return False

        if self._connected.wait(timeout=timeout):
            logger.info("✅ MQTT Control Plane connected")
            return True

        logger.error(f"❌ Connection timeout after {timeout}s")
        return False

    def disconnect(self) -> None:
        """Disconnect from MQTT broker (safe to call multiple times)."""
        if self._running:
            logger.info("🔌 Disconnecting from MQTT broker")
            self.publish_status("disconnected")
            self.client.loop_stop()
            self.client.disconnect()
            self._running = False
            self._connected.clear()
            logger.info("✅ MQTT Control Plane disconnected")

    def publish_status(self, status: str, data: Optional[Dict[str, Any]] = None) -> bool:
        """
        Publish status update to status topic (QoS 1, retained).

        Args:
            status: Status string (connected, ok, rejected, error, ...)
            data: Optional JSON-ready payload

        Returns:
            True if handed to the client, False otherwise
        """
        message: Dict[str, Any] = {
            "status": status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "client_id": self.client_id,
        }
        if data is not None:
            message["data"] = data

        try:
            payload = json.dumps(message)
        except (TypeError, ValueError) as e:
            logger.error(f"❌ Status not serializable: {e}")
            return False

        result = self.client.publish(self.status_topic, payload, qos=1, retain=True)
        if result.rc != mqtt.MQTT_ERR_SUCCESS:
            logger.warning(f"⚠️ Status publish failed (rc={result.rc})")
            return False

        logger.debug(f"📤 Status published: {status}")
        return True

    def handle_command(self, command_data: Dict[str, Any]) -> Optional[str]:
        """
        Execute one decoded command; failures are reported on the status topic.

        Returns:
            "ok", "rejected", "error", or None for empty input
        """
        command = str(command_data.get('command', '')).lower()
        if not command:
            logger.warning("⚠️ Empty command received")
            return None

        logger.info(f"🎯 Executing command: {command}")
        try:
            result = self.command_registry.execute(command, command_data, role=self.role)
        except CommandNotAvailableError as e:
            logger.warning(f"⚠️ {e}")
            self.publish_status("rejected", {"command": command, "error": str(e)})
            return "rejected"
        except CommandNotPermittedError as e:
            logger.warning(f"⚠️ {e}")
            available = sorted(self.command_registry.available_for(e.role))
            self.publish_status(
                "rejected",
                {"command": command, "error": str(e), "available": available}
            )
            return "rejected"
        except (ZoneError, ValueError, KeyError, TypeError) as e:
            logger.error(f"❌ Command '{command}' failed: {e}")
            self.publish_status("error", {"command": command, "error": str(e)})
            return "error"

        logger.debug(f"✅ Command '{command}' executed successfully: {result}")
        return "ok"

    # ===== MQTT Callbacks (run in MQTT thread) =====

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        if reason_code.is_failure:
            logger.error(f"❌ Connection failed ({reason_code})")
            self._connected.clear()
            return

        logger.info(f"✅ Connected to broker ({reason_code})")
        client.subscribe(self.command_topic, qos=1)
        logger.info(f"📥 Subscribed to: {self.command_topic} (QoS 1)")
        self.publish_status("connected")
        self._connected.set()

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties):
        if reason_code.is_failure:
            logger.warning(f"⚠️ Unexpected disconnection ({reason_code})")
        else:
            logger.info("✅ Disconnected from broker")
        self._connected.clear()

    def _on_message(self, client, userdata, msg):
        try:
            command_data = json.loads(msg.payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"❌ Error decoding JSON: {msg.payload!r} ({e})")
            return

        if not isinstance(command_data, dict):
            logger.warning(f"⚠️ Command payload must be a JSON object, got {type(command_data).__name__}")
            return

        self.handle_command(command_data)
