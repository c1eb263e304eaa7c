"""
MQTT client wrapper for sending commands to the zone editor service.

Handles MQTT connection, publishing, optional status read-back and
disconnection.
"""

import json
import threading
from typing import Dict, Any, Optional

import paho.mqtt.client as mqtt


class MQTTCommandClient:
    """
    MQTT client for sending commands to the zone editor service.

    Publishes commands to the control plane topic with QoS 1. When a status
    topic is given, waits for the next status message and returns it.
    """

    def __init__(
        self,
        broker: str = "localhost",
        port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None
    ):
        self.broker = broker
        self.port = port

        self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)
        if username and password:
            self.client.username_pw_set(username, password)

        self._reply: Optional[Dict[str, Any]] = None
        self._replied = threading.Event()
        self._subscribed = threading.Event()

    def _on_subscribe(self, client, userdata, mid, reason_code_list, properties):
        self._subscribed.set()

    def _on_message(self, client, userdata, msg):
        try:
            status = json.loads(msg.payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return
        # Skip the retained status that predates this command
        if msg.retain:
            return
        self._reply = status
        self._replied.set()

    def send_command(
        self,
        topic: str,
        command: Dict[str, Any],
        status_topic: Optional[str] = None,
        qos: int = 1,
        timeout: float = 5.0
    ) -> Optional[Dict[str, Any]]:
        """
        Send command to MQTT topic.

        Args:
            topic: Command topic (e.g., "atlas/control/zone_editor_1/commands")
            command: Command dictionary (JSON serialized)
            status_topic: If set, wait for the service's status reply
            qos: Quality of Service (default: 1 for control commands)
            timeout: Seconds to wait for the status reply

        Returns:
            Status message, or None when not waiting / no reply in time

        Raises:
            ConnectionError: If unable to connect to MQTT broker
            ValueError: If command is not JSON serializable
        """
        try:
            payload = json.dumps(command)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid command data: {e}")

        try:
            self.client.connect(self.broker, self.port, keepalive=60)
        except OSError as e:
            raise ConnectionError(
                f"Unable to connect to MQTT broker at {self.broker}:{self.port}. "
                f"Is mosquitto running? ({e})"
            )

        self.client.loop_start()
        try:
            if status_topic:
                self.client.on_subscribe = self._on_subscribe
                self.client.on_message = self._on_message
                self.client.subscribe(status_topic, qos=1)
                self._subscribed.wait(timeout=timeout)

            result = self.client.publish(topic, payload, qos=qos)
            result.wait_for_publish(timeout=timeout)

            if status_topic and self._replied.wait(timeout=timeout):
                return self._reply
            return None
        finally:
            self.client.loop_stop()
            self.client.disconnect()
