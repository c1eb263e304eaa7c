#!/usr/bin/env python3
"""
Zone Editor Service - Entry Point
=================================

Starts the Atlas zone editor service, which:
- Hosts one ZoneEditor / CampaignGate session for the configured role
- Receives editor and campaign commands via the MQTT control plane
- Publishes zone lifecycle, payment and campaign signals to MQTT
- Applies zone snapshots from the backing store

Usage:
    python run_zone_editor.py --config config/atlas_service/service_config.yaml

Lifecycle:
    1. Load configuration from YAML
    2. Setup logging (console + file)
    3. Create control plane, publisher and snapshot subscriber
    4. Create and setup ZoneEditorService
    5. Start service (non-blocking)
    6. Wait for stop signal (Ctrl+C or SIGTERM)
    7. Graceful shutdown

Logs:
    - Console: INFO level
    - File: logs/zone_editor.log (INFO level)
"""

import argparse
import signal
import sys
import logging
from pathlib import Path
from typing import Optional

from atlas_control import MQTTControlPlane
from atlas_mqtt import ZoneEventPublisher, ZoneSubscriber, create_logger
from atlas_service import ServiceConfig, ZoneEditorService


# ─────────────────────────────────────────────────────────────────────────────
# Logging Setup
# ─────────────────────────────────────────────────────────────────────────────

def setup_logging(log_file: Optional[Path] = None) -> logging.Logger:
    """Console logging, plus a file handler when `log_file` is given."""
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            *([logging.FileHandler(log_file)] if log_file else [])
        ]
    )
    return logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Main Service
# ─────────────────────────────────────────────────────────────────────────────

class ZoneEditorApp:
    """
    Application wrapper for ZoneEditorService.

    Handles configuration loading, component wiring, signal handling and
    graceful shutdown.
    """

    def __init__(self, config_path: Path, log_file: Optional[Path] = None):
        self.config_path = config_path
        self.logger = setup_logging(log_file)

        self.config: Optional[ServiceConfig] = None
        self.service: Optional[ZoneEditorService] = None
        self._shutdown_requested = False

    def setup(self):
        self.logger.info("=" * 80)
        self.logger.info("🚀 Atlas Zone Editor - Starting")
        self.logger.info("=" * 80)

        self.logger.info(f"📄 Loading configuration: {self.config_path}")
        self.config = ServiceConfig.from_yaml(self.config_path)
        service_id = self.config.service_id
        mqtt_config = self.config.mqtt_config
        topics = self.config.topics
        self.logger.info(
            f"✅ Configuration loaded (service_id={service_id}, role={self.config.user_role.value})"
        )

        control_plane = MQTTControlPlane(
            broker_host=mqtt_config.broker,
            broker_port=mqtt_config.port,
            command_topic=topics['commands'],
            status_topic=topics['status'],
            client_id=f"zone_editor_{service_id}_control",
            role=self.config.user_role,
            username=mqtt_config.username,
            password=mqtt_config.password,
        )

        zone_publisher = ZoneEventPublisher(
            broker_host=mqtt_config.broker,
            broker_port=mqtt_config.port,
            topic=topics['zone_events'],
            logger=create_logger(component="zone_publisher"),
            client_id=f"zone_editor_{service_id}_events",
            username=mqtt_config.username,
            password=mqtt_config.password,
            qos=mqtt_config.qos,
        )

        self.service = ZoneEditorService(
            config=self.config,
            control_plane=control_plane,
            zone_publisher=zone_publisher,
        )
        self.service.snapshot_subscriber = ZoneSubscriber(
            broker_host=mqtt_config.broker,
            broker_port=mqtt_config.port,
            snapshot_topic=topics['snapshots'],
            on_snapshot=self.service.on_snapshot,
            logger=create_logger(component="snapshot_subscriber"),
            client_id=f"zone_editor_{service_id}_snapshots",
            username=mqtt_config.username,
            password=mqtt_config.password,
            qos=mqtt_config.qos,
        )

        for name, topic in topics.items():
            self.logger.info(f"  - {name}: {topic}")

        self.service.setup()
        self.logger.info("=" * 80)

    def run(self):
        """Run the service; blocks until shutdown is requested."""
        if not self.service:
            raise RuntimeError("Service not initialized. Call setup() first.")

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        try:
            self.service.start()
            self.logger.info("✅ Service started successfully")
            self.logger.info("Press Ctrl+C to stop")
            self.service.wait()
        except RuntimeError as e:
            self.logger.error(f"❌ Service error: {e}", exc_info=True)
            self.shutdown()
            sys.exit(1)

    def shutdown(self):
        if self._shutdown_requested:
            self.logger.warning("⚠️  Shutdown already in progress")
            return
        self._shutdown_requested = True

        self.logger.info("🛑 Shutting down zone editor service")
        if self.service:
            self.service.stop()
        self.logger.info("✅ Shutdown complete")

    def _signal_handler(self, signum, frame):
        signal_name = signal.Signals(signum).name
        self.logger.info(f"⚠️  Received signal {signal_name} ({signum})")
        self.shutdown()
        sys.exit(0)


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def parse_args():
    parser = argparse.ArgumentParser(
        description="Atlas Zone Editor - ad zone editing over MQTT",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_zone_editor.py --config config/atlas_service/service_config.yaml
  python run_zone_editor.py --config config/atlas_service/service_config.yaml --no-log-file
        """
    )
    parser.add_argument('--config', type=Path, required=True,
                        help='Path to service configuration YAML file')
    parser.add_argument('--log-file', type=Path, default=Path('logs/zone_editor.log'),
                        help='Path to log file (default: logs/zone_editor.log)')
    parser.add_argument('--no-log-file', action='store_true',
                        help='Disable file logging (console only)')
    return parser.parse_args()


def main():
    args = parse_args()

    if not args.config.exists():
        print(f"❌ Error: Configuration file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    app = ZoneEditorApp(
        config_path=args.config,
        log_file=None if args.no_log_file else args.log_file
    )

    try:
        app.setup()
    except (OSError, ValueError) as e:
        print(f"❌ Fatal error: {e}", file=sys.stderr)
        sys.exit(1)
    app.run()


if __name__ == '__main__':
    main()
