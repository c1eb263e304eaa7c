"""
Atlas CLI - Main entry point.

Command-line interface for sending MQTT commands to the zone editor service.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from atlas_control import command_topic, status_topic

from .mqtt_client import MQTTCommandClient


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load a YAML command file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If YAML is invalid
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atlas-cli",
        description="Atlas CLI - Send MQTT commands to the zone editor service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  atlas-cli arm circle
  atlas-cli click 25.2048 55.2708
  atlas-cli select 3f2a9c...
  atlas-cli resize radius 120
  atlas-cli rename "Marina Walk"
  atlas-cli quotes
  atlas-cli activate 3
  atlas-cli confirm-payment 3f2a9c...
  atlas-cli describe 3f2a9c...
  atlas-cli send config/commands/place_zone.yaml
"""
    )

    parser.add_argument("--service-id", default="zone_editor_1",
                        help="Target service ID (default: zone_editor_1)")
    parser.add_argument("--broker", default="localhost",
                        help="MQTT broker host (default: localhost)")
    parser.add_argument("--port", type=int, default=1883,
                        help="MQTT broker port (default: 1883)")
    parser.add_argument("--no-wait", action="store_true",
                        help="Do not wait for the service's status reply")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    arm = sub.add_parser("arm", help="Arm/disarm a shape tool")
    arm.add_argument("shape", choices=["circle", "rectangle"])

    for name, help_text in (("click", "Click on the map"), ("place", "Place a zone"),
                            ("move", "Re-center selected zone")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("lat", type=float)
        p.add_argument("lng", type=float)
        if name == "place":
            p.add_argument("--name", default=None)

    select = sub.add_parser("select", help="Select a zone by id")
    select.add_argument("zone_id")

    rename = sub.add_parser("rename", help="Rename selected zone (start + commit)")
    rename.add_argument("name")

    resize = sub.add_parser("resize", help="Resize selected zone")
    resize.add_argument("field", choices=["radius", "width", "height"])
    resize.add_argument("value", type=float)

    activate = sub.add_parser("activate", help="Request activation for N months")
    activate.add_argument("months", type=int)

    for name, help_text in (("describe", "Advertiser view of a zone"),
                            ("campaign", "Start a campaign on a zone"),
                            ("confirm-payment", "Mark a zone as paid")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("zone_id")

    send = sub.add_parser("send", help="Send a raw command from YAML")
    send.add_argument("config", help="Path to command YAML")

    for name, help_text in (("clear", "Clear selection"), ("quotes", "Tier quotes"),
                            ("delete", "Delete selected zone"), ("list", "List zones"),
                            ("state", "Editor state")):
        sub.add_parser(name, help=help_text)

    return parser


_SIMPLE = {
    "clear": "clear_selection",
    "quotes": "get_quotes",
    "delete": "delete_zone",
    "list": "list_zones",
    "state": "get_state",
}

_BY_ZONE = {
    "select": "select_zone",
    "describe": "describe_zone",
    "campaign": "start_campaign",
    "confirm-payment": "confirm_payment",
}

_BY_POINT = {
    "click": "map_click",
    "place": "place_zone",
    "move": "move_zone",
}


def build_commands(args: argparse.Namespace) -> List[Dict[str, Any]]:
    """
    Translate parsed arguments into command payloads (in send order).

    Raises:
        ValueError: For a YAML command file without a 'command' key
    """
    if args.command in _SIMPLE:
        return [{'command': _SIMPLE[args.command]}]
    if args.command in _BY_ZONE:
        return [{'command': _BY_ZONE[args.command], 'zone_id': args.zone_id}]
    if args.command in _BY_POINT:
        command = {'command': _BY_POINT[args.command], 'lat': args.lat, 'lng': args.lng}
        if getattr(args, "name", None):
            command['name'] = args.name
        return [command]
    if args.command == "arm":
        return [{'command': 'arm_drawing', 'shape': args.shape.upper()}]
    if args.command == "rename":
        return [
            {'command': 'rename_start'},
            {'command': 'rename_commit', 'name': args.name},
        ]
    if args.command == "resize":
        return [{'command': 'resize', 'field': args.field, 'value': args.value}]
    if args.command == "activate":
        return [{'command': 'request_activation', 'months': args.months}]
    if args.command == "send":
        command = load_yaml_config(args.config)
        if 'command' not in command:
            raise ValueError(f"{args.config} has no 'command' key")
        return [command]
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        commands = build_commands(args)
        reply_topic = None if args.no_wait else status_topic(args.service_id)
        for command in commands:
            client = MQTTCommandClient(broker=args.broker, port=args.port)
            reply = client.send_command(
                command_topic(args.service_id),
                command,
                status_topic=reply_topic
            )
            print(f"✅ Command sent: {command['command']}")
            if reply is not None:
                print(json.dumps(reply, indent=2))
    except (ConnectionError, FileNotFoundError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
