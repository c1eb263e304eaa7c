"""
Atlas CLI - Command-line interface for the zone editor service.

Sends MQTT commands without hand-writing JSON.

Usage:
    atlas-cli arm circle
    atlas-cli click 25.2048 55.2708
    atlas-cli resize radius 120
    atlas-cli activate 3
"""

__version__ = "1.0.0"
