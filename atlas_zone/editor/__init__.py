"""
Editor Layer
============

Bounded Context: Owner-facing zone editing.

Responsibilities:
- Drawing tool arming and zone placement
- Single selection with a live working copy
- Clamped resizing, renaming, re-centering
- Activation gating (minimum viable area) and payment handoff
- Deletion

Design Philosophy:
- Stateful but encapsulated (one ZoneEditor per owner session)
- Holds ids, never long-lived zone references
- Side effects go out through a ZoneEventSink
"""

from atlas_zone.editor.states import (
    EditorMode,
    EditorState,
    EditingSession,
    Idle,
    Drawing,
    Editing,
)
from atlas_zone.editor.editor import ZoneEditor, ZoneCollection

__all__ = [
    "EditorMode",
    "EditorState",
    "EditingSession",
    "Idle",
    "Drawing",
    "Editing",
    "ZoneEditor",
    "ZoneCollection",
]
