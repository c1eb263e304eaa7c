"""
Editor States
=============

Owner-facing editor state machine values.

    Idle ──arm_drawing──▶ Drawing(shape) ──place_zone──▶ Idle
      │                       │
      └──────select(id)──────┴──▶ Editing(session) ──delete/clear──▶ Idle

Design:
- Idle / Drawing / Editing are distinct types (tagged union)
- EditingSession is the only mutable piece: a working copy of one zone
- The session holds the zone id plus the external version it was cloned
  from (origin), never a long-lived reference into the collection
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Union

from atlas_zone.geometry.geomath import area_of
from atlas_zone.geometry.shapes import ZoneShape
from atlas_zone.model import AdZone


class EditorMode(str, Enum):
    """Coarse editor state (for status reporting)."""
    IDLE = "idle"
    DRAWING = "drawing"
    EDITING = "editing"


@dataclass
class EditingSession:
    """
    Working copy of the selected zone.

    Attributes:
        zone_id: Id of the selected zone
        working: Live edited copy (what the owner sees)
        origin: External version the working copy was cloned from
        area_sqm: Cached area of `working`, refreshed on geometry edits
        renaming: True while the inline name editor is open
        pending_name: Name text shown in the inline editor
    """

    zone_id: str
    working: AdZone
    origin: AdZone
    area_sqm: int
    renaming: bool = False
    pending_name: str = ""

    @classmethod
    def open(cls, zone: AdZone) -> "EditingSession":
        """Start a fresh session cloned from `zone`."""
        return cls(
            zone_id=zone.id,
            working=zone,
            origin=zone,
            area_sqm=area_of(zone),
            pending_name=zone.name
        )

    def rebase(self, zone: AdZone) -> None:
        """Re-clone from an externally changed version of the zone."""
        self.working = zone
        self.origin = zone
        self.area_sqm = area_of(zone)
        if not self.renaming:
            self.pending_name = zone.name


@dataclass(frozen=True)
class Idle:
    mode: ClassVar[EditorMode] = EditorMode.IDLE

    def to_dict(self) -> Dict[str, Any]:
        return {'mode': self.mode.value}


@dataclass(frozen=True)
class Drawing:
    """Shape tool armed, waiting for a map click."""

    shape: ZoneShape
    mode: ClassVar[EditorMode] = EditorMode.DRAWING

    def to_dict(self) -> Dict[str, Any]:
        return {'mode': self.mode.value, 'shape': self.shape.value}


@dataclass(frozen=True)
class Editing:
    """A zone is selected; its session is live."""

    session: EditingSession
    mode: ClassVar[EditorMode] = EditorMode.EDITING

    @property
    def zone_id(self) -> str:
        return self.session.zone_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.mode.value,
            'zone_id': self.session.zone_id,
            'area_sqm': self.session.area_sqm,
            'renaming': self.session.renaming,
        }


EditorState = Union[Idle, Drawing, Editing]

IDLE = Idle()
