"""
Zone Editor Module
==================

Owner-facing lifecycle for zones: drawing, selection, live editing, activation
handoff and deletion.

Design:
- Single selection: at most one EditingSession
- Arena + id: the editor keeps the selected id and re-resolves it against the
  external collection before every read and operation
- Optimistic edits: applied to the session and emitted to the sink at once
- Role gated: operations a role may not use are no-ops (logged), never errors
- Synchronous, no locking (callers serialize access)

Usage:
    store = ZoneStore()
    editor = ZoneEditor(zones=store, sink=FanOutSink(store, publisher))

    editor.arm_drawing(ZoneShape.CIRCLE)
    zone = editor.place_zone(GeoPoint(lat=25.2, lng=55.27))
    editor.select(zone.id)
    editor.resize("radius", 120)
    editor.request_activation(3)   # -> PriceQuote, emits payment initiation
"""

import logging
from typing import Any, Dict, FrozenSet, List, Optional, Protocol

from atlas_zone.config import EditorConfig
from atlas_zone.editor.states import (
    IDLE,
    Drawing,
    Editing,
    EditingSession,
    EditorMode,
    EditorState,
)
from atlas_zone.errors import (
    BelowMinimumArea,
    StaleSelection,
    ZoneError,
)
from atlas_zone.events import ZoneEventSink
from atlas_zone.geometry.geomath import area_of
from atlas_zone.geometry.shapes import GeoPoint, ZoneShape
from atlas_zone.model import (
    DIMENSION_FIELDS,
    AdZone,
    apply_field_update,
    is_viable_area,
    new_zone,
)
from atlas_zone.pricing import PriceQuote, PricingEngine, TierQuote
from atlas_zone.roles import OWNER_ROLES, UserRole

logger = logging.getLogger(__name__)


class ZoneCollection(Protocol):
    """Anything that resolves zone ids (ZoneStore, a plain dict, ...)."""

    def get(self, zone_id: str) -> Optional[AdZone]:
        ...


class ZoneEditor:
    """
    State machine over Idle / Drawing(shape) / Editing(session).

    Attributes:
        role: User role driving this editor
        config: Editor constants (clamps, minimum area, defaults)
        pricing: Quote calculator
    """

    def __init__(
        self,
        zones: ZoneCollection,
        sink: ZoneEventSink,
        role: UserRole = UserRole.ZONE_OWNER,
        config: Optional[EditorConfig] = None,
        pricing: Optional[PricingEngine] = None
    ):
        """
        Initialize editor in Idle.

        Args:
            zones: External zone collection (read on every call)
            sink: Receives add/update/delete/payment signals
            role: User role (gates owner-only operations)
            config: Editor configuration (defaults to system constants)
            pricing: Pricing engine (defaults to one built from config)
        """
        self._zones = zones
        self._sink = sink
        self.role = UserRole(role)
        self.config = config or EditorConfig()
        self.pricing = pricing or PricingEngine.from_config(self.config)
        self._state: EditorState = IDLE

    # ===== Reads (always re-resolved) =====

    @property
    def state(self) -> EditorState:
        self._refresh()
        return self._state

    @property
    def mode(self) -> EditorMode:
        return self.state.mode

    @property
    def session(self) -> Optional[EditingSession]:
        state = self.state
        return state.session if isinstance(state, Editing) else None

    def selected_zone(self) -> Optional[AdZone]:
        """Live working copy of the selected zone."""
        session = self.session
        return session.working if session else None

    @property
    def current_area(self) -> Optional[int]:
        session = self.session
        return session.area_sqm if session else None

    def can_activate(self) -> bool:
        """True when the selected zone is large enough to be offered for payment."""
        session = self.session
        return session is not None and is_viable_area(
            session.area_sqm, self.config.min_zone_area
        )

    def quotes(self) -> List[TierQuote]:
        """Tier quotes for the selected zone (disabled below the minimum area)."""
        session = self.session
        if session is None:
            return []
        return self.pricing.quote_tiers(session.area_sqm, self.config.min_zone_area)

    def status(self) -> Dict[str, Any]:
        """JSON-ready description of the current state."""
        result = self.state.to_dict()
        result['role'] = self.role.value
        if isinstance(self._state, Editing):
            result['viable'] = self.can_activate()
        return result

    # ===== Transitions =====

    def arm_drawing(self, shape: ZoneShape) -> EditorState:
        """
        Arm or disarm a shape tool (radio-style toggle).

        Same shape twice returns to Idle; another shape switches the tool.
        Arming while editing closes the session.
        """
        if not self._allowed(OWNER_ROLES, "arm_drawing"):
            return self.state

        shape = ZoneShape(shape)
        current = self.state
        if isinstance(current, Drawing) and current.shape == shape:
            self._state = IDLE
            logger.debug(f"Drawing disarmed ({shape.value})")
        else:
            self._state = Drawing(shape)
            logger.debug(f"Drawing armed ({shape.value})")
        return self._state

    def place_zone(self, point: GeoPoint, name: Optional[str] = None) -> Optional[AdZone]:
        """
        Drop a default-sized zone of the armed shape at `point`.

        Returns:
            The new zone, or None when not drawing / not permitted
        """
        if not self._allowed(OWNER_ROLES, "place_zone"):
            return None

        current = self.state
        if not isinstance(current, Drawing):
            logger.warning("place_zone ignored: no shape armed")
            return None

        zone = new_zone(point, current.shape, self.config, name=name)
        self._state = IDLE
        self._sink.on_add_zone(zone)
        logger.info(f"Zone placed: {zone.id} ({zone.shape.value}, {area_of(zone)} m²)")
        return zone

    def handle_map_click(self, point: GeoPoint) -> Optional[AdZone]:
        """
        Route a click on empty map space.

        REGULAR users relocate their own position (handled outside the core);
        an owner with a shape armed places a zone; anyone else clears the
        selection.
        """
        if self.role == UserRole.REGULAR:
            logger.debug("Map click from regular user ignored by zone editor")
            return None

        if self.role == UserRole.ZONE_OWNER and isinstance(self.state, Drawing):
            return self.place_zone(point)

        self.select(None)
        return None

    def select(self, zone_id: Optional[str]) -> EditorState:
        """
        Select a zone (fresh session) or clear the selection with None.

        Unknown ids clear the selection.
        """
        if zone_id is None:
            self._state = IDLE
            return self._state

        zone = self._zones.get(zone_id)
        if zone is None:
            logger.info(str(StaleSelection(zone_id)))
            self._state = IDLE
            return self._state

        self._state = Editing(EditingSession.open(zone))
        logger.debug(f"Zone selected: {zone_id}")
        return self._state

    def clear(self) -> EditorState:
        """Back to Idle from anywhere (nothing in flight to cancel)."""
        self._state = IDLE
        return self._state

    def rename_start(self) -> bool:
        session = self._owner_session("rename_start")
        if session is None:
            return False
        session.renaming = True
        session.pending_name = session.working.name
        return True

    def rename_commit(self, text: Optional[str] = None) -> bool:
        """
        Apply the pending name and close the inline editor.

        Empty names are accepted.

        Args:
            text: New name (defaults to the pending name)
        """
        session = self._owner_session("rename_commit")
        if session is None or not session.renaming:
            return False

        name = session.pending_name if text is None else text
        session.renaming = False
        self._apply(session, "name", name)
        return True

    def rename_cancel(self) -> bool:
        session = self._owner_session("rename_cancel")
        if session is None or not session.renaming:
            return False
        session.renaming = False
        session.pending_name = session.working.name
        return True

    def resize(self, field: str, value: float) -> bool:
        """
        Set a dimension, clamped to the editor range for that field.

        Called at drag/slider frequency; does constant work besides the
        collection lookup.

        Args:
            field: radius (circles) or width/height (rectangles)
            value: Requested size in meters

        Returns:
            True if applied; False if refused (prior value kept)
        """
        session = self._owner_session("resize")
        if session is None:
            return False

        clamp = self.config.clamps.get(field)
        if clamp is None:
            logger.warning(f"resize ignored: '{field}' is not a dimension")
            return False

        try:
            low, high = clamp
            clamped = min(max(float(value), low), high)
        except (TypeError, ValueError):
            logger.warning(f"resize ignored: {field}={value!r} is not a number")
            return False

        return self._apply(session, field, clamped)

    def move(self, point: GeoPoint) -> bool:
        """Re-center the selected zone."""
        session = self._owner_session("move")
        if session is None:
            return False
        return self._apply(session, "center", point)

    def request_activation(self, months: int) -> Optional[PriceQuote]:
        """
        Quote the selected zone for `months` and hand off to payment.

        Unreachable below the minimum viable area: no event, returns None.
        Does not flip is_active (the payment collaborator does, on confirmation).
        """
        session = self._owner_session("request_activation")
        if session is None:
            return None

        if not is_viable_area(session.area_sqm, self.config.min_zone_area):
            logger.info(str(BelowMinimumArea(session.area_sqm, self.config.min_zone_area)))
            return None

        if not self.pricing.offers(months):
            logger.warning(f"request_activation ignored: {months} months is not an offered tier")
            return None

        price = self.pricing.quote(session.area_sqm, months)
        self._sink.on_initiate_payment(session.working, months, price.total_usd)
        logger.info(
            f"Payment initiated: zone={session.zone_id} months={months} total=${price.total_usd}"
        )
        return price

    def delete_zone(self) -> bool:
        """Delete the selected zone and return to Idle (no confirmation step)."""
        session = self._owner_session("delete_zone")
        if session is None:
            return False

        zone_id = session.zone_id
        self._state = IDLE
        self._sink.on_delete_zone(zone_id)
        logger.info(f"Zone deleted: {zone_id}")
        return True

    # ===== Internals =====

    def _refresh(self) -> None:
        """Re-derive the session from the latest external state."""
        if not isinstance(self._state, Editing):
            return

        session = self._state.session
        external = self._zones.get(session.zone_id)
        if external is None:
            logger.info(str(StaleSelection(session.zone_id)))
            self._state = IDLE
        elif external != session.origin:
            session.rebase(external)

    def _allowed(self, roles: FrozenSet[UserRole], action: str) -> bool:
        if self.role in roles:
            return True
        logger.warning(f"{action} not available for role {self.role.value}")
        return False

    def _owner_session(self, action: str) -> Optional[EditingSession]:
        if not self._allowed(OWNER_ROLES, action):
            return None
        session = self.session
        if session is None:
            logger.warning(f"{action} ignored: no zone selected")
        return session

    def _apply(self, session: EditingSession, field: str, value: Any) -> bool:
        try:
            updated = apply_field_update(session.working, field, value)
        except (ZoneError, ValueError, TypeError) as e:
            logger.warning(f"Update refused for zone {session.zone_id}: {e}")
            return False

        session.working = updated
        if field in DIMENSION_FIELDS:
            session.area_sqm = area_of(updated)
        if field == "name":
            session.pending_name = updated.name

        self._sink.on_update_zone(updated)
        return True
