"""
Zone Editor Service - MQTT-driven host for one owner/advertiser session.

Wires the core (ZoneStore, ZoneEditor, CampaignGate) to the transport:
commands arrive on the control plane, side-effect signals leave through the
ZoneEventPublisher, and snapshots from the backing store replace the store.

Threading Model:
- Control Plane Thread (paho-mqtt internal, command handlers)
- Snapshot Subscriber Thread (paho-mqtt internal, replace_all)
- Publisher Thread (paho-mqtt internal, outgoing only)

Every command handler and snapshot application runs under one service lock,
so the editor never sees a half-applied snapshot mid-command.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from atlas_mqtt.schemas import ZoneSnapshotMessage, zone_to_dict
from atlas_service.config import ServiceConfig
from atlas_zone import (
    CampaignGate,
    FanOutSink,
    GeoPoint,
    ZoneEditor,
    ZoneShape,
    ZoneStore,
)
from atlas_zone.errors import BelowMinimumArea
from atlas_zone.geometry.geomath import area_of, areas_of, zone_bounds
from atlas_zone.model import is_viable_area
from atlas_zone.pricing import PriceQuote, PricingEngine
from atlas_zone.roles import ADVERTISER_ROLES, ALL_ROLES, OWNER_ROLES

logger = logging.getLogger(__name__)


def _point(command: Dict) -> GeoPoint:
    return GeoPoint(lat=float(command["lat"]), lng=float(command["lng"]))


class ZoneEditorService:
    """
    Zone editor service.

    Usage:
        config = ServiceConfig.from_yaml("config/atlas_service/service_config.yaml")
        control_plane = MQTTControlPlane(...)
        zone_publisher = ZoneEventPublisher(...)

        service = ZoneEditorService(config, control_plane, zone_publisher)
        service.snapshot_subscriber = ZoneSubscriber(..., on_snapshot=service.on_snapshot)

        service.setup()
        service.start()
        service.wait()  # Blocks until stopped
    """

    def __init__(
        self,
        config: ServiceConfig,
        control_plane,  # MQTTControlPlane
        zone_publisher,  # ZoneEventPublisher
        snapshot_subscriber=None,  # ZoneSubscriber
    ):
        self.config = config
        self.control_plane = control_plane
        self.zone_publisher = zone_publisher
        self.snapshot_subscriber = snapshot_subscriber

        self.store = ZoneStore()
        sink = FanOutSink(self.store, zone_publisher)
        self.editor = ZoneEditor(
            zones=self.store,
            sink=sink,
            role=config.user_role,
            config=config.editor_config,
            pricing=PricingEngine.from_config(config.editor_config),
        )
        self.gate = CampaignGate(
            sink=sink,
            role=config.user_role,
            estimated_reach=config.editor_config.estimated_reach,
        )

        # zone_id -> quote handed to the payment collaborator, awaiting confirmation
        self._pending_payments: Dict[str, PriceQuote] = {}

        self._lock = threading.RLock()
        self._running = False
        self._stop_event = threading.Event()

        logger.info(
            f"ZoneEditorService initialized for service_id={config.service_id} "
            f"(role={config.user_role.value})"
        )

    def setup(self) -> None:
        """Register command handlers. Must be called before start()."""
        self._setup_control_handlers()
        logger.info("Service setup complete")

    def _setup_control_handlers(self) -> None:
        registry = self.control_plane.command_registry
        commands = (
            # Editor (owner)
            ("arm_drawing", self._handle_arm_drawing, "Arm/disarm a shape tool", OWNER_ROLES),
            ("place_zone", self._handle_place_zone, "Drop a zone of the armed shape", OWNER_ROLES),
            ("rename_start", self._handle_rename_start, "Open inline rename", OWNER_ROLES),
            ("rename_commit", self._handle_rename_commit, "Apply pending name", OWNER_ROLES),
            ("rename_cancel", self._handle_rename_cancel, "Discard pending name", OWNER_ROLES),
            ("resize", self._handle_resize, "Resize selected zone (clamped)", OWNER_ROLES),
            ("move_zone", self._handle_move_zone, "Re-center selected zone", OWNER_ROLES),
            ("get_quotes", self._handle_get_quotes, "Tier quotes for selected zone", OWNER_ROLES),
            ("request_activation", self._handle_request_activation, "Hand off to payment", OWNER_ROLES),
            ("delete_zone", self._handle_delete_zone, "Delete selected zone", OWNER_ROLES),
            # Editor (any role)
            ("map_click", self._handle_map_click, "Click on empty map space", ALL_ROLES),
            ("select_zone", self._handle_select_zone, "Select a zone by id", ALL_ROLES),
            ("clear_selection", self._handle_clear_selection, "Back to idle", ALL_ROLES),
            # Campaigns
            ("describe_zone", self._handle_describe_zone, "Advertiser view of a zone", ALL_ROLES),
            ("start_campaign", self._handle_start_campaign, "Start a campaign on an active zone", ADVERTISER_ROLES),
            # Payment confirmation / reads
            ("confirm_payment", self._handle_confirm_payment, "Payment confirmed: activate zone", OWNER_ROLES),
            ("list_zones", self._handle_list_zones, "List all zones", ALL_ROLES),
            ("get_state", self._handle_get_state, "Editor state", ALL_ROLES),
        )
        for name, handler, description, roles in commands:
            registry.register(name, self._serialized(handler), description, roles=roles)

        logger.info(f"Control handlers registered ({registry.count()} commands)")

    def _serialized(self, handler: Callable[[Dict], Dict]) -> Callable[[Dict], Dict]:
        def run(command: Optional[Dict] = None) -> Dict:
            with self._lock:
                return handler(command or {})
        return run

    # ===== Lifecycle =====

    def start(self) -> None:
        """
        Start the service (non-blocking).

        Lifecycle:
        1. Connect control plane (required)
        2. Connect zone publisher
        3. Connect snapshot subscriber (if any)
        """
        if self._running:
            logger.warning("Service already running")
            return

        logger.info("Starting zone editor service")

        if not self.control_plane.connect(timeout=5.0):
            raise RuntimeError("Failed to connect to MQTT broker (control plane)")

        if not self.zone_publisher.connect():
            logger.warning("Zone publisher not connected; signals will be dropped until it reconnects")

        if self.snapshot_subscriber is not None:
            if self.snapshot_subscriber.connect():
                self.snapshot_subscriber.start()
            else:
                logger.warning("Snapshot subscriber not connected; store starts empty")

        self._running = True
        self._stop_event.clear()
        self.control_plane.publish_status("running", self._state_payload())
        logger.info("✅ Zone editor service started")

    def wait(self) -> None:
        """Block until stop() is called."""
        if not self._running:
            logger.warning("Service not running")
            return

        try:
            self._stop_event.wait()
        except KeyboardInterrupt:
            logger.info("Received KeyboardInterrupt, stopping...")
            self.stop()

    def stop(self) -> None:
        """Disconnect every transport component."""
        if not self._running:
            logger.warning("Service not running")
            return

        logger.info("Stopping zone editor service")

        if self.snapshot_subscriber is not None:
            self.snapshot_subscriber.stop()
        self.zone_publisher.disconnect()

        self.control_plane.publish_status("stopped")
        self.control_plane.disconnect()

        self._running = False
        self._stop_event.set()
        logger.info("✅ Zone editor service stopped")

    # ===== Snapshots (Subscriber Thread) =====

    def on_snapshot(self, snapshot: ZoneSnapshotMessage) -> None:
        """Replace the store with the backing store's view (all or nothing)."""
        try:
            zones = snapshot.to_zones()
        except ValueError as e:
            logger.error(f"Snapshot rejected, store unchanged: {e}")
            return

        with self._lock:
            self.store.replace_all(zones)
            state = self.editor.state
        logger.info(
            f"Snapshot applied: {len(zones)} zones (editor {state.mode.value})"
        )

    # ===== Helpers =====

    def _reply(self, status: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self.control_plane.publish_status(status, data)
        return data

    def _state_payload(self) -> Dict[str, Any]:
        selected = self.editor.selected_zone()
        return {
            'state': self.editor.status(),
            'selected': zone_to_dict(selected) if selected else None,
            'zone_count': len(self.store),
        }

    def _zone(self, command: Dict):
        zone_id = command["zone_id"]
        zone = self.store.get(zone_id)
        if zone is None:
            raise KeyError(f"Unknown zone '{zone_id}'")
        return zone

    # ===== Command Handlers (Control Plane Thread) =====

    def _handle_arm_drawing(self, command: Dict) -> Dict:
        self.editor.arm_drawing(ZoneShape(str(command["shape"]).upper()))
        return self._reply("state", self._state_payload())

    def _handle_place_zone(self, command: Dict) -> Dict:
        zone = self.editor.place_zone(_point(command), name=command.get("name"))
        data = self._state_payload()
        data['zone'] = zone_to_dict(zone) if zone else None
        return self._reply("zone_placed" if zone else "state", data)

    def _handle_map_click(self, command: Dict) -> Dict:
        zone = self.editor.handle_map_click(_point(command))
        data = self._state_payload()
        data['zone'] = zone_to_dict(zone) if zone else None
        return self._reply("zone_placed" if zone else "state", data)

    def _handle_select_zone(self, command: Dict) -> Dict:
        self.editor.select(command.get("zone_id"))
        return self._reply("state", self._state_payload())

    def _handle_clear_selection(self, command: Dict) -> Dict:
        self.editor.clear()
        return self._reply("state", self._state_payload())

    def _handle_rename_start(self, command: Dict) -> Dict:
        self.editor.rename_start()
        return self._reply("state", self._state_payload())

    def _handle_rename_commit(self, command: Dict) -> Dict:
        self.editor.rename_commit(command.get("name"))
        return self._reply("state", self._state_payload())

    def _handle_rename_cancel(self, command: Dict) -> Dict:
        self.editor.rename_cancel()
        return self._reply("state", self._state_payload())

    def _handle_resize(self, command: Dict) -> Dict:
        applied = self.editor.resize(command["field"], command["value"])
        data = self._state_payload()
        data['applied'] = applied
        return self._reply("state", data)

    def _handle_move_zone(self, command: Dict) -> Dict:
        applied = self.editor.move(_point(command))
        data = self._state_payload()
        data['applied'] = applied
        return self._reply("state", data)

    def _handle_get_quotes(self, command: Dict) -> Dict:
        data = {
            'area_sqm': self.editor.current_area,
            'viable': self.editor.can_activate(),
            'quotes': [tier.to_dict() for tier in self.editor.quotes()],
        }
        return self._reply("quotes", data)

    def _handle_request_activation(self, command: Dict) -> Dict:
        price = self.editor.request_activation(int(command["months"]))
        if price is None:
            return self._reply("activation_refused", self._state_payload())
        self._pending_payments[self.editor.session.zone_id] = price
        return self._reply("payment_initiated", price.to_dict())

    def _handle_delete_zone(self, command: Dict) -> Dict:
        zone_id = self.editor.session.zone_id if self.editor.session else None
        deleted = self.editor.delete_zone()
        if deleted:
            self._pending_payments.pop(zone_id, None)
        data = self._state_payload()
        data['deleted'] = zone_id if deleted else None
        return self._reply("zone_deleted" if deleted else "state", data)

    def _handle_describe_zone(self, command: Dict) -> Dict:
        offer = self.gate.describe(self._zone(command))
        data = offer.to_dict()
        if offer.can_start_campaign:
            data['cpm_label'] = offer.cpm_label
            data['reach_label'] = offer.reach_label
        return self._reply("zone_offer", data)

    def _handle_start_campaign(self, command: Dict) -> Dict:
        zone = self._zone(command)
        started = self.gate.request_campaign_start(zone)
        return self._reply(
            "campaign_requested" if started else "campaign_refused",
            {'zone_id': zone.id}
        )

    def _handle_confirm_payment(self, command: Dict) -> Dict:
        zone = self._zone(command)
        price = self._pending_payments.get(zone.id)
        if price is None:
            logger.warning(f"Payment confirmation ignored: no payment initiated for zone {zone.id}")
            return self._reply(
                "payment_refused",
                {'zone_id': zone.id, 'reason': "no payment initiated"}
            )

        min_area = self.config.editor_config.min_zone_area
        if not is_viable_area(area_of(zone), min_area):
            logger.warning(str(BelowMinimumArea(area_of(zone), min_area)))
            return self._reply(
                "payment_refused",
                {'zone_id': zone.id, 'reason': "below minimum area"}
            )

        del self._pending_payments[zone.id]
        activated = self.store.activate(zone.id)
        self.zone_publisher.on_update_zone(activated)
        logger.info(f"Payment confirmed: zone {zone.id} is active ({price.months} months)")
        return self._reply(
            "zone_activated",
            {'zone': zone_to_dict(activated), 'months': price.months, 'total_usd': price.total_usd}
        )

    def _handle_list_zones(self, command: Dict) -> Dict:
        zones = self.store.snapshot()
        areas = areas_of(zones)
        listed = []
        for zone, area in zip(zones, areas):
            sw, ne = zone_bounds(zone)
            entry = zone_to_dict(zone)
            entry['area_sqm'] = int(area)
            entry['bounds'] = {
                'sw': {'lat': sw.lat, 'lng': sw.lng},
                'ne': {'lat': ne.lat, 'lng': ne.lng},
            }
            listed.append(entry)
        return self._reply("zones_list", {'zones': listed, 'total_area_sqm': int(areas.sum())})

    def _handle_get_state(self, command: Dict) -> Dict:
        return self._reply("state", self._state_payload())
