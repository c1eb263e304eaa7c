"""
Zone editor service tests.

The control plane and zone publisher are replaced by in-process fakes:
commands go straight through the registry and every status is recorded.
"""

import pytest

from atlas_control import (
    CommandNotPermittedError,
    CommandRegistry,
    MQTTControlPlane,
    command_topic,
    status_topic,
)
from atlas_mqtt.schemas import SCHEMA_VERSION, Timestamp, ZonePayload, ZoneSnapshotMessage
from atlas_service import ServiceConfig, ZoneEditorService
from atlas_zone import AdZone, CircleGeometry, GeoPoint, RectangleGeometry, UserRole, ZoneShape

from test_zone_editor import RecordingSink

DUBAI = GeoPoint(lat=25.2048, lng=55.2708)


class FakeControlPlane:
    def __init__(self, role, connects=True):
        self.command_registry = CommandRegistry()
        self.role = role
        self.connects = connects
        self.statuses = []
        self.disconnected = False

    def connect(self, timeout=5.0):
        return self.connects

    def disconnect(self):
        self.disconnected = True

    def publish_status(self, status, data=None):
        self.statuses.append((status, data))
        return True

    def send(self, command, **data):
        data['command'] = command
        return self.command_registry.execute(command, data, role=self.role)

    @property
    def last_status(self):
        return self.statuses[-1][0]


class FakePublisher(RecordingSink):
    def __init__(self, connects=True):
        super().__init__()
        self.connects = connects

    def connect(self, timeout=10.0):
        return self.connects

    def disconnect(self):
        pass


def make_service(role=UserRole.ZONE_OWNER, plane_connects=True):
    plane = FakeControlPlane(role, connects=plane_connects)
    publisher = FakePublisher()
    service = ZoneEditorService(ServiceConfig(service_id="ze1", user_role=role), plane, publisher)
    service.setup()
    return service, plane, publisher


def zone(zone_id, active=False, cpm=2.5):
    return AdZone(id=zone_id, name=zone_id, center=DUBAI,
                  geometry=CircleGeometry(radius=100), is_active=active, price_per_1k=cpm)


def snapshot_of(*zones):
    return ZoneSnapshotMessage.from_zones(list(zones))


def test_registers_every_command():
    service, plane, _ = make_service()
    assert plane.command_registry.count() == 18


def test_owner_flow_draw_edit_activate():
    service, plane, publisher = make_service()

    state = plane.send("arm_drawing", shape="circle")
    assert state['state']['mode'] == "drawing"
    assert state['state']['shape'] == "CIRCLE"

    placed = plane.send("place_zone", lat=25.2048, lng=55.2708, name="Marina")
    assert plane.last_status == "zone_placed"
    zone_id = placed['zone']['id']
    assert placed['zone']['radius'] == 50.0
    assert placed['zone_count'] == 1
    assert publisher.kinds() == ["add"]

    selected = plane.send("select_zone", zone_id=zone_id)
    assert selected['state']['mode'] == "editing"
    assert selected['state']['area_sqm'] == 7854

    resized = plane.send("resize", field="radius", value=100)
    assert resized['applied'] is True
    assert resized['state']['area_sqm'] == 31416

    quotes = plane.send("get_quotes")
    assert plane.last_status == "quotes"
    assert quotes['viable'] is True
    assert [q['total_usd'] for q in quotes['quotes']] == ["78.54", "235.62", "942.48"]

    price = plane.send("request_activation", months=3)
    assert plane.last_status == "payment_initiated"
    assert price == {'months': 3, 'total_usd': "235.62"}
    assert publisher.calls[-1][0] == "payment"
    assert service.store.get(zone_id).is_active is False

    activated = plane.send("confirm_payment", zone_id=zone_id)
    assert plane.last_status == "zone_activated"
    assert activated['zone']['is_active'] is True
    assert publisher.kinds()[-1] == "update"
    assert service.editor.selected_zone().is_active


def test_rename_and_move_through_commands():
    service, plane, _ = make_service()
    service.on_snapshot(snapshot_of(zone("z1")))
    plane.send("select_zone", zone_id="z1")

    plane.send("rename_start")
    renamed = plane.send("rename_commit", name="Harbour")
    assert renamed['selected']['name'] == "Harbour"

    moved = plane.send("move_zone", lat=25.0, lng=55.0)
    assert moved['applied'] is True
    assert moved['selected']['center'] == {'lat': 25.0, 'lng': 55.0}


def test_activation_refused_below_minimum_area():
    service, plane, publisher = make_service()
    small = AdZone(id="tiny", name="tiny", center=DUBAI,
                   geometry=RectangleGeometry(width=20, height=20))
    service.on_snapshot(snapshot_of(small))
    plane.send("select_zone", zone_id="tiny")

    quotes = plane.send("get_quotes")
    assert quotes['viable'] is False
    assert not any(q['enabled'] for q in quotes['quotes'])

    plane.send("request_activation", months=1)
    assert plane.last_status == "activation_refused"
    assert publisher.calls == []


def test_delete_selected_zone():
    service, plane, publisher = make_service()
    service.on_snapshot(snapshot_of(zone("z1"), zone("z2")))
    plane.send("select_zone", zone_id="z1")

    deleted = plane.send("delete_zone")
    assert plane.last_status == "zone_deleted"
    assert deleted['deleted'] == "z1"
    assert deleted['state']['mode'] == "idle"
    assert deleted['zone_count'] == 1
    assert publisher.calls == [("delete", "z1")]


def test_list_zones_includes_area():
    service, plane, _ = make_service()
    service.on_snapshot(snapshot_of(zone("z1")))

    listed = plane.send("list_zones")
    assert plane.last_status == "zones_list"
    assert listed['zones'][0]['id'] == "z1"
    assert listed['zones'][0]['area_sqm'] == 31416
    assert listed['total_area_sqm'] == 31416
    bounds = listed['zones'][0]['bounds']
    assert bounds['sw']['lat'] < 25.2048 < bounds['ne']['lat']
    assert bounds['sw']['lng'] < 55.2708 < bounds['ne']['lng']


def test_snapshot_removing_selection_returns_to_idle():
    service, plane, _ = make_service()
    service.on_snapshot(snapshot_of(zone("z1")))
    plane.send("select_zone", zone_id="z1")

    service.on_snapshot(snapshot_of(zone("z2")))

    state = plane.send("get_state")
    assert state['state']['mode'] == "idle"
    assert state['selected'] is None


def test_invalid_snapshot_keeps_store():
    service, _, _ = make_service()
    service.on_snapshot(snapshot_of(zone("z1")))

    broken = ZoneSnapshotMessage(
        schema_version=SCHEMA_VERSION,
        timestamp=Timestamp.now(),
        zones=[ZonePayload(id="bad", name="bad", shape=ZoneShape.CIRCLE,
                           lat=25.0, lng=55.0, radius=-1.0)]
    )
    service.on_snapshot(broken)

    assert [z.id for z in service.store.snapshot()] == ["z1"]


def test_confirm_payment_unknown_zone():
    _, plane, _ = make_service()
    with pytest.raises(KeyError):
        plane.send("confirm_payment", zone_id="ghost")


def test_advertiser_describes_and_starts_campaign():
    service, plane, publisher = make_service(role=UserRole.ADVERTISER)
    service.on_snapshot(snapshot_of(zone("live", active=True), zone("draft")))

    offer = plane.send("describe_zone", zone_id="live")
    assert plane.last_status == "zone_offer"
    assert offer['cpm_label'] == "$2.50"
    assert offer['reach_label'] == "~1.5k"

    hidden = plane.send("describe_zone", zone_id="draft")
    assert hidden == {'zone_id': "draft", 'status': "inactive", 'can_start_campaign': False}

    plane.send("start_campaign", zone_id="live")
    assert plane.last_status == "campaign_requested"
    assert publisher.kinds() == ["campaign"]

    plane.send("start_campaign", zone_id="draft")
    assert plane.last_status == "campaign_refused"
    assert publisher.kinds() == ["campaign"]


def test_advertiser_cannot_edit():
    _, plane, _ = make_service(role=UserRole.ADVERTISER)
    with pytest.raises(CommandNotPermittedError):
        plane.send("arm_drawing", shape="CIRCLE")


def test_owner_cannot_start_campaign():
    _, plane, _ = make_service()
    with pytest.raises(CommandNotPermittedError):
        plane.send("start_campaign", zone_id="z1")


def test_start_and_stop():
    service, plane, _ = make_service()
    service.start()
    assert plane.statuses[-1][0] == "running"

    service.stop()
    assert plane.statuses[-1][0] == "stopped"
    assert plane.disconnected


def test_start_fails_without_control_plane():
    service, _, _ = make_service(plane_connects=False)
    with pytest.raises(RuntimeError):
        service.start()


def test_list_zones_empty_store():
    _, plane, _ = make_service()
    assert plane.send("list_zones") == {'zones': [], 'total_area_sqm': 0}


@pytest.mark.parametrize("role", [UserRole.ADVERTISER, UserRole.REGULAR])
def test_non_owner_cannot_confirm_payment(role, monkeypatch):
    plane = MQTTControlPlane(
        broker_host="localhost",
        broker_port=1883,
        command_topic=command_topic("ze1"),
        status_topic=status_topic("ze1"),
        client_id="test_control",
        role=role,
    )
    statuses = []
    monkeypatch.setattr(
        plane, "publish_status",
        lambda status, data=None: statuses.append((status, data)) or True
    )
    service = ZoneEditorService(ServiceConfig(service_id="ze1", user_role=role), plane, FakePublisher())
    service.setup()
    service.on_snapshot(snapshot_of(zone("z1")))

    assert plane.handle_command({'command': "confirm_payment", 'zone_id': "z1"}) == "rejected"
    assert statuses[-1][0] == "rejected"
    assert service.store.get("z1").is_active is False


def test_advertiser_cannot_activate_then_start_campaign():
    service, plane, publisher = make_service(role=UserRole.ADVERTISER)
    service.on_snapshot(snapshot_of(zone("z1")))

    with pytest.raises(CommandNotPermittedError):
        plane.send("confirm_payment", zone_id="z1")

    plane.send("start_campaign", zone_id="z1")
    assert plane.last_status == "campaign_refused"
    assert publisher.calls == []


def test_confirm_payment_requires_initiated_payment():
    service, plane, publisher = make_service()
    service.on_snapshot(snapshot_of(zone("z1")))

    refused = plane.send("confirm_payment", zone_id="z1")

    assert plane.last_status == "payment_refused"
    assert refused['reason'] == "no payment initiated"
    assert service.store.get("z1").is_active is False
    assert publisher.calls == []


def test_confirm_payment_refused_after_shrinking_below_minimum():
    service, plane, publisher = make_service()
    service.on_snapshot(snapshot_of(zone("z1")))
    plane.send("select_zone", zone_id="z1")
    plane.send("request_activation", months=1)
    assert plane.last_status == "payment_initiated"

    plane.send("resize", field="radius", value=10)
    refused = plane.send("confirm_payment", zone_id="z1")

    assert plane.last_status == "payment_refused"
    assert refused['reason'] == "below minimum area"
    assert service.store.get("z1").is_active is False


def test_confirm_payment_is_single_use():
    service, plane, _ = make_service()
    service.on_snapshot(snapshot_of(zone("z1")))
    plane.send("select_zone", zone_id="z1")
    plane.send("request_activation", months=12)

    activated = plane.send("confirm_payment", zone_id="z1")
    assert activated['months'] == 12
    assert activated['total_usd'] == "942.48"

    plane.send("confirm_payment", zone_id="z1")
    assert plane.last_status == "payment_refused"
