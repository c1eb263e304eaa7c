"""
Campaign gate tests: advertiser view and campaign-start gating.
"""

import pytest

from atlas_zone import (
    AdZone,
    CampaignGate,
    CircleGeometry,
    GeoPoint,
    OfferStatus,
    UserRole,
)

from test_zone_editor import RecordingSink


def zone(active, cpm=2.5):
    return AdZone(id="z1", name="Marina", center=GeoPoint(lat=25.0, lng=55.0),
                  geometry=CircleGeometry(radius=20), is_active=active, price_per_1k=cpm)


def test_describe_active_zone():
    offer = CampaignGate(sink=RecordingSink()).describe(zone(True, cpm=3.0))

    assert offer.status == OfferStatus.ACTIVE
    assert offer.cpm_rate == 3.0
    assert offer.cpm_label == "$3.00"
    assert offer.estimated_reach == 1500
    assert offer.reach_label == "~1.5k"
    assert offer.can_start_campaign


def test_describe_inactive_zone_hides_figures():
    offer = CampaignGate(sink=RecordingSink()).describe(zone(False))

    assert offer.status == OfferStatus.INACTIVE
    assert offer.cpm_rate is None
    assert offer.reach_label is None
    assert not offer.can_start_campaign
    assert offer.to_dict() == {
        'zone_id': 'z1',
        'status': 'inactive',
        'can_start_campaign': False,
    }


def test_cpm_is_independent_of_area_quote():
    # Same zone, different CPM: the offer only reflects price_per_1k
    gate = CampaignGate(sink=RecordingSink())
    assert gate.describe(zone(True, cpm=0.5)).cpm_rate == 0.5
    assert gate.describe(zone(True, cpm=9.0)).cpm_rate == 9.0


def test_campaign_start_on_active_zone():
    sink = RecordingSink()
    gate = CampaignGate(sink=sink, role=UserRole.ADVERTISER)

    assert gate.request_campaign_start(zone(True))
    assert sink.calls == [("campaign", zone(True))]


def test_campaign_start_refused_on_inactive_zone():
    sink = RecordingSink()
    gate = CampaignGate(sink=sink, role=UserRole.ADVERTISER)

    assert gate.request_campaign_start(zone(False)) is False
    assert sink.calls == []


@pytest.mark.parametrize("role", [UserRole.ZONE_OWNER, UserRole.REGULAR])
def test_campaign_start_requires_advertiser(role):
    sink = RecordingSink()
    gate = CampaignGate(sink=sink, role=role)

    assert gate.request_campaign_start(zone(True)) is False
    assert sink.calls == []


def test_reach_label_below_thousand():
    gate = CampaignGate(sink=RecordingSink(), estimated_reach=800)
    assert gate.describe(zone(True)).reach_label == "~800"
