"""
Campaign Gate Module
====================

Advertiser-facing read path over zones.

Design:
- describe() is a pure projection (CPM + placeholder reach)
- Inactive zones expose a status only, no figures and no action
- request_campaign_start() emits only for advertisers on active zones
- CPM is the zone's own price_per_1k; it is unrelated to the owner-facing
  area × rate × months quote
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from atlas_zone.config import ESTIMATED_REACH
from atlas_zone.events import ZoneEventSink
from atlas_zone.model import AdZone
from atlas_zone.roles import ADVERTISER_ROLES, UserRole

logger = logging.getLogger(__name__)


class OfferStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class ZoneOffer:
    """
    What an advertiser sees for one zone.

    Attributes:
        zone_id: Zone identifier
        status: ACTIVE or INACTIVE
        cpm_rate: Cost per thousand impressions (None when inactive)
        estimated_reach: Placeholder reach (None when inactive)
        can_start_campaign: True only for active zones
    """

    zone_id: str
    status: OfferStatus
    cpm_rate: Optional[float] = None
    estimated_reach: Optional[int] = None

    @property
    def can_start_campaign(self) -> bool:
        return self.status == OfferStatus.ACTIVE

    @property
    def cpm_label(self) -> Optional[str]:
        return None if self.cpm_rate is None else f"${self.cpm_rate:.2f}"

    @property
    def reach_label(self) -> Optional[str]:
        if self.estimated_reach is None:
            return None
        if self.estimated_reach >= 1000:
            return f"~{self.estimated_reach / 1000:.1f}k"
        return f"~{self.estimated_reach}"

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'zone_id': self.zone_id,
            'status': self.status.value,
            'can_start_campaign': self.can_start_campaign,
        }
        if self.status == OfferStatus.ACTIVE:
            result['cpm_rate'] = self.cpm_rate
            result['estimated_reach'] = self.estimated_reach
        return result


class CampaignGate:
    """
    Gate between advertisers and campaign management.

    Usage:
        gate = CampaignGate(sink=publisher, role=UserRole.ADVERTISER)
        offer = gate.describe(zone)
        if offer.can_start_campaign:
            gate.request_campaign_start(zone)
    """

    def __init__(
        self,
        sink: ZoneEventSink,
        role: UserRole = UserRole.ADVERTISER,
        estimated_reach: int = ESTIMATED_REACH
    ):
        self._sink = sink
        self.role = UserRole(role)
        self.estimated_reach = estimated_reach

    def describe(self, zone: AdZone) -> ZoneOffer:
        if not zone.is_active:
            return ZoneOffer(zone_id=zone.id, status=OfferStatus.INACTIVE)
        return ZoneOffer(
            zone_id=zone.id,
            status=OfferStatus.ACTIVE,
            cpm_rate=zone.price_per_1k,
            estimated_reach=self.estimated_reach
        )

    def request_campaign_start(self, zone: AdZone) -> bool:
        """
        Emit a campaign-start request.

        Returns:
            True if emitted; False for inactive zones or non-advertisers
        """
        if self.role not in ADVERTISER_ROLES:
            logger.warning(f"start_campaign not available for role {self.role.value}")
            return False
        if not zone.is_active:
            logger.warning(f"start_campaign ignored: zone {zone.id} is inactive")
            return False

        self._sink.on_start_campaign(zone)
        logger.info(f"Campaign start requested: zone={zone.id}")
        return True
