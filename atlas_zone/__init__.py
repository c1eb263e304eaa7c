"""
Atlas Zone Engine v1.0
======================

Bounded Context: Geographically anchored advertising zones.

Design Philosophy:
- Separation of Concerns: Geometry, Model, Pricing, Editing, Campaigns separated
- Immutable values (frozen dataclasses), one stateful editor per owner session
- The zone collection belongs to someone else: we keep ids, not references
- Side effects leave through a sink (ZoneEventSink), never through return values

Architecture:

    atlas_zone/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── shapes.py      # GeoPoint, CircleGeometry, RectangleGeometry
    │   └── geomath.py     # bounds_for, area_of
    │
    ├── model.py           # AdZone, validate_geometry, apply_field_update
    ├── pricing.py         # quote, PricingEngine, duration tiers
    │
    ├── editor/            # Owner-facing state machine (stateful)
    │   ├── states.py      # Idle, Drawing, Editing, EditingSession
    │   └── editor.py      # ZoneEditor
    │
    ├── campaign.py        # CampaignGate (advertiser read path)
    ├── events.py          # ZoneEventSink, FanOutSink
    └── store.py           # ZoneStore (in-memory external collection)

Usage:

    from atlas_zone import (
        GeoPoint, ZoneShape, ZoneStore, ZoneEditor, CampaignGate, UserRole
    )

    store = ZoneStore()
    editor = ZoneEditor(zones=store, sink=store, role=UserRole.ZONE_OWNER)

    editor.arm_drawing(ZoneShape.RECTANGLE)
    zone = editor.place_zone(GeoPoint(lat=25.2048, lng=55.2708))

    editor.select(zone.id)
    editor.resize("width", 250)
    for tier in editor.quotes():
        print(tier.tier.label, tier.quote.total_usd, tier.enabled)

    editor.request_activation(3)
"""

# Geometry Layer (immutable, stateless)
from atlas_zone.geometry import (
    GeoPoint,
    ZoneShape,
    CircleGeometry,
    RectangleGeometry,
    bounds_for,
    area_of,
)

# Model
from atlas_zone.errors import (
    ZoneError,
    InvalidGeometry,
    ImmutableFieldError,
    UnknownFieldError,
    BelowMinimumArea,
    StaleSelection,
)
from atlas_zone.model import (
    AdZone,
    validate_geometry,
    is_viable_area,
    apply_field_update,
    new_zone,
)
from atlas_zone.roles import UserRole
from atlas_zone.config import EditorConfig, MIN_ZONE_AREA

# Pricing
from atlas_zone.pricing import (
    quote,
    PricingEngine,
    PriceQuote,
    TierQuote,
    DurationTier,
    STANDARD_TIERS,
)

# Editing & campaigns (stateful)
from atlas_zone.events import ZoneEventSink, FanOutSink
from atlas_zone.store import ZoneStore
from atlas_zone.editor import ZoneEditor, EditorMode
from atlas_zone.campaign import CampaignGate, ZoneOffer, OfferStatus

__all__ = [
    # Geometry
    "GeoPoint",
    "ZoneShape",
    "CircleGeometry",
    "RectangleGeometry",
    "bounds_for",
    "area_of",
    # Model
    "ZoneError",
    "InvalidGeometry",
    "ImmutableFieldError",
    "UnknownFieldError",
    "BelowMinimumArea",
    "StaleSelection",
    "AdZone",
    "validate_geometry",
    "is_viable_area",
    "apply_field_update",
    "new_zone",
    "UserRole",
    "EditorConfig",
    "MIN_ZONE_AREA",
    # Pricing
    "quote",
    "PricingEngine",
    "PriceQuote",
    "TierQuote",
    "DurationTier",
    "STANDARD_TIERS",
    # Editing & campaigns
    "ZoneEventSink",
    "FanOutSink",
    "ZoneStore",
    "ZoneEditor",
    "EditorMode",
    "CampaignGate",
    "ZoneOffer",
    "OfferStatus",
]

__version__ = "1.0.0"
