"""
Engine configuration for the zone editor and pricing.

System constants live here as defaults. They are deployment concerns: a
service loads them once (see atlas_service.config) and they never change at
runtime.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

# Minimum viable zone size in square meters
MIN_ZONE_AREA = 1000

# USD per square meter per month
RATE_USD_PER_SQM_MONTH = 0.0025

# Offered rental durations in months
DURATION_TIERS = (1, 3, 12)

# Editor-level dimension clamps (meters)
RADIUS_RANGE = (4.0, 500.0)
WIDTH_RANGE = (7.0, 1000.0)
HEIGHT_RANGE = (8.0, 1000.0)

# Placeholder advertiser reach (impressions)
ESTIMATED_REACH = 1500


@dataclass(frozen=True)
class EditorConfig:
    """
    Zone editor configuration.

    Attributes:
        min_zone_area: Minimum viable area (m²) before activation is offered
        rate_usd_per_sqm_month: Owner-facing rental rate
        duration_tiers: Offered durations in months
        radius_range: (min, max) radius clamp in meters
        width_range: (min, max) width clamp in meters
        height_range: (min, max) height clamp in meters
        default_radius: Radius of a freshly placed circle
        default_width: Width of a freshly placed rectangle
        default_height: Height of a freshly placed rectangle
        default_price_per_1k: CPM assigned to new zones
        default_zone_name: Name assigned to new zones
        estimated_reach: Advertiser reach placeholder
    """

    min_zone_area: int = MIN_ZONE_AREA
    rate_usd_per_sqm_month: float = RATE_USD_PER_SQM_MONTH
    duration_tiers: Tuple[int, ...] = DURATION_TIERS
    radius_range: Tuple[float, float] = RADIUS_RANGE
    width_range: Tuple[float, float] = WIDTH_RANGE
    height_range: Tuple[float, float] = HEIGHT_RANGE
    default_radius: float = 50.0
    default_width: float = 100.0
    default_height: float = 100.0
    default_price_per_1k: float = 2.5
    default_zone_name: str = "New Zone"
    estimated_reach: int = ESTIMATED_REACH

    def __post_init__(self):
        """Validate editor configuration."""
        if self.min_zone_area < 0:
            raise ValueError(
                f"min_zone_area must be >= 0, got {self.min_zone_area}"
            )

        if self.rate_usd_per_sqm_month < 0:
            raise ValueError(
                f"rate_usd_per_sqm_month must be >= 0, got {self.rate_usd_per_sqm_month}"
            )

        if not self.duration_tiers or any(m <= 0 for m in self.duration_tiers):
            raise ValueError(
                f"duration_tiers must be positive months, got {self.duration_tiers}"
            )

        for name in ("radius_range", "width_range", "height_range"):
            low, high = getattr(self, name)
            if not 0 < low <= high:
                raise ValueError(
                    f"{name} must satisfy 0 < min <= max, got {(low, high)}"
                )

        checks = (
            ("default_radius", self.default_radius, self.radius_range),
            ("default_width", self.default_width, self.width_range),
            ("default_height", self.default_height, self.height_range),
        )
        for name, value, (low, high) in checks:
            if not low <= value <= high:
                raise ValueError(
                    f"{name} must be within {(low, high)}, got {value}"
                )

        if self.default_price_per_1k < 0:
            raise ValueError(
                f"default_price_per_1k must be >= 0, got {self.default_price_per_1k}"
            )

    @property
    def clamps(self) -> Dict[str, Tuple[float, float]]:
        """Clamp range per resizable field."""
        return {
            "radius": self.radius_range,
            "width": self.width_range,
            "height": self.height_range,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "EditorConfig":
        """Build from a plain mapping (YAML section); lists become tuples."""
        kwargs = dict(data or {})
        for key in ("duration_tiers", "radius_range", "width_range", "height_range"):
            if key in kwargs:
                kwargs[key] = tuple(kwargs[key])
        return cls(**kwargs)
