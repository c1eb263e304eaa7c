"""
Pricing Engine Module
=====================

Owner-facing rental quotes: total = area × rate × months.

Design:
- Decimal arithmetic, half-up rounding to cents (no float drift on ties)
- Fixed duration tiers; the owner chooses, the engine never picks one
- No area floor here: below-minimum quotes are computable but the editor
  marks them disabled
- Independent from the advertiser CPM (AdZone.price_per_1k)
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Tuple

from atlas_zone.config import DURATION_TIERS, RATE_USD_PER_SQM_MONTH
from atlas_zone.model import is_viable_area

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class DurationTier:
    """
    Offered rental duration.

    Attributes:
        months: Duration in months
        tag: Short plan tag (e.g. "Quarterly")
        label: Display label (e.g. "3 Months Plan")
        highlight: True for the suggested tier
    """

    months: int
    tag: str
    label: str
    highlight: bool = False

    def __post_init__(self):
        if self.months <= 0:
            raise ValueError(f"Tier months must be > 0, got {self.months}")


STANDARD_TIERS: Tuple[DurationTier, ...] = (
    DurationTier(months=1, tag="Standard", label="1 Month Plan"),
    DurationTier(months=3, tag="Quarterly", label="3 Months Plan", highlight=True),
    DurationTier(months=12, tag="Annual Value", label="1 Year Plan"),
)


@dataclass(frozen=True)
class PriceQuote:
    """Computed total for one duration; never stored on the zone."""

    months: int
    total_usd: str

    def to_dict(self) -> Dict[str, object]:
        return {'months': self.months, 'total_usd': self.total_usd}


@dataclass(frozen=True)
class TierQuote:
    """A tier with its quote and whether the editor allows selecting it."""

    tier: DurationTier
    quote: PriceQuote
    enabled: bool

    def to_dict(self) -> Dict[str, object]:
        return {
            'months': self.tier.months,
            'tag': self.tier.tag,
            'label': self.tier.label,
            'highlight': self.tier.highlight,
            'total_usd': self.quote.total_usd,
            'enabled': self.enabled,
        }


def quote(area_sqm: int, months: int, rate: float = RATE_USD_PER_SQM_MONTH) -> str:
    """
    Total rental price as a 2-decimal string.

    Args:
        area_sqm: Zone area in square meters (>= 0)
        months: Duration in months (> 0)
        rate: USD per square meter per month

    Returns:
        Total in USD, e.g. "9.43"

    Raises:
        ValueError: If area is negative or months is not positive

    Example:
        >>> quote(1257, 3)
        '9.43'
    """
    if area_sqm < 0:
        raise ValueError(f"area_sqm must be >= 0, got {area_sqm}")
    if months <= 0:
        raise ValueError(f"months must be > 0, got {months}")

    total = Decimal(str(area_sqm)) * Decimal(str(rate)) * Decimal(str(months))
    return str(total.quantize(CENTS, rounding=ROUND_HALF_UP))


def tiers_for(months: Sequence[int]) -> Tuple[DurationTier, ...]:
    """
    Resolve configured month counts to tiers, reusing the standard labels.
    """
    known = {tier.months: tier for tier in STANDARD_TIERS}
    return tuple(
        known.get(m, DurationTier(months=m, tag=f"{m} Months", label=f"{m} Months Plan"))
        for m in months
    )


class PricingEngine:
    """
    Quote calculator bound to a rate and a set of tiers.

    Usage:
        engine = PricingEngine()
        engine.quote(1257, 3)            # PriceQuote(months=3, total_usd='9.43')
        engine.quote_tiers(1257, 1000)   # one TierQuote per tier
    """

    def __init__(
        self,
        rate: float = RATE_USD_PER_SQM_MONTH,
        tiers: Optional[Sequence[DurationTier]] = None
    ):
        if rate < 0:
            raise ValueError(f"rate must be >= 0, got {rate}")
        self.rate = rate
        self.tiers: Tuple[DurationTier, ...] = tuple(tiers) if tiers else tiers_for(DURATION_TIERS)

    @classmethod
    def from_config(cls, config) -> "PricingEngine":
        return cls(
            rate=config.rate_usd_per_sqm_month,
            tiers=tiers_for(config.duration_tiers)
        )

    def offers(self, months: int) -> bool:
        """True if `months` is one of the offered tiers."""
        return any(tier.months == months for tier in self.tiers)

    def quote(self, area_sqm: int, months: int) -> PriceQuote:
        return PriceQuote(months=months, total_usd=quote(area_sqm, months, self.rate))

    def quote_tiers(self, area_sqm: int, min_area_sqm: int = 0) -> List[TierQuote]:
        """
        Quote every tier for an area.

        Args:
            area_sqm: Zone area
            min_area_sqm: Viable minimum; tiers are disabled below it

        Returns:
            TierQuote list in tier order
        """
        enabled = is_viable_area(area_sqm, min_area_sqm)
        return [
            TierQuote(tier=tier, quote=self.quote(area_sqm, tier.months), enabled=enabled)
            for tier in self.tiers
        ]
