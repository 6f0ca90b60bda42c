"""Colour buckets for the choropleth views and territory insights.

Two threshold strategies exist. ``FIXED_FRACTION`` places the bands at two
thirds and one third of the largest revenue (floored at 1 so an all-zero
map stays LOW). ``PERCENTILE`` uses the 70th and 30th percentile of the
sorted revenues, indexed as ``floor(n * p)``.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from performance.records import ZERO

HIGH_FRACTION = Decimal("0.66")
MID_FRACTION = Decimal("0.33")
HIGH_PERCENTILE = Decimal("0.70")
MID_PERCENTILE = Decimal("0.30")

PRICING_OPPORTUNITY_MIN_DEALS = 10
PRICING_OPPORTUNITY_MAX_REVENUE = Decimal("50000")
EXPANSION_MIN_REVENUE = Decimal("100000")


class ColorBucket(str, enum.Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Insight(str, enum.Enum):
    PRICING_OPPORTUNITY = "PRICING_OPPORTUNITY"
    EXPANSION_CANDIDATE = "EXPANSION_CANDIDATE"


class Strategy(str, enum.Enum):
    FIXED_FRACTION = "fixed_fraction"
    PERCENTILE = "percentile"


@dataclass(frozen=True)
class Thresholds:
    high: Decimal
    mid: Decimal

    def bucket_for(self, revenue: Decimal) -> ColorBucket:
        if revenue >= self.high:
            return ColorBucket.HIGH
        if revenue >= self.mid:
            return ColorBucket.MEDIUM
        return ColorBucket.LOW


def fixed_fraction_thresholds(revenues: Iterable[Decimal]) -> Thresholds:
    top = max(revenues, default=ZERO)
    if top < 1:
        top = Decimal("1")
    return Thresholds(high=top * HIGH_FRACTION, mid=top * MID_FRACTION)


def _percentile(ordered: list, fraction: Decimal) -> Decimal:
    index = int(Decimal(len(ordered)) * fraction)
    if index >= len(ordered):
        return ZERO
    return ordered[index]


def percentile_thresholds(revenues: Iterable[Decimal]) -> Thresholds:
    ordered = sorted(revenues)
    return Thresholds(
        high=_percentile(ordered, HIGH_PERCENTILE),
        mid=_percentile(ordered, MID_PERCENTILE),
    )


_STRATEGIES = {
    Strategy.FIXED_FRACTION: fixed_fraction_thresholds,
    Strategy.PERCENTILE: percentile_thresholds,
}


def thresholds_for(revenues: Iterable[Decimal], strategy: Strategy) -> Thresholds:
    return _STRATEGIES[Strategy(strategy)](list(revenues))


def classify(revenue_by_key: dict, strategy: Strategy, population=None) -> dict:
    """Map each key of ``revenue_by_key`` to its colour bucket.

    Thresholds are computed over ``population`` when given, otherwise over
    the classified revenues themselves.
    """
    source = population if population is not None else revenue_by_key.values()
    thresholds = thresholds_for(source, strategy)
    return {key: thresholds.bucket_for(revenue) for key, revenue in revenue_by_key.items()}


def insight_for(revenue: Decimal, deals: int):
    if deals > PRICING_OPPORTUNITY_MIN_DEALS and revenue < PRICING_OPPORTUNITY_MAX_REVENUE:
        return Insight.PRICING_OPPORTUNITY
    if revenue > EXPANSION_MIN_REVENUE:
        return Insight.EXPANSION_CANDIDATE
    return None
