from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from performance.aggregation import GroupBy, aggregate
from performance.records import SaleRow


@dataclass(frozen=True)
class TrendPoint:
    year: int
    month: int
    revenue: Decimal
    deals: int

    def as_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "revenue": self.revenue,
            "deals": self.deals,
        }


def trend_from_buckets(buckets: dict) -> list[TrendPoint]:
    """Chronological points for month buckets; months without sales are absent."""
    return [
        TrendPoint(year=key.year, month=key.month, revenue=bucket.revenue, deals=bucket.deals)
        for key, bucket in sorted(buckets.items())
    ]


def monthly_trend(rows: Iterable[SaleRow]) -> list[TrendPoint]:
    return trend_from_buckets(aggregate(rows, GroupBy.MONTH))
