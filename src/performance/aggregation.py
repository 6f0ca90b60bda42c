"""Single-pass grouping of sale rows into revenue / deal buckets."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Hashable, Iterable, NamedTuple

from performance.records import ZERO, SaleRow, round_half_up


class GroupBy(enum.Enum):
    TERRITORY = "territory_id"
    REP = "sales_rep_id"
    PRODUCT = "product_id"
    CUSTOMER = "customer_id"
    MONTH = "month"


class MonthKey(NamedTuple):
    year: int
    month: int

    def __str__(self):
        return f"{self.year:04d}-{self.month:02d}"


def average_deal_size(revenue: Decimal, deals: int) -> int:
    if deals <= 0:
        return 0
    return int(round_half_up(revenue / Decimal(deals)))


@dataclass
class Bucket:
    key: Hashable = None
    revenue: Decimal = ZERO
    deals: int = 0

    def add(self, row: SaleRow):
        self.revenue += row.revenue
        self.deals += row.deals

    @property
    def avg_deal_size(self) -> int:
        return average_deal_size(self.revenue, self.deals)


def key_for(row: SaleRow, group_by: GroupBy):
    if group_by is GroupBy.MONTH:
        if row.year is None or row.month is None:
            return None
        return MonthKey(row.year, row.month)
    return getattr(row, group_by.value)


def aggregate(rows: Iterable[SaleRow], group_by: GroupBy) -> dict:
    """Group ``rows`` by ``group_by``.

    Rows whose key is missing are dropped from the grouping; they still
    count in ``totals``.
    """
    buckets = {}
    for row in rows:
        key = key_for(row, group_by)
        if key is None:
            continue
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = Bucket(key=key)
        bucket.add(row)
    return buckets


def totals(rows: Iterable[SaleRow]) -> Bucket:
    bucket = Bucket()
    for row in rows:
        bucket.add(row)
    return bucket


def revenue_by_key(buckets: dict) -> dict:
    return {key: bucket.revenue for key, bucket in buckets.items()}
