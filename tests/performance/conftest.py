"""In-memory collaborators for exercising the performance engine without a database."""
from dataclasses import dataclass
from decimal import Decimal

import pytest

from performance.fetchers import Collaborators
from performance.records import RepInfo, SaleRow, TerritoryInfo


def sale_row(revenue, territory="t1", rep="r1", deals=1, month=3, year=2026, product=None, customer=None):
    return SaleRow(
        revenue=Decimal(str(revenue)),
        deals=deals,
        territory_id=territory,
        sales_rep_id=rep,
        product_id=product,
        customer_id=customer,
        month=month,
        year=year,
    )


class FakeSaleFetcher:
    def __init__(self, rows=()):
        self.rows = list(rows)
        self.fetch_calls = []
        self.territory_calls = []

    def _matches(self, row, sale_filter):
        if sale_filter.territory_ids is not None and row.territory_id not in sale_filter.territory_ids:
            return False
        if sale_filter.rep_id and row.sales_rep_id != sale_filter.rep_id:
            return False
        if sale_filter.rep_ids is not None and row.sales_rep_id not in sale_filter.rep_ids:
            return False
        if sale_filter.product_id and row.product_id != sale_filter.product_id:
            return False
        if sale_filter.month is not None and (row.month, row.year) != (sale_filter.month, sale_filter.year):
            return False
        return True

    def fetch(self, sale_filter):
        self.fetch_calls.append(sale_filter)
        return [row for row in self.rows if self._matches(row, sale_filter)]

    def territory_ids(self, sale_filter):
        self.territory_calls.append(sale_filter)
        return {row.territory_id for row in self.rows if self._matches(row, sale_filter)}


class FakeAssignmentFetcher:
    def __init__(self, pairs=(), reps=()):
        self.pairs = list(pairs)
        self.reps = {rep.id: rep for rep in reps}

    def territory_ids_for_rep(self, rep_id):
        return {territory for rep, territory in self.pairs if rep == rep_id}

    def reps_by_territory(self, territory_ids=None):
        result = {}
        for rep, territory in self.pairs:
            if territory_ids is not None and territory not in territory_ids:
                continue
            if rep in self.reps:
                result.setdefault(territory, []).append(self.reps[rep])
        return result


class FakeMetadataFetcher:
    def __init__(self, territories=(), reps=(), products=None, customers=None):
        self._territories = list(territories)
        self._reps = list(reps)
        self._products = products or {}
        self._customers = customers or {}

    def territories(self, territory_ids=None):
        return [
            territory for territory in sorted(self._territories, key=lambda t: t.name)
            if territory_ids is None or territory.id in territory_ids
        ]

    def territory(self, territory_id):
        found = self.territories([territory_id])
        return found[0] if found else None

    def products(self, product_ids):
        return [{"id": pk, **self._products[pk]} for pk in reversed(list(product_ids)) if pk in self._products]

    def customers(self, customer_ids):
        return [{"id": pk, **self._customers[pk]} for pk in reversed(list(customer_ids)) if pk in self._customers]

    def sales_reps(self, rep_ids=None):
        return [rep for rep in self._reps if rep_ids is None or rep.id in rep_ids]


@dataclass
class FakeTarget:
    sales_rep_id: str
    month: int
    year: int
    target_amount: Decimal


class FakeTargetStore:
    def __init__(self, targets=()):
        self.records = {(t.sales_rep_id, t.month, t.year): t for t in targets}

    def get(self, rep_id, month, year):
        return self.records.get((rep_id, month, year))

    def create(self, rep_id, month, year, amount):
        target = FakeTarget(rep_id, month, year, amount)
        self.records[(rep_id, month, year)] = target
        return target

    def update(self, target, amount):
        target.target_amount = amount
        return target

    def for_period(self, month, year, rep_ids=None):
        return {
            rep: target.target_amount
            for (rep, m, y), target in self.records.items()
            if (m, y) == (month, year) and (rep_ids is None or rep in rep_ids)
        }


@pytest.fixture
def territories():
    return [
        TerritoryInfo(id="t1", name="Mumbai", state="Maharashtra", region="West"),
        TerritoryInfo(id="t2", name="Pune", state="Maharashtra", region="West"),
        TerritoryInfo(id="t3", name="Chennai", state="Tamil Nadu", region=""),
    ]


@pytest.fixture
def reps():
    return [
        RepInfo(id="r1", first_name="Arjun", last_name="Rao", user_code="SL_001"),
        RepInfo(id="r2", first_name="Kavya", last_name="Nair", user_code="SL_002"),
        RepInfo(id="r3", first_name="Rohan", last_name="Das", user_code="SL_003"),
    ]


@pytest.fixture
def build_collaborators(territories, reps):
    def _build(rows=(), pairs=(), targets=(), products=None, customers=None):
        return Collaborators(
            sales=FakeSaleFetcher(rows),
            assignments=FakeAssignmentFetcher(pairs, reps),
            metadata=FakeMetadataFetcher(territories, reps, products, customers),
            targets=FakeTargetStore(targets),
        )
    return _build


@pytest.fixture
def row():
    return sale_row


@pytest.fixture
def fake_target():
    return FakeTarget
