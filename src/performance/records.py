"""Request-scoped value types and ingestion-time normalisation.

Sale rows coming from storage are normalised exactly once, here: revenue is
coerced to a non-negative ``Decimal`` and the deal count to a positive
``int``. Every later summation can then trust its inputs.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from performance.exceptions import InvalidFilter

ZERO = Decimal("0")

MIN_YEAR = 2000
MAX_YEAR = 2100


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def coerce_revenue(value: Any) -> Decimal:
    """Return ``value`` as a Decimal, or 0 when missing, non-numeric or negative."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


def coerce_deal_count(value: Any) -> int:
    """Return ``value`` as a positive int; anything unusable counts as one deal."""
    if value is None or isinstance(value, bool):
        return 1
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 1
    return count if count >= 1 else 1


def round_half_up(value: Decimal, exponent: str = "1") -> Decimal:
    return value.quantize(Decimal(exponent), rounding=ROUND_HALF_UP)


def _as_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _as_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


# ---------------------------------------------------------------------------
# Sale rows
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SaleRow:
    revenue: Decimal
    deals: int
    territory_id: str | None
    sales_rep_id: str | None
    product_id: str | None = None
    customer_id: str | None = None
    month: int | None = None
    year: int | None = None
    sale_date: date | None = None


def normalize_row(raw: Mapping[str, Any]) -> SaleRow:
    """Build a ``SaleRow`` from a storage mapping, tolerating missing fields."""
    return SaleRow(
        revenue=coerce_revenue(raw.get("revenue")),
        deals=coerce_deal_count(raw.get("deal_count")),
        territory_id=_as_id(raw.get("territory_id")),
        sales_rep_id=_as_id(raw.get("sales_rep_id")),
        product_id=_as_id(raw.get("product_id")),
        customer_id=_as_id(raw.get("customer_id")),
        month=_as_int(raw.get("month")),
        year=_as_int(raw.get("year")),
        sale_date=raw.get("sale_date"),
    )


def normalize_rows(raws: Iterable[Mapping[str, Any]]) -> list[SaleRow]:
    return [normalize_row(raw) for raw in raws]


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def validate_period(month: Any, year: Any) -> tuple[int, int]:
    """Validate a (month, year) pair; raises ``InvalidFilter``."""
    try:
        month_num = int(month)
    except (TypeError, ValueError):
        raise InvalidFilter("Mois invalide.", field="month")
    try:
        year_num = int(year)
    except (TypeError, ValueError):
        raise InvalidFilter("Annee invalide.", field="year")
    if not 1 <= month_num <= 12:
        raise InvalidFilter("Le mois doit etre compris entre 1 et 12.", field="month")
    if not MIN_YEAR <= year_num <= MAX_YEAR:
        raise InvalidFilter(
            f"L'annee doit etre comprise entre {MIN_YEAR} et {MAX_YEAR}.", field="year",
        )
    return month_num, year_num


@dataclass(frozen=True)
class SaleFilter:
    """Filter handed to the sale fetcher.

    ``territory_ids`` / ``rep_ids`` set to ``None`` mean "no restriction";
    an empty frozenset means "nothing" and is short-circuited upstream.
    """

    territory_ids: frozenset[str] | None = None
    rep_id: str | None = None
    rep_ids: frozenset[str] | None = None
    product_id: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    month: int | None = None
    year: int | None = None

    def __post_init__(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise InvalidFilter(
                "La date de debut doit preceder la date de fin.", field="date_from",
            )
        if self.month is not None or self.year is not None:
            if self.month is None or self.year is None:
                raise InvalidFilter("Le mois et l'annee vont ensemble.", field="month")
            validate_period(self.month, self.year)

    def restricted_to(self, territory_ids, rep_id) -> "SaleFilter":
        return replace(
            self,
            territory_ids=frozenset(territory_ids) if territory_ids is not None else None,
            rep_id=rep_id,
        )

    def without_scope(self) -> "SaleFilter":
        return replace(self, territory_ids=None, rep_id=None, rep_ids=None)


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TerritoryInfo:
    id: str
    name: str
    state: str
    region: str = ""
    latitude: Decimal | None = None
    longitude: Decimal | None = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "state": self.state,
            "region": self.region,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


@dataclass(frozen=True)
class RepInfo:
    id: str
    first_name: str
    last_name: str = ""
    user_code: str = ""
    email: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "user_code": self.user_code,
        }
