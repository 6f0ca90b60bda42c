"""Target-vs-achieved evaluation and the monthly target upsert."""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from performance.exceptions import InvalidFilter
from performance.records import ZERO, round_half_up, validate_period

logger = logging.getLogger("territory")


class TargetStatus(str, enum.Enum):
    EXCEEDED = "EXCEEDED"
    ACHIEVED = "ACHIEVED"
    BELOW = "BELOW"
    NO_TARGET = "NO_TARGET"


class UpsertOutcome(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"


@dataclass(frozen=True)
class Evaluation:
    target_amount: Decimal
    achieved_revenue: Decimal
    performance_percentage: Decimal
    status: TargetStatus


@dataclass(frozen=True)
class PerformanceRow:
    rep_id: str
    name: str
    user_code: str
    target_amount: Decimal
    achieved_revenue: Decimal
    performance_percentage: Decimal
    status: TargetStatus

    def as_dict(self) -> dict:
        return {
            "sales_rep_id": self.rep_id,
            "name": self.name,
            "user_code": self.user_code,
            "target_amount": self.target_amount,
            "achieved_revenue": self.achieved_revenue,
            "performance_percentage": float(self.performance_percentage),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class UpsertResult:
    target: object
    outcome: UpsertOutcome

    @property
    def created(self) -> bool:
        return self.outcome is UpsertOutcome.CREATED


@dataclass(frozen=True)
class Page:
    data: list
    total: int
    page: int
    pages: int


def evaluate(target_amount, achieved) -> Evaluation:
    """Compare ``achieved`` against ``target_amount``.

    Equality is ACHIEVED; only a strictly larger revenue is EXCEEDED.
    """
    target_amount = Decimal(target_amount)
    achieved = Decimal(achieved)
    if target_amount <= 0:
        raise InvalidFilter("L'objectif doit etre strictement positif.", field="target_amount")
    percentage = round_half_up(achieved / target_amount * 100, "0.1")
    if achieved > target_amount:
        status = TargetStatus.EXCEEDED
    elif achieved == target_amount:
        status = TargetStatus.ACHIEVED
    else:
        status = TargetStatus.BELOW
    return Evaluation(target_amount, achieved, percentage, status)


def build_performance_rows(reps, targets, achieved) -> list[PerformanceRow]:
    """One row per rep holding a target; reps without one are left out.

    ``targets`` maps rep id to target amount, ``achieved`` maps rep id to
    achieved revenue (missing means no sales).
    """
    rows = []
    for rep in reps:
        target_amount = targets.get(rep.id)
        if target_amount is None or target_amount <= 0:
            continue
        evaluation = evaluate(target_amount, achieved.get(rep.id, ZERO))
        rows.append(PerformanceRow(
            rep_id=rep.id,
            name=rep.display_name,
            user_code=rep.user_code,
            target_amount=evaluation.target_amount,
            achieved_revenue=evaluation.achieved_revenue,
            performance_percentage=evaluation.performance_percentage,
            status=evaluation.status,
        ))
    return rows


def validate_target(month, year, amount) -> tuple[int, int, Decimal]:
    month, year = validate_period(month, year)
    try:
        amount = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidFilter("Montant d'objectif invalide.", field="target_amount")
    if not amount.is_finite() or amount <= 0:
        raise InvalidFilter("L'objectif doit etre strictement positif.", field="target_amount")
    return month, year, amount


def set_target(store, rep_id, month, year, amount) -> UpsertResult:
    """Create or update the target of ``rep_id`` for (month, year).

    Check-then-create: two concurrent calls for the same period are only
    kept apart by the storage unique constraint.
    """
    month, year, amount = validate_target(month, year, amount)
    existing = store.get(rep_id, month, year)
    if existing is not None:
        target = store.update(existing, amount)
        outcome = UpsertOutcome.UPDATED
    else:
        target = store.create(rep_id, month, year, amount)
        outcome = UpsertOutcome.CREATED
    logger.info(
        "Sales target %s for rep %s (%02d/%d): %s",
        outcome.value, rep_id, month, year, amount,
    )
    return UpsertResult(target=target, outcome=outcome)


def paginate(rows, page, limit) -> Page:
    try:
        page = int(page)
        limit = int(limit)
    except (TypeError, ValueError):
        raise InvalidFilter("Pagination invalide.", field="page")
    if page < 1:
        raise InvalidFilter("La page doit etre superieure ou egale a 1.", field="page")
    if limit < 1:
        raise InvalidFilter("La limite doit etre superieure ou egale a 1.", field="limit")
    total = len(rows)
    pages = max(1, math.ceil(total / limit))
    start = (page - 1) * limit
    return Page(data=list(rows[start:start + limit]), total=total, page=page, pages=pages)
