"""
Territory performance views.

``PerformanceService`` resolves the caller's scope, fetches the rows the
view needs through its collaborators, then derives the payload with the
pure aggregation, classification, target, trend and ranking helpers.
An empty scope short-circuits before any sale is fetched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial

from django.conf import settings

from performance.aggregation import Bucket, GroupBy, aggregate, revenue_by_key, totals
from performance.classification import Strategy, insight_for, thresholds_for
from performance.exceptions import InvalidFilter, ScopeViolation, TerritoryNotFound
from performance.fetchers import Collaborators, fetch_all
from performance.ranking import top_n
from performance.records import ZERO, SaleFilter, validate_period
from performance.scope import resolver_for
from performance.targets import (
    TargetStatus,
    build_performance_rows,
    evaluate,
    paginate,
    set_target,
)
from performance.trends import trend_from_buckets

logger = logging.getLogger("territory")

UNKNOWN_REGION = "Unknown"


@dataclass(frozen=True)
class Caller:
    id: str
    role: str

    @classmethod
    def from_user(cls, user):
        return cls(id=str(user.pk), role=str(user.role))


def _top_n_setting():
    return getattr(settings, "PERFORMANCE_TOP_N", 5)


def _bucket_fields(bucket: Bucket) -> dict:
    return {
        "total_revenue": bucket.revenue,
        "total_deals": bucket.deals,
        "avg_deal_size": bucket.avg_deal_size,
    }


class PerformanceService:
    """Assembles every performance payload for one caller."""

    def __init__(self, collaborators: Collaborators | None = None):
        self.collaborators = collaborators or Collaborators.default()

    @property
    def sales(self):
        return self.collaborators.sales

    @property
    def assignments(self):
        return self.collaborators.assignments

    @property
    def metadata(self):
        return self.collaborators.metadata

    @property
    def targets(self):
        return self.collaborators.targets

    # ------------------------------------------------------------------
    # Scope
    # ------------------------------------------------------------------

    def resolve_scope(self, caller: Caller, requested: SaleFilter | None = None):
        resolver = resolver_for(caller.role, assignments=self.assignments, sales=self.sales)
        scope = resolver.resolve(caller.id, requested or SaleFilter())
        logger.debug(
            "Scope for %s %s: %s territories, rep=%s",
            caller.role,
            caller.id,
            "all" if scope.is_unrestricted else len(scope.territory_ids),
            scope.rep_id,
        )
        return scope

    # ------------------------------------------------------------------
    # Territory listing and detail
    # ------------------------------------------------------------------

    def territory_listing(self, caller: Caller, sale_filter: SaleFilter | None = None) -> list[dict]:
        """Territories in scope sorted by revenue, highest first."""
        sale_filter = sale_filter or SaleFilter()
        scope = self.resolve_scope(caller, sale_filter)
        if scope.is_empty:
            logger.info("Empty scope for %s, territory listing skipped", caller.id)
            return []

        fetched = fetch_all(
            sales=partial(self.sales.fetch, scope.apply(sale_filter)),
            territories=partial(self.metadata.territories, scope.territory_ids),
            reps=partial(self.assignments.reps_by_territory, scope.territory_ids),
        )
        by_territory = aggregate(fetched["sales"], GroupBy.TERRITORY)
        rows = []
        for territory in fetched["territories"]:
            bucket = by_territory.get(territory.id) or Bucket(key=territory.id)
            rows.append({
                "territory_id": territory.id,
                "territory_name": territory.name,
                "state": territory.state,
                "region": territory.region,
                **_bucket_fields(bucket),
                "assigned_sales_reps": [
                    rep.as_dict() for rep in fetched["reps"].get(territory.id, [])
                ],
            })
        rows.sort(key=lambda row: (-row["total_revenue"], row["territory_name"]))
        return rows

    def territory_detail(self, caller: Caller, territory_id) -> dict:
        territory_id = str(territory_id)
        scope = self.resolve_scope(caller)
        if not scope.allows(territory_id):
            raise ScopeViolation("Ce territoire ne vous est pas affecte.")

        territory = self.metadata.territory(territory_id)
        if territory is None:
            raise TerritoryNotFound("Territoire introuvable.")

        fetched = fetch_all(
            sales=partial(self.sales.fetch, SaleFilter(territory_ids=frozenset([territory_id]))),
            reps=partial(self.assignments.reps_by_territory, [territory_id]),
        )
        rows = fetched["sales"]
        k = _top_n_setting()
        products = revenue_by_key(aggregate(rows, GroupBy.PRODUCT))
        customers = revenue_by_key(aggregate(rows, GroupBy.CUSTOMER))
        return {
            "territory": territory.as_dict(),
            **_bucket_fields(totals(rows)),
            "monthly_trend": [
                point.as_dict()
                for point in trend_from_buckets(aggregate(rows, GroupBy.MONTH))
            ],
            "top_products": top_n(products, self.metadata.products, k),
            "top_customers": top_n(customers, self.metadata.customers, k),
            "assigned_reps": [rep.as_dict() for rep in fetched["reps"].get(territory_id, [])],
        }

    def sales_reps(self) -> list[dict]:
        return [rep.as_dict() for rep in self.metadata.sales_reps()]

    # ------------------------------------------------------------------
    # Maps
    # ------------------------------------------------------------------

    def territory_map(
        self,
        caller: Caller,
        sale_filter: SaleFilter | None = None,
        strategy: Strategy = Strategy.FIXED_FRACTION,
    ) -> list[dict]:
        """Map markers coloured HIGH / MEDIUM / LOW.

        Thresholds are computed over the territories that have at least one
        sale in the window; territories without sales are then classified
        with revenue 0.
        """
        sale_filter = sale_filter or SaleFilter()
        scope = self.resolve_scope(caller, sale_filter)
        if scope.is_empty:
            return []

        fetched = fetch_all(
            sales=partial(self.sales.fetch, scope.apply(sale_filter)),
            territories=partial(self.metadata.territories, scope.territory_ids),
        )
        by_territory = aggregate(fetched["sales"], GroupBy.TERRITORY)
        thresholds = thresholds_for(revenue_by_key(by_territory).values(), strategy)
        payload = []
        for territory in fetched["territories"]:
            bucket = by_territory.get(territory.id) or Bucket(key=territory.id)
            payload.append({
                **territory.as_dict(),
                "revenue": bucket.revenue,
                "deals": bucket.deals,
                "color_bucket": thresholds.bucket_for(bucket.revenue).value,
            })
        return payload

    def district_map(self, caller: Caller, sale_filter: SaleFilter | None = None) -> list[dict]:
        return self.territory_map(caller, sale_filter, strategy=Strategy.PERCENTILE)

    # ------------------------------------------------------------------
    # Dashboards
    # ------------------------------------------------------------------

    def sales_dashboard(self, caller: Caller, sale_filter: SaleFilter | None = None) -> dict:
        """Personal KPIs of a representative over their assigned territories."""
        sale_filter = sale_filter or SaleFilter()
        scope = self.resolve_scope(caller, sale_filter)
        if scope.is_empty:
            return {
                **_bucket_fields(Bucket()),
                "monthly_trend": [],
                "top_customers": [],
                "territories": [],
            }

        fetched = fetch_all(
            sales=partial(self.sales.fetch, scope.apply(sale_filter)),
            territories=partial(self.metadata.territories, scope.territory_ids),
        )
        rows = fetched["sales"]
        by_territory = aggregate(rows, GroupBy.TERRITORY)
        customers = revenue_by_key(aggregate(rows, GroupBy.CUSTOMER))
        return {
            **_bucket_fields(totals(rows)),
            "monthly_trend": [
                point.as_dict()
                for point in trend_from_buckets(aggregate(rows, GroupBy.MONTH))
            ],
            "top_customers": top_n(customers, self.metadata.customers, _top_n_setting()),
            "territories": [
                {
                    **territory.as_dict(),
                    "revenue": (by_territory.get(territory.id) or Bucket()).revenue,
                    "deals": (by_territory.get(territory.id) or Bucket()).deals,
                }
                for territory in fetched["territories"]
            ],
        }

    def management_dashboard(self, caller: Caller, sale_filter: SaleFilter | None = None) -> dict:
        """Regional KPIs with best / worst territories and insights."""
        sale_filter = sale_filter or SaleFilter()
        scope = self.resolve_scope(caller, sale_filter)
        if scope.is_empty:
            return {
                **_bucket_fields(Bucket()),
                "top_territories": [],
                "bottom_territories": [],
                "revenue_by_region": [],
                "monthly_trend": [],
            }

        fetched = fetch_all(
            sales=partial(self.sales.fetch, scope.apply(sale_filter)),
            territories=partial(self.metadata.territories, scope.territory_ids),
        )
        rows = fetched["sales"]
        territories = {territory.id: territory for territory in fetched["territories"]}
        by_territory = aggregate(rows, GroupBy.TERRITORY)

        classified = []
        for territory_id, bucket in by_territory.items():
            territory = territories.get(territory_id)
            if territory is None:
                continue
            insight = insight_for(bucket.revenue, bucket.deals)
            classified.append({
                "territory_id": territory_id,
                "territory_name": territory.name,
                "state": territory.state,
                "region": territory.region,
                "revenue": bucket.revenue,
                "deals": bucket.deals,
                "insight": insight.value if insight else None,
            })
        classified.sort(key=lambda row: (-row["revenue"], row["territory_name"]))

        by_region = {}
        for territory in fetched["territories"]:
            region = territory.region or UNKNOWN_REGION
            bucket = by_territory.get(territory.id)
            by_region[region] = by_region.get(region, ZERO) + (bucket.revenue if bucket else ZERO)

        k = _top_n_setting()
        return {
            **_bucket_fields(totals(rows)),
            "top_territories": classified[:k],
            "bottom_territories": list(reversed(classified[-k:])) if classified else [],
            "revenue_by_region": [
                {"region": region, "revenue": revenue}
                for region, revenue in sorted(by_region.items(), key=lambda item: (-item[1], item[0]))
            ],
            "monthly_trend": [
                point.as_dict()
                for point in trend_from_buckets(aggregate(rows, GroupBy.MONTH))
            ],
        }

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    def sales_performance(self, caller: Caller, month, year, page=1, limit=None) -> dict:
        """Paginated target-vs-achieved rows for (month, year)."""
        month, year = validate_period(month, year)
        limit = limit or getattr(settings, "PERFORMANCE_PAGE_SIZE", 10)
        scope = self.resolve_scope(caller)
        if scope.is_empty:
            return self._page_dict(paginate([], page, limit))

        reps = self.metadata.sales_reps([scope.rep_id] if scope.rep_id else None)
        if not reps:
            return self._page_dict(paginate([], page, limit))

        rep_ids = frozenset(rep.id for rep in reps)
        period = scope.apply(SaleFilter(month=month, year=year, rep_ids=rep_ids))
        fetched = fetch_all(
            targets=partial(self.targets.for_period, month, year, rep_ids),
            sales=partial(self.sales.fetch, period),
        )
        achieved = revenue_by_key(aggregate(fetched["sales"], GroupBy.REP))
        rows = build_performance_rows(reps, fetched["targets"], achieved)
        return self._page_dict(paginate([row.as_dict() for row in rows], page, limit))

    @staticmethod
    def _page_dict(page) -> dict:
        return {"data": page.data, "total": page.total, "page": page.page, "pages": page.pages}

    def my_performance(self, caller: Caller, month, year) -> dict:
        """Target card of the calling representative.

        Achieved revenue is every sale of the rep for (month, year), the same
        sum the management performance table reports, whatever territories
        the rep is currently assigned to.
        """
        month, year = validate_period(month, year)
        fetched = fetch_all(
            target=partial(self.targets.get, caller.id, month, year),
            sales=partial(self.sales.fetch, SaleFilter(month=month, year=year, rep_id=caller.id)),
        )
        target = fetched["target"]
        achieved = totals(fetched["sales"]).revenue

        payload = {"month": month, "year": year, "achieved_revenue": achieved}
        if target is None:
            return {
                **payload,
                "target_amount": None,
                "performance_percentage": None,
                "status": TargetStatus.NO_TARGET.value,
            }
        evaluation = evaluate(target.target_amount, achieved)
        return {
            **payload,
            "target_amount": evaluation.target_amount,
            "performance_percentage": float(evaluation.performance_percentage),
            "status": evaluation.status.value,
        }

    def set_target(self, rep_id, month, year, amount):
        rep_id = str(rep_id)
        if not self.metadata.sales_reps([rep_id]):
            raise InvalidFilter("Representant introuvable ou inactif.", field="sales_rep")
        return set_target(self.targets, rep_id, month, year, amount)
