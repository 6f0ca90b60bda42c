"""ORM-backed data collaborators of the performance engine.

The engine only talks to these objects, never to the models directly, so
tests can hand it in-memory fakes. Database failures are re-raised as
``UpstreamFetchFailure``; nothing here retries.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass

from django.conf import settings
from django.db import DatabaseError, connections

from accounts.models import User
from catalog.models import Product
from customers.models import Customer
from objectives.models import SalesTarget
from performance.exceptions import UpstreamFetchFailure
from performance.records import RepInfo, SaleFilter, TerritoryInfo, normalize_rows
from sales.models import SaleRecord
from territories.models import Territory, TerritoryAssignment

logger = logging.getLogger("territory")

SALE_FIELDS = (
    "revenue",
    "deal_count",
    "territory_id",
    "sales_rep_id",
    "product_id",
    "customer_id",
    "month",
    "year",
    "sale_date",
)


@contextmanager
def upstream(what):
    try:
        yield
    except DatabaseError as exc:
        logger.exception("Upstream fetch failed: %s", what)
        raise UpstreamFetchFailure(f"Echec de lecture : {what}") from exc


def _ids(values):
    return [str(value) for value in values]


class SaleFetcher:
    def queryset(self, sale_filter: SaleFilter):
        qs = SaleRecord.objects.all()
        if sale_filter.territory_ids is not None:
            qs = qs.filter(territory_id__in=list(sale_filter.territory_ids))
        if sale_filter.rep_id:
            qs = qs.filter(sales_rep_id=sale_filter.rep_id)
        if sale_filter.rep_ids is not None:
            qs = qs.filter(sales_rep_id__in=list(sale_filter.rep_ids))
        if sale_filter.product_id:
            qs = qs.filter(product_id=sale_filter.product_id)
        if sale_filter.date_from:
            qs = qs.filter(sale_date__gte=sale_filter.date_from)
        if sale_filter.date_to:
            qs = qs.filter(sale_date__lte=sale_filter.date_to)
        if sale_filter.month is not None:
            qs = qs.filter(month=sale_filter.month, year=sale_filter.year)
        return qs

    def fetch(self, sale_filter: SaleFilter):
        with upstream("ventes"):
            raws = list(self.queryset(sale_filter).order_by().values(*SALE_FIELDS))
        logger.debug("Fetched %d sale rows", len(raws))
        return normalize_rows(raws)

    def territory_ids(self, sale_filter: SaleFilter):
        with upstream("territoires vendus"):
            values = (
                self.queryset(sale_filter)
                .order_by()
                .values_list("territory_id", flat=True)
                .distinct()
            )
            return set(_ids(values))


class AssignmentFetcher:
    def territory_ids_for_rep(self, rep_id):
        with upstream("affectations"):
            values = TerritoryAssignment.objects.filter(sales_rep_id=rep_id).values_list(
                "territory_id", flat=True,
            )
            return set(_ids(values))

    def reps_by_territory(self, territory_ids=None):
        """Map territory id to the ``RepInfo`` of every assigned rep."""
        qs = TerritoryAssignment.objects.select_related("sales_rep").order_by(
            "sales_rep__first_name", "sales_rep__last_name",
        )
        if territory_ids is not None:
            qs = qs.filter(territory_id__in=list(territory_ids))
        result = {}
        with upstream("representants affectes"):
            for assignment in qs:
                rep = assignment.sales_rep
                result.setdefault(str(assignment.territory_id), []).append(_rep_info(rep))
        return result


def _rep_info(user) -> RepInfo:
    return RepInfo(
        id=str(user.pk),
        first_name=user.first_name,
        last_name=user.last_name,
        user_code=user.user_code,
        email=user.email,
    )


class MetadataFetcher:
    def territories(self, territory_ids=None):
        qs = Territory.objects.order_by("name")
        if territory_ids is not None:
            qs = qs.filter(pk__in=list(territory_ids))
        with upstream("territoires"):
            return [
                TerritoryInfo(
                    id=str(territory.pk),
                    name=territory.name,
                    state=territory.state,
                    region=territory.region,
                    latitude=territory.latitude,
                    longitude=territory.longitude,
                )
                for territory in qs
            ]

    def territory(self, territory_id):
        territories = self.territories([territory_id])
        return territories[0] if territories else None

    def products(self, product_ids):
        with upstream("produits"):
            return list(
                Product.objects.filter(pk__in=list(product_ids)).values("id", "name", "category")
            )

    def customers(self, customer_ids):
        with upstream("clients"):
            return list(
                Customer.objects.filter(pk__in=list(customer_ids)).values(
                    "id", "name", "industry", "location",
                )
            )

    def sales_reps(self, rep_ids=None):
        """Active SALES users, ordered by first name then last name."""
        qs = User.objects.active_sales_reps()
        if rep_ids is not None:
            qs = qs.filter(pk__in=list(rep_ids))
        with upstream("representants"):
            return [_rep_info(user) for user in qs]


class TargetStore:
    def get(self, rep_id, month, year):
        with upstream("objectifs"):
            return SalesTarget.objects.filter(
                sales_rep_id=rep_id, month=month, year=year,
            ).first()

    def create(self, rep_id, month, year, amount):
        with upstream("creation objectif"):
            return SalesTarget.objects.create(
                sales_rep_id=rep_id, month=month, year=year, target_amount=amount,
            )

    def update(self, target, amount):
        target.target_amount = amount
        with upstream("mise a jour objectif"):
            target.save(update_fields=["target_amount", "updated_at"])
        return target

    def for_period(self, month, year, rep_ids=None):
        """Map rep id to target amount for (month, year)."""
        qs = SalesTarget.objects.filter(month=month, year=year)
        if rep_ids is not None:
            qs = qs.filter(sales_rep_id__in=list(rep_ids))
        with upstream("objectifs"):
            return {
                str(rep_id): amount
                for rep_id, amount in qs.values_list("sales_rep_id", "target_amount")
            }


@dataclass
class Collaborators:
    sales: SaleFetcher
    assignments: AssignmentFetcher
    metadata: MetadataFetcher
    targets: TargetStore

    @classmethod
    def default(cls):
        return cls(
            sales=SaleFetcher(),
            assignments=AssignmentFetcher(),
            metadata=MetadataFetcher(),
            targets=TargetStore(),
        )


def _run_and_close(call):
    try:
        return call()
    finally:
        connections.close_all()


def fetch_all(**calls):
    """Run independent fetches and wait for all of them.

    With ``PERFORMANCE_PARALLEL_FETCH`` the calls run on a thread pool; each
    worker closes its own database connections. The first failure is
    re-raised once every call has finished.
    """
    if not calls:
        return {}
    parallel = getattr(settings, "PERFORMANCE_PARALLEL_FETCH", False)
    if not parallel or len(calls) == 1:
        return {name: call() for name, call in calls.items()}

    workers = min(len(calls), getattr(settings, "PERFORMANCE_FETCH_WORKERS", 4))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="perf-fetch") as pool:
        futures = {name: pool.submit(_run_and_close, call) for name, call in calls.items()}
    return {name: future.result() for name, future in futures.items()}
