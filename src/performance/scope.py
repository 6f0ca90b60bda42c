"""Role-based data scoping.

Every aggregation is narrowed by a ``ScopeResult`` before any sale is
fetched. Sales representatives are confined to their assigned territories;
administration and management see everything unless they inspect a single
representative, in which case the territories come from the union of that
representative's sales in the window and their formal assignments.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from performance.exceptions import ScopeViolation
from performance.records import SaleFilter

logger = logging.getLogger("territory")


@dataclass(frozen=True)
class ScopeResult:
    territory_ids: frozenset[str] | None
    rep_id: str | None = None

    @property
    def is_unrestricted(self) -> bool:
        return self.territory_ids is None

    @property
    def is_empty(self) -> bool:
        return self.territory_ids is not None and not self.territory_ids

    def allows(self, territory_id) -> bool:
        if self.territory_ids is None:
            return True
        return str(territory_id) in self.territory_ids

    def apply(self, sale_filter: SaleFilter) -> SaleFilter:
        return sale_filter.restricted_to(self.territory_ids, self.rep_id)


class ScopeResolver:
    role = None

    def __init__(self, assignments, sales):
        self.assignments = assignments
        self.sales = sales

    def resolve(self, caller_id, requested: SaleFilter | None = None) -> ScopeResult:
        raise NotImplementedError

    def _union_scope(self, rep_id, requested: SaleFilter) -> ScopeResult:
        window = requested.without_scope()
        from_sales = {str(pk) for pk in self.sales.territory_ids(window.restricted_to(None, rep_id))}
        from_assignments = {str(pk) for pk in self.assignments.territory_ids_for_rep(rep_id)}
        return ScopeResult(frozenset(from_sales | from_assignments), rep_id=rep_id)


class _OversightScopeResolver(ScopeResolver):
    def resolve(self, caller_id, requested=None):
        requested = requested or SaleFilter()
        if requested.rep_id:
            return self._union_scope(str(requested.rep_id), requested)
        return ScopeResult(territory_ids=None)


class AdminScopeResolver(_OversightScopeResolver):
    role = "ADMIN"


class ManagementScopeResolver(_OversightScopeResolver):
    role = "MANAGEMENT"


class SalesScopeResolver(ScopeResolver):
    role = "SALES"

    def resolve(self, caller_id, requested=None):
        caller_id = str(caller_id)
        if requested is not None and requested.rep_id and str(requested.rep_id) != caller_id:
            logger.info(
                "Sales rep %s asked for rep %s; forcing own scope",
                caller_id, requested.rep_id,
            )
        territory_ids = frozenset(str(pk) for pk in self.assignments.territory_ids_for_rep(caller_id))
        return ScopeResult(territory_ids, rep_id=caller_id)


RESOLVERS = {
    resolver.role: resolver
    for resolver in (AdminScopeResolver, ManagementScopeResolver, SalesScopeResolver)
}


def resolver_for(role, *, assignments, sales) -> ScopeResolver:
    try:
        resolver_class = RESOLVERS[str(role)]
    except KeyError:
        raise ScopeViolation(f"Role inconnu : {role}")
    return resolver_class(assignments=assignments, sales=sales)
