import pytest

from performance.exceptions import ScopeViolation
from performance.records import SaleFilter
from performance.scope import (
    AdminScopeResolver,
    ManagementScopeResolver,
    SalesScopeResolver,
    ScopeResult,
    resolver_for,
)


def _resolver(role, collaborators):
    return resolver_for(role, assignments=collaborators.assignments, sales=collaborators.sales)


def test_rep_scope_is_union_of_sales_and_assignments(build_collaborators, row):
    collaborators = build_collaborators(
        rows=[row(100, territory="A", rep="r1")],
        pairs=[("r1", "B")],
    )

    scope = _resolver("MANAGEMENT", collaborators).resolve("m1", SaleFilter(rep_id="r1"))

    assert scope.territory_ids == frozenset({"A", "B"})
    assert scope.rep_id == "r1"


def test_union_only_counts_sales_of_the_inspected_rep(build_collaborators, row):
    collaborators = build_collaborators(
        rows=[row(100, territory="A", rep="r1"), row(100, territory="C", rep="r2")],
        pairs=[("r2", "B")],
    )

    scope = _resolver("ADMIN", collaborators).resolve("a1", SaleFilter(rep_id="r1"))

    assert scope.territory_ids == frozenset({"A"})


def test_management_without_rep_is_unrestricted(build_collaborators):
    scope = _resolver("MANAGEMENT", build_collaborators()).resolve("m1")

    assert scope.is_unrestricted
    assert not scope.is_empty
    assert scope.allows("anything")


def test_admin_without_rep_is_unrestricted(build_collaborators):
    assert _resolver("ADMIN", build_collaborators()).resolve("a1", SaleFilter()).is_unrestricted


def test_sales_scope_is_forced_to_caller(build_collaborators, row):
    collaborators = build_collaborators(
        rows=[row(100, territory="t2", rep="r2")],
        pairs=[("r1", "t1"), ("r2", "t2")],
    )

    scope = _resolver("SALES", collaborators).resolve("r1", SaleFilter(rep_id="r2"))

    assert scope.rep_id == "r1"
    assert scope.territory_ids == frozenset({"t1"})
    assert not scope.allows("t2")


def test_sales_scope_ignores_territories_with_sales_but_no_assignment(build_collaborators, row):
    collaborators = build_collaborators(rows=[row(100, territory="t9", rep="r1")], pairs=[("r1", "t1")])

    scope = _resolver("SALES", collaborators).resolve("r1")

    assert scope.territory_ids == frozenset({"t1"})
    assert collaborators.sales.territory_calls == []


def test_sales_without_assignment_is_empty(build_collaborators):
    scope = _resolver("SALES", build_collaborators()).resolve("r1")

    assert scope.is_empty


def test_unknown_role_is_forbidden(build_collaborators):
    with pytest.raises(ScopeViolation):
        _resolver("CASHIER", build_collaborators())


def test_resolver_classes_by_role(build_collaborators):
    assert isinstance(_resolver("ADMIN", build_collaborators()), AdminScopeResolver)
    assert isinstance(_resolver("MANAGEMENT", build_collaborators()), ManagementScopeResolver)
    assert isinstance(_resolver("SALES", build_collaborators()), SalesScopeResolver)


def test_apply_narrows_the_filter():
    scope = ScopeResult(frozenset({"t1"}), rep_id="r1")

    narrowed = scope.apply(SaleFilter(product_id="p1", rep_id="r9"))

    assert narrowed.territory_ids == frozenset({"t1"})
    assert narrowed.rep_id == "r1"
    assert narrowed.product_id == "p1"
