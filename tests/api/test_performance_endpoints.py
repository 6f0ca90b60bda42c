import uuid
from datetime import date
from unittest import mock

import pytest
from django.db import DatabaseError
from django.urls import reverse
from rest_framework.test import APIClient

from objectives.models import SalesTarget
from performance.exceptions import UpstreamFetchFailure
from performance.fetchers import SaleFetcher
from sales.models import SaleRecord


@pytest.fixture
def booked(sales_user, other_sales_user, territory, second_territory, assignment, make_sale):
    """Mumbai: 1000 by the assigned rep. Pune: 5000 by another rep."""
    make_sale(sales_user, territory, 1000, deal_count=2)
    make_sale(other_sales_user, second_territory, 5000)


# ---------------------------------------------------------------------------
# Territory performance
# ---------------------------------------------------------------------------

@pytest.mark.django_db
class TestTerritoryPerformance:
    url_name = "api:territory-performance"

    def test_anonymous_is_rejected(self, api_client):
        assert api_client.get(reverse(self.url_name)).status_code == 401

    def test_admin_is_forbidden(self, admin_client):
        assert admin_client.get(reverse(self.url_name)).status_code == 403

    def test_management_sees_every_territory(self, management_client, booked):
        response = management_client.get(reverse(self.url_name))

        assert response.status_code == 200
        data = response.json()
        assert [row["territory_name"] for row in data] == ["Pune", "Mumbai"]
        assert data[0]["total_revenue"] == 5000
        assert data[1]["total_deals"] == 2
        assert data[1]["avg_deal_size"] == 500
        assert data[1]["assigned_sales_reps"][0]["user_code"] == "SL_001"

    def test_sales_is_limited_to_assigned_territories(self, sales_client, booked):
        response = sales_client.get(reverse(self.url_name))

        assert response.status_code == 200
        assert [row["territory_name"] for row in response.json()] == ["Mumbai"]

    def test_rep_without_assignment_gets_empty_list(self, other_sales_user, booked):
        client = APIClient()
        client.force_authenticate(user=other_sales_user)
        response = client.get(reverse(self.url_name))

        assert response.status_code == 200
        assert response.json() == []

    def test_inverted_date_range_is_rejected(self, management_client):
        response = management_client.get(reverse(self.url_name), {"date_from": "2026-04-01", "date_to": "2026-03-01"})

        assert response.status_code == 400
        assert "date_from" in response.json()

    def test_date_window(self, management_client, sales_user, territory, booked, make_sale):
        make_sale(sales_user, territory, 700, sale_date=date(2026, 6, 1))

        response = management_client.get(reverse(self.url_name), {"date_from": "2026-06-01", "date_to": "2026-06-30"})

        by_name = {row["territory_name"]: row["total_revenue"] for row in response.json()}
        assert by_name == {"Mumbai": 700, "Pune": 0}


@pytest.mark.django_db
class TestTerritoryDetail:
    def test_detail(self, management_client, territory, product, customer, sales_user, assignment, make_sale):
        make_sale(sales_user, territory, 1200, product=product, customer=customer)
        make_sale(sales_user, territory, 300, sale_date=date(2026, 4, 2))

        response = management_client.get(reverse("api:territory-performance-detail", args=[territory.pk]))

        assert response.status_code == 200
        data = response.json()
        assert data["territory"]["name"] == "Mumbai"
        assert data["total_revenue"] == 1500
        assert [(p["year"], p["month"]) for p in data["monthly_trend"]] == [(2026, 3), (2026, 4)]
        assert data["top_products"][0]["name"] == "CRM Starter"
        assert data["top_customers"][0]["name"] == "Sharma Traders"
        assert data["assigned_reps"][0]["display_name"] == "Sales User"

    def test_unassigned_territory_is_forbidden_for_sales(self, sales_client, assignment, second_territory):
        response = sales_client.get(reverse("api:territory-performance-detail", args=[second_territory.pk]))

        assert response.status_code == 403

    def test_unknown_territory(self, management_client):
        response = management_client.get(reverse("api:territory-performance-detail", args=[uuid.uuid4()]))

        assert response.status_code == 404


@pytest.mark.django_db
def test_sales_reps_listing(management_client, sales_client, sales_user, other_sales_user):
    url = reverse("api:territory-performance-sales-reps")

    response = management_client.get(url)

    assert response.status_code == 200
    assert [rep["display_name"] for rep in response.json()] == ["Sales User", "Zoe Second"]
    assert sales_client.get(url).status_code == 403


# ---------------------------------------------------------------------------
# Maps
# ---------------------------------------------------------------------------

@pytest.mark.django_db
class TestMaps:
    def _buckets(self, response):
        return {row["name"]: row["color_bucket"] for row in response.json()}

    def test_territory_map_uses_fixed_fraction(self, admin_client, booked):
        response = admin_client.get(reverse("api:map-territories"))

        assert response.status_code == 200
        assert self._buckets(response) == {"Pune": "HIGH", "Mumbai": "LOW"}

    def test_district_map_uses_percentile(self, admin_client, booked):
        response = admin_client.get(reverse("api:map-districts"))

        assert self._buckets(response) == {"Pune": "HIGH", "Mumbai": "MEDIUM"}

    def test_strategy_override(self, admin_client, booked):
        response = admin_client.get(reverse("api:map-territories"), {"strategy": "percentile"})

        assert self._buckets(response) == {"Pune": "HIGH", "Mumbai": "MEDIUM"}

    def test_unknown_strategy(self, admin_client):
        response = admin_client.get(reverse("api:map-territories"), {"strategy": "random"})

        assert response.status_code == 400

    def test_sales_map_shows_assigned_territories_only(self, sales_client, booked):
        response = sales_client.get(reverse("api:map-territories"))

        rows = response.json()
        assert [row["name"] for row in rows] == ["Mumbai"]
        assert rows[0]["revenue"] == 1000
        assert rows[0]["color_bucket"] == "HIGH"


# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------

@pytest.mark.django_db
class TestDashboards:
    def test_sales_dashboard(self, sales_client, management_client, booked):
        response = sales_client.get(reverse("api:dashboard-sales"))

        assert response.status_code == 200
        data = response.json()
        assert data["total_revenue"] == 1000
        assert data["territories"][0]["name"] == "Mumbai"
        assert management_client.get(reverse("api:dashboard-sales")).status_code == 403

    def test_management_dashboard(self, management_client, third_territory, sales_user, make_sale, booked):
        make_sale(sales_user, third_territory, 150000)

        response = management_client.get(reverse("api:dashboard-management"))

        assert response.status_code == 200
        data = response.json()
        assert data["total_revenue"] == 156000
        assert data["top_territories"][0]["territory_name"] == "Chennai"
        assert data["top_territories"][0]["insight"] == "EXPANSION_CANDIDATE"
        assert data["bottom_territories"][0]["territory_name"] == "Mumbai"
        assert data["revenue_by_region"] == [
            {"region": "Unknown", "revenue": 150000},
            {"region": "West", "revenue": 6000},
        ]

    def test_management_dashboard_is_closed_to_sales(self, sales_client):
        assert sales_client.get(reverse("api:dashboard-management")).status_code == 403


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------

@pytest.mark.django_db
class TestSalesTarget:
    url_name = "api:management-sales-target"

    def _body(self, rep, amount="100000.00", month=3, year=2026):
        return {"sales_rep": str(rep.pk), "month": month, "year": year, "target_amount": amount}

    def test_create_then_update(self, management_client, sales_user):
        created = management_client.post(reverse(self.url_name), self._body(sales_user), format="json")
        updated = management_client.post(reverse(self.url_name), self._body(sales_user, "80000.00"), format="json")

        assert created.status_code == 201
        assert created.json()["outcome"] == "created"
        assert updated.status_code == 200
        assert updated.json()["outcome"] == "updated"
        assert updated.json()["target"]["target_amount"] == "80000.00"
        assert SalesTarget.objects.count() == 1

    @pytest.mark.parametrize("overrides", [{"month": 0}, {"year": 1999}, {"amount": "0"}, {"amount": "-5"}])
    def test_invalid_values(self, management_client, sales_user, overrides):
        response = management_client.post(reverse(self.url_name), self._body(sales_user, **overrides), format="json")

        assert response.status_code == 400
        assert not SalesTarget.objects.exists()

    def test_unknown_rep(self, management_client, management_user):
        response = management_client.post(reverse(self.url_name), self._body(management_user), format="json")

        assert response.status_code == 400
        assert "sales_rep" in response.json()

    def test_only_management_can_set_targets(self, sales_client, admin_client, sales_user):
        assert sales_client.post(reverse(self.url_name), self._body(sales_user), format="json").status_code == 403
        assert admin_client.post(reverse(self.url_name), self._body(sales_user), format="json").status_code == 403


@pytest.mark.django_db
class TestSalesPerformance:
    url_name = "api:management-sales-performance"

    def test_rows_for_reps_with_targets(self, management_client, booked, sales_user, make_target):
        make_target(sales_user, 1000)

        response = management_client.get(reverse(self.url_name), {"month": 3, "year": 2026})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["pages"] == 1
        row = data["data"][0]
        assert row["user_code"] == "SL_001"
        assert row["achieved_revenue"] == 1000
        assert row["performance_percentage"] == 100.0
        assert row["status"] == "ACHIEVED"

    def test_invalid_month(self, management_client):
        assert management_client.get(reverse(self.url_name), {"month": 13, "year": 2026}).status_code == 400

    def test_invalid_page(self, management_client):
        assert management_client.get(reverse(self.url_name), {"month": 3, "year": 2026, "page": 0}).status_code == 400


@pytest.mark.django_db
class TestMyPerformance:
    url_name = "api:sales-my-performance"

    def test_without_target(self, sales_client, booked):
        response = sales_client.get(reverse(self.url_name), {"month": 3, "year": 2026})

        assert response.status_code == 200
        assert response.json() == {
            "month": 3,
            "year": 2026,
            "achieved_revenue": 1000,
            "target_amount": None,
            "performance_percentage": None,
            "status": "NO_TARGET",
        }

    def test_exceeded(self, sales_client, sales_user, booked, make_target):
        make_target(sales_user, 800)

        data = sales_client.get(reverse(self.url_name), {"month": 3, "year": 2026}).json()

        assert data["status"] == "EXCEEDED"
        assert data["performance_percentage"] == 125.0

    def test_counts_sales_outside_current_assignment(
        self, sales_client, management_client, sales_user, second_territory, booked, make_sale, make_target,
    ):
        make_sale(sales_user, second_territory, 500)
        make_target(sales_user, 1500)

        card = sales_client.get(reverse(self.url_name), {"month": 3, "year": 2026}).json()
        table = management_client.get(
            reverse("api:management-sales-performance"), {"month": 3, "year": 2026},
        ).json()

        assert card["achieved_revenue"] == 1500
        assert card["status"] == "ACHIEVED"
        assert table["data"][0]["achieved_revenue"] == card["achieved_revenue"]

    def test_closed_to_management(self, management_client):
        assert management_client.get(reverse(self.url_name)).status_code == 403


# ---------------------------------------------------------------------------
# Upstream failures
# ---------------------------------------------------------------------------

@pytest.mark.django_db
class TestUpstreamFailure:
    detail = {"detail": "Erreur lors du calcul des performances."}

    def test_fetch_failure_is_a_generic_500(self, management_client, booked):
        with mock.patch.object(SaleFetcher, "fetch", side_effect=UpstreamFetchFailure("ventes")):
            response = management_client.get(reverse("api:territory-performance"))

        assert response.status_code == 500
        assert response.json() == self.detail

    def test_database_error_is_not_turned_into_an_empty_payload(self, sales_client, booked):
        with mock.patch.object(SaleRecord.objects, "all", side_effect=DatabaseError("connection lost")):
            response = sales_client.get(reverse("api:dashboard-sales"))

        assert response.status_code == 500
        assert response.json() == self.detail
        assert "total_revenue" not in response.json()
