from datetime import date
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from performance.exceptions import UpstreamFetchFailure
from performance.fetchers import AssignmentFetcher, MetadataFetcher, SaleFetcher, TargetStore
from performance.records import SaleFilter
from sales.models import SaleRecord
from territories.models import TerritoryAssignment


@pytest.mark.django_db
class TestSaleFetcher:
    def test_rows_are_normalised(self, sales_user, territory, product, make_sale):
        make_sale(sales_user, territory, "1250.50", deal_count=3, product=product)

        rows = SaleFetcher().fetch(SaleFilter())

        assert len(rows) == 1
        assert rows[0].revenue == Decimal("1250.50")
        assert rows[0].deals == 3
        assert rows[0].territory_id == str(territory.pk)
        assert rows[0].product_id == str(product.pk)
        assert (rows[0].month, rows[0].year) == (3, 2026)

    def test_filters(self, sales_user, other_sales_user, territory, second_territory, make_sale):
        make_sale(sales_user, territory, 100, sale_date=date(2026, 1, 5))
        make_sale(sales_user, second_territory, 200, sale_date=date(2026, 2, 5))
        make_sale(other_sales_user, territory, 300, sale_date=date(2026, 2, 20))
        fetcher = SaleFetcher()

        by_territory = fetcher.fetch(SaleFilter(territory_ids=frozenset([str(territory.pk)])))
        by_rep = fetcher.fetch(SaleFilter(rep_id=str(other_sales_user.pk)))
        by_window = fetcher.fetch(SaleFilter(date_from=date(2026, 2, 1), date_to=date(2026, 2, 10)))
        by_period = fetcher.fetch(SaleFilter(month=2, year=2026))

        assert sorted(r.revenue for r in by_territory) == [Decimal(100), Decimal(300)]
        assert [r.revenue for r in by_rep] == [Decimal(300)]
        assert [r.revenue for r in by_window] == [Decimal(200)]
        assert sorted(r.revenue for r in by_period) == [Decimal(200), Decimal(300)]
        assert fetcher.fetch(SaleFilter(territory_ids=frozenset())) == []

    def test_territory_ids_are_distinct(self, sales_user, territory, make_sale):
        make_sale(sales_user, territory, 1)
        make_sale(sales_user, territory, 2)

        assert SaleFetcher().territory_ids(SaleFilter(rep_id=str(sales_user.pk))) == {str(territory.pk)}

    def test_database_errors_become_upstream_failures(self):
        with mock.patch.object(SaleRecord.objects, "all", side_effect=DatabaseError("boom")):
            with pytest.raises(UpstreamFetchFailure):
                SaleFetcher().fetch(SaleFilter())


@pytest.mark.django_db
class TestAssignmentAndMetadata:
    def test_assignment_lookups(self, sales_user, territory, second_territory):
        TerritoryAssignment.objects.create(sales_rep=sales_user, territory=territory)
        fetcher = AssignmentFetcher()

        assert fetcher.territory_ids_for_rep(str(sales_user.pk)) == {str(territory.pk)}
        reps = fetcher.reps_by_territory([str(territory.pk), str(second_territory.pk)])
        assert list(reps) == [str(territory.pk)]
        assert reps[str(territory.pk)][0].display_name == "Sales User"

    def test_metadata(self, sales_user, management_user, territory, second_territory, product, customer):
        metadata = MetadataFetcher()

        assert [t.name for t in metadata.territories()] == ["Mumbai", "Pune"]
        assert metadata.territory(str(second_territory.pk)).state == "Maharashtra"
        assert metadata.products([product.pk])[0]["category"] == "Software"
        assert metadata.customers([customer.pk])[0]["industry"] == "Retail"
        assert [rep.id for rep in metadata.sales_reps()] == [str(sales_user.pk)]


@pytest.mark.django_db
class TestTargetStore:
    def test_create_update_and_period_lookup(self, sales_user):
        store = TargetStore()

        target = store.create(str(sales_user.pk), 3, 2026, Decimal("1000"))
        store.update(target, Decimal("2500"))

        assert store.get(str(sales_user.pk), 3, 2026).target_amount == Decimal("2500")
        assert store.get(str(sales_user.pk), 4, 2026) is None
        assert store.for_period(3, 2026) == {str(sales_user.pk): Decimal("2500.00")}
