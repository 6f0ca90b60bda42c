from datetime import date
from decimal import Decimal

import pytest

from customers.models import Customer
from performance.exceptions import ScopeViolation
from sales.models import SaleRecord
from sales.services import record_sale


@pytest.mark.django_db
class TestRecordSale:
    def test_records_sale_in_assigned_territory(self, sales_user, territory, assignment, product):
        sale = record_sale(
            sales_rep=sales_user,
            territory=territory,
            revenue=Decimal("45000.00"),
            sale_date=date(2026, 5, 17),
            deal_count=2,
            product=product,
            customer_name="Deccan Pharma",
            customer_industry="Healthcare",
        )

        assert (sale.month, sale.year) == (5, 2026)
        assert sale.deal_count == 2
        assert sale.customer.name == "Deccan Pharma"
        assert sale.customer.location == "Mumbai"

    def test_explicit_period_wins(self, sales_user, territory, assignment):
        sale = record_sale(
            sales_rep=sales_user,
            territory=territory,
            revenue=Decimal("10"),
            sale_date=date(2026, 5, 31),
            month=6,
            year=2026,
        )

        assert (sale.month, sale.year) == (6, 2026)
        assert sale.customer is None

    def test_sales_rep_cannot_book_outside_assignment(self, sales_user, second_territory):
        with pytest.raises(ScopeViolation):
            record_sale(
                sales_rep=sales_user,
                territory=second_territory,
                revenue=Decimal("10"),
                sale_date=date(2026, 5, 1),
                customer_name="Ghost",
            )

        assert not SaleRecord.objects.exists()
        assert not Customer.objects.exists()

    def test_admin_can_book_anywhere(self, admin_user, second_territory):
        sale = record_sale(
            sales_rep=admin_user,
            territory=second_territory,
            revenue=Decimal("10"),
            sale_date=date(2026, 5, 1),
        )

        assert sale.pk is not None


@pytest.mark.django_db
def test_save_fills_period_from_sale_date(sales_user, territory):
    sale = SaleRecord.objects.create(
        sales_rep=sales_user, territory=territory, revenue=Decimal("1"), sale_date=date(2025, 12, 2),
    )

    assert (sale.month, sale.year) == (12, 2025)
