"""Business-logic / service functions for the sales app."""
from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from customers.models import Customer
from performance.exceptions import ScopeViolation
from sales.models import SaleRecord
from territories.models import TerritoryAssignment

logger = logging.getLogger("territory")


# ---------------------------------------------------------------------------
# record_sale
# ---------------------------------------------------------------------------

@transaction.atomic
def record_sale(
    *,
    sales_rep,
    territory,
    revenue: Decimal,
    sale_date,
    deal_count: int = 1,
    quantity: int = 1,
    month: int | None = None,
    year: int | None = None,
    product=None,
    customer_name: str = "",
    customer_industry: str = "",
    customer_contact: str = "",
) -> SaleRecord:
    """Book a sale for ``sales_rep``.

    A SALES user may only book into a territory formally assigned to them;
    ``ScopeViolation`` is raised otherwise. When a customer name is given
    a new customer row is created and linked to the sale.
    """
    if sales_rep.is_sales and not TerritoryAssignment.objects.filter(
        sales_rep=sales_rep, territory=territory,
    ).exists():
        raise ScopeViolation("Ce territoire ne vous est pas affecte.")

    customer = None
    if customer_name:
        customer = Customer.objects.create(
            name=customer_name,
            industry=customer_industry or "",
            contact=customer_contact or "",
            location=territory.name,
        )

    sale = SaleRecord.objects.create(
        sales_rep=sales_rep,
        territory=territory,
        product=product,
        customer=customer,
        revenue=revenue,
        deal_count=deal_count or 1,
        quantity=quantity or 1,
        sale_date=sale_date,
        month=month or sale_date.month,
        year=year or sale_date.year,
    )
    logger.info(
        "Sale %s recorded by %s in territory %s (%s)",
        sale.pk, sales_rep.pk, territory.pk, revenue,
    )
    return sale
