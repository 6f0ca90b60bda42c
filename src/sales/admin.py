"""Admin configuration for the sales app."""
from django.contrib import admin

from sales.models import SaleRecord


@admin.register(SaleRecord)
class SaleRecordAdmin(admin.ModelAdmin):
    """Admin for the SaleRecord model."""

    list_display = (
        "sale_date",
        "territory",
        "sales_rep",
        "product",
        "customer",
        "revenue",
        "deal_count",
    )
    list_filter = ("year", "month", "territory__state", "territory")
    search_fields = (
        "sales_rep__first_name",
        "sales_rep__last_name",
        "sales_rep__user_code",
        "territory__name",
        "customer__name",
    )
    date_hierarchy = "sale_date"
    raw_id_fields = ("sales_rep", "territory", "product", "customer")
