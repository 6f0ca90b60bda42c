"""Django admin for the objectives module."""
from django.contrib import admin

from objectives.models import SalesTarget


@admin.register(SalesTarget)
class SalesTargetAdmin(admin.ModelAdmin):
    list_display = ("sales_rep", "year", "month", "target_amount", "updated_at")
    list_filter = ("year", "month")
    search_fields = ("sales_rep__first_name", "sales_rep__last_name", "sales_rep__user_code")
    ordering = ("-year", "-month")
