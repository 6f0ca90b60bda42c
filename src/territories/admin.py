"""Admin configuration for the territories app."""
from django.contrib import admin

from territories.models import Territory, TerritoryAssignment


class TerritoryAssignmentInline(admin.TabularInline):
    model = TerritoryAssignment
    extra = 0
    autocomplete_fields = ("sales_rep",)


@admin.register(Territory)
class TerritoryAdmin(admin.ModelAdmin):
    list_display = ("name", "state", "region", "latitude", "longitude")
    list_filter = ("state", "region")
    search_fields = ("name", "state", "region")
    inlines = [TerritoryAssignmentInline]


@admin.register(TerritoryAssignment)
class TerritoryAssignmentAdmin(admin.ModelAdmin):
    list_display = ("sales_rep", "territory", "created_at")
    list_filter = ("territory__state",)
    search_fields = ("sales_rep__email", "sales_rep__user_code", "territory__name")
