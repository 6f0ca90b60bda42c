"""Admin configuration for the customers app."""
from django.contrib import admin

from customers.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "industry", "location", "contact", "created_at")
    list_filter = ("industry",)
    search_fields = ("name", "industry", "location", "contact")
