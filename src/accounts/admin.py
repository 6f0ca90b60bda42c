from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from objectives.models import SalesTarget
from territories.models import TerritoryAssignment

from .models import User

class TerritoryAssignmentInline(admin.TabularInline):
    model = TerritoryAssignment
    fk_name = "sales_rep"
    extra = 0
    autocomplete_fields = ("territory",)
    verbose_name = "territoire couvert"
    verbose_name_plural = "territoires couverts"

class SalesTargetInline(admin.TabularInline):
    model = SalesTarget
    extra = 0
    fields = ("year", "month", "target_amount")
    ordering = ("-year", "-month")

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin configuration for the custom User model.

    Coverage and monthly targets are edited inline for representatives.
    """

    inlines = (TerritoryAssignmentInline, SalesTargetInline)

    # ------------------------------------------------------------------
    # List view
    # ------------------------------------------------------------------
    list_display = (
        "user_code",
        "email",
        "first_name",
        "last_name",
        "role",
        "territory_count",
        "is_active",
        "date_joined",
    )
    list_filter = ("role", "is_active", "is_staff", "is_superuser")
    search_fields = ("email", "first_name", "last_name", "user_code")
    ordering = ("first_name", "last_name")
    actions = ("activate_users", "deactivate_users")

    # ------------------------------------------------------------------
    # Detail / edit view
    # ------------------------------------------------------------------
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (
            _("Informations personnelles"),
            {"fields": ("first_name", "last_name", "user_code")},
        ),
        (
            _("Role et permissions"),
            {
                "fields": (
                    "role",
                    "is_active",
                    "is_staff",
                    "is_superuser",
                ),
            },
        ),
        (
            _("Dates importantes"),
            {"fields": ("last_login", "date_joined")},
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "first_name",
                    "last_name",
                    "user_code",
                    "role",
                    "password1",
                    "password2",
                ),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login")

    def get_queryset(self, request):
        queryset = super().get_queryset(request)
        return queryset.prefetch_related("territory_assignments")

    @admin.display(description="Territoires")
    def territory_count(self, obj):
        return obj.territory_assignments.count()

    @admin.action(description="Activer les utilisateurs selectionnes")
    def activate_users(self, request, queryset):
        queryset.update(is_active=True)

    @admin.action(description="Desactiver les utilisateurs selectionnes")
    def deactivate_users(self, request, queryset):
        queryset.update(is_active=False)

    def get_inlines(self, request, obj):
        if obj is None or not obj.is_sales:
            return ()
        return super().get_inlines(request, obj)
