"""Role-based DRF permissions for the territory performance API."""
from rest_framework.permissions import BasePermission


class _RolePermission(BasePermission):
    """Allow authenticated users whose role is in ``allowed_roles``."""

    allowed_roles = ()
    message = "Vous n'avez pas acces a cette ressource."

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and user.is_active
            and user.role in self.allowed_roles
        )


class IsAdmin(_RolePermission):
    """Allow access to users with the ADMIN role."""

    allowed_roles = ("ADMIN",)


class IsManagement(_RolePermission):
    """Allow access to users with the MANAGEMENT role."""

    allowed_roles = ("MANAGEMENT",)


class IsSales(_RolePermission):
    """Allow access to users with the SALES role."""

    allowed_roles = ("SALES",)


class IsManagementOrSales(_RolePermission):
    allowed_roles = ("MANAGEMENT", "SALES")


class IsManagementOrAdmin(_RolePermission):
    allowed_roles = ("ADMIN", "MANAGEMENT")


class IsSalesOrAdmin(_RolePermission):
    allowed_roles = ("ADMIN", "SALES")


class IsAnyRole(_RolePermission):
    allowed_roles = ("ADMIN", "MANAGEMENT", "SALES")
