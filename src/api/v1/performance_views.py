"""REST API endpoints for territory and representative performance."""
import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from api.v1.permissions import (
    IsAnyRole,
    IsManagement,
    IsManagementOrAdmin,
    IsManagementOrSales,
    IsSales,
)
from api.v1.serializers import (
    MapQuerySerializer,
    PerformanceQuerySerializer,
    PeriodQuerySerializer,
    SalesTargetInputSerializer,
    SalesTargetOutputSerializer,
    SalesUserSerializer,
)
from performance.classification import Strategy
from performance.exceptions import (
    InvalidFilter,
    PerformanceError,
    ScopeViolation,
    TerritoryNotFound,
)
from performance.services import Caller, PerformanceService

logger = logging.getLogger("territory")


class PerformanceFailure(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Erreur lors du calcul des performances."
    default_code = "performance_failure"


class PerformanceAPIView(APIView):
    """Base view: builds the service and maps engine errors to HTTP errors."""

    permission_classes = [IsAuthenticated]
    service_class = PerformanceService

    def get_service(self):
        return self.service_class()

    def get_caller(self):
        return Caller.from_user(self.request.user)

    def parse_query(self, serializer_class):
        serializer = serializer_class(data=self.request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer

    def parse_period(self):
        data = self.parse_query(PeriodQuerySerializer).validated_data
        today = timezone.localdate()
        return {
            "month": data.get("month", today.month),
            "year": data.get("year", today.year),
            "page": data.get("page", 1),
            "limit": data.get("limit"),
        }

    def handle_exception(self, exc):
        if isinstance(exc, ScopeViolation):
            exc = PermissionDenied(str(exc))
        elif isinstance(exc, InvalidFilter):
            exc = ValidationError(exc.as_dict())
        elif isinstance(exc, TerritoryNotFound):
            exc = NotFound(str(exc))
        elif isinstance(exc, PerformanceError):
            logger.exception("Performance request failed for user %s", self.request.user.pk)
            exc = PerformanceFailure()
        return super().handle_exception(exc)


# ---------------------------------------------------------------------------
# Territory performance
# ---------------------------------------------------------------------------

class TerritoryPerformanceListView(PerformanceAPIView):
    """GET: territories in scope with revenue, deals and assigned reps."""

    permission_classes = [IsManagementOrSales]

    def get(self, request):
        sale_filter = self.parse_query(PerformanceQuerySerializer).to_filter()
        return Response(self.get_service().territory_listing(self.get_caller(), sale_filter))


class TerritoryPerformanceSalesRepsView(PerformanceAPIView):
    permission_classes = [IsManagement]

    def get(self, request):
        return Response(self.get_service().sales_reps())


class TerritoryPerformanceDetailView(PerformanceAPIView):
    """GET: one territory with trend, top products and top customers."""

    permission_classes = [IsManagementOrSales]

    def get(self, request, pk):
        return Response(self.get_service().territory_detail(self.get_caller(), pk))


# ---------------------------------------------------------------------------
# Maps
# ---------------------------------------------------------------------------

class TerritoryMapView(PerformanceAPIView):
    """GET: map markers, fixed-fraction colouring unless ``strategy`` says otherwise."""

    permission_classes = [IsAnyRole]
    default_strategy = Strategy.FIXED_FRACTION

    def get(self, request):
        query = self.parse_query(MapQuerySerializer)
        strategy = query.validated_data.get("strategy") or self.default_strategy
        payload = self.get_service().territory_map(
            self.get_caller(), query.to_filter(), strategy=Strategy(strategy),
        )
        return Response(payload)


class DistrictMapView(TerritoryMapView):
    """GET: choropleth payload, percentile colouring."""

    default_strategy = Strategy.PERCENTILE


# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------

class SalesDashboardView(PerformanceAPIView):
    permission_classes = [IsSales]

    def get(self, request):
        sale_filter = self.parse_query(PerformanceQuerySerializer).to_filter()
        return Response(self.get_service().sales_dashboard(self.get_caller(), sale_filter))


class ManagementDashboardView(PerformanceAPIView):
    permission_classes = [IsManagementOrAdmin]

    def get(self, request):
        sale_filter = self.parse_query(PerformanceQuerySerializer).to_filter()
        return Response(self.get_service().management_dashboard(self.get_caller(), sale_filter))


# ---------------------------------------------------------------------------
# Management: users, targets, performance table
# ---------------------------------------------------------------------------

class SalesUsersView(PerformanceAPIView):
    permission_classes = [IsManagement]

    def get(self, request):
        reps = User.objects.active_sales_reps()
        return Response(SalesUserSerializer(reps, many=True).data)


class SalesTargetView(PerformanceAPIView):
    """POST: create or update the monthly target of a representative."""

    permission_classes = [IsManagement]

    def post(self, request):
        serializer = SalesTargetInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = self.get_service().set_target(
            data["sales_rep"], data["month"], data["year"], data["target_amount"],
        )
        payload = {
            "outcome": result.outcome.value,
            "target": SalesTargetOutputSerializer(result.target).data,
        }
        code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
        return Response(payload, status=code)


class SalesPerformanceView(PerformanceAPIView):
    """GET: paginated target-vs-achieved table for a month."""

    permission_classes = [IsManagement]

    def get(self, request):
        period = self.parse_period()
        return Response(self.get_service().sales_performance(self.get_caller(), **period))


class MyPerformanceView(PerformanceAPIView):
    permission_classes = [IsSales]

    def get(self, request):
        period = self.parse_period()
        return Response(
            self.get_service().my_performance(self.get_caller(), period["month"], period["year"])
        )
