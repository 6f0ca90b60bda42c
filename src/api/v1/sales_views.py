"""Sale recording endpoints for representatives."""
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from api.v1.filters import SaleRecordFilter
from api.v1.pagination import SaleRecordPagination
from api.v1.permissions import IsSalesOrAdmin
from api.v1.serializers import (
    ProductSerializer,
    SaleRecordCreateSerializer,
    SaleRecordSerializer,
    TerritorySerializer,
)
from catalog.models import Product
from performance.exceptions import ScopeViolation
from sales.models import SaleRecord
from sales.services import record_sale
from territories.models import Territory


class SaleRecordViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    List and record sales.

    - SALES users only see their own sales and may only record sales in
      their assigned territories.
    - ADMIN sees every sale.
    """

    queryset = SaleRecord.objects.select_related("territory", "sales_rep", "product", "customer")
    permission_classes = [IsSalesOrAdmin]
    filterset_class = SaleRecordFilter
    search_fields = ["territory__name", "customer__name", "product__name"]
    ordering_fields = ["sale_date", "revenue", "created_at"]
    pagination_class = SaleRecordPagination

    def get_serializer_class(self):
        if self.action == "create":
            return SaleRecordCreateSerializer
        return SaleRecordSerializer

    def get_queryset(self):
        qs = super().get_queryset().order_by("-sale_date", "-created_at")
        if self.request.user.is_sales:
            qs = qs.filter(sales_rep=self.request.user)
        return qs

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            sale = record_sale(sales_rep=request.user, **serializer.validated_data)
        except ScopeViolation as exc:
            raise PermissionDenied(str(exc))
        return Response(SaleRecordSerializer(sale).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], pagination_class=None)
    def territories(self, request):
        qs = Territory.objects.order_by("name")
        if request.user.is_sales:
            qs = qs.filter(assignments__sales_rep=request.user)
        return Response(TerritorySerializer(qs, many=True).data)

    @action(detail=False, methods=["get"], pagination_class=None)
    def products(self, request):
        qs = Product.objects.filter(is_active=True).order_by("name")
        return Response(ProductSerializer(qs, many=True).data)
