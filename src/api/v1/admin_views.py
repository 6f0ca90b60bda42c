"""Catalog, territory and assignment administration (ADMIN role)."""
import logging

from django.db import transaction
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsAdmin
from api.v1.serializers import (
    ProductSerializer,
    TerritoryAssignmentBulkSerializer,
    TerritoryAssignmentSerializer,
    TerritorySerializer,
)
from catalog.models import Product
from territories.models import Territory, TerritoryAssignment
from territories.services import assign_territories

logger = logging.getLogger("territory")


class TerritoryViewSet(viewsets.ModelViewSet):
    """CRUD for territories. Search by name or state, filter by region."""

    serializer_class = TerritorySerializer
    queryset = Territory.objects.all()
    permission_classes = [IsAdmin]
    filterset_fields = ["state", "region"]
    search_fields = ["name", "state", "region"]
    ordering_fields = ["name", "state", "region", "created_at"]
    pagination_class = StandardResultsSetPagination


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    queryset = Product.objects.all()
    permission_classes = [IsAdmin]
    filterset_fields = ["category", "is_active"]
    search_fields = ["name", "category"]
    ordering_fields = ["name", "category", "price", "created_at"]
    pagination_class = StandardResultsSetPagination


class TerritoryAssignmentViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Rep coverage of territories.

    - ``POST`` with ``sales_rep`` and ``territory`` creates one assignment.
    - ``POST assign/`` with ``sales_rep`` and ``territories`` assigns several
      territories at once; existing assignments are kept.
    """

    serializer_class = TerritoryAssignmentSerializer
    queryset = TerritoryAssignment.objects.select_related("sales_rep", "territory")
    permission_classes = [IsAdmin]
    filterset_fields = ["sales_rep", "territory"]
    ordering_fields = ["created_at"]
    pagination_class = StandardResultsSetPagination

    def perform_create(self, serializer):
        sales_rep = serializer.validated_data["sales_rep"]
        territory = serializer.validated_data["territory"]
        if not sales_rep.is_sales:
            raise ValidationError({"sales_rep": "Seuls les representants peuvent etre affectes."})
        serializer.save()
        logger.info("Rep %s assigned to territory %s", sales_rep.pk, territory.pk)

    @action(detail=False, methods=["post"])
    def assign(self, request):
        serializer = TerritoryAssignmentBulkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sales_rep = serializer.validated_data["sales_rep"]
        territory_ids = [territory.pk for territory in serializer.validated_data["territories"]]
        with transaction.atomic():
            try:
                created = assign_territories(sales_rep, territory_ids)
            except ValueError as exc:
                raise ValidationError({"detail": str(exc)})
        return Response(
            {
                "created": len(created),
                "assignments": TerritoryAssignmentSerializer(
                    TerritoryAssignment.objects.filter(sales_rep=sales_rep).select_related(
                        "sales_rep", "territory",
                    ),
                    many=True,
                ).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
