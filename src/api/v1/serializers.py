"""Serializers for the territory performance API v1."""
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import serializers

from catalog.models import Product
from performance.classification import Strategy
from performance.records import SaleFilter
from sales.models import SaleRecord
from territories.models import Territory, TerritoryAssignment

User = get_user_model()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class MeSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "first_name", "last_name", "display_name", "user_code", "role"]
        read_only_fields = fields


class SalesUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "first_name", "last_name", "user_code", "email"]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Catalog / territories
# ---------------------------------------------------------------------------

class TerritorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Territory
        fields = ["id", "name", "state", "region", "latitude", "longitude", "created_at"]
        read_only_fields = ["id", "created_at"]


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "category", "price", "is_active", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Le prix ne peut pas etre negatif.")
        return value


class TerritoryAssignmentSerializer(serializers.ModelSerializer):
    sales_rep_name = serializers.CharField(source="sales_rep.get_full_name", read_only=True)
    territory_name = serializers.CharField(source="territory.name", read_only=True)

    class Meta:
        model = TerritoryAssignment
        fields = ["id", "sales_rep", "sales_rep_name", "territory", "territory_name", "created_at"]
        read_only_fields = ["id", "created_at"]


class TerritoryAssignmentBulkSerializer(serializers.Serializer):
    """Assign one representative to several territories at once."""

    sales_rep = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(role="SALES"))
    territories = serializers.PrimaryKeyRelatedField(
        queryset=Territory.objects.all(), many=True, allow_empty=False,
    )


# ---------------------------------------------------------------------------
# Sale records
# ---------------------------------------------------------------------------

class SaleRecordSerializer(serializers.ModelSerializer):
    territory_name = serializers.CharField(source="territory.name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True, default=None)
    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)
    sales_rep_name = serializers.CharField(source="sales_rep.get_full_name", read_only=True)

    class Meta:
        model = SaleRecord
        fields = [
            "id", "territory", "territory_name", "sales_rep", "sales_rep_name",
            "product", "product_name", "customer", "customer_name",
            "revenue", "deal_count", "quantity", "sale_date", "month", "year",
            "created_at",
        ]
        read_only_fields = fields


class SaleRecordCreateSerializer(serializers.Serializer):
    territory = serializers.PrimaryKeyRelatedField(queryset=Territory.objects.all())
    product = serializers.PrimaryKeyRelatedField(
        queryset=Product.objects.filter(is_active=True), required=False, allow_null=True,
    )
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"))
    deal_count = serializers.IntegerField(min_value=1, required=False, default=1)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    sale_date = serializers.DateField()
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    customer_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    customer_industry = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")
    customer_contact = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")


# ---------------------------------------------------------------------------
# Performance queries
# ---------------------------------------------------------------------------

class PerformanceQuerySerializer(serializers.Serializer):
    """Query string of the territory / map / dashboard views."""

    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    sales_rep = serializers.UUIDField(required=False)
    product = serializers.UUIDField(required=False)

    def validate(self, attrs):
        date_from = attrs.get("date_from")
        date_to = attrs.get("date_to")
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError(
                {"date_from": "La date de debut doit preceder la date de fin."}
            )
        return attrs

    def to_filter(self) -> SaleFilter:
        data = self.validated_data
        return SaleFilter(
            rep_id=str(data["sales_rep"]) if data.get("sales_rep") else None,
            product_id=str(data["product"]) if data.get("product") else None,
            date_from=data.get("date_from"),
            date_to=data.get("date_to"),
        )


class MapQuerySerializer(PerformanceQuerySerializer):
    strategy = serializers.ChoiceField(
        choices=[choice.value for choice in Strategy], required=False,
    )


class PeriodQuerySerializer(serializers.Serializer):
    month = serializers.IntegerField(required=False)
    year = serializers.IntegerField(required=False)
    page = serializers.IntegerField(required=False, default=1)
    limit = serializers.IntegerField(required=False)


class SalesTargetInputSerializer(serializers.Serializer):
    """Body of a target upsert; range checks happen in the engine."""

    sales_rep = serializers.UUIDField()
    month = serializers.IntegerField()
    year = serializers.IntegerField()
    target_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class SalesTargetOutputSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    sales_rep = serializers.UUIDField(source="sales_rep_id")
    month = serializers.IntegerField()
    year = serializers.IntegerField()
    target_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
