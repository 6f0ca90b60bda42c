"""django-filter filtersets for API v1 list endpoints."""
import django_filters

from sales.models import SaleRecord


class SaleRecordFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name="sale_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="sale_date", lookup_expr="lte")

    class Meta:
        model = SaleRecord
        fields = ["territory", "product", "sales_rep", "month", "year"]
