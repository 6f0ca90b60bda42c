from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from accounts.models import User
from catalog.models import Product
from customers.models import Customer
from objectives.models import SalesTarget
from sales.models import SaleRecord
from territories.models import Territory, TerritoryAssignment


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def management_user(db):
    return User.objects.create_user(
        email="direction@test.com",
        password="testpass123",
        first_name="Direction",
        last_name="User",
        role=User.Role.MANAGEMENT,
    )


@pytest.fixture
def sales_user(db):
    return User.objects.create_user(
        email="sales@test.com",
        password="testpass123",
        first_name="Sales",
        last_name="User",
        role=User.Role.SALES,
    )


@pytest.fixture
def other_sales_user(db):
    return User.objects.create_user(
        email="sales2@test.com",
        password="testpass123",
        first_name="Zoe",
        last_name="Second",
        role=User.Role.SALES,
    )


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def management_client(management_user):
    return _client_for(management_user)


@pytest.fixture
def sales_client(sales_user):
    return _client_for(sales_user)


@pytest.fixture
def territory(db):
    return Territory.objects.create(
        name="Mumbai",
        state="Maharashtra",
        region="West",
        latitude=Decimal("19.076090"),
        longitude=Decimal("72.877426"),
    )


@pytest.fixture
def second_territory(db):
    return Territory.objects.create(name="Pune", state="Maharashtra", region="West")


@pytest.fixture
def third_territory(db):
    return Territory.objects.create(name="Chennai", state="Tamil Nadu", region="")


@pytest.fixture
def product(db):
    return Product.objects.create(name="CRM Starter", category="Software", price=Decimal("25000.00"))


@pytest.fixture
def customer(db):
    return Customer.objects.create(name="Sharma Traders", industry="Retail", location="Mumbai")


@pytest.fixture
def assignment(sales_user, territory):
    return TerritoryAssignment.objects.create(sales_rep=sales_user, territory=territory)


@pytest.fixture
def make_sale(db):
    def _make_sale(sales_rep, territory, revenue, sale_date=date(2026, 3, 10), **kwargs):
        return SaleRecord.objects.create(
            sales_rep=sales_rep,
            territory=territory,
            revenue=Decimal(str(revenue)),
            sale_date=sale_date,
            **kwargs,
        )
    return _make_sale


@pytest.fixture
def make_target(db):
    def _make_target(sales_rep, amount, month=3, year=2026):
        return SalesTarget.objects.create(
            sales_rep=sales_rep, month=month, year=year, target_amount=Decimal(str(amount)),
        )
    return _make_target
