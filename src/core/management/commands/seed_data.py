"""Seed database with demo territories, representatives, sales and targets."""
import random
from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction


class Command(BaseCommand):
    help = "Seed database with users, territories, assignments, products, customers, sales and targets"

    DEMO_USERS = [
        {"email": "admin@territory.in", "first_name": "Admin", "last_name": "Systeme", "role": "ADMIN", "password": "admin123!"},
        {"email": "direction@territory.in", "first_name": "Meera", "last_name": "Iyer", "role": "MANAGEMENT", "password": "direction123!"},
        {"email": "rep1@territory.in", "first_name": "Arjun", "last_name": "Rao", "role": "SALES", "password": "rep123!"},
        {"email": "rep2@territory.in", "first_name": "Kavya", "last_name": "Nair", "role": "SALES", "password": "rep123!"},
        {"email": "rep3@territory.in", "first_name": "Rohan", "last_name": "Das", "role": "SALES", "password": "rep123!"},
    ]

    TERRITORIES = [
        ("Mumbai", "Maharashtra", "West", "19.076090", "72.877426"),
        ("Pune", "Maharashtra", "West", "18.520430", "73.856743"),
        ("Bengaluru", "Karnataka", "South", "12.971599", "77.594566"),
        ("Chennai", "Tamil Nadu", "South", "13.082680", "80.270721"),
        ("Kolkata", "West Bengal", "East", "22.572645", "88.363892"),
        ("Delhi", "Delhi", "North", "28.704060", "77.102493"),
        ("Jaipur", "Rajasthan", "North", "26.912434", "75.787270"),
        ("Guwahati", "Assam", "", "26.144518", "91.736237"),
    ]

    PRODUCTS = [
        ("CRM Starter", "Software", "25000.00"),
        ("CRM Enterprise", "Software", "180000.00"),
        ("Field Tablet", "Hardware", "42000.00"),
        ("Onboarding Pack", "Services", "60000.00"),
    ]

    CUSTOMERS = [
        ("Sharma Traders", "Retail"),
        ("Coastal Logistics", "Logistics"),
        ("Deccan Pharma", "Healthcare"),
        ("Ganga Textiles", "Manufacturing"),
        ("Nilgiri Foods", "FMCG"),
    ]

    ASSIGNMENTS = {
        "rep1@territory.in": ["Mumbai", "Pune"],
        "rep2@territory.in": ["Bengaluru", "Chennai"],
        "rep3@territory.in": ["Delhi", "Jaipur", "Kolkata"],
    }

    def add_arguments(self, parser):
        parser.add_argument("--flush", action="store_true", help="Delete existing data first")
        parser.add_argument("--months", type=int, default=6, help="Number of past months of sales to generate")
        parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducible demo data")

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            self._flush()

        self.stdout.write("Seeding data...")
        rng = random.Random(options["seed"])
        users = self._create_users()
        territories = self._create_territories()
        self._create_assignments(users, territories)
        products = self._create_products()
        customers = self._create_customers(territories)
        sales = self._create_sales(users, territories, products, customers, rng, options["months"])
        targets = self._create_targets(users, rng, options["months"])

        self.stdout.write(self.style.SUCCESS(
            f"Seed complete: {len(users)} users, {len(territories)} territories, "
            f"{len(products)} products, {len(customers)} customers, "
            f"{sales} sales, {targets} targets"
        ))

    def _flush(self):
        from accounts.models import User
        from catalog.models import Product
        from customers.models import Customer
        from objectives.models import SalesTarget
        from sales.models import SaleRecord
        from territories.models import Territory, TerritoryAssignment

        for model in [SalesTarget, SaleRecord, TerritoryAssignment, Customer, Product, Territory]:
            model.objects.all().delete()
        demo_emails = [u["email"] for u in self.DEMO_USERS]
        User.objects.filter(email__in=demo_emails).delete()

    def _create_users(self):
        from accounts.models import User

        users = {}
        for data in self.DEMO_USERS:
            user = User.objects.filter(email=data["email"]).first()
            if user is None:
                extra = {"is_staff": True, "is_superuser": True} if data["role"] == "ADMIN" else {}
                user = User.objects.create_user(
                    email=data["email"],
                    password=data["password"],
                    first_name=data["first_name"],
                    last_name=data["last_name"],
                    role=data["role"],
                    **extra,
                )
                self.stdout.write(f"  User: {user.email} ({user.role}, {user.user_code})")
            users[data["email"]] = user
        return users

    def _create_territories(self):
        from territories.models import Territory

        territories = {}
        for name, state, region, latitude, longitude in self.TERRITORIES:
            territory, _ = Territory.objects.get_or_create(
                name=name,
                state=state,
                defaults={
                    "region": region,
                    "latitude": Decimal(latitude),
                    "longitude": Decimal(longitude),
                },
            )
            territories[name] = territory
        return territories

    def _create_assignments(self, users, territories):
        from territories.services import assign_territories

        for email, names in self.ASSIGNMENTS.items():
            assign_territories(users[email], [territories[name].pk for name in names])

    def _create_products(self):
        from catalog.models import Product

        products = []
        for name, category, price in self.PRODUCTS:
            product, _ = Product.objects.get_or_create(
                name=name, defaults={"category": category, "price": Decimal(price)},
            )
            products.append(product)
        return products

    def _create_customers(self, territories):
        from customers.models import Customer

        locations = list(territories)
        customers = []
        for index, (name, industry) in enumerate(self.CUSTOMERS):
            customer, _ = Customer.objects.get_or_create(
                name=name,
                defaults={"industry": industry, "location": locations[index % len(locations)]},
            )
            customers.append(customer)
        return customers

    def _past_periods(self, months):
        today = date.today()
        year, month = today.year, today.month
        periods = []
        for _ in range(max(months, 1)):
            periods.append((year, month))
            month -= 1
            if month == 0:
                year, month = year - 1, 12
        return periods

    def _create_sales(self, users, territories, products, customers, rng, months):
        from sales.models import SaleRecord

        if SaleRecord.objects.exists():
            return 0
        records = []
        for email, names in self.ASSIGNMENTS.items():
            rep = users[email]
            for year, month in self._past_periods(months):
                for _ in range(rng.randint(2, 6)):
                    product = rng.choice(products)
                    deal_count = rng.randint(1, 4)
                    records.append(SaleRecord(
                        sales_rep=rep,
                        territory=territories[rng.choice(names)],
                        product=product,
                        customer=rng.choice(customers),
                        revenue=(product.price or Decimal("10000")) * deal_count,
                        deal_count=deal_count,
                        quantity=deal_count,
                        sale_date=date(year, month, rng.randint(1, 28)),
                        month=month,
                        year=year,
                    ))
        SaleRecord.objects.bulk_create(records)
        return len(records)

    def _create_targets(self, users, rng, months):
        from objectives.models import SalesTarget

        created = 0
        for email in self.ASSIGNMENTS:
            for year, month in self._past_periods(months):
                _, was_created = SalesTarget.objects.get_or_create(
                    sales_rep=users[email],
                    month=month,
                    year=year,
                    defaults={"target_amount": Decimal(rng.randrange(200000, 600000, 10000))},
                )
                created += int(was_created)
        return created
