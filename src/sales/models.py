"""Models for the sales app."""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# SaleRecord
# ---------------------------------------------------------------------------

class SaleRecord(TimeStampedModel):
    """A closed sale booked by a representative against a territory.

    Records are read-only input for the performance engine: ``month`` and
    ``year`` are denormalised from ``sale_date`` so monthly grouping and
    target matching never have to truncate dates.
    """

    revenue = models.DecimalField(
        "chiffre d'affaires",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    deal_count = models.PositiveIntegerField(
        "nombre d'affaires",
        default=1,
        validators=[MinValueValidator(1)],
    )
    quantity = models.PositiveIntegerField("quantite", default=1)
    sale_date = models.DateField("date de vente", db_index=True)
    month = models.PositiveSmallIntegerField(
        "mois",
        validators=[MinValueValidator(1), MaxValueValidator(12)],
    )
    year = models.PositiveSmallIntegerField("annee")
    territory = models.ForeignKey(
        "territories.Territory",
        on_delete=models.PROTECT,
        related_name="sales",
        verbose_name="territoire",
    )
    sales_rep = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="sale_records",
        verbose_name="representant",
    )
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
        verbose_name="produit",
    )
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
        verbose_name="client",
    )

    class Meta:
        verbose_name = "vente"
        verbose_name_plural = "ventes"
        ordering = ["-sale_date", "-created_at"]
        indexes = [
            models.Index(fields=["sales_rep", "year", "month"], name="sale_rep_period_idx"),
            models.Index(fields=["territory", "sale_date"], name="sale_territory_date_idx"),
        ]

    def __str__(self):
        return f"{self.territory} {self.sale_date} {self.revenue}"

    def save(self, *args, **kwargs):
        if self.sale_date and not self.month:
            self.month = self.sale_date.month
        if self.sale_date and not self.year:
            self.year = self.sale_date.year
        super().save(*args, **kwargs)
