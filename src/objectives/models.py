"""Models for the sales objectives module."""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class SalesTarget(TimeStampedModel):
    """Monthly revenue goal for one sales representative.

    Business rule: at most one target per (rep, month, year). Writes go
    through ``performance.targets.set_target`` which updates the existing
    row in place; the unique constraint is the last line of defence when two
    requests race on the same period.
    """

    sales_rep = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sales_targets",
        verbose_name="representant",
    )
    month = models.PositiveSmallIntegerField(
        "mois",
        validators=[MinValueValidator(1), MaxValueValidator(12)],
    )
    year = models.PositiveSmallIntegerField(
        "annee",
        validators=[MinValueValidator(2000), MaxValueValidator(2100)],
    )
    target_amount = models.DecimalField(
        "objectif",
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    class Meta:
        verbose_name = "objectif commercial"
        verbose_name_plural = "objectifs commerciaux"
        constraints = [
            models.UniqueConstraint(
                fields=["sales_rep", "month", "year"],
                name="uniq_sales_target_period",
            ),
        ]
        ordering = ["-year", "-month"]

    def __str__(self) -> str:
        return f"{self.sales_rep} {self.year}-{self.month:02d}"
