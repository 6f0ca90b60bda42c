"""Models for the territories app (territories and rep coverage)."""
from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class Territory(TimeStampedModel):
    """A geographic sales region, the primary unit of performance reporting."""

    name = models.CharField("nom", max_length=200)
    state = models.CharField("etat", max_length=100)
    region = models.CharField("region", max_length=100, blank=True, default="")
    latitude = models.DecimalField(
        "latitude", max_digits=9, decimal_places=6, null=True, blank=True,
    )
    longitude = models.DecimalField(
        "longitude", max_digits=9, decimal_places=6, null=True, blank=True,
    )

    class Meta:
        verbose_name = "territoire"
        verbose_name_plural = "territoires"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.state})"


class TerritoryAssignment(TimeStampedModel):
    """Formal coverage of a territory by a sales representative.

    Coverage is independent of sales activity: a rep may be assigned to a
    territory with no sale recorded in it yet.
    """

    sales_rep = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="territory_assignments",
        verbose_name="representant",
    )
    territory = models.ForeignKey(
        Territory,
        on_delete=models.CASCADE,
        related_name="assignments",
        verbose_name="territoire",
    )

    class Meta:
        verbose_name = "affectation territoire"
        verbose_name_plural = "affectations territoire"
        constraints = [
            models.UniqueConstraint(
                fields=["sales_rep", "territory"],
                name="uniq_rep_territory_assignment",
            ),
        ]

    def __str__(self):
        return f"{self.sales_rep} -> {self.territory}"
