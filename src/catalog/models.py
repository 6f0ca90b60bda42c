"""Models for the catalog app (products sold in territories)."""
from django.db import models

from core.models import TimeStampedModel


class Product(TimeStampedModel):
    """A product line that sale records can be attributed to."""

    name = models.CharField("nom", max_length=255)
    category = models.CharField("categorie", max_length=120, blank=True, default="")
    price = models.DecimalField(
        "prix", max_digits=14, decimal_places=2, null=True, blank=True,
    )
    is_active = models.BooleanField("actif", default=True)

    class Meta:
        verbose_name = "produit"
        verbose_name_plural = "produits"
        ordering = ["name"]

    def __str__(self):
        return self.name
