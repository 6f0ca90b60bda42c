"""Models for the customers app."""
from django.db import models

from core.models import TimeStampedModel


class Customer(TimeStampedModel):
    """An account a representative sold to."""

    name = models.CharField("nom", max_length=200)
    industry = models.CharField("secteur", max_length=120, blank=True, default="")
    location = models.CharField("localisation", max_length=200, blank=True, default="")
    contact = models.CharField("contact", max_length=200, blank=True, default="")

    class Meta:
        verbose_name = "client"
        verbose_name_plural = "clients"
        ordering = ["name"]

    def __str__(self):
        return self.name
