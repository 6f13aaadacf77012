"""Property catalog model used by the reservation engine."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Property(models.Model):
    """A listed property, identified across the platform by ``ref``."""

    class RentalKind(models.TextChoices):
        PER_NIGHT = "par_nuit", _("Location par nuit")
        PER_MONTH = "par_mois", _("Location par mois")
        SIX_MONTHS = "six_mois", _("Location six mois")
        TWELVE_MONTHS = "douze_mois", _("Location douze mois")

    ref = models.CharField(max_length=64, unique=True)
    title = models.CharField(max_length=255, blank=True)
    location = models.CharField(max_length=255, blank=True)
    price = models.CharField(
        max_length=64,
        blank=True,
        help_text=_("Prix affiché, tel que saisi dans le catalogue."),
    )
    location_type = models.CharField(
        max_length=20,
        choices=RentalKind.choices,
        blank=True,
    )
    is_published = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Bien")
        verbose_name_plural = _("Biens")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.ref} · {self.title}" if self.title else self.ref
