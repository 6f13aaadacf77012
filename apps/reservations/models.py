"""Short-stay reservation model."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.reservations.domain import lifecycle
from apps.reservations.domain.ranges import nights_between
from apps.reservations.exceptions import InvalidTransitionError


class ReservationQuerySet(models.QuerySet):
    def for_property(self, property_ref: str):
        return self.filter(property_ref=property_ref)

    def active(self, now: datetime):
        """Blocks that currently block their dates (mirrors ``lifecycle.is_active``)."""
        return self.filter(
            Q(status__in=lifecycle.DURABLE_STATUSES)
            | Q(status=lifecycle.HOLD, hold_expires_at__isnull=True)
            | Q(status=lifecycle.HOLD, hold_expires_at__gt=now)
        )

    def upcoming(self, today: date):
        return self.filter(check_out_date__gte=today)

    def overlapping(self, check_in_date: date, check_out_date: date):
        return self.filter(check_in_date__lt=check_out_date, check_out_date__gt=check_in_date)

    def stale_holds(self, now: datetime):
        return self.filter(status=lifecycle.HOLD, hold_expires_at__lte=now)


class ShortStayReservation(models.Model):
    """A dated claim of one property by a customer."""

    class Status(models.TextChoices):
        HOLD = lifecycle.HOLD, _("En attente (hold)")
        NEW = lifecycle.NEW, _("Nouvelle")
        CONTACTED = lifecycle.CONTACTED, _("Client contacté")
        CONFIRMED = lifecycle.CONFIRMED, _("Confirmée")
        CANCELLED = lifecycle.CANCELLED, _("Annulée")

    class Language(models.TextChoices):
        FR = "fr", _("Français")
        AR = "ar", _("Arabe")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    property_ref = models.CharField(max_length=64, db_index=True)
    property_title = models.CharField(max_length=255, blank=True, null=True)
    property_location = models.CharField(max_length=255, blank=True, null=True)
    property_price = models.CharField(max_length=64, blank=True, null=True)
    property_location_type = models.CharField(max_length=20, blank=True, null=True)

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.HOLD)
    source = models.CharField(
        max_length=40,
        default="property_details",
        help_text=_("Origine de la demande (fiche bien, back-office, ...)."),
    )
    lang = models.CharField(max_length=2, choices=Language.choices, default=Language.FR)
    reservation_option = models.CharField(max_length=64, blank=True, null=True)
    reservation_option_label = models.CharField(max_length=255, blank=True, null=True)

    check_in_date = models.DateField()
    check_out_date = models.DateField()
    nights = models.PositiveIntegerField(default=1, editable=False)
    hold_expires_at = models.DateTimeField(
        blank=True,
        null=True,
        help_text=_("Fin de validité du hold; ignorée pour les autres statuts."),
    )

    customer_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="short_stay_reservations",
    )
    customer_name = models.CharField(max_length=255, blank=True, null=True)
    customer_phone = models.CharField(max_length=32, blank=True, null=True)
    customer_email = models.EmailField(blank=True, null=True)
    message = models.TextField(blank=True, null=True)

    cancelled_at = models.DateTimeField(blank=True, null=True)
    cancellation_reason = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        db_table = "short_stay_reservations"
        verbose_name = _("Réservation courte durée")
        verbose_name_plural = _("Réservations courte durée")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(check_out_date__gt=F("check_in_date")),
                name="short_stay_reservations_valid_range",
            ),
        ]
        indexes = [
            models.Index(
                fields=["property_ref", "status", "check_in_date"],
                name="short_stay_property_idx",
            ),
            models.Index(fields=["status", "hold_expires_at"], name="short_stay_hold_idx"),
            models.Index(fields=["customer_email"], name="short_stay_email_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.property_ref} {self.check_in_date} → {self.check_out_date} ({self.status})"

    def save(self, *args, **kwargs):
        if self.check_in_date and self.check_out_date:
            self.nights = nights_between(self.check_in_date, self.check_out_date)
        super().save(*args, **kwargs)

    def is_active(self, now: datetime | None = None) -> bool:
        return lifecycle.is_active(self, now or timezone.now())

    def transition_to(
        self,
        target: str,
        *,
        reason: str | None = None,
        now: datetime | None = None,
        using: str | None = None,
    ) -> None:
        """Move to ``target`` and persist the changed columns."""

        now = now or timezone.now()
        if not lifecycle.can_transition(self.status, target):
            raise InvalidTransitionError(f"Cannot move a reservation from {self.status} to {target}")
        if target != lifecycle.CANCELLED and lifecycle.is_expired_hold(self, now):
            raise InvalidTransitionError("The hold has expired and no longer blocks its dates")

        self.status = target
        update_fields = ["status", "updated_at"]
        if target == lifecycle.CANCELLED:
            self.cancelled_at = now
            self.cancellation_reason = (reason or "")[:255] or None
            update_fields += ["cancelled_at", "cancellation_reason"]
        elif self.hold_expires_at is not None:
            self.hold_expires_at = None
            update_fields.append("hold_expires_at")
        self.save(using=using, update_fields=update_fields)
