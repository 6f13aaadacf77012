"""User domain models.

The marketplace distinguishes customers from back-office identities
(agencies, platform administrators). Only customers may create
short-stay reservations.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(BaseUserManager):
    """Manager that uses the email address as the login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("An email address is required to create a user.")
        email = self.normalize_email(email)

        phone = extra_fields.get("phone")
        if phone:
            extra_fields["phone"] = self.normalize_phone(phone)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("account_type", CustomUser.AccountType.CUSTOMER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("account_type", CustomUser.AccountType.SUPER_ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        return phone.replace(" ", "").replace("-", "")


class CustomUser(AbstractUser):
    """Platform account with an account kind."""

    class AccountType(models.TextChoices):
        CUSTOMER = "customer", _("Client")
        AGENCY = "agency", _("Agence")
        ADMIN = "admin", _("Administrateur")
        ADMIN_READ_ONLY = "admin_read_only", _("Administrateur (lecture seule)")
        SUPER_ADMIN = "super_admin", _("Super administrateur")

    BACKOFFICE_TYPES = frozenset(
        {
            AccountType.AGENCY,
            AccountType.ADMIN,
            AccountType.ADMIN_READ_ONLY,
            AccountType.SUPER_ADMIN,
        }
    )

    username = models.CharField(
        _("Nom affiché"),
        max_length=150,
        blank=True,
        help_text=_("Optionnel, utilisé dans les interfaces et les notifications."),
    )
    email = models.EmailField(_("Email"), unique=True)
    phone = models.CharField(_("Téléphone"), max_length=20, blank=True)
    account_type = models.CharField(
        _("Type de compte"),
        max_length=20,
        choices=AccountType.choices,
        default=AccountType.CUSTOMER,
    )
    agency_name = models.CharField(_("Nom de l'agence"), max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = _("Utilisateur")
        verbose_name_plural = _("Utilisateurs")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_account_type_display()})"

    def is_backoffice(self) -> bool:
        """Agency and administrator accounts may not book as customers."""
        if self.is_staff or self.is_superuser:
            return True
        return self.account_type in self.BACKOFFICE_TYPES

    @property
    def display_name(self) -> str:
        candidates = (self.get_full_name(), self.username, self.agency_name)
        return next((c.strip() for c in candidates if c and c.strip()), "")
