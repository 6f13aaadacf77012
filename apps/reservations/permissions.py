"""Access rules of the reservation API."""

from __future__ import annotations

import hmac

from django.conf import settings  # type: ignore
from rest_framework import permissions  # type: ignore


def is_backoffice_account(user) -> bool:
    """Agencies and administrators act for the platform and cannot book."""

    if user is None or not getattr(user, "is_authenticated", False):
        return False
    if hasattr(user, "is_backoffice"):
        return bool(user.is_backoffice())
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


def _bearer_token(header: str) -> str:
    scheme, _, token = (header or "").strip().partition(" ")
    if scheme.lower() == "bearer":
        return token.strip()
    return ""


class HasCronSecret(permissions.BasePermission):
    """Scheduler endpoints; open when no cron secret is configured."""

    message = "Invalid or missing cron secret."

    def has_permission(self, request, view):  # type: ignore
        expected = (getattr(settings, "RESERVATIONS", {}).get("CRON_SECRET") or "").strip()
        if not expected:
            return True

        candidates = (
            _bearer_token(request.META.get("HTTP_AUTHORIZATION", "")),
            request.META.get("HTTP_X_CRON_SECRET", "").strip(),
            (request.query_params.get("secret") or "").strip(),
        )
        return any(
            candidate and hmac.compare_digest(candidate.encode(), expected.encode())
            for candidate in candidates
        )
