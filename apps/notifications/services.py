"""Notification services: in-app back-office notifications and email."""

from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.db import DatabaseError  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Notification

logger = logging.getLogger(__name__)

DEFAULT_DEDUPE_SECONDS = 10


def _optional_text(value) -> str:
    return str(value if value is not None else "").strip()


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def notify_admin_event(
    *,
    event_type: str,
    title: str,
    body: str | None = None,
    href: str | None = None,
    icon_key: str | None = None,
    entity_table: str | None = None,
    entity_id: str | None = None,
    metadata: dict | None = None,
    dedupe_seconds: int = DEFAULT_DEDUPE_SECONDS,
) -> bool:
    """
    Create a back-office notification.

    A notification with the same event type and entity created within the
    last ``dedupe_seconds`` suppresses this one.

    Returns:
        bool: True if a notification row was created
    """
    event_type = _optional_text(event_type) or "event"
    title = _optional_text(title) or "Nouvel événement"
    entity_table = _optional_text(entity_table)
    entity_id = _optional_text(entity_id)
    dedupe_seconds = max(0, int(dedupe_seconds or 0))

    try:
        if dedupe_seconds > 0:
            recent = Notification.objects.filter(
                event_type=event_type,
                created_at__gte=timezone.now() - timedelta(seconds=dedupe_seconds),
            )
            if entity_table:
                recent = recent.filter(entity_table=entity_table)
            if entity_id:
                recent = recent.filter(entity_id=entity_id)
            if recent.exists():
                logger.debug("Notification %s for %s/%s deduplicated", event_type, entity_table, entity_id)
                return False

        Notification.objects.create(
            event_type=event_type,
            icon_key=_optional_text(icon_key) or "bell",
            title=title,
            message=_optional_text(body),
            href=_optional_text(href) or "/admin/protected",
            entity_table=entity_table,
            entity_id=entity_id,
            metadata=metadata or {},
        )
    except DatabaseError as e:
        logger.error("Failed to create notification %s: %s", event_type, e, exc_info=True)
        return False

    logger.info("Back-office notification created: %s (%s)", title, event_type)
    return True


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(recipient_email: str, subject: str, message: str) -> bool:
    """
    Send a plain-text email.

    Returns:
        bool: True if the message was handed to the mail backend
    """
    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            fail_silently=False,
        )
    except Exception as e:
        logger.error("Failed to send email to %s: %s", recipient_email, e, exc_info=True)
        return False

    logger.info("Email sent successfully to %s: %s", recipient_email, subject)
    return True
