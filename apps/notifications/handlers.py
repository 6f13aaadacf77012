"""Domain event subscribers that turn reservation events into notifications."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore

from apps.reservations.domain.events import ReservationCreated
from shared.application.message_bus import message_bus

from .services import notify_admin_event, send_email_notification

logger = logging.getLogger(__name__)


def notify_reservation_created(event: ReservationCreated) -> None:
    """Back-office alert for a new short-stay reservation."""

    label = event.property_title or event.property_ref
    customer = event.customer_name or event.customer_email or event.customer_phone or "Client"
    title = f"Nouvelle réservation: {label}"
    body = f"{customer} · {event.check_in_date.isoformat()} → {event.check_out_date.isoformat()}"

    notify_admin_event(
        event_type="reservation_created",
        title=title,
        body=body,
        href="/admin/protected/leads/reservations",
        icon_key="calendar",
        entity_table="short_stay_reservations",
        entity_id=str(event.reservation_id),
        metadata={
            "property_ref": event.property_ref,
            "status": event.status,
            "nights": event.nights,
            "degraded_write": event.degraded_write,
        },
    )

    recipient = settings.RESERVATIONS.get("NOTIFY_EMAIL")
    if recipient:
        send_email_notification(recipient, title, body)


def register_handlers() -> None:
    message_bus.register_event_handler(ReservationCreated, notify_reservation_created)
