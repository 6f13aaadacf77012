"""Celery tasks for short-stay reservations."""

from __future__ import annotations

import structlog  # type: ignore
from celery import shared_task  # type: ignore

from .services import maintain_reservations

logger = structlog.get_logger(__name__)


@shared_task(name="reservations.maintain_short_stay_reservations")
def maintain_short_stay_reservations() -> dict:
    """Expire stale holds across every property."""

    summary = maintain_reservations()
    logger.info("reservation_maintenance", **summary)
    return summary
