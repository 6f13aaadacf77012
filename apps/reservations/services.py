"""Domain services for short-stay reservations.

Reads never trust stored hold statuses: expired holds are filtered out
by ``ReservationQuerySet.active`` whether or not the janitor has run.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Iterable

from django.db import DatabaseError, transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from apps.reservations.domain import lifecycle
from apps.reservations.domain.availability import AvailabilitySnapshot, build_availability_snapshot

from .models import ShortStayReservation

logger = logging.getLogger(__name__)

SUMMARY_MAX_REFS = 120
ACCOUNT_HISTORY_LIMIT = 200


def expire_stale_holds(*, now: datetime, property_refs: Iterable[str] | None = None, using: str | None = None) -> int:
    """Cancel holds whose expiry has passed; returns the number of rows changed."""

    queryset = ShortStayReservation.objects.using(using).stale_holds(now)
    if property_refs is not None:
        queryset = queryset.filter(property_ref__in=list(property_refs))
    expired = queryset.update(
        status=lifecycle.CANCELLED,
        cancellation_reason=lifecycle.HOLD_EXPIRED_REASON,
        cancelled_at=now,
        updated_at=now,
    )
    if expired:
        logger.info("Expired %s stale reservation holds", expired)
    return expired


def expire_stale_holds_quietly(*, now: datetime, property_refs: Iterable[str] | None = None) -> int:
    """Best-effort janitor run; a failure is logged and reads carry on."""

    try:
        with transaction.atomic():
            return expire_stale_holds(now=now, property_refs=property_refs)
    except DatabaseError:
        logger.warning("Stale hold cleanup failed", exc_info=True)
        return 0


def load_active_blocks(property_ref: str, *, today, now: datetime, using: str | None = None) -> list[ShortStayReservation]:
    """Active blocks of one property that have not ended before ``today``, by check-in."""

    return list(
        ShortStayReservation.objects.using(using)
        .for_property(property_ref)
        .active(now)
        .upcoming(today)
        .order_by("check_in_date", "check_out_date", "created_at")
    )


def get_availability(property_ref: str, *, now: datetime | None = None) -> AvailabilitySnapshot:
    now = now or timezone.now()
    today = timezone.localdate(now)
    expire_stale_holds_quietly(now=now, property_refs=[property_ref])
    blocks = load_active_blocks(property_ref, today=today, now=now)
    return build_availability_snapshot(blocks, today=today, now=now)


def parse_refs(raw: str | Iterable[str] | None) -> list[str]:
    """Split a comma separated list of refs, dropping blanks and duplicates."""

    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else raw
    refs: list[str] = []
    for part in parts:
        ref = (part or "").strip()
        if ref and ref not in refs:
            refs.append(ref)
        if len(refs) >= SUMMARY_MAX_REFS:
            break
    return refs


def summarize_availability(refs: Iterable[str], *, now: datetime | None = None) -> list[dict]:
    """Compact availability of several properties, in the order requested."""

    refs = parse_refs(refs)
    if not refs:
        return []

    now = now or timezone.now()
    today = timezone.localdate(now)
    expire_stale_holds_quietly(now=now, property_refs=refs)

    grouped: dict[str, list[ShortStayReservation]] = defaultdict(list)
    blocks = (
        ShortStayReservation.objects.filter(property_ref__in=refs)
        .active(now)
        .upcoming(today)
        .order_by("check_in_date", "check_out_date")
    )
    for block in blocks:
        grouped[block.property_ref].append(block)

    summary = []
    for ref in refs:
        snapshot = build_availability_snapshot(grouped.get(ref, []), today=today, now=now)
        summary.append(
            {
                "property_ref": ref,
                "is_reserved_now": snapshot.is_reserved,
                "reserved_until": snapshot.reserved_until,
                "next_available_check_in": snapshot.next_available_check_in,
            }
        )
    return summary


def customer_reservations(user):
    """Reservations made by ``user``, or anonymously with the same email."""

    ownership = Q(customer_user=user)
    email = (getattr(user, "email", "") or "").strip()
    if email:
        ownership |= Q(customer_user__isnull=True, customer_email__iexact=email)
    return ShortStayReservation.objects.filter(ownership).order_by("-created_at")


def transition_reservation(
    reservation: ShortStayReservation,
    target: str,
    *,
    reason: str | None = None,
    now: datetime | None = None,
    using: str | None = None,
) -> ShortStayReservation:
    """Apply a lifecycle transition under a row lock."""

    with transaction.atomic(using=using):
        locked = ShortStayReservation.objects.using(using).select_for_update().get(pk=reservation.pk)
        locked.transition_to(target, reason=reason, now=now, using=using)
    logger.info("Reservation %s moved to %s", locked.pk, target)
    return locked


def cancel_reservation(
    reservation: ShortStayReservation,
    *,
    reason: str | None = None,
    now: datetime | None = None,
    using: str | None = None,
) -> ShortStayReservation:
    if reservation.status == lifecycle.CANCELLED:
        return reservation
    return transition_reservation(reservation, lifecycle.CANCELLED, reason=reason, now=now, using=using)


def maintain_reservations(*, now: datetime | None = None) -> dict:
    """Periodic upkeep: expire every stale hold across all properties."""

    now = now or timezone.now()
    with transaction.atomic():
        expired = expire_stale_holds(now=now)
    return {
        "expired_holds": expired,
        "ran_at": now.isoformat(),
    }
