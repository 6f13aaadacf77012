"""Tests for janitor, lifecycle and read services."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from apps.reservations.domain import lifecycle
from apps.reservations.exceptions import InvalidTransitionError
from apps.reservations.models import ShortStayReservation
from apps.reservations.services import (
    cancel_reservation,
    customer_reservations,
    expire_stale_holds,
    get_availability,
    maintain_reservations,
    parse_refs,
    summarize_availability,
    transition_reservation,
)
from apps.users.models import CustomUser

pytestmark = pytest.mark.django_db


def test_janitor_only_touches_expired_holds(make_reservation, now):
    expired = make_reservation(date(2025, 6, 2), date(2025, 6, 4), status="hold", hold_expires_at=now)
    live = make_reservation(
        date(2025, 6, 5), date(2025, 6, 6), status="hold", hold_expires_at=now + timedelta(minutes=1)
    )
    open_hold = make_reservation(date(2025, 6, 7), date(2025, 6, 8), status="hold")
    confirmed = make_reservation(date(2025, 6, 9), date(2025, 6, 10))

    assert expire_stale_holds(now=now, property_refs=["RST-0101"]) == 1
    assert expire_stale_holds(now=now, property_refs=["RST-0101"]) == 0

    statuses = dict(ShortStayReservation.objects.values_list("pk", "status"))
    assert statuses[expired.pk] == "cancelled"
    assert statuses[live.pk] == "hold"
    assert statuses[open_hold.pk] == "hold"
    assert statuses[confirmed.pk] == "confirmed"
    expired.refresh_from_db()
    assert expired.cancellation_reason == lifecycle.HOLD_EXPIRED_REASON


def test_janitor_scope_is_per_property(make_reservation, now):
    other = make_reservation(
        date(2025, 6, 2), date(2025, 6, 4), status="hold", hold_expires_at=now, property_ref="RST-0202"
    )

    expire_stale_holds(now=now, property_refs=["RST-0101"])

    other.refresh_from_db()
    assert other.status == "hold"


def test_active_queryset_matches_predicate(make_reservation, now):
    make_reservation(date(2025, 6, 2), date(2025, 6, 4), status="hold", hold_expires_at=now)
    make_reservation(date(2025, 6, 5), date(2025, 6, 6), status="cancelled")
    kept = make_reservation(date(2025, 6, 7), date(2025, 6, 8), status="hold")

    blocks = list(ShortStayReservation.objects.all())
    expected = {b.pk for b in blocks if lifecycle.is_active(b, now)}

    assert set(ShortStayReservation.objects.active(now).values_list("pk", flat=True)) == expected == {kept.pk}


def test_availability_reads_are_idempotent(make_reservation, now):
    make_reservation(date(2025, 6, 1), date(2025, 6, 4))
    make_reservation(date(2025, 6, 4), date(2025, 6, 7), status="hold", hold_expires_at=now + timedelta(hours=1))

    first = get_availability("RST-0101", now=now)
    second = get_availability("RST-0101", now=now)

    assert first == second
    assert first.reserved_until == date(2025, 6, 6)
    assert first.next_available_check_in == date(2025, 6, 7)


def test_summary_keeps_request_order_and_dedupes(make_reservation, now):
    make_reservation(date(2025, 6, 1), date(2025, 6, 3), property_ref="RST-0202")

    items = summarize_availability("RST-0202, RST-0101,RST-0202,,", now=now)

    assert [item["property_ref"] for item in items] == ["RST-0202", "RST-0101"]
    assert items[0]["is_reserved_now"] is True
    assert items[0]["reserved_until"] == date(2025, 6, 2)
    assert items[1]["is_reserved_now"] is False


def test_parse_refs_caps_the_list():
    refs = parse_refs(",".join(f"R{i}" for i in range(500)))

    assert len(refs) == 120
    assert refs[0] == "R0"


def test_transitions_follow_state_machine(make_reservation, now):
    reservation = make_reservation(date(2025, 6, 2), date(2025, 6, 4), status="new")

    reservation = transition_reservation(reservation, "contacted", now=now)
    reservation = transition_reservation(reservation, "confirmed", now=now)
    assert reservation.status == "confirmed"

    with pytest.raises(InvalidTransitionError):
        transition_reservation(reservation, "new", now=now)


def test_promoting_live_hold_clears_expiry(make_reservation, now):
    hold = make_reservation(
        date(2025, 6, 2), date(2025, 6, 4), status="hold", hold_expires_at=now + timedelta(minutes=5)
    )

    confirmed = transition_reservation(hold, "confirmed", now=now)

    assert confirmed.hold_expires_at is None


def test_expired_hold_cannot_be_promoted(make_reservation, now):
    hold = make_reservation(date(2025, 6, 2), date(2025, 6, 4), status="hold", hold_expires_at=now)

    with pytest.raises(InvalidTransitionError):
        transition_reservation(hold, "confirmed", now=now)


def test_cancel_records_reason_and_is_idempotent(make_reservation, now):
    reservation = make_reservation(date(2025, 6, 2), date(2025, 6, 4))

    cancelled = cancel_reservation(reservation, reason="guest_request", now=now)
    assert cancelled.status == "cancelled"
    assert cancelled.cancelled_at == now
    assert cancelled.cancellation_reason == "guest_request"

    assert cancel_reservation(cancelled, reason="again", now=now).cancellation_reason == "guest_request"


def test_cancel_on_explicit_database_alias(make_reservation, now):
    reservation = make_reservation(date(2025, 6, 2), date(2025, 6, 4))

    cancelled = cancel_reservation(reservation, reason="guest_request", now=now, using="default")

    assert cancelled._state.db == "default"
    assert ShortStayReservation.objects.using("default").get(pk=reservation.pk).status == "cancelled"


def test_maintenance_expires_every_property(make_reservation, now):
    make_reservation(date(2025, 6, 2), date(2025, 6, 4), status="hold", hold_expires_at=now)
    make_reservation(date(2025, 6, 2), date(2025, 6, 4), status="hold", hold_expires_at=now, property_ref="RST-0202")

    summary = maintain_reservations(now=now)

    assert summary["expired_holds"] == 2


def test_customer_history_includes_anonymous_bookings_by_email(make_reservation):
    user = CustomUser.objects.create_user(email="nadia@example.com")
    linked = make_reservation(date(2025, 6, 2), date(2025, 6, 4), customer_user=user)
    anonymous = make_reservation(date(2025, 6, 5), date(2025, 6, 6), customer_email="NADIA@example.com")
    make_reservation(date(2025, 6, 7), date(2025, 6, 8), customer_email="someone@example.com")

    assert set(customer_reservations(user).values_list("pk", flat=True)) == {linked.pk, anonymous.pk}
