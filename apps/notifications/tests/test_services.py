"""Tests for back-office notifications."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from apps.notifications.handlers import notify_reservation_created
from apps.notifications.models import Notification
from apps.notifications.services import notify_admin_event
from apps.reservations.domain.events import ReservationCreated
from shared.application.message_bus import message_bus

pytestmark = pytest.mark.django_db


def _event(**overrides) -> ReservationCreated:
    reservation_id = overrides.pop("reservation_id", uuid4())
    values = dict(
        aggregate_id=reservation_id,
        reservation_id=reservation_id,
        property_ref="RST-0606",
        property_title="Studio Bab Ezzouar",
        check_in_date=date(2025, 7, 1),
        check_out_date=date(2025, 7, 4),
        nights=3,
        status="hold",
        customer_name="Walid",
    )
    values.update(overrides)
    return ReservationCreated(**values)


def test_duplicate_events_are_suppressed():
    first = notify_admin_event(event_type="reservation_created", title="A", entity_table="t", entity_id="1")
    second = notify_admin_event(event_type="reservation_created", title="A", entity_table="t", entity_id="1")
    other = notify_admin_event(event_type="reservation_created", title="B", entity_table="t", entity_id="2")

    assert (first, second, other) == (True, False, True)
    assert Notification.objects.count() == 2


def test_dedupe_can_be_disabled():
    for _ in range(2):
        notify_admin_event(event_type="ping", title="Ping", dedupe_seconds=0)

    assert Notification.objects.filter(event_type="ping").count() == 2


def test_reservation_created_handler_builds_notification(settings, mailoutbox):
    settings.RESERVATIONS = {"NOTIFY_EMAIL": "ops@example.com"}
    event = _event()

    notify_reservation_created(event)

    notification = Notification.objects.get(entity_id=str(event.reservation_id))
    assert notification.user is None
    assert notification.entity_table == "short_stay_reservations"
    assert "Studio Bab Ezzouar" in notification.title
    assert notification.metadata["nights"] == 3
    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == ["ops@example.com"]


def test_handler_is_subscribed_on_the_bus():
    assert notify_reservation_created in message_bus.handlers_for(ReservationCreated)


def test_handler_falls_back_to_ref_without_title(settings):
    settings.RESERVATIONS = {}

    notify_reservation_created(_event(property_title=None))

    assert Notification.objects.get().title.endswith("RST-0606")


def test_failing_subscriber_does_not_stop_others():
    calls = []

    def broken(event):
        raise RuntimeError("boom")

    def recorder(event):
        calls.append(event.reservation_id)

    message_bus.register_event_handler(ReservationCreated, broken)
    message_bus.register_event_handler(ReservationCreated, recorder)
    try:
        event = _event()
        message_bus.publish_events([event])
    finally:
        message_bus.unregister_event_handler(ReservationCreated, broken)
        message_bus.unregister_event_handler(ReservationCreated, recorder)

    assert calls == [event.reservation_id]
    assert Notification.objects.filter(entity_id=str(event.reservation_id)).exists()
    assert notify_reservation_created in message_bus.handlers_for(ReservationCreated)
