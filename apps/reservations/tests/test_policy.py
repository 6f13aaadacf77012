"""Tests for ReservationPolicy."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from django.test import override_settings

from apps.reservations.policy import ReservationPolicy, clamp_hold_minutes


@pytest.mark.parametrize(
    "raw, expected",
    [(15, 15), ("30", 30), (0, 1), (-4, 1), (500, 180), ("abc", 15), (None, 15)],
)
def test_hold_minutes_are_clamped(raw, expected):
    assert clamp_hold_minutes(raw) == expected


def test_policy_from_mapping():
    policy = ReservationPolicy.from_settings(
        {"HOLD_MINUTES": "45", "AUTO_CONFIRM": "true", "ATOMIC_WRITES": "0"}
    )

    assert policy.hold_minutes == 45
    assert policy.auto_confirm is True
    assert policy.atomic_writes is False
    assert policy.maintenance_on_create is False


@override_settings(RESERVATIONS={"HOLD_MINUTES": 999})
def test_policy_from_django_settings():
    policy = ReservationPolicy.from_settings()

    assert policy.hold_minutes == 180
    assert policy.atomic_writes is True


def test_initial_status_and_expiry():
    now = datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc)

    held = ReservationPolicy(hold_minutes=20)
    assert held.initial_status == "hold"
    assert held.hold_expiry(now) == now + timedelta(minutes=20)

    confirmed = ReservationPolicy(auto_confirm=True)
    assert confirmed.initial_status == "new"
    assert confirmed.hold_expiry(now) is None
