from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from apps.properties.models import Property
from apps.reservations.models import ShortStayReservation

NOW = datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def listed_property(db):
    return Property.objects.create(
        ref="RST-0101",
        title="Appartement F3 Sablettes",
        location="Alger, Sablettes",
        price="9 000 DA / nuit",
        location_type=Property.RentalKind.PER_NIGHT,
    )


@pytest.fixture
def make_reservation(db, now):
    def factory(check_in: date, check_out: date, *, status="confirmed", property_ref="RST-0101", **extra):
        extra.setdefault("created_at", now)
        return ShortStayReservation.objects.create(
            property_ref=property_ref,
            check_in_date=check_in,
            check_out_date=check_out,
            status=status,
            **extra,
        )

    return factory
