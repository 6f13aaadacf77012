"""Tests for the property snapshot lookup."""

from __future__ import annotations

import pytest

from apps.properties.models import Property
from apps.properties.services import get_property_snapshot


@pytest.mark.django_db
def test_snapshot_returns_catalog_fields():
    Property.objects.create(
        ref="RST-0042",
        title="Studio vue mer",
        location="Oran, Bir El Djir",
        price="6 500 DA / nuit",
        location_type=Property.RentalKind.PER_NIGHT,
    )

    snapshot = get_property_snapshot("RST-0042")

    assert snapshot is not None
    assert snapshot.ref == "RST-0042"
    assert snapshot.title == "Studio vue mer"
    assert snapshot.location_type == "par_nuit"


@pytest.mark.django_db
def test_blank_catalog_fields_become_none():
    Property.objects.create(ref="RST-0043", title="  ")

    snapshot = get_property_snapshot("RST-0043")

    assert snapshot is not None
    assert snapshot.title is None
    assert snapshot.price is None
    assert snapshot.location_type is None


@pytest.mark.django_db
def test_unknown_ref_returns_none():
    assert get_property_snapshot("missing") is None
