"""Property lookup consumed by the reservation engine."""

from __future__ import annotations

from dataclasses import dataclass

from .models import Property


@dataclass(frozen=True)
class PropertySnapshot:
    ref: str
    title: str | None
    location: str | None
    price: str | None
    location_type: str | None


def _blank_to_none(value: str) -> str | None:
    value = (value or "").strip()
    return value or None


def get_property_snapshot(ref: str) -> PropertySnapshot | None:
    """Return the catalog snapshot for ``ref`` or ``None`` when it does not exist."""

    row = (
        Property.objects.filter(ref=ref)
        .values("ref", "title", "location", "price", "location_type")
        .first()
    )
    if row is None:
        return None
    return PropertySnapshot(
        ref=row["ref"],
        title=_blank_to_none(row["title"]),
        location=_blank_to_none(row["location"]),
        price=_blank_to_none(row["price"]),
        location_type=_blank_to_none(row["location_type"]),
    )
