"""Tests for half-open range helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest

from shared.domain.value_objects import DateRange
from apps.reservations.domain.ranges import (
    find_first_overlap,
    nights_between,
    parse_iso_date,
    ranges_overlap,
)


@dataclass
class Block:
    check_in_date: date
    check_out_date: date


def JUNE(day: int) -> date:
    return date(2025, 6, day)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ((JUNE(10), JUNE(15)), (JUNE(12), JUNE(14)), True),
        ((JUNE(10), JUNE(15)), (JUNE(15), JUNE(20)), False),
        ((JUNE(10), JUNE(15)), (JUNE(5), JUNE(10)), False),
        ((JUNE(10), JUNE(15)), (JUNE(14), JUNE(16)), True),
        ((JUNE(10), JUNE(15)), (JUNE(1), JUNE(30)), True),
    ],
)
def test_overlap_is_symmetric(a, b, expected):
    assert ranges_overlap(*a, *b) is expected
    assert ranges_overlap(*b, *a) is expected


def test_find_first_overlap_returns_earliest_check_in():
    late = Block(JUNE(14), JUNE(18))
    early = Block(JUNE(9), JUNE(12))
    unrelated = Block(JUNE(20), JUNE(22))

    assert find_first_overlap([late, unrelated, early], JUNE(11), JUNE(15)) is early


def test_find_first_overlap_ignores_touching_blocks():
    blocks = [Block(JUNE(5), JUNE(10)), Block(JUNE(15), JUNE(20))]

    assert find_first_overlap(blocks, JUNE(10), JUNE(15)) is None


@pytest.mark.parametrize("value", ["2025-06-10", " 2025-06-10 ", date(2025, 6, 10)])
def test_parse_iso_date_accepts_calendar_dates(value):
    assert parse_iso_date(value) == JUNE(10)


@pytest.mark.parametrize(
    "value",
    ["", None, "20250610", "2025-6-10", "2025-02-30", "10/06/2025", "2025-06-10T00:00:00", 20250610],
)
def test_parse_iso_date_rejects_everything_else(value):
    assert parse_iso_date(value) is None


def test_nights_between():
    assert nights_between(JUNE(10), JUNE(15)) == 5


def test_date_range_value_object():
    stay = DateRange(JUNE(10), JUNE(15))

    assert stay.overlaps_with(DateRange(JUNE(14), JUNE(20)))
    assert not stay.overlaps_with(DateRange(JUNE(15), JUNE(20)))
    assert str(stay) == "2025-06-10 - 2025-06-15"


def test_date_range_rejects_empty_stays():
    with pytest.raises(ValueError):
        DateRange(JUNE(10), JUNE(10))
