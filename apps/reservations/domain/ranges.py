"""
Date range primitives

All ranges are half-open: [check_in_date, check_out_date). The check-out
day of one stay can be the check-in day of the next.
"""

import re
from datetime import date, datetime
from typing import Iterable, Optional, Protocol, TypeVar

from shared.domain.value_objects import ranges_overlap

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

__all__ = ["ranges_overlap", "find_first_overlap", "parse_iso_date", "nights_between"]


class DatedBlock(Protocol):
    check_in_date: date
    check_out_date: date


B = TypeVar("B", bound=DatedBlock)


def parse_iso_date(value) -> Optional[date]:
    """
    Parse a strict ``YYYY-MM-DD`` calendar date.

    Returns None for anything else, including other ISO 8601 spellings
    (``20250610``) and impossible dates (``2025-02-30``).
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not ISO_DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def find_first_overlap(blocks: Iterable[B], check_in_date: date, check_out_date: date) -> Optional[B]:
    """Return the earliest block (by check-in) intersecting the candidate range."""
    ordered = sorted(blocks, key=lambda block: block.check_in_date)
    for block in ordered:
        if ranges_overlap(block.check_in_date, block.check_out_date, check_in_date, check_out_date):
            return block
    return None


def nights_between(check_in_date: date, check_out_date: date) -> int:
    return (check_out_date - check_in_date).days
