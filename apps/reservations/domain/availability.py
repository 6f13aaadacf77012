"""
Availability Aggregator

Folds the active blocks of one property into an AvailabilitySnapshot:

- ``reserved_until``: the last night of the continuous reserved window
  anchored at today. Blocks that cover the frontier or start the day
  right after it extend the window; a gap stops it.
- ``next_available_check_in``: the day after ``reserved_until``.
- ``blocked_ranges``: every active block, unmerged, for display.

Snapshots are derived on every read and never persisted.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from apps.reservations.domain.lifecycle import is_active, normalize_status

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class BlockedRange:
    check_in_date: date
    check_out_date: date
    status: str
    hold_expires_at: Optional[datetime] = None

    @classmethod
    def from_block(cls, block) -> 'BlockedRange':
        return cls(
            check_in_date=block.check_in_date,
            check_out_date=block.check_out_date,
            status=normalize_status(block.status),
            hold_expires_at=block.hold_expires_at,
        )


@dataclass(frozen=True)
class AvailabilitySnapshot:
    is_reserved: bool = False
    reserved_until: Optional[date] = None
    next_available_check_in: Optional[date] = None
    blocked_ranges: List[BlockedRange] = field(default_factory=list)


def derive_reserved_until(blocks: Iterable, today: date) -> Optional[date]:
    """
    Last night of the reserved window that starts at ``today``.

    ``blocks`` must already be restricted to active blocks. Returns None
    when no block covers today or starts tomorrow.
    """
    ordered = sorted(blocks, key=lambda b: (b.check_in_date, b.check_out_date))
    frontier = today
    reserved_until = None

    extended = True
    while extended:
        extended = False
        for block in ordered:
            covers_frontier = block.check_in_date <= frontier < block.check_out_date
            starts_next_day = block.check_in_date == frontier + ONE_DAY
            if not (covers_frontier or starts_next_day):
                continue
            last_night = block.check_out_date - ONE_DAY
            if reserved_until is None or last_night > reserved_until:
                reserved_until = last_night
                frontier = last_night
                extended = True
    return reserved_until


def build_availability_snapshot(blocks: Iterable, *, today: date, now: datetime) -> AvailabilitySnapshot:
    active = sorted(
        (b for b in blocks if is_active(b, now) and b.check_out_date >= today),
        key=lambda b: (b.check_in_date, b.check_out_date),
    )
    reserved_until = derive_reserved_until(active, today)
    return AvailabilitySnapshot(
        is_reserved=reserved_until is not None,
        reserved_until=reserved_until,
        next_available_check_in=reserved_until + ONE_DAY if reserved_until else None,
        blocked_ranges=[BlockedRange.from_block(b) for b in active],
    )
