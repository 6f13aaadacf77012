"""
Common Value Objects

- DateRange: a half-open range of calendar dates (check-in to check-out)
- ranges_overlap: the overlap rule DateRange is built on
"""

from dataclasses import dataclass
from datetime import date

from shared.domain.base import ValueObject


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Check whether two half-open ranges [start, end) share at least one day.

    Adjacent ranges do not overlap: a check-out day can be the next
    guest's check-in day.
    """
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    Used for reservation periods and availability checks.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Examples:
            - DateRange(25, 28) overlaps with DateRange(27, 30) -> True
            - DateRange(25, 28) overlaps with DateRange(28, 31) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return ranges_overlap(self.start_date, self.end_date, other.start_date, other.end_date)

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
