"""
Reservation Domain Events

Published by the unit of work after the creating transaction commits.
"""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class ReservationCreated(DomainEvent):
    """
    Event: a short-stay reservation was recorded

    Triggers:
    - Back-office notification
    """
    reservation_id: UUID
    property_ref: str
    property_title: str | None
    check_in_date: date
    check_out_date: date
    nights: int
    status: str
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    degraded_write: bool = False  # created through the insert-then-verify fallback
