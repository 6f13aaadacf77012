"""
Reservation Command Handlers

Use cases of the reservation engine.

Commands:
- CreateReservationCommand: validate, pre-check and persist a new
  reservation, then return it with a fresh availability snapshot

Queries:
- AvailabilityQuery: availability snapshot of one property
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional
import logging

from django.utils import timezone

from shared.domain.value_objects import DateRange

from apps.properties.services import PropertySnapshot, get_property_snapshot
from apps.reservations.application.writers import (
    InsertThenVerifyReservationWriter,
    ReservationDraft,
    ReservationWriter,
    TransactionalReservationWriter,
)
from apps.reservations.domain.availability import (
    AvailabilitySnapshot,
    BlockedRange,
    build_availability_snapshot,
)
from apps.reservations.domain.ranges import find_first_overlap, parse_iso_date
from apps.reservations.exceptions import (
    AtomicWriteUnavailable,
    PropertyNotFoundError,
    ReservationConflictError,
    ReservationOverlapError,
    ReservationPolicyError,
    ReservationValidationError,
)
from apps.reservations.models import ShortStayReservation
from apps.reservations.permissions import is_backoffice_account
from apps.reservations.policy import ReservationPolicy
from apps.reservations.services import (
    expire_stale_holds_quietly,
    get_availability,
    load_active_blocks,
)

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Ces dates ne sont plus disponibles."


# ===== Commands =====

@dataclass
class CreateReservationCommand:
    """
    Command to create a short-stay reservation

    Raw customer input; the handler validates every field.
    """
    property_ref: Optional[str]
    check_in_date: Any
    check_out_date: Any
    user: Any = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    message: Optional[str] = None
    lang: Optional[str] = None
    reservation_option: Optional[str] = None
    reservation_option_label: Optional[str] = None
    source: Optional[str] = None


@dataclass
class ReservationResult:
    reservation: ShortStayReservation
    availability: AvailabilitySnapshot
    degraded: bool = False


@dataclass
class AvailabilityQuery:
    property_ref: Optional[str]


# ===== Helpers =====

def _clean(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def normalize_phone(value) -> Optional[str]:
    digits = "".join(ch for ch in str(value or "") if ch.isdigit())
    return digits or None


def normalize_lang(value) -> str:
    return "ar" if (_clean(value) or "").lower() == "ar" else "fr"


def _authenticated(user):
    if user is not None and getattr(user, "is_authenticated", False):
        return user
    return None


# ===== Handlers =====

class CreateReservationHandler:
    """
    Handler for CreateReservationCommand

    Order of checks: dates, caller policy, property, overlap. The
    overlap pre-check only spares a write for the common case; the
    writer re-checks under its lock.
    """

    def __init__(
        self,
        *,
        policy: ReservationPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
        writer: ReservationWriter | None = None,
        fallback_writer: ReservationWriter | None = None,
        property_lookup: Callable[[str], PropertySnapshot | None] | None = None,
    ):
        self.policy = policy or ReservationPolicy.from_settings()
        self.clock = clock or timezone.now
        self.writer = writer or TransactionalReservationWriter()
        self.fallback_writer = fallback_writer or InsertThenVerifyReservationWriter()
        self.property_lookup = property_lookup or get_property_snapshot

    def handle(self, command: CreateReservationCommand) -> ReservationResult:
        now = self.clock()
        today = timezone.localdate(now)

        property_ref, stay = self._validate(command, today)

        if is_backoffice_account(command.user):
            raise ReservationPolicyError(
                "Les comptes agence et administrateur ne peuvent pas réserver."
            )

        property_snapshot = self.property_lookup(property_ref)
        if property_snapshot is None:
            raise PropertyNotFoundError(f"Property {property_ref} not found")

        expire_stale_holds_quietly(now=now, property_refs=[property_ref])

        blocks = load_active_blocks(property_ref, today=today, now=now)
        conflicting = find_first_overlap(blocks, stay.start_date, stay.end_date)
        if conflicting is not None:
            raise self._conflict(blocks, conflicting, today=today, now=now)

        draft = self._build_draft(command, property_snapshot, stay)
        try:
            reservation, degraded = self._write(draft, now)
        except ReservationOverlapError as exc:
            blocks = load_active_blocks(property_ref, today=today, now=now)
            conflicting = find_first_overlap(blocks, stay.start_date, stay.end_date) or exc.conflicting
            raise self._conflict(blocks, conflicting, today=today, now=now) from exc

        if self.policy.maintenance_on_create:
            self._trigger_maintenance()

        blocks = load_active_blocks(property_ref, today=today, now=now)
        availability = build_availability_snapshot(blocks, today=today, now=now)
        return ReservationResult(reservation=reservation, availability=availability, degraded=degraded)

    def _validate(self, command: CreateReservationCommand, today: date):
        property_ref = _clean(command.property_ref)
        if not property_ref:
            raise ReservationValidationError("property_ref is required", field="property_ref")

        check_in_date = parse_iso_date(command.check_in_date)
        if check_in_date is None:
            raise ReservationValidationError("check_in_date must be YYYY-MM-DD", field="check_in_date")
        check_out_date = parse_iso_date(command.check_out_date)
        if check_out_date is None:
            raise ReservationValidationError("check_out_date must be YYYY-MM-DD", field="check_out_date")

        if check_out_date <= check_in_date:
            raise ReservationValidationError(
                "check_out_date must be after check_in_date", field="check_out_date"
            )
        if check_in_date < today:
            raise ReservationValidationError("check_in_date cannot be in the past", field="check_in_date")
        return property_ref, DateRange(check_in_date, check_out_date)

    def _build_draft(self, command, property_snapshot, stay: DateRange) -> ReservationDraft:
        user = _authenticated(command.user)
        name = _clean(command.customer_name)
        phone = _clean(command.customer_phone)
        email = _clean(command.customer_email)
        if user is not None:
            name = name or _clean(getattr(user, "display_name", None))
            phone = phone or _clean(getattr(user, "phone", None))
            email = email or _clean(getattr(user, "email", None))

        return ReservationDraft(
            property=property_snapshot,
            check_in_date=stay.start_date,
            check_out_date=stay.end_date,
            customer_user_id=user.pk if user is not None else None,
            customer_name=name,
            customer_phone=normalize_phone(phone),
            customer_email=email.lower() if email else None,
            message=_clean(command.message),
            lang=normalize_lang(command.lang),
            reservation_option=_clean(command.reservation_option),
            reservation_option_label=_clean(command.reservation_option_label),
            source=_clean(command.source) or "property_details",
        )

    def _write(self, draft: ReservationDraft, now: datetime):
        try:
            return self.writer.create(draft, policy=self.policy, now=now), False
        except AtomicWriteUnavailable as exc:
            logger.warning("Serialized reservation write unavailable, using fallback: %s", exc)
        return self.fallback_writer.create(draft, policy=self.policy, now=now), True

    def _conflict(self, blocks, conflicting, *, today, now) -> ReservationConflictError:
        snapshot = build_availability_snapshot(blocks, today=today, now=now)
        return ReservationConflictError(
            CONFLICT_MESSAGE,
            snapshot=snapshot,
            conflicting=BlockedRange.from_block(conflicting) if conflicting is not None else None,
        )

    def _trigger_maintenance(self) -> None:
        from apps.reservations.tasks import maintain_short_stay_reservations

        try:
            maintain_short_stay_reservations.delay()
        except Exception as exc:
            # Broker outages must not fail a reservation that is already stored.
            logger.warning("Could not enqueue reservation maintenance: %s", exc)


class AvailabilityQueryHandler:
    """Handler for AvailabilityQuery"""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or timezone.now

    def handle(self, query: AvailabilityQuery) -> AvailabilitySnapshot:
        property_ref = _clean(query.property_ref)
        if not property_ref:
            raise ReservationValidationError("property_ref is required", field="property_ref")
        return get_availability(property_ref, now=self.clock())
