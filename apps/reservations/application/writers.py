"""
Reservation Writers

Two ways to persist a new reservation without ever leaving two active
blocks of one property overlapping:

- TransactionalReservationWriter: expire, re-check and insert inside one
  transaction while holding a per-property write lock.
- InsertThenVerifyReservationWriter: used when the database cannot give
  that guarantee. Inserts first, then verifies against earlier rows and
  cancels its own row if it lost the race.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
import logging

from django.db import DatabaseError, IntegrityError, connections, transaction

from shared.application.uow import DjangoUnitOfWork
from apps.properties.services import PropertySnapshot
from apps.reservations.domain import lifecycle
from apps.reservations.domain.events import ReservationCreated
from apps.reservations.domain.ranges import find_first_overlap
from apps.reservations.exceptions import AtomicWriteUnavailable, ReservationOverlapError
from apps.reservations.models import ShortStayReservation
from apps.reservations.policy import ReservationPolicy
from apps.reservations.services import cancel_reservation, expire_stale_holds

logger = logging.getLogger(__name__)

EXCLUSION_CONSTRAINT = "short_stay_reservations_no_overlap"
EXCLUSION_VIOLATION_SQLSTATE = "23P01"

# SQLite serializes writers itself when transactions open in IMMEDIATE mode.
SERIALIZED_VENDORS = frozenset({"postgresql", "sqlite"})


@dataclass(frozen=True)
class ReservationDraft:
    """Validated input of a reservation, not yet persisted."""
    property: PropertySnapshot
    check_in_date: date
    check_out_date: date
    customer_user_id: int | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    message: str | None = None
    lang: str = "fr"
    reservation_option: str | None = None
    reservation_option_label: str | None = None
    source: str = "property_details"

    def build(self, *, status: str, hold_expires_at: datetime | None, now: datetime) -> ShortStayReservation:
        return ShortStayReservation(
            property_ref=self.property.ref,
            property_title=self.property.title,
            property_location=self.property.location,
            property_price=self.property.price,
            property_location_type=self.property.location_type,
            status=status,
            hold_expires_at=hold_expires_at,
            source=self.source,
            lang=self.lang,
            reservation_option=self.reservation_option,
            reservation_option_label=self.reservation_option_label,
            check_in_date=self.check_in_date,
            check_out_date=self.check_out_date,
            customer_user_id=self.customer_user_id,
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            customer_email=self.customer_email,
            message=self.message,
            created_at=now,
        )


def reservation_created_event(reservation: ShortStayReservation, *, degraded: bool) -> ReservationCreated:
    return ReservationCreated(
        aggregate_id=reservation.pk,
        reservation_id=reservation.pk,
        property_ref=reservation.property_ref,
        property_title=reservation.property_title,
        check_in_date=reservation.check_in_date,
        check_out_date=reservation.check_out_date,
        nights=reservation.nights,
        status=reservation.status,
        customer_name=reservation.customer_name,
        customer_email=reservation.customer_email,
        customer_phone=reservation.customer_phone,
        degraded_write=degraded,
    )


def is_overlap_violation(exc: IntegrityError) -> bool:
    """Whether ``exc`` comes from the PostgreSQL range exclusion constraint."""
    cause = exc.__cause__
    # psycopg2 exposes ``pgcode``, psycopg 3 ``sqlstate``
    code = getattr(cause, "pgcode", None) or getattr(cause, "sqlstate", None)
    if code == EXCLUSION_VIOLATION_SQLSTATE:
        return True
    return EXCLUSION_CONSTRAINT in str(exc)


class ReservationWriter(ABC):
    """Persists a draft or raises ReservationOverlapError."""

    def __init__(self, using: str = "default"):
        self.using = using

    @abstractmethod
    def create(self, draft: ReservationDraft, *, policy: ReservationPolicy, now: datetime) -> ShortStayReservation:
        """Insert the reservation described by ``draft``"""


class TransactionalReservationWriter(ReservationWriter):
    """
    Serialized writer

    Within a single transaction, with the property locked against other
    writers: expire stale holds, re-check overlap, insert the block with
    the policy's initial status, record ReservationCreated.
    """

    def create(self, draft, *, policy, now):
        connection = connections[self.using]
        if not policy.atomic_writes:
            raise AtomicWriteUnavailable("Atomic reservation writes are disabled")
        if connection.vendor not in SERIALIZED_VENDORS:
            raise AtomicWriteUnavailable(
                f"{connection.vendor} cannot serialize reservation writes"
            )

        ref = draft.property.ref
        try:
            with DjangoUnitOfWork(using=self.using) as uow:
                self._lock_property(connection, ref)
                expire_stale_holds(now=now, property_refs=[ref], using=self.using)

                existing = (
                    ShortStayReservation.objects.using(self.using)
                    .for_property(ref)
                    .active(now)
                    .overlapping(draft.check_in_date, draft.check_out_date)
                    .order_by("check_in_date", "created_at")
                )
                conflicting = find_first_overlap(existing, draft.check_in_date, draft.check_out_date)
                if conflicting is not None:
                    raise ReservationOverlapError(conflicting=conflicting)

                reservation = draft.build(
                    status=policy.initial_status,
                    hold_expires_at=policy.hold_expiry(now),
                    now=now,
                )
                reservation.save(using=self.using, force_insert=True)
                uow.add_event(reservation_created_event(reservation, degraded=False))
        except IntegrityError as exc:
            if is_overlap_violation(exc):
                raise ReservationOverlapError() from exc
            raise

        logger.info(
            "Reservation %s created for %s (%s → %s, %s)",
            reservation.pk, ref, draft.check_in_date, draft.check_out_date, reservation.status,
        )
        return reservation

    def _lock_property(self, connection, property_ref: str) -> None:
        if connection.vendor != "postgresql":
            return
        try:
            with connection.cursor() as cursor:
                cursor.execute(
                    "SELECT pg_advisory_xact_lock(hashtext(%s))",
                    [f"short_stay_reservations:{property_ref}"],
                )
        except DatabaseError as exc:
            raise AtomicWriteUnavailable("Per-property write lock is unavailable") from exc


class InsertThenVerifyReservationWriter(ReservationWriter):
    """
    Fallback writer

    The row is inserted as ``new`` without a hold. Once it is committed,
    any other active block overlapping it wins: the new row is cancelled
    with a compensation reason and the caller sees a conflict. Of two
    racing rows at least one gives way; on a true tie both do.
    """

    def create(self, draft, *, policy, now):
        ref = draft.property.ref
        try:
            with transaction.atomic(using=self.using):
                expire_stale_holds(now=now, property_refs=[ref], using=self.using)
                reservation = draft.build(status=lifecycle.NEW, hold_expires_at=None, now=now)
                reservation.save(using=self.using, force_insert=True)
        except IntegrityError as exc:
            if is_overlap_violation(exc):
                raise ReservationOverlapError() from exc
            raise

        competing = self._find_competing_overlap(reservation, now)
        if competing is not None:
            cancel_reservation(
                reservation,
                reason=lifecycle.OVERLAP_COMPENSATION_REASON,
                now=now,
                using=self.using,
            )
            logger.warning(
                "Reservation %s for %s lost to %s and was compensated",
                reservation.pk, ref, competing.pk,
            )
            raise ReservationOverlapError(conflicting=competing)

        with DjangoUnitOfWork(using=self.using) as uow:
            uow.add_event(reservation_created_event(reservation, degraded=True))

        logger.warning("Reservation %s for %s created without serialized write", reservation.pk, ref)
        return reservation

    def _find_competing_overlap(self, reservation, now):
        return (
            ShortStayReservation.objects.using(self.using)
            .for_property(reservation.property_ref)
            .active(now)
            .overlapping(reservation.check_in_date, reservation.check_out_date)
            .exclude(pk=reservation.pk)
            .order_by("check_in_date", "created_at")
            .first()
        )
