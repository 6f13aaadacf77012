"""Errors raised by the reservation engine.

Each error carries a stable machine ``code`` and the HTTP status the API
layer answers with.
"""

from __future__ import annotations


class ReservationError(Exception):
    """Base class of every reservation failure."""

    code = "reservation_error"
    status_code = 400

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ReservationValidationError(ReservationError):
    code = "validation_error"
    status_code = 400

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class PropertyNotFoundError(ReservationError):
    code = "property_not_found"
    status_code = 404


class ReservationPolicyError(ReservationError):
    """The caller's account kind is not allowed to book."""

    code = "backoffice_account_forbidden"
    status_code = 403


class ReservationConflictError(ReservationError):
    """Requested dates intersect an active block.

    ``snapshot`` is the availability of the property at the time the
    conflict was detected; ``conflicting`` the first intersecting block.
    """

    code = "reservation_conflict"
    status_code = 409

    def __init__(self, message: str, *, snapshot, conflicting=None):
        super().__init__(message)
        self.snapshot = snapshot
        self.conflicting = conflicting


class ReservationOverlapError(ReservationError):
    """A writer refused or rolled back an overlapping insert."""

    code = "reservation_conflict"
    status_code = 409

    def __init__(self, message: str = "Overlapping active reservation", *, conflicting=None):
        super().__init__(message)
        self.conflicting = conflicting


class AtomicWriteUnavailable(ReservationError):
    """The transactional writer cannot run on this database."""

    code = "atomic_write_unavailable"
    status_code = 503


class InvalidTransitionError(ReservationError):
    code = "invalid_transition"
    status_code = 400
