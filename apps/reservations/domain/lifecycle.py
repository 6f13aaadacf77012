"""
Reservation lifecycle

State machine of a single reservation block:

    hold -> new | contacted | confirmed   (back-office promotion)
    hold -> cancelled                     (expiry or explicit cancellation)
    new -> contacted | confirmed | cancelled
    contacted -> confirmed | cancelled
    confirmed -> cancelled

Nothing leaves ``cancelled``. A hold only blocks dates while its
``hold_expires_at`` is empty or in the future; ``is_active`` is the
single predicate every read path applies, so correctness never depends
on the expiry janitor having run.
"""

from datetime import datetime

HOLD = "hold"
NEW = "new"
CONTACTED = "contacted"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"

DURABLE_STATUSES = frozenset({NEW, CONTACTED, CONFIRMED})
ACTIVE_STATUSES = DURABLE_STATUSES | {HOLD}

ALLOWED_TRANSITIONS = {
    HOLD: frozenset({NEW, CONTACTED, CONFIRMED, CANCELLED}),
    NEW: frozenset({CONTACTED, CONFIRMED, CANCELLED}),
    CONTACTED: frozenset({CONFIRMED, CANCELLED}),
    CONFIRMED: frozenset({CANCELLED}),
    CANCELLED: frozenset(),
}

HOLD_EXPIRED_REASON = "hold_expired_auto"
OVERLAP_COMPENSATION_REASON = "overlap_detected_after_insert"


def normalize_status(status) -> str:
    return str(status or "").strip().lower()


def is_active(block, now: datetime) -> bool:
    """Whether ``block`` currently blocks its dates."""
    status = normalize_status(block.status)
    if status not in ACTIVE_STATUSES:
        return False
    if status != HOLD:
        return True
    expires_at = block.hold_expires_at
    return expires_at is None or expires_at > now


def is_expired_hold(block, now: datetime) -> bool:
    return normalize_status(block.status) == HOLD and not is_active(block, now)


def can_transition(current, target) -> bool:
    return normalize_status(target) in ALLOWED_TRANSITIONS.get(normalize_status(current), frozenset())
