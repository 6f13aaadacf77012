"""Runtime reservation policy, read from ``settings.RESERVATIONS``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Mapping

from django.conf import settings  # type: ignore

from apps.reservations.domain.lifecycle import HOLD, NEW

DEFAULT_HOLD_MINUTES = 15
MIN_HOLD_MINUTES = 1
MAX_HOLD_MINUTES = 180

_TRUTHY = {"1", "true", "yes", "on"}


def clamp_hold_minutes(value: Any) -> int:
    """Hold duration in minutes, clamped to [1, 180]; unparseable values fall back to 15."""

    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return DEFAULT_HOLD_MINUTES
    return max(MIN_HOLD_MINUTES, min(MAX_HOLD_MINUTES, minutes))


def as_flag(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class ReservationPolicy:
    hold_minutes: int = DEFAULT_HOLD_MINUTES
    auto_confirm: bool = False
    atomic_writes: bool = True
    maintenance_on_create: bool = False

    def __post_init__(self):
        object.__setattr__(self, "hold_minutes", clamp_hold_minutes(self.hold_minutes))

    @classmethod
    def from_settings(cls, config: Mapping[str, Any] | None = None) -> "ReservationPolicy":
        if config is None:
            config = getattr(settings, "RESERVATIONS", {}) or {}
        return cls(
            hold_minutes=config.get("HOLD_MINUTES", DEFAULT_HOLD_MINUTES),
            auto_confirm=as_flag(config.get("AUTO_CONFIRM"), False),
            atomic_writes=as_flag(config.get("ATOMIC_WRITES"), True),
            maintenance_on_create=as_flag(config.get("MAINTENANCE_ON_CREATE"), False),
        )

    @property
    def hold_duration(self) -> timedelta:
        return timedelta(minutes=self.hold_minutes)

    @property
    def initial_status(self) -> str:
        return NEW if self.auto_confirm else HOLD

    def hold_expiry(self, now: datetime) -> datetime | None:
        if self.auto_confirm:
            return None
        return now + self.hold_duration
