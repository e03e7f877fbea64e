"""Ban ledger rules: durations, labels and lazy expiry."""

from __future__ import annotations

import math
from datetime import datetime

from colloquium.db.time import as_utc, utcnow
from colloquium.models.community import BanDuration
from colloquium.services.errors import InvalidInputError

MIN_BAN_REASON_LENGTH = 10

_THRESHOLD_DAYS: dict[BanDuration, float] = {
    BanDuration.ONE_DAY: 1,
    BanDuration.SEVEN_DAYS: 7,
    BanDuration.THIRTY_DAYS: 30,
    BanDuration.PERMANENT: math.inf,
}

_DURATION_LABELS: dict[BanDuration, str] = {
    BanDuration.ONE_DAY: "1 day",
    BanDuration.SEVEN_DAYS: "7 days",
    BanDuration.THIRTY_DAYS: "30 days",
    BanDuration.PERMANENT: "Permanent",
}


def parse_duration(value: str | BanDuration) -> BanDuration:
    """Return the :class:`BanDuration` for ``value``.

    Raises:
        InvalidInputError: If the value is not a supported duration.
    """
    try:
        return BanDuration(value)
    except ValueError:
        allowed = ", ".join(d.value for d in BanDuration)
        raise InvalidInputError(f"Invalid ban duration; expected one of: {allowed}") from None


def validate_reason(reason: str | None) -> str:
    """Return the stripped reason, enforcing the minimum length."""
    cleaned = (reason or "").strip()
    if len(cleaned) < MIN_BAN_REASON_LENGTH:
        raise InvalidInputError(
            f"A reason of at least {MIN_BAN_REASON_LENGTH} characters is required"
        )
    return cleaned


def threshold_days(duration: BanDuration) -> float:
    """Return the number of whole days after which a ban lapses."""
    return _THRESHOLD_DAYS[duration]


def duration_label(duration: BanDuration) -> str:
    """Return a human-readable label for ``duration``."""
    return _DURATION_LABELS[duration]


def days_since(moment: datetime, now: datetime | None = None) -> int:
    """Return the number of whole days elapsed since ``moment``."""
    now = now or utcnow()
    return (as_utc(now) - as_utc(moment)).days


def is_expired(banned_at: datetime, duration: BanDuration, now: datetime | None = None) -> bool:
    """Return True when a ban placed at ``banned_at`` has run its course.

    Permanent bans never expire.
    """
    if duration == BanDuration.PERMANENT:
        return False
    return days_since(banned_at, now) >= threshold_days(duration)
