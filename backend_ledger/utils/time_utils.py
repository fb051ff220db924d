"""
Epoch-millisecond time helpers.

Ledger timestamps (reconcile stamp, first run, snooze deadlines) are integer
milliseconds since the epoch; everything here works in that unit.
"""

from __future__ import annotations

import time
from datetime import datetime, tzinfo

MILLISECONDS: dict[str, int] = {
    "year": 365 * 24 * 60 * 60 * 1000,
    "week": 7 * 24 * 60 * 60 * 1000,
    "day": 24 * 60 * 60 * 1000,
    "hour": 60 * 60 * 1000,
    "minute": 60 * 1000,
    "second": 1000,
}
DAY_MS = MILLISECONDS["day"]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def days_ms(days: float) -> int:
    return int(days * DAY_MS)


# (upper bound in seconds, singular phrase, unit seconds for the plural form)
_RELATIVE_THRESHOLDS: tuple[tuple[float, str, float | None], ...] = (
    (45, "a few seconds", None),
    (90, "a minute", None),
    (45 * 60, "minutes", 60),
    (90 * 60, "an hour", None),
    (22 * 3600, "hours", 3600),
    (36 * 3600, "a day", None),
    (26 * 86400, "days", 86400),
    (45 * 86400, "a month", None),
    (320 * 86400, "months", 30 * 86400),
    (548 * 86400, "a year", None),
)


def _relative_phrase(delta_sec: float) -> str:
    for upper, phrase, unit in _RELATIVE_THRESHOLDS:
        if delta_sec < upper:
            if unit is None:
                return phrase
            return f"{max(2, round(delta_sec / unit))} {phrase}"
    return f"{max(2, round(delta_sec / (365 * 86400)))} years"


def formatted_time_from_now(timestamp: int, now: int | None = None) -> str:
    """
    Human relative time for an epoch-ms timestamp: "in 3 days", "2 hours ago".

    Bucket boundaries follow the usual relative-time conventions (45s, 90s,
    45min, 22h, 26d, 320d).
    """
    now = now if now is not None else now_ms()
    delta_sec = abs(timestamp - now) / 1000.0
    phrase = _relative_phrase(delta_sec)
    if timestamp >= now:
        return f"in {phrase}"
    return f"{phrase} ago"


def formatted_date_from_timestamp(timestamp: int, fmt: str, tz: tzinfo | None = None) -> str:
    """Format an epoch-ms timestamp with strftime. tz=None uses local time."""
    return datetime.fromtimestamp(timestamp / 1000.0, tz=tz).strftime(fmt)
