from __future__ import annotations

from enum import Enum

from .clock import now_millis

DELIMITER = "|"
CONSUMED_KEY_PREFIX = "auth-tk-consumed-"
CONSUMED_MARK = "true"

# A token whose due field cannot be parsed is pushed one day into the past.
FORCED_EXPIRY_MS = 1000 * 60 * 60 * 24


def due_for(seconds: int, now: int | None = None) -> int:
    """
    Convert a lifetime in seconds into an absolute due timestamp (epoch millis).

    `0` or a negative number means "never due" and yields `-1`.
    """
    if seconds <= 0:
        return -1
    if now is None:
        now = now_millis()
    return now + seconds * 1000


class TokenLife(Enum):
    """
    Named token lifetimes.

    Values are ``(name, seconds)`` pairs so that aliases sharing the same
    duration (SHORT / ONE_HOUR, ...) stay distinct members.
    """
    ONE_MIN = ("one_min", 60)
    SHORT = ("short", 60 * 60)
    ONE_HOUR = ("one_hour", 60 * 60)
    NORMAL = ("normal", 60 * 60 * 24)
    ONE_DAY = ("one_day", 60 * 60 * 24)
    ONE_WEEK = ("one_week", 60 * 60 * 24 * 7)
    THIRTY_DAYS = ("thirty_days", 60 * 60 * 24 * 30)
    LONG = ("long", 60 * 60 * 24 * 90)
    NINETY_DAYS = ("ninety_days", 60 * 60 * 24 * 90)
    FOREVER = ("forever", -1)

    @property
    def seconds(self) -> int:
        return self.value[1]

    def due(self, now: int | None = None) -> int:
        return due_for(self.seconds, now)

    @classmethod
    def from_name(cls, name: str) -> "TokenLife":
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown token life: {name!r}") from None
