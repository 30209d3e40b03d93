# src/pkg_token/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .entities import Token


# --- Secret ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Secret:
    """
    Key material supplied by the caller on every call.

    Text secrets are encoded as UTF-8; everything downstream works on bytes.
    """
    value: bytes

    @classmethod
    def of(cls, raw: str | bytes | Secret) -> Secret:
        if isinstance(raw, Secret):
            return raw
        if isinstance(raw, str):
            return cls(raw.encode("utf-8"))
        return cls(bytes(raw))

    def __repr__(self) -> str:
        return "Secret(***)"


# --- Decode outcome ----------------------------------------------------------


class DecodeStatus(Enum):
    BLANK = "blank"
    UNDECRYPTABLE = "undecryptable"
    MALFORMED = "malformed"
    BAD_DUE = "bad_due"
    EXPIRED = "expired"
    OK = "ok"


@dataclass(frozen=True, slots=True)
class DecodeOutcome:
    """
    Tagged result of decoding a wire string.

    Three invalid shapes are observable through `token`:
      - BLANK / UNDECRYPTABLE / MALFORMED: the empty sentinel
      - BAD_DUE: id set, due forced one day into the past, no payload
      - EXPIRED: id and real due set, no payload
    """
    status: DecodeStatus
    token: Token

    @property
    def ok(self) -> bool:
        return self.status is DecodeStatus.OK
