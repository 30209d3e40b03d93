from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .clock import now_millis
from .ports import ConsumptionRegistry


@dataclass(frozen=True, slots=True)
class Token:
    """
    Decoded token: an identity, an absolute due time and an ordered payload.

    - id:      subject encoded in the token; blank means "no token"
    - due:     expiry instant in epoch millis; non-positive never expires
    - payload: auxiliary strings, order significant, duplicates allowed

    Tokens are produced by `TokenCodec.decode`, which never raises and hands
    back a sentinel token for malformed input instead.
    """

    id: str = ""
    due: int = 0
    payload: Tuple[str, ...] = ()

    def __init__(self, id: str = "", due: int = 0, payload: Iterable[str] = ()) -> None:
        object.__setattr__(self, "id", id)
        object.__setattr__(self, "due", due)
        object.__setattr__(self, "payload", tuple(payload))

    @classmethod
    def empty(cls) -> Token:
        return cls("", 0, ())

    # ---- predicates -------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.id or self.id.isspace()

    def is_expired(self, now: int | None = None) -> bool:
        if self.due <= 0:
            return False
        if now is None:
            now = now_millis()
        return self.due <= now

    def is_consumed(self, registry: ConsumptionRegistry) -> bool:
        return registry.is_consumed(self)

    def is_valid(self, registry: ConsumptionRegistry, now: int | None = None) -> bool:
        """
        A token is valid when it is not empty, not expired and not consumed.

        The consumption registry is only asked once the first two checks pass.
        """
        return (
            not self.is_empty
            and not self.is_expired(now)
            and not self.is_consumed(registry)
        )

    # ---- payload access ---------------------------------------------------

    @property
    def first_payload(self) -> Optional[str]:
        return self.payload[0] if self.payload else None

    def payload_at(self, index: int) -> Optional[str]:
        if 0 <= index < len(self.payload):
            return self.payload[index]
        return None

    def __str__(self) -> str:
        return (
            f"{{id: {self.id}, expired: {self.is_expired()}, "
            f"due: {self.due}, payload: {list(self.payload)}}}"
        )
