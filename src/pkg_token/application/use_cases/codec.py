from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ...domain.clock import now_millis
from ...domain.constants import DELIMITER, FORCED_EXPIRY_MS, TokenLife, due_for
from ...domain.entities import Token
from ...domain.exceptions import TokenError
from ...domain.ports import Cipher
from ...domain.value_objects import DecodeOutcome, DecodeStatus, Secret

logger = logging.getLogger(__name__)

_DUE_PATTERN = re.compile(r"[+-]?[0-9]+")
_LONG_MIN = -(2 ** 63)
_LONG_MAX = 2 ** 63 - 1


def parse_due(raw: str) -> Optional[int]:
    """
    Parse a due field as a signed 64-bit decimal integer.

    Returns None for anything else (whitespace, underscores, overflow...).
    """
    if not _DUE_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    if value < _LONG_MIN or value > _LONG_MAX:
        return None
    return value


def lifetime_seconds(life: TokenLife | int) -> int:
    if isinstance(life, TokenLife):
        return life.seconds
    return int(life)


@dataclass(slots=True)
class TokenCodec:
    """
    Application use case pair: token <-> wire string.

    Plaintext layout before encryption:

        <id>|<due-millis>(|<payload>)*

    The delimiter is not escaped. An id or payload containing `|` is
    silently split differently on decode.
    """

    cipher: Cipher

    def encode(
            self,
            secret: str | bytes | Secret,
            life: TokenLife | int,
            id: str,
            *payload: str,
            now: int | None = None,
    ) -> str:
        """
        Build and encrypt a wire string for `id` expiring after `life`.

        Raises:
            InvalidKeyError (or whatever the cipher raises for bad key material)
        """
        due = due_for(lifetime_seconds(life), now)
        fields = [id, str(due), *payload]
        plaintext = DELIMITER.join(fields)
        return self.cipher.encrypt(plaintext, Secret.of(secret).value)

    def decode(self, secret: str | bytes | Secret, wire: str | None, now: int | None = None) -> Token:
        """Decode a wire string; never raises."""
        return self.decode_outcome(secret, wire, now=now).token

    def decode_outcome(
            self,
            secret: str | bytes | Secret,
            wire: str | None,
            now: int | None = None,
    ) -> DecodeOutcome:
        if wire is None or not wire.strip():
            return DecodeOutcome(DecodeStatus.BLANK, Token.empty())

        plaintext = self._decrypt(secret, wire)
        if plaintext is None:
            return self._rejected(DecodeStatus.UNDECRYPTABLE, Token.empty())

        fields = plaintext.split(DELIMITER)
        if len(fields) < 2:
            return self._rejected(DecodeStatus.MALFORMED, Token.empty())

        id_ = fields[0]
        if now is None:
            now = now_millis()

        due = parse_due(fields[1])
        if due is None:
            return self._rejected(DecodeStatus.BAD_DUE, Token(id_, now - FORCED_EXPIRY_MS))

        token = Token(id_, due)
        if token.is_expired(now):
            return self._rejected(DecodeStatus.EXPIRED, token)

        return DecodeOutcome(DecodeStatus.OK, Token(id_, due, fields[2:]))

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _decrypt(self, secret: str | bytes | Secret, wire: str) -> Optional[str]:
        try:
            return self.cipher.decrypt(wire, Secret.of(secret).value)
        except (TokenError, ValueError) as exc:
            logger.debug("Token decryption failed: %s", type(exc).__name__)
            return None

    @staticmethod
    def _rejected(status: DecodeStatus, token: Token) -> DecodeOutcome:
        logger.debug("Token decoded as %s", status.value)
        return DecodeOutcome(status, token)
