from __future__ import annotations

import logging
from dataclasses import dataclass

from ...domain.clock import now_millis
from ...domain.constants import DELIMITER
from ...domain.exceptions import TokenError
from ...domain.ports import Cipher
from ...domain.value_objects import Secret
from .codec import parse_due

logger = logging.getLogger(__name__)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


@dataclass(slots=True)
class VerifyTokenUseCase:
    """
    Structural / temporal check of a wire string against an expected id.

    Does NOT consult the consumption cache: a consumed token still verifies.
    Use `Token.is_valid` for the full check.
    """

    cipher: Cipher

    def execute(
            self,
            secret: str | bytes | Secret,
            expected_id: str | None,
            wire: str | None,
            now: int | None = None,
    ) -> bool:
        """Return True iff `wire` carries `expected_id` and is not expired."""
        if _blank(expected_id) or _blank(wire):
            return False

        try:
            plaintext = self.cipher.decrypt(wire, Secret.of(secret).value)
        except (TokenError, ValueError) as exc:
            logger.debug("Token verification failed to decrypt: %s", type(exc).__name__)
            return False

        fields = plaintext.split(DELIMITER)
        if len(fields) < 2:
            return False
        if fields[0] != expected_id:
            return False

        due = parse_due(fields[1])
        if due is None:
            return False

        if now is None:
            now = now_millis()
        return due < 1 or due > now
