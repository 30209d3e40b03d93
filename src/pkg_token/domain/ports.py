from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from .entities import Token


class Cipher(Protocol):
    """
    Port for symmetric encryption of token plaintext.

    Implementations live in the adapters layer (e.g. Fernet cipher).
    """

    def encrypt(self, plaintext: str, key: bytes) -> str:
        """
        Encrypt `plaintext` into a URL-safe string.

        Raises:
          - InvalidKeyError if `key` is unusable
        """
        ...

    def decrypt(self, ciphertext: str, key: bytes) -> str:
        """
        Decrypt a string produced by `encrypt` with the same key.

        Raises:
          - DecryptionError on tampered, foreign-key or malformed input
          - InvalidKeyError if `key` is unusable
        """
        ...


class ExpiringCache(Protocol):
    """
    Port for the key-value store backing token consumption.

    `ttl_seconds=None` stores an entry that never expires. A non-positive
    ttl describes an entry that is already expired, so nothing is stored.
    """

    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, value: str, ttl_seconds: Optional[int]) -> None:
        ...


class ConsumptionRegistry(Protocol):
    """
    Port answering whether a token instance has already been used.
    """

    def is_consumed(self, token: "Token") -> bool:
        ...
