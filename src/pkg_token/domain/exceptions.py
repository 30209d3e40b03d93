class TokenError(Exception):
    """Base class for token errors."""
    pass


class DecryptionError(TokenError):
    """Raised when a ciphertext cannot be decrypted with the given key."""
    pass


class InvalidKeyError(TokenError):
    """Raised when the secret cannot be used as key material."""
    pass


class CacheUnavailableError(TokenError):
    """Raised when the consumption cache backend fails."""
    pass


class TokenRejectedError(TokenError):
    """Raised when a presented token is empty, expired, consumed or foreign."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Token rejected: {reason}")
        self.reason = reason
