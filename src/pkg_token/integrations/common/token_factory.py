from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ...adapters.cache.memory import InMemoryExpiringCache
from ...adapters.fernet.cipher import FernetCipher
from ...admin.settings import TokenSettings
from ...application.use_cases.codec import TokenCodec
from ...application.use_cases.consume import ConsumptionTracker
from ...application.use_cases.verify import VerifyTokenUseCase
from ...domain.constants import TokenLife
from ...domain.entities import Token
from ...domain.exceptions import TokenRejectedError
from ...domain.ports import Cipher, ExpiringCache
from ...domain.value_objects import DecodeOutcome, Secret

logger = logging.getLogger(__name__)


class CacheProvider:
    """
    Builds the consumption cache lazily, at most once.

    Concurrent first calls to `get()` construct a single instance.
    """

    def __init__(self, factory: Callable[[], ExpiringCache]) -> None:
        self._factory = factory
        self._cache: Optional[ExpiringCache] = None
        self._lock = threading.Lock()

    def get(self) -> ExpiringCache:
        if self._cache is not None:
            return self._cache

        with self._lock:
            if self._cache is None:
                self._cache = self._factory()
        return self._cache


class _LazyCache(ExpiringCache):
    """ExpiringCache that resolves its backend through a CacheProvider on first use."""

    def __init__(self, provider: CacheProvider) -> None:
        self._provider = provider

    def get(self, key: str) -> Optional[str]:
        return self._provider.get().get(key)

    def put(self, key: str, value: str, ttl_seconds: Optional[int]) -> None:
        self._provider.get().put(key, value, ttl_seconds)


def cache_factory_from_settings(settings: TokenSettings) -> Callable[[], ExpiringCache]:
    def build() -> ExpiringCache:
        if settings.cache_backend == "redis":
            from ...adapters.cache.redis_cache import RedisExpiringCache

            logger.info("Using redis consumption cache")
            return RedisExpiringCache.from_url(settings.redis_url)

        logger.info("Using in-memory consumption cache (maxsize=%d)", settings.memory_cache_size)
        return InMemoryExpiringCache(maxsize=settings.memory_cache_size)

    return build


@dataclass(slots=True)
class TokenDependencies:
    """
    Framework-agnostic token facade.

    Integrations (FastAPI, CLI, etc.) adapt this to their own
    dependency systems. The secret is bound once here; the use cases
    underneath still take it on every call.
    """

    secret: Secret
    codec: TokenCodec
    verifier: VerifyTokenUseCase
    tracker: ConsumptionTracker
    default_life: TokenLife = TokenLife.SHORT

    # --- Core operations --------------------------------------------------

    def issue(self, id: str, *payload: str, life: TokenLife | int | None = None) -> str:
        """id + payload -> wire string."""
        return self.codec.encode(
            self.secret,
            self.default_life if life is None else life,
            id,
            *payload,
        )

    def parse(self, wire: str | None) -> Token:
        """wire string -> Token (never raises)."""
        return self.codec.decode(self.secret, wire)

    def inspect(self, wire: str | None) -> DecodeOutcome:
        return self.codec.decode_outcome(self.secret, wire)

    def verify(self, expected_id: str, wire: str | None) -> bool:
        """Structural / temporal check only; ignores consumption."""
        return self.verifier.execute(self.secret, expected_id, wire)

    def is_consumed(self, token: Token) -> bool:
        return self.tracker.is_consumed(token)

    def is_valid(self, token: Token) -> bool:
        return token.is_valid(self.tracker)

    def consume(self, token: Token) -> None:
        self.tracker.consume(token)

    # --- Single-use redemption --------------------------------------------

    def check(self, wire: str | None, expected_id: str | None = None) -> Token:
        """
        Parse `wire` and require a valid token, optionally for `expected_id`.

        Raises:
            TokenRejectedError  token empty, expired, consumed or foreign
            CacheUnavailableError  consumption cache failure
        """
        token = self.parse(wire)
        if token.is_empty:
            raise TokenRejectedError("empty")
        if token.is_expired():
            raise TokenRejectedError("expired")
        if expected_id is not None and token.id != expected_id:
            raise TokenRejectedError("id mismatch")
        if token.is_consumed(self.tracker):
            raise TokenRejectedError("consumed")
        return token

    def redeem(self, wire: str | None, expected_id: str | None = None) -> Token:
        """`check` the token, then mark it consumed and return it."""
        token = self.check(wire, expected_id)
        self.tracker.consume(token)
        return token


def create_token_dependencies(
        *,
        secret: str | bytes | Secret,
        cache: ExpiringCache | None = None,
        cipher: Cipher | None = None,
        default_life: TokenLife = TokenLife.SHORT,
) -> TokenDependencies:
    """
    Wire codec, verifier and consumption tracker around one secret.

    Without an explicit cache a process-local in-memory cache is used.
    """
    cipher = cipher or FernetCipher()
    cache = cache if cache is not None else InMemoryExpiringCache()

    return TokenDependencies(
        secret=Secret.of(secret),
        codec=TokenCodec(cipher=cipher),
        verifier=VerifyTokenUseCase(cipher=cipher),
        tracker=ConsumptionTracker(cache=cache),
        default_life=default_life,
    )


def create_token_dependencies_from_settings(
        settings: TokenSettings,
        *,
        cipher: Cipher | None = None,
) -> TokenDependencies:
    """
    High-level factory: TokenSettings -> TokenDependencies.

    The cache backend named in settings is built on first use, once.
    """
    provider = CacheProvider(cache_factory_from_settings(settings))
    return create_token_dependencies(
        secret=settings.secret,
        cache=_LazyCache(provider),
        cipher=cipher,
        default_life=settings.default_life,
    )
