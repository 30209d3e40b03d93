from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..domain.constants import TokenLife
from ..domain.value_objects import Secret

CACHE_BACKENDS = ("memory", "redis")


@dataclass(slots=True)
class TokenSettings:
    """
    Token secret + consumption cache wiring.

    Host code decides how to construct this (env, config file, etc.).
    """
    secret: Secret
    cache_backend: str = "memory"
    redis_url: Optional[str] = None
    default_life: TokenLife = TokenLife.SHORT
    memory_cache_size: int = 100_000

    def __post_init__(self) -> None:
        backend = self.cache_backend.strip().lower()
        if backend not in CACHE_BACKENDS:
            raise ValueError(
                f"Unknown cache backend {self.cache_backend!r}, expected one of {CACHE_BACKENDS}"
            )
        if backend == "redis" and not self.redis_url:
            raise ValueError("redis cache backend requires redis_url")
        self.cache_backend = backend
