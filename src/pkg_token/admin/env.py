from __future__ import annotations

import os

from ..domain.constants import TokenLife
from ..domain.value_objects import Secret
from .settings import TokenSettings


def settings_from_env() -> TokenSettings:
    def _int(key: str, default: int) -> int:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw)
        except ValueError:
            raise RuntimeError(f"{key} must be an integer, got {raw!r}") from None

    secret = os.getenv("PKG_TOKEN_SECRET")
    cache_backend = os.getenv("PKG_TOKEN_CACHE") or "memory"
    redis_url = os.getenv("PKG_TOKEN_REDIS_URL")

    missing = [n for n, v in [("PKG_TOKEN_SECRET", secret)] if not v]
    if cache_backend.strip().lower() == "redis" and not redis_url:
        missing.append("PKG_TOKEN_REDIS_URL")
    if missing:
        raise RuntimeError(f"Missing token settings: {', '.join(missing)}")

    try:
        default_life = TokenLife.from_name(os.getenv("PKG_TOKEN_DEFAULT_LIFE") or "short")
    except ValueError as exc:
        raise RuntimeError(str(exc)) from exc

    return TokenSettings(
        secret=Secret.of(secret),
        cache_backend=cache_backend,
        redis_url=redis_url,
        default_life=default_life,
        memory_cache_size=_int("PKG_TOKEN_MEMORY_CACHE_SIZE", 100_000),
    )
