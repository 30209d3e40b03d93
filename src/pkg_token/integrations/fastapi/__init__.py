from __future__ import annotations

from .deps import FastAPITokenAuth
from ..common.token_factory import (
    TokenDependencies,
    create_token_dependencies,
    create_token_dependencies_from_settings,
)
from ...admin.settings import TokenSettings
from ...domain.ports import ExpiringCache
from ...domain.value_objects import Secret


def create_fastapi_token_auth(
    *,
    secret: str | bytes | Secret | None = None,
    cache: ExpiringCache | None = None,
    settings: TokenSettings | None = None,
) -> FastAPITokenAuth:
    """
    High-level helper for FastAPI apps:

    - Creates TokenDependencies from a secret (+ optional cache) or settings
    - Wraps them in FastAPITokenAuth, exposing dependencies like:

        token_auth.get_token
        token_auth.get_optional_token
        token_auth.redeem_token
        token_auth.require_payload(...)
    """
    if settings is not None:
        tokens: TokenDependencies = create_token_dependencies_from_settings(settings)
    elif secret is not None:
        tokens = create_token_dependencies(secret=secret, cache=cache)
    else:
        raise ValueError("Either secret or settings is required")
    return FastAPITokenAuth(tokens=tokens)


__all__ = ["FastAPITokenAuth", "create_fastapi_token_auth"]
