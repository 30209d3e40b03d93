from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials

from .security import bearer_scheme, extract_token_from_request
from ..common.token_factory import TokenDependencies
from ...domain.entities import Token
from ...domain.exceptions import CacheUnavailableError, TokenRejectedError


def _unauthorized(exc: TokenRejectedError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=str(exc),
    )


def _unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Token store unavailable",
    )


@dataclass(slots=True)
class FastAPITokenAuth:
    """
    FastAPI integration for pkg_token.

    Every "present but unusable" token (empty, expired, consumed, foreign)
    becomes a 401; a failing consumption cache becomes a 503.
    """

    tokens: TokenDependencies

    # ------------------------------------------------------------------ #
    # Base dependencies
    # ------------------------------------------------------------------ #

    async def get_token(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> Token:
        """Dependency: require a valid (not consumed) token. Does not consume it."""
        wire = extract_token_from_request(request, credentials)
        try:
            return self.tokens.check(wire)
        except TokenRejectedError as exc:
            raise _unauthorized(exc) from exc
        except CacheUnavailableError as exc:
            raise _unavailable() from exc

    async def get_optional_token(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> Token | None:
        """Dependency: valid token or None."""
        wire = extract_token_from_request(request, credentials)
        if wire is None:
            return None

        try:
            return self.tokens.check(wire)
        except TokenRejectedError:
            # bad token -> treat as anonymous
            return None
        except CacheUnavailableError as exc:
            raise _unavailable() from exc

    async def redeem_token(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> Token:
        """Dependency: require a valid token and consume it (single use)."""
        wire = extract_token_from_request(request, credentials)
        try:
            return self.tokens.redeem(wire)
        except TokenRejectedError as exc:
            raise _unauthorized(exc) from exc
        except CacheUnavailableError as exc:
            raise _unavailable() from exc

    # ------------------------------------------------------------------ #
    # Dependency factories
    # ------------------------------------------------------------------ #

    def require_payload(self, index: int, *allowed: str) -> Callable:
        """
        Dependency factory: require a valid token whose payload at `index`
        is one of `allowed` (e.g. a sub-action code like "reset-password").
        """

        async def dependency(
                token: Token = Depends(self.get_token),
        ) -> Token:
            if token.payload_at(index) not in allowed:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Token not issued for: {list(allowed)}",
                )
            return token

        return dependency


"""

from pkg_token.integrations.fastapi import create_fastapi_token_auth
from app.config import settings  # your own settings

token_auth = create_fastapi_token_auth(secret=settings.TOKEN_SECRET)

@router.get("/verify-email")
async def verify_email(token: Token = Depends(token_auth.redeem_token)):
    ...

"""
