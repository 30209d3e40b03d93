from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# Expose this so apps can plug it into dependencies if they want OpenAPI security
bearer_scheme = HTTPBearer(auto_error=False)

DEFAULT_QUERY_PARAM = "token"
DEFAULT_COOKIE_NAME = "auth_token"


def extract_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
    query_param: str = DEFAULT_QUERY_PARAM,
    cookie_name: str = DEFAULT_COOKIE_NAME,
) -> Optional[str]:
    """
    Extract a wire token from either:

      1. HTTP Bearer auth header
      2. A query parameter (e.g. links sent by email: '?token=...')
      3. A cookie

    Returns None if no token is found; blank tokens are decoded as empty
    anyway, so the caller decides how to reject.
    """
    # 1) Prefer the HTTPBearer credentials if provided
    if credentials is not None:
        token = (credentials.credentials or "").strip()
        if token:
            return token

    # 2) Fallback to raw Authorization header (in case user didn't use bearer_scheme)
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.removeprefix("Bearer ").strip()
        if token:
            return token

    # 3) Query parameter
    query_token = request.query_params.get(query_param)
    if query_token:
        return query_token

    # 4) Cookie
    return request.cookies.get(cookie_name) or None
