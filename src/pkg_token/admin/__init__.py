"""
pkg_token.admin

Operator-side helpers:

- TokenSettings: secret + consumption cache wiring.
- settings_from_env: env-driven settings for services and the CLI.
- cli.main: `pkg-token issue|inspect|verify`.
"""

from __future__ import annotations

from .env import settings_from_env
from .settings import TokenSettings

__all__ = [
    "TokenSettings",
    "settings_from_env",
]
