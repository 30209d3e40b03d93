from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.clock import now_millis
from ...domain.constants import CONSUMED_KEY_PREFIX, CONSUMED_MARK
from ...domain.entities import Token
from ...domain.ports import ExpiringCache

logger = logging.getLogger(__name__)


def consumed_key(token: Token) -> str:
    return f"{CONSUMED_KEY_PREFIX}{token.id}{token.due}"


def consumed_ttl(token: Token, now: int | None = None) -> Optional[int]:
    """
    Seconds the consumption mark must live: until one second past `due`.

    Never-expiring tokens get a mark that never expires (None).
    """
    if token.due <= 0:
        return None
    if now is None:
        now = now_millis()
    return max(0, (token.due + 1000 - now) // 1000)


@dataclass(slots=True)
class ConsumptionTracker:
    """
    Marks token instances as used in an external expiring cache.

    The mark is keyed by `id + due` so two tokens issued for the same id
    at different instants are tracked separately. There is no un-consume,
    and no compare-and-set: concurrent consumes of the same token both
    succeed.

    Cache failures propagate (CacheUnavailableError from the adapters).
    """

    cache: ExpiringCache

    def is_consumed(self, token: Token) -> bool:
        return self.cache.get(consumed_key(token)) is not None

    def consume(self, token: Token, now: int | None = None) -> None:
        key = consumed_key(token)
        ttl = consumed_ttl(token, now)
        logger.debug("Marking token consumed (ttl=%s)", ttl)
        self.cache.put(key, CONSUMED_MARK, ttl)
