# tests/test_consume.py
from pkg_token.adapters.cache.memory import InMemoryExpiringCache
from pkg_token.application.use_cases.consume import (
    ConsumptionTracker,
    consumed_key,
    consumed_ttl,
)
from pkg_token.domain.entities import Token

NOW = 1_700_000_000_000


class RecordingCache:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.puts: list[tuple[str, str, int | None]] = []

    def get(self, key):
        return self.data.get(key)

    def put(self, key, value, ttl_seconds):
        self.puts.append((key, value, ttl_seconds))
        self.data[key] = value


def test_consumed_key():
    assert consumed_key(Token("alice", 1234)) == "auth-tk-consumed-alice1234"
    assert consumed_key(Token("alice", -1)) == "auth-tk-consumed-alice-1"


def test_consumed_ttl():
    assert consumed_ttl(Token("a", NOW + 60_000), now=NOW) == 61
    assert consumed_ttl(Token("a", NOW + 1), now=NOW) == 1
    assert consumed_ttl(Token("a", NOW), now=NOW) == 1
    assert consumed_ttl(Token("a", NOW - 500), now=NOW) == 0
    assert consumed_ttl(Token("a", NOW - 60_000), now=NOW) == 0
    # never-expiring tokens get a mark that never expires
    assert consumed_ttl(Token("a", -1), now=NOW) is None


def test_consume_writes_mark():
    cache = RecordingCache()
    tracker = ConsumptionTracker(cache=cache)
    tk = Token("alice", NOW + 60_000)

    assert not tracker.is_consumed(tk)
    tracker.consume(tk, now=NOW)
    assert cache.puts == [("auth-tk-consumed-alice" + str(NOW + 60_000), "true", 61)]


def test_consume_idempotent(timer):
    tracker = ConsumptionTracker(cache=InMemoryExpiringCache(timer=timer))
    tk = Token("alice", NOW + 60_000, ["nonce"])

    assert not tracker.is_consumed(tk)
    tracker.consume(tk, now=NOW)
    assert tracker.is_consumed(tk)
    assert tracker.is_consumed(tk)

    tracker.consume(tk, now=NOW)
    assert tracker.is_consumed(tk)


def test_consume_is_per_instance(timer):
    tracker = ConsumptionTracker(cache=InMemoryExpiringCache(timer=timer))
    first = Token("alice", NOW + 60_000)
    second = Token("alice", NOW + 120_000)

    tracker.consume(first, now=NOW)
    assert tracker.is_consumed(first)
    assert not tracker.is_consumed(second)


def test_mark_expires_after_token(timer):
    tracker = ConsumptionTracker(cache=InMemoryExpiringCache(timer=timer))
    tk = Token("alice", NOW + 10_000)

    tracker.consume(tk, now=NOW)
    timer.advance(10)
    assert tracker.is_consumed(tk)
    timer.advance(1)
    assert not tracker.is_consumed(tk)


def test_forever_token_mark_persists(timer):
    tracker = ConsumptionTracker(cache=InMemoryExpiringCache(timer=timer))
    tk = Token("alice", -1)

    tracker.consume(tk, now=NOW)
    timer.advance(10 * 365 * 24 * 3600)
    assert tracker.is_consumed(tk)


def test_consume_expired_token_is_noop(timer):
    tracker = ConsumptionTracker(cache=InMemoryExpiringCache(timer=timer))
    tk = Token("alice", NOW - 5000)

    tracker.consume(tk, now=NOW)
    assert not tracker.is_consumed(tk)
    assert not tk.is_valid(tracker, now=NOW)


def test_token_valid_with_tracker(timer):
    tracker = ConsumptionTracker(cache=InMemoryExpiringCache(timer=timer))
    tk = Token("alice", NOW + 60_000)

    assert tk.is_valid(tracker, now=NOW)
    tracker.consume(tk, now=NOW)
    assert tk.is_consumed(tracker)
    assert not tk.is_valid(tracker, now=NOW)
