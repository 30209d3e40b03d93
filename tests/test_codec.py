# tests/test_codec.py
import string

import pytest

from pkg_token.domain.constants import FORCED_EXPIRY_MS, TokenLife
from pkg_token.domain.entities import Token
from pkg_token.domain.exceptions import InvalidKeyError
from pkg_token.domain.value_objects import DecodeStatus

SECRET = b"correct horse battery staple"
OTHER_SECRET = b"another secret entirely"
NOW = 1_700_000_000_000


_B64_ALPHABET = string.ascii_letters + string.digits + "-_="


def _substitutions(wire: str):
    for i, original in enumerate(wire):
        for replacement in _B64_ALPHABET:
            if replacement != original:
                yield i, wire[:i] + replacement + wire[i + 1:]


@pytest.mark.parametrize(
    "payload",
    [(), ("nonce-1",), ("reset", "42", "reset"), ("", "x"), ("x", ""), ("",)],
)
@pytest.mark.parametrize("life", [TokenLife.ONE_MIN, TokenLife.NORMAL, 30])
def test_round_trip(codec, payload, life):
    wire = codec.encode(SECRET, life, "alice@example.com", *payload)
    tk = codec.decode(SECRET, wire)

    assert tk.id == "alice@example.com"
    assert tk.payload == payload
    assert not tk.is_expired()
    assert not tk.is_empty


def test_encode_is_url_safe(codec):
    wire = codec.encode(SECRET, TokenLife.SHORT, "alice", "x")
    allowed = set(string.ascii_letters + string.digits + "-_=")
    assert set(wire) <= allowed


def test_encode_due_layout(codec, cipher):
    wire = codec.encode(SECRET, 60, "alice", "a", "b", now=NOW)
    assert cipher.decrypt(wire, SECRET) == f"alice|{NOW + 60_000}|a|b"


def test_string_secret_equals_utf8_bytes(codec):
    wire = codec.encode("pässword", TokenLife.SHORT, "alice")
    assert codec.decode("pässword".encode("utf-8"), wire).id == "alice"


def test_encode_propagates_key_errors(codec):
    with pytest.raises(InvalidKeyError):
        codec.encode(b"", TokenLife.SHORT, "alice")


@pytest.mark.parametrize("wire", ["", "   ", None])
def test_blank_input_is_empty_sentinel(codec, wire):
    outcome = codec.decode_outcome(SECRET, wire)
    assert outcome.status is DecodeStatus.BLANK
    assert outcome.token == Token.empty()
    assert codec.decode(SECRET, wire).is_empty


def test_tamper_rejection(codec):
    wire = codec.encode(SECRET, TokenLife.SHORT, "alice", "x")
    survivors = [
        (i, tampered)
        for i, tampered in _substitutions(wire)
        if codec.decode(SECRET, tampered) != Token.empty()
    ]
    assert survivors == []


def test_tamper_in_padding_bits_is_rejected(codec):
    # the last data character before '=' carries unused bits
    wire = codec.encode(SECRET, TokenLife.SHORT, "alice")
    stripped = wire.rstrip("=")
    i = len(stripped) - 1
    for replacement in _B64_ALPHABET[:-1]:
        if replacement == wire[i]:
            continue
        outcome = codec.decode_outcome(SECRET, wire[:i] + replacement + wire[i + 1:])
        assert outcome.status is DecodeStatus.UNDECRYPTABLE


@pytest.mark.parametrize("wire", ["not-a-token", "%%%%", "gAAAAA", "ünicode"])
def test_garbage_is_empty_sentinel(codec, wire):
    assert codec.decode(SECRET, wire) == Token.empty()


def test_wrong_key_rejection(codec):
    wire = codec.encode(SECRET, TokenLife.SHORT, "alice")
    assert codec.decode(OTHER_SECRET, wire) == Token.empty()
    assert codec.decode(b"", wire) == Token.empty()


def test_single_field_is_malformed(codec, cipher):
    wire = cipher.encrypt("alice", SECRET)
    outcome = codec.decode_outcome(SECRET, wire)
    assert outcome.status is DecodeStatus.MALFORMED
    assert outcome.token == Token.empty()


@pytest.mark.parametrize("due_field", ["soon", "", " 12", "1_000", "99999999999999999999"])
def test_bad_due_forces_expiry(codec, cipher, due_field):
    wire = cipher.encrypt(f"alice|{due_field}|payload", SECRET)
    outcome = codec.decode_outcome(SECRET, wire, now=NOW)

    assert outcome.status is DecodeStatus.BAD_DUE
    tk = outcome.token
    assert tk.id == "alice"
    assert tk.due == NOW - FORCED_EXPIRY_MS
    assert tk.payload == ()
    assert not tk.is_empty
    assert tk.is_expired(now=NOW)


def test_expired_token_keeps_id_and_due(codec):
    wire = codec.encode(SECRET, 1, "alice", "payload", now=NOW)
    outcome = codec.decode_outcome(SECRET, wire, now=NOW + 1001)

    assert outcome.status is DecodeStatus.EXPIRED
    tk = outcome.token
    assert tk.id == "alice"
    assert tk.due == NOW + 1000
    assert tk.payload == ()
    assert not tk.is_empty
    assert tk.is_expired(now=NOW + 1001)


def test_expiry_boundary(codec):
    wire = codec.encode(SECRET, 1, "alice", now=NOW)
    assert not codec.decode(SECRET, wire, now=NOW).is_expired(now=NOW)
    assert not codec.decode(SECRET, wire, now=NOW + 999).is_expired(now=NOW + 999)
    assert codec.decode(SECRET, wire, now=NOW + 1000).is_expired(now=NOW + 1000)


@pytest.mark.parametrize("life", [TokenLife.FOREVER, 0, -10])
def test_forever_token_never_expires(codec, cipher, life):
    wire = codec.encode(SECRET, life, "alice", "p", now=NOW)
    assert cipher.decrypt(wire, SECRET) == "alice|-1|p"

    far_future = NOW + 1000 * 60 * 60 * 24 * 365 * 100
    outcome = codec.decode_outcome(SECRET, wire, now=far_future)
    assert outcome.status is DecodeStatus.OK
    assert outcome.token == Token("alice", -1, ["p"])
    assert not outcome.token.is_expired(now=far_future)


def test_delimiter_in_payload_is_split(codec):
    # no escaping: a '|' inside a field becomes a field boundary
    wire = codec.encode(SECRET, TokenLife.SHORT, "alice", "a|b")
    assert codec.decode(SECRET, wire).payload == ("a", "b")


def test_decode_accepts_string_wire_from_other_issuer(codec, cipher):
    wire = cipher.encrypt(f"bob|{NOW + 5000}", SECRET)
    assert codec.decode(SECRET, wire, now=NOW) == Token("bob", NOW + 5000)


def test_trailing_empty_payload_field_is_kept(codec, cipher):
    wire = cipher.encrypt(f"alice|{NOW + 60_000}|a|", SECRET)
    assert codec.decode(SECRET, wire, now=NOW).payload == ("a", "")
