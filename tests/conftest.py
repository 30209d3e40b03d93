import pytest

from pkg_token.adapters.fernet.cipher import FernetCipher
from pkg_token.application.use_cases.codec import TokenCodec


class FakeTimer:
    """Manually advanced clock for cachetools caches."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def cipher():
    return FernetCipher()


@pytest.fixture
def codec(cipher):
    return TokenCodec(cipher=cipher)


@pytest.fixture
def timer():
    return FakeTimer()
