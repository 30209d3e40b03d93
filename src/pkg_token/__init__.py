"""
pkg_token

Stateless, secret-keyed tokens: an identity, an expiry and a payload
encrypted into a URL-safe string, with single-use consumption tracked in
an external expiring cache.
"""

__version__ = "0.1.0"

from .domain.entities import Token
from .domain.constants import TokenLife, due_for
from .domain.exceptions import (
    TokenError,
    DecryptionError,
    InvalidKeyError,
    CacheUnavailableError,
    TokenRejectedError,
)
from .domain.value_objects import Secret, DecodeStatus, DecodeOutcome
from .domain.ports import Cipher, ExpiringCache, ConsumptionRegistry

from .application.use_cases.codec import TokenCodec
from .application.use_cases.verify import VerifyTokenUseCase
from .application.use_cases.consume import ConsumptionTracker

# Default adapters
from .adapters.fernet.cipher import FernetCipher
from .adapters.cache.memory import InMemoryExpiringCache

from .integrations.common.token_factory import (
    TokenDependencies,
    create_token_dependencies,
    create_token_dependencies_from_settings,
)

__all__ = [
    "__version__",
    # domain core
    "Token",
    "TokenLife",
    "due_for",
    "Secret",
    "DecodeStatus",
    "DecodeOutcome",
    "Cipher",
    "ExpiringCache",
    "ConsumptionRegistry",
    # exceptions
    "TokenError",
    "DecryptionError",
    "InvalidKeyError",
    "CacheUnavailableError",
    "TokenRejectedError",
    # use cases
    "TokenCodec",
    "VerifyTokenUseCase",
    "ConsumptionTracker",
    # adapters
    "FernetCipher",
    "InMemoryExpiringCache",
    # facade
    "TokenDependencies",
    "create_token_dependencies",
    "create_token_dependencies_from_settings",
]
