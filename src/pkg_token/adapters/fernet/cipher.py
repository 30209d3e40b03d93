import base64
import binascii

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ...domain.exceptions import DecryptionError, InvalidKeyError
from ...domain.ports import Cipher

KDF_SALT = b"pkg_token"
KDF_INFO = b"pkg_token fernet key"


def derive_fernet_key(secret: bytes) -> bytes:
    """
    Stretch a secret of any length into a url-safe base64 Fernet key (HKDF-SHA256).
    """
    if not secret:
        raise InvalidKeyError("Secret must not be empty")
    kdf = HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=KDF_SALT,
        info=KDF_INFO,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret))


class FernetCipher(Cipher):
    """
    Adapter implementing the Cipher port with `cryptography`'s Fernet.

    Fernet is AES-128-CBC with an HMAC-SHA256 tag and URL-safe base64
    output, so tampered ciphertext fails the HMAC check instead of
    decrypting to garbage. Ciphertext must also be canonical base64:
    a string differing from the issued one only in unused padding bits
    is rejected as well.
    """

    def encrypt(self, plaintext: str, key: bytes) -> str:
        return self._fernet(key).encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str, key: bytes) -> str:
        fernet = self._fernet(key)
        if not self._is_canonical(ciphertext):
            raise DecryptionError("Ciphertext is not canonical base64")

        try:
            raw = fernet.decrypt(ciphertext.encode("ascii"))
        except (InvalidToken, binascii.Error, ValueError) as exc:
            raise DecryptionError("Ciphertext could not be decrypted") from exc

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("Decrypted plaintext is not valid UTF-8") from exc

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _fernet(key: bytes) -> Fernet:
        return Fernet(derive_fernet_key(key))

    @staticmethod
    def _is_canonical(ciphertext: str) -> bool:
        try:
            encoded = ciphertext.encode("ascii")
            return base64.urlsafe_b64encode(base64.urlsafe_b64decode(encoded)) == encoded
        except (UnicodeEncodeError, binascii.Error, ValueError):
            return False
