"""Field Cipher — reversible encryption of sensitive journal fields.

Invariants:
    - decrypt(encrypt(x)) == x for every cipher
    - PlaintextCipher is the identity; FernetCipher output is URL-safe base64 text
    - Decryption failures surface as UpstreamServiceError, never as raw library errors

Design Decisions:
    - Fernet (cryptography) over a hosted vault SDK: authenticated symmetric encryption,
      no network hop on every read
    - Cipher selected by config ("plaintext" | "fernet"), built once per process
"""

import logging

from cryptography.fernet import Fernet, InvalidToken

from app.config import Settings
from app.core.errors import UpstreamServiceError

logger = logging.getLogger(__name__)


class PlaintextCipher:
    """Identity cipher — stores fields as given."""

    def encrypt(self, plaintext: str) -> str:
        return plaintext

    def decrypt(self, ciphertext: str) -> str:
        return ciphertext


class FernetCipher:
    """Fernet-based field encryption."""

    def __init__(self, key: str | bytes):
        self._fernet = Fernet(key)

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        try:
            return self._fernet.decrypt(ciphertext.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as e:
            logger.error(f"Field decryption failed: {type(e).__name__}")
            raise UpstreamServiceError("FieldCipher", "stored field could not be decrypted")


def build_field_cipher(settings: Settings) -> PlaintextCipher | FernetCipher:
    """Build the configured cipher."""
    if settings.field_cipher == "fernet":
        if not settings.field_cipher_key:
            raise ValueError("FIELD_CIPHER_KEY must be set when FIELD_CIPHER=fernet")
        return FernetCipher(settings.field_cipher_key)
    if settings.field_cipher != "plaintext":
        raise ValueError(f"Unknown FIELD_CIPHER '{settings.field_cipher}'")
    return PlaintextCipher()
