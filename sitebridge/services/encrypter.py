"""
Session bridge payload encryption for sitebridge

Tokens are Fernet tokens (AES-CBC with an HMAC) keyed from the application
secret. They are URL safe and randomized, so two encryptions of the same
session id differ.
"""
from __future__ import annotations
import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from sitebridge.exceptions import ConfigurationError, CryptoError


class Encrypter:
    """Encrypt and decrypt session identifiers."""

    def __init__(self, *, key_material: bytes) -> None:
        if not key_material:
            raise ConfigurationError("Encrypter requires non-empty key material")
        digest = hashlib.sha256(key_material).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    @classmethod
    def from_secret(cls, secret: str | bytes) -> "Encrypter":
        material = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
        return cls(key_material=material)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` returning a URL-safe token."""
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        """Decrypt ``token``; raises CryptoError when it is not authentic."""
        try:
            plaintext = self._fernet.decrypt(token.encode("utf-8"))
            return plaintext.decode("utf-8")
        except (InvalidToken, UnicodeError) as exc:
            raise CryptoError() from exc

