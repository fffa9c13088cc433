"""Symmetric encryption for access tokens persisted outside the process."""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from sharepoint_oauth.core.exceptions import DecodeError
from sharepoint_oauth.models.access_token import AccessToken


class TokenCipherService:
    """Seal and unseal serialized access tokens using a derived Fernet key."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        key = base64.urlsafe_b64encode(digest)
        self._fernet = Fernet(key)

    def seal(self, token: AccessToken) -> str:
        """Encrypt the two-field serialized form of ``token``."""
        return self._fernet.encrypt(token.serialize().encode("utf-8")).decode("utf-8")

    def unseal(self, ciphertext: str) -> AccessToken:
        """Decrypt ``ciphertext`` and restore the access token it holds."""
        try:
            plaintext = self._fernet.decrypt(ciphertext.encode("utf-8"))
        except InvalidToken as exc:
            raise DecodeError(
                "Failed to decrypt access token; invalid ciphertext provided."
            ) from exc
        return AccessToken.deserialize(plaintext.decode("utf-8"))


__all__ = ["TokenCipherService"]
