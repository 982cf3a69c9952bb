from __future__ import annotations

import hashlib
import secrets

from authcore.application.ports.session_token_port import SessionTokenPort


class SessionTokenService(SessionTokenPort):
    """Opaque bearer tokens; only their SHA-256 digest is ever persisted."""

    def __init__(self, *, token_bytes: int = 48):
        self._token_bytes = token_bytes

    def generate_token(self) -> str:
        return secrets.token_urlsafe(self._token_bytes)

    def hash_token(self, *, token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()
