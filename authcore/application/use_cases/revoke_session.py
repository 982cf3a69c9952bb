from __future__ import annotations

import logging

from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.application.ports.session_token_port import SessionTokenPort

from .auth_common import session_log_ref


logger = logging.getLogger(__name__)


class RevokeSessionUseCase:
    def __init__(self, *, auth_store: AuthStorePort, token_port: SessionTokenPort):
        self._auth_store = auth_store
        self._token_port = token_port

    def execute(self, *, token: str) -> None:
        """Idempotent logout; unknown or already revoked tokens are silently accepted."""
        token = token.strip()
        if not token:
            return

        session_id = self._token_port.hash_token(token=token)
        self._auth_store.revoke_session(session_id=session_id)
        logger.info("revoke_session: session=%s", session_log_ref(session_id))
