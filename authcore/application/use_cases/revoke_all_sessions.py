from __future__ import annotations

import logging

from authcore.application.ports.auth_store_port import AuthStorePort

from .auth_common import revoke_credential_sessions


logger = logging.getLogger(__name__)


class RevokeAllSessionsUseCase:
    """Revoke every session that exists when the call starts.

    Sessions issued after this call commits are not affected.
    """

    def __init__(self, *, auth_store: AuthStorePort):
        self._auth_store = auth_store

    def execute(self, *, credential_id: str) -> int:
        def _tx(auth_store: AuthStorePort) -> int:
            credential = auth_store.get_credential_by_id(credential_id=credential_id, for_update=True)
            if credential is None:
                return 0
            return revoke_credential_sessions(auth_store, credential_id=credential_id)

        revoked = self._auth_store.execute_in_transaction(_tx)
        logger.info(
            "revoke_all_sessions: credential_id=%s revoked_sessions=%s",
            credential_id,
            revoked,
        )
        return revoked
