from __future__ import annotations

import logging

from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.domain.exceptions import CredentialNotFoundError


logger = logging.getLogger(__name__)


class DeleteCredentialUseCase:
    def __init__(self, *, auth_store: AuthStorePort):
        self._auth_store = auth_store

    def execute(self, *, credential_id: str) -> int:
        """Hard-delete the credential; its sessions go with it in the same transaction."""

        def _tx(auth_store: AuthStorePort) -> int:
            credential = auth_store.get_credential_by_id(credential_id=credential_id, for_update=True)
            if credential is None:
                raise CredentialNotFoundError("Credential not found.")

            removed_sessions = auth_store.count_sessions_for_credential(credential_id=credential_id)
            auth_store.delete_credential(credential_id=credential_id)
            return removed_sessions

        removed = self._auth_store.execute_in_transaction(_tx)
        logger.info(
            "delete_credential: credential_id=%s removed_sessions=%s",
            credential_id,
            removed,
        )
        return removed
