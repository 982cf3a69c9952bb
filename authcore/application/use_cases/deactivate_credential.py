from __future__ import annotations

import logging

from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.domain.exceptions import CredentialNotFoundError

from .auth_common import revoke_credential_sessions


logger = logging.getLogger(__name__)


class DeactivateCredentialUseCase:
    def __init__(self, *, auth_store: AuthStorePort):
        self._auth_store = auth_store

    def execute(self, *, credential_id: str) -> int:
        """Deactivate the credential and revoke its sessions; returns how many were revoked."""

        def _tx(auth_store: AuthStorePort) -> int:
            credential = auth_store.get_credential_by_id(credential_id=credential_id, for_update=True)
            if credential is None:
                raise CredentialNotFoundError("Credential not found.")

            if credential.active:
                auth_store.update_credential_active(credential_id=credential_id, active=False)

            return revoke_credential_sessions(auth_store, credential_id=credential_id)

        revoked = self._auth_store.execute_in_transaction(_tx)
        logger.info(
            "deactivate_credential: credential_id=%s revoked_sessions=%s",
            credential_id,
            revoked,
        )
        return revoked
