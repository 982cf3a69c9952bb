from __future__ import annotations

import logging

from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.domain.exceptions import CredentialNotFoundError


logger = logging.getLogger(__name__)


class ReactivateCredentialUseCase:
    def __init__(self, *, auth_store: AuthStorePort):
        self._auth_store = auth_store

    def execute(self, *, credential_id: str) -> None:
        def _tx(auth_store: AuthStorePort) -> None:
            credential = auth_store.get_credential_by_id(credential_id=credential_id, for_update=True)
            if credential is None:
                raise CredentialNotFoundError("Credential not found.")
            if not credential.active:
                auth_store.update_credential_active(credential_id=credential_id, active=True)

        self._auth_store.execute_in_transaction(_tx)
        logger.info("reactivate_credential: credential_id=%s", credential_id)
