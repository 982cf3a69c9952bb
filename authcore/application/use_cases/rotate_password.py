from __future__ import annotations

import logging

from authcore.application.dto.auth import RotatePasswordInput
from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.application.ports.password_hasher_port import PasswordHasherPort
from authcore.domain.exceptions import CredentialNotFoundError
from authcore.domain.services.credential_policy import ensure_password_strength

from .auth_common import revoke_credential_sessions


logger = logging.getLogger(__name__)


class RotatePasswordUseCase:
    """Overwrite the password hash and revoke every existing session of the credential."""

    def __init__(
        self,
        *,
        auth_store: AuthStorePort,
        password_hasher: PasswordHasherPort,
        password_min_length: int,
    ):
        self._auth_store = auth_store
        self._password_hasher = password_hasher
        self._password_min_length = password_min_length

    def execute(self, command: RotatePasswordInput) -> int:
        ensure_password_strength(command.new_password, min_length=self._password_min_length)
        password_hash = self._password_hasher.hash(command.new_password)
        credential_id = command.credential_id

        def _tx(auth_store: AuthStorePort) -> int:
            credential = auth_store.get_credential_by_id(credential_id=credential_id, for_update=True)
            if credential is None:
                raise CredentialNotFoundError("Credential not found.")

            auth_store.update_credential_password(
                credential_id=credential_id,
                password_hash=password_hash,
            )
            return revoke_credential_sessions(auth_store, credential_id=credential_id)

        revoked = self._auth_store.execute_in_transaction(_tx)
        logger.info(
            "rotate_password: credential_id=%s revoked_sessions=%s",
            credential_id,
            revoked,
        )
        return revoked
