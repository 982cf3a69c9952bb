from __future__ import annotations

import logging
from uuid import uuid4

from authcore.application.dto.auth import CredentialOutput, RegisterCredentialInput
from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.application.ports.password_hasher_port import PasswordHasherPort
from authcore.domain.exceptions import DuplicateEmailError
from authcore.domain.services.credential_policy import ensure_password_strength, ensure_valid_email

from .auth_common import build_credential_output


logger = logging.getLogger(__name__)


class RegisterCredentialUseCase:
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

    def execute(self, command: RegisterCredentialInput) -> CredentialOutput:
        email = ensure_valid_email(command.email)
        ensure_password_strength(command.password, min_length=self._password_min_length)

        password_hash = self._password_hasher.hash(command.password)

        def _tx(auth_store: AuthStorePort) -> CredentialOutput:
            # The unique index still arbitrates concurrent registrations.
            if auth_store.get_credential_by_email(email=email) is not None:
                raise DuplicateEmailError("Email already in use.")

            credential = auth_store.create_credential(
                credential_id=str(uuid4()),
                email=email,
                password_hash=password_hash,
                active=True,
            )
            return build_credential_output(credential)

        output = self._auth_store.execute_in_transaction(_tx)
        logger.info("register_credential: created credential_id=%s", output.id)
        return output
