from __future__ import annotations

import logging

from authcore.application.dto.auth import StorageRetryPolicy, VerifyCredentialInput
from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.application.ports.password_hasher_port import PasswordHasherPort
from authcore.domain.exceptions import InvalidCredentialsError, StorageUnavailableError
from authcore.domain.services.credential_policy import normalize_email

from .auth_common import INVALID_CREDENTIALS_MESSAGE, retry_storage_read


logger = logging.getLogger(__name__)


class VerifyCredentialUseCase:
    """Check an email/password pair and return the credential id.

    Unknown email, deactivated credential and wrong password all raise the
    same ``InvalidCredentialsError`` after exactly one hash verification, so
    neither the response nor its latency tells them apart.
    """

    def __init__(
        self,
        *,
        auth_store: AuthStorePort,
        password_hasher: PasswordHasherPort,
        retry_policy: StorageRetryPolicy,
    ):
        self._auth_store = auth_store
        self._password_hasher = password_hasher
        self._retry_policy = retry_policy

    def execute(self, command: VerifyCredentialInput) -> str:
        email = normalize_email(command.email)
        credential = retry_storage_read(
            lambda: self._auth_store.get_credential_by_email(email=email),
            policy=self._retry_policy,
            operation="verify_credential",
        )

        if credential is None or not credential.active:
            self._password_hasher.verify(command.password, self._password_hasher.dummy_hash())
            logger.debug(
                "verify_credential: rejected reason=%s",
                "unknown_email" if credential is None else "inactive",
            )
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        verified, replacement_hash = self._password_hasher.verify_and_update(
            command.password,
            credential.password_hash,
        )
        if not verified:
            logger.debug(
                "verify_credential: rejected reason=password_mismatch credential_id=%s",
                credential.id,
            )
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        if replacement_hash:
            self._upgrade_password_hash(
                credential_id=credential.id,
                current_hash=credential.password_hash,
                new_hash=replacement_hash,
            )

        return credential.id

    def _upgrade_password_hash(self, *, credential_id: str, current_hash: str, new_hash: str) -> None:
        # Compare-and-set so a concurrent rotation is never overwritten.
        try:
            replaced = self._auth_store.replace_credential_password_hash(
                credential_id=credential_id,
                current_hash=current_hash,
                new_hash=new_hash,
            )
        except StorageUnavailableError as exc:
            logger.warning(
                "verify_credential: hash_upgrade_failed credential_id=%s error=%s",
                credential_id,
                exc,
            )
            return
        if replaced:
            logger.info("verify_credential: hash_upgraded credential_id=%s", credential_id)
