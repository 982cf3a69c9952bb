from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from authcore.application.dto.auth import CredentialOutput, StorageRetryPolicy
from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.domain.entities.credential import Credential
from authcore.domain.exceptions import StorageUnavailableError


logger = logging.getLogger(__name__)

TResult = TypeVar("TResult")

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."


def build_credential_output(credential: Credential) -> CredentialOutput:
    return CredentialOutput(
        id=credential.id,
        email=credential.email,
        active=credential.active,
    )


def session_log_ref(session_id: str) -> str:
    return session_id[:12]


def revoke_credential_sessions(auth_store: AuthStorePort, *, credential_id: str) -> int:
    """Revoke every active session of the credential.

    Must run inside a transaction that already holds the credential row lock,
    so a concurrent issue either commits before (and is revoked) or waits for
    the commit (and stays valid).
    """
    return auth_store.revoke_sessions_for_credential(credential_id=credential_id)


def retry_storage_read(
    fn: Callable[[], TResult],
    *,
    policy: StorageRetryPolicy,
    operation: str,
) -> TResult:
    """Run a read-only store call, retrying StorageUnavailableError with backoff.

    Never use for writes: a retried insert could issue or register twice.
    """
    attempts = max(1, policy.attempts)
    delay = policy.base_delay_seconds

    attempt = 1
    while True:
        try:
            return fn()
        except StorageUnavailableError as exc:
            if attempt >= attempts:
                raise
            logger.warning(
                "auth_store: read_retry operation=%s attempt=%s/%s error=%s",
                operation,
                attempt,
                attempts,
                exc,
            )
            if delay > 0:
                time.sleep(delay)
            delay *= 2
            attempt += 1
