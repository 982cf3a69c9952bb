from __future__ import annotations

from authcore.application.dto.auth import StorageRetryPolicy, ValidatedSessionOutput
from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.application.ports.clock_port import ClockPort
from authcore.application.ports.session_token_port import SessionTokenPort
from authcore.domain.exceptions import SessionNotFoundError
from authcore.domain.services.session_validity import ensure_session_valid

from .auth_common import retry_storage_read


class ValidateSessionUseCase:
    """Resolve a bearer token to its credential id.

    A single lock-free read; expiry is evaluated lazily against the clock and
    expiration is fixed at issuance (no sliding window).
    """

    def __init__(
        self,
        *,
        auth_store: AuthStorePort,
        token_port: SessionTokenPort,
        clock: ClockPort,
        retry_policy: StorageRetryPolicy,
    ):
        self._auth_store = auth_store
        self._token_port = token_port
        self._clock = clock
        self._retry_policy = retry_policy

    def execute(self, *, token: str) -> ValidatedSessionOutput:
        token = token.strip()
        if not token:
            raise SessionNotFoundError("Session not found.")

        session_id = self._token_port.hash_token(token=token)
        record = retry_storage_read(
            lambda: self._auth_store.get_session_with_credential(session_id=session_id),
            policy=self._retry_policy,
            operation="validate_session",
        )
        session = ensure_session_valid(record, now=self._clock.now())
        return ValidatedSessionOutput(
            credential_id=session.credential_id,
            session_id=session.id,
            expires_at=session.expires_at,
        )
