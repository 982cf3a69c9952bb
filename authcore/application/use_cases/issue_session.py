from __future__ import annotations

import logging

from authcore.application.dto.auth import IssuedSessionOutput, IssueSessionInput, SessionPolicy
from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.application.ports.clock_port import ClockPort
from authcore.application.ports.session_token_port import SessionTokenPort
from authcore.domain.exceptions import CredentialInactiveError, CredentialNotFoundError
from authcore.domain.services.session_validity import compute_expires_at, ensure_session_ttl

from .auth_common import session_log_ref


logger = logging.getLogger(__name__)


class IssueSessionUseCase:
    def __init__(
        self,
        *,
        auth_store: AuthStorePort,
        token_port: SessionTokenPort,
        clock: ClockPort,
        session_policy: SessionPolicy,
    ):
        self._auth_store = auth_store
        self._token_port = token_port
        self._clock = clock
        self._session_policy = session_policy

    def execute(self, command: IssueSessionInput) -> IssuedSessionOutput:
        ttl_seconds = command.ttl_seconds
        if ttl_seconds is None:
            ttl_seconds = self._session_policy.default_ttl_seconds
        ttl_seconds = ensure_session_ttl(ttl_seconds, max_ttl_seconds=self._session_policy.max_ttl_seconds)

        token = self._token_port.generate_token()
        session_id = self._token_port.hash_token(token=token)
        credential_id = command.credential_id

        def _tx(auth_store: AuthStorePort) -> IssuedSessionOutput:
            # Same row lock as revoke-all: issuance is ordered against it per credential.
            credential = auth_store.get_credential_by_id(credential_id=credential_id, for_update=True)
            if credential is None:
                raise CredentialNotFoundError("Credential not found.")
            if not credential.active:
                raise CredentialInactiveError("Credential is inactive.")

            now = self._clock.now()
            session = auth_store.create_session(
                session_id=session_id,
                credential_id=credential_id,
                created_at=now,
                expires_at=compute_expires_at(now=now, ttl_seconds=ttl_seconds),
            )
            return IssuedSessionOutput(
                token=token,
                session_id=session.id,
                credential_id=session.credential_id,
                created_at=session.created_at,
                expires_at=session.expires_at,
            )

        output = self._auth_store.execute_in_transaction(_tx)
        logger.info(
            "issue_session: credential_id=%s session=%s expires_at=%s",
            credential_id,
            session_log_ref(output.session_id),
            output.expires_at.isoformat(),
        )
        return output
