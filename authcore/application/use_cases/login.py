from __future__ import annotations

from authcore.application.dto.auth import (
    IssuedSessionOutput,
    IssueSessionInput,
    LoginInput,
    VerifyCredentialInput,
)

from .issue_session import IssueSessionUseCase
from .verify_credential import VerifyCredentialUseCase


class LoginUseCase:
    def __init__(
        self,
        *,
        verify_credential_use_case: VerifyCredentialUseCase,
        issue_session_use_case: IssueSessionUseCase,
    ):
        self._verify_credential_use_case = verify_credential_use_case
        self._issue_session_use_case = issue_session_use_case

    def execute(self, command: LoginInput) -> IssuedSessionOutput:
        credential_id = self._verify_credential_use_case.execute(
            VerifyCredentialInput(email=command.email, password=command.password)
        )
        return self._issue_session_use_case.execute(
            IssueSessionInput(credential_id=credential_id, ttl_seconds=command.ttl_seconds)
        )
