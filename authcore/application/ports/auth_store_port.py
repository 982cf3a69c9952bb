from __future__ import annotations

from datetime import datetime
from typing import Callable, Protocol, TypeVar

from authcore.domain.entities.credential import Credential
from authcore.domain.entities.session import Session, SessionWithCredential


TAuthResult = TypeVar("TAuthResult")


class AuthStorePort(Protocol):
    def execute_in_transaction(self, fn: Callable[[AuthStorePort], TAuthResult]) -> TAuthResult:
        ...

    def get_credential_by_id(self, *, credential_id: str, for_update: bool = False) -> Credential | None:
        ...

    def get_credential_by_email(self, *, email: str) -> Credential | None:
        ...

    def create_credential(
        self,
        *,
        credential_id: str,
        email: str,
        password_hash: str,
        active: bool,
    ) -> Credential:
        ...

    def update_credential_active(self, *, credential_id: str, active: bool) -> None:
        ...

    def update_credential_password(self, *, credential_id: str, password_hash: str) -> None:
        ...

    def replace_credential_password_hash(self, *, credential_id: str, current_hash: str, new_hash: str) -> bool:
        ...

    def delete_credential(self, *, credential_id: str) -> bool:
        ...

    def count_sessions_for_credential(self, *, credential_id: str) -> int:
        ...

    def create_session(
        self,
        *,
        session_id: str,
        credential_id: str,
        created_at: datetime,
        expires_at: datetime,
    ) -> Session:
        ...

    def get_session_with_credential(self, *, session_id: str) -> SessionWithCredential | None:
        ...

    def revoke_session(self, *, session_id: str) -> None:
        ...

    def revoke_sessions_for_credential(self, *, credential_id: str) -> int:
        ...

    def delete_sessions_expired_before(self, *, cutoff: datetime) -> int:
        ...
