from __future__ import annotations

from typing import Any, Mapping

from authcore.domain.entities.credential import Credential
from authcore.domain.entities.session import Session, SessionWithCredential


def _as_str(value: Any) -> str:
    return str(value)


def map_row_to_credential(row: Mapping[str, Any]) -> Credential:
    return Credential(
        id=_as_str(row["id"]),
        email=row["email"],
        password_hash=row["password"],
        active=bool(row["active"]),
    )


def map_row_to_session(row: Mapping[str, Any]) -> Session:
    return Session(
        id=_as_str(row["id"]),
        credential_id=_as_str(row["credential_id"]),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
        active=bool(row["active"]),
    )


def map_row_to_session_with_credential(row: Mapping[str, Any]) -> SessionWithCredential:
    credential_active = row.get("credential_active")
    return SessionWithCredential(
        session=map_row_to_session(row),
        credential_active=bool(credential_active) if credential_active is not None else None,
    )
