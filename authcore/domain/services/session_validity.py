from __future__ import annotations

from datetime import datetime, timedelta

from authcore.domain.entities.session import Session, SessionWithCredential
from authcore.domain.exceptions import (
    CredentialInactiveError,
    InvalidSessionTtlError,
    SessionExpiredError,
    SessionNotFoundError,
    SessionRevokedError,
)


def ensure_session_ttl(ttl_seconds: int, *, max_ttl_seconds: int) -> int:
    if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int):
        raise InvalidSessionTtlError("Session ttl must be an integer number of seconds.")
    if ttl_seconds <= 0:
        raise InvalidSessionTtlError("Session ttl must be positive.")
    if ttl_seconds > max_ttl_seconds:
        raise InvalidSessionTtlError(f"Session ttl must not exceed {max_ttl_seconds} seconds.")
    return ttl_seconds


def compute_expires_at(*, now: datetime, ttl_seconds: int) -> datetime:
    return now + timedelta(seconds=ttl_seconds)


def ensure_session_valid(record: SessionWithCredential | None, *, now: datetime) -> Session:
    """Return the session when it is usable at ``now``, else raise the failure kind.

    Checks run in a fixed order: unknown session, inactive or missing
    credential, expiry (``now >= expires_at``), revocation.
    """
    if record is None:
        raise SessionNotFoundError("Session not found.")

    if not record.credential_active:
        raise CredentialInactiveError("Credential is inactive.")

    state = record.session.state_at(now)
    if state == "expired":
        raise SessionExpiredError("Session expired.")
    if state == "revoked":
        raise SessionRevokedError("Session revoked.")
    return record.session
