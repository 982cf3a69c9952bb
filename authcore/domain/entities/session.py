from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


SessionState = Literal["active", "expired", "revoked"]


@dataclass(frozen=True)
class Session:
    id: str
    credential_id: str
    created_at: datetime
    expires_at: datetime
    active: bool

    def state_at(self, now: datetime) -> SessionState:
        """Expired wins over revoked."""
        if now >= self.expires_at:
            return "expired"
        if not self.active:
            return "revoked"
        return "active"


@dataclass(frozen=True)
class SessionWithCredential:
    """Session row joined with its owning credential's status."""

    session: Session
    credential_active: bool | None
