from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CredentialOutput:
    id: str
    email: str
    active: bool


@dataclass(frozen=True)
class RegisterCredentialInput:
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class VerifyCredentialInput:
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class RotatePasswordInput:
    credential_id: str
    new_password: str = field(repr=False)


@dataclass(frozen=True)
class IssueSessionInput:
    credential_id: str
    ttl_seconds: int | None = None


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str = field(repr=False)
    ttl_seconds: int | None = None


@dataclass(frozen=True)
class IssuedSessionOutput:
    token: str = field(repr=False)
    session_id: str
    credential_id: str
    created_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class ValidatedSessionOutput:
    credential_id: str
    session_id: str
    expires_at: datetime


@dataclass(frozen=True)
class SessionPolicy:
    default_ttl_seconds: int
    max_ttl_seconds: int
    sweep_grace_seconds: int


@dataclass(frozen=True)
class StorageRetryPolicy:
    attempts: int
    base_delay_seconds: float
