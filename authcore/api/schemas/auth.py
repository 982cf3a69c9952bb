from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)
    ttl_seconds: int | None = Field(default=None, gt=0)


class RotatePasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=1, max_length=256)


class CredentialResponse(BaseModel):
    id: str
    email: str
    active: bool


class SessionTokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    credential_id: str
    expires_at: datetime


class CurrentSessionResponse(BaseModel):
    credential_id: str
    expires_at: datetime


class RevokedSessionsResponse(BaseModel):
    revoked_sessions: int


class OkResponse(BaseModel):
    ok: bool
