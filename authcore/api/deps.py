from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Request

from authcore.application.dto.auth import SessionPolicy, StorageRetryPolicy, ValidatedSessionOutput
from authcore.application.use_cases.delete_credential import DeleteCredentialUseCase
from authcore.application.use_cases.issue_session import IssueSessionUseCase
from authcore.application.use_cases.login import LoginUseCase
from authcore.application.use_cases.register_credential import RegisterCredentialUseCase
from authcore.application.use_cases.revoke_session import RevokeSessionUseCase
from authcore.application.use_cases.rotate_password import RotatePasswordUseCase
from authcore.application.use_cases.validate_session import ValidateSessionUseCase
from authcore.application.use_cases.verify_credential import VerifyCredentialUseCase
from authcore.core.db import get_engine
from authcore.domain.exceptions import (
    CredentialInactiveError,
    NotFoundError,
    SessionExpiredError,
    SessionRevokedError,
    StorageUnavailableError,
)
from authcore.infrastructure.db.models.auth import create_schema
from authcore.infrastructure.db.repositories.auth_repository import SqlAuthRepository
from authcore.infrastructure.security.password_hasher import PasswordHasher
from authcore.infrastructure.security.session_token_service import SessionTokenService
from authcore.infrastructure.system_clock import SystemClock
from authcore.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_db_engine():
    settings = get_settings()
    if not settings.database_url:
        raise HTTPException(status_code=500, detail="AUTH_DATABASE_URL is required.")
    engine = get_engine(settings.database_url)
    if settings.auto_create_schema:
        create_schema(engine)
    return engine


def _get_auth_repository() -> SqlAuthRepository:
    return SqlAuthRepository(_get_db_engine())


@lru_cache(maxsize=1)
def _get_password_hasher() -> PasswordHasher:
    return PasswordHasher(max_workers=get_settings().password_hash_workers)


@lru_cache(maxsize=1)
def _get_token_service() -> SessionTokenService:
    return SessionTokenService()


@lru_cache(maxsize=1)
def _get_clock() -> SystemClock:
    return SystemClock()


def _session_policy() -> SessionPolicy:
    settings = get_settings()
    return SessionPolicy(
        default_ttl_seconds=settings.session_default_ttl_seconds,
        max_ttl_seconds=settings.session_max_ttl_seconds,
        sweep_grace_seconds=settings.session_sweep_grace_seconds,
    )


def _retry_policy() -> StorageRetryPolicy:
    settings = get_settings()
    return StorageRetryPolicy(
        attempts=settings.storage_read_retries,
        base_delay_seconds=settings.storage_retry_base_delay_seconds,
    )


def get_register_credential_use_case() -> RegisterCredentialUseCase:
    return RegisterCredentialUseCase(
        auth_store=_get_auth_repository(),
        password_hasher=_get_password_hasher(),
        password_min_length=get_settings().password_min_length,
    )


def get_login_use_case() -> LoginUseCase:
    auth_store = _get_auth_repository()
    return LoginUseCase(
        verify_credential_use_case=VerifyCredentialUseCase(
            auth_store=auth_store,
            password_hasher=_get_password_hasher(),
            retry_policy=_retry_policy(),
        ),
        issue_session_use_case=IssueSessionUseCase(
            auth_store=auth_store,
            token_port=_get_token_service(),
            clock=_get_clock(),
            session_policy=_session_policy(),
        ),
    )


def get_validate_session_use_case() -> ValidateSessionUseCase:
    return ValidateSessionUseCase(
        auth_store=_get_auth_repository(),
        token_port=_get_token_service(),
        clock=_get_clock(),
        retry_policy=_retry_policy(),
    )


def get_revoke_session_use_case() -> RevokeSessionUseCase:
    return RevokeSessionUseCase(
        auth_store=_get_auth_repository(),
        token_port=_get_token_service(),
    )


def get_rotate_password_use_case() -> RotatePasswordUseCase:
    return RotatePasswordUseCase(
        auth_store=_get_auth_repository(),
        password_hasher=_get_password_hasher(),
        password_min_length=get_settings().password_min_length,
    )


def get_delete_credential_use_case() -> DeleteCredentialUseCase:
    return DeleteCredentialUseCase(auth_store=_get_auth_repository())


def get_session_token(
    request: Request,
    authorization: str | None = Header(default=None),
) -> str | None:
    if authorization:
        if not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Invalid authorization header.")
        return authorization.replace("Bearer ", "", 1).strip() or None
    return request.cookies.get(get_settings().session_cookie_name) or None


def get_current_session(
    token: str | None = Depends(get_session_token),
    use_case: ValidateSessionUseCase = Depends(get_validate_session_use_case),
) -> ValidatedSessionOutput:
    if not token:
        raise HTTPException(status_code=401, detail="Missing session token.")

    try:
        return use_case.execute(token=token)
    except (NotFoundError, SessionExpiredError, SessionRevokedError, CredentialInactiveError) as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except StorageUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
