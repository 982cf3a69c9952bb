from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response

from authcore.api.deps import (
    get_current_session,
    get_delete_credential_use_case,
    get_login_use_case,
    get_register_credential_use_case,
    get_revoke_session_use_case,
    get_rotate_password_use_case,
    get_session_token,
)
from authcore.api.schemas.auth import (
    CredentialResponse,
    CurrentSessionResponse,
    OkResponse,
    RevokedSessionsResponse,
    RotatePasswordRequest,
    SessionTokenResponse,
    SignInRequest,
    SignUpRequest,
)
from authcore.application.dto.auth import (
    LoginInput,
    RegisterCredentialInput,
    RotatePasswordInput,
    ValidatedSessionOutput,
)
from authcore.application.use_cases.auth_common import INVALID_CREDENTIALS_MESSAGE
from authcore.application.use_cases.delete_credential import DeleteCredentialUseCase
from authcore.application.use_cases.login import LoginUseCase
from authcore.application.use_cases.register_credential import RegisterCredentialUseCase
from authcore.application.use_cases.revoke_session import RevokeSessionUseCase
from authcore.application.use_cases.rotate_password import RotatePasswordUseCase
from authcore.domain.exceptions import (
    CredentialInactiveError,
    CredentialNotFoundError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidSessionTtlError,
    StorageUnavailableError,
    WeakPasswordError,
)
from authcore.shared.config import get_settings


router = APIRouter()


def _set_session_cookie(response: Response, token: str, expires_at: datetime) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        expires=expires_at,
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=get_settings().session_cookie_name, path="/")


@router.post("/v1/auth/sign-up", response_model=CredentialResponse)
def sign_up(
    req: SignUpRequest,
    use_case: RegisterCredentialUseCase = Depends(get_register_credential_use_case),
):
    try:
        output = use_case.execute(RegisterCredentialInput(email=req.email, password=req.password))
    except DuplicateEmailError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except (InvalidEmailError, WeakPasswordError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return CredentialResponse(id=output.id, email=output.email, active=output.active)


@router.post("/v1/auth/sign-in", response_model=SessionTokenResponse)
def sign_in(
    req: SignInRequest,
    response: Response,
    use_case: LoginUseCase = Depends(get_login_use_case),
):
    try:
        output = use_case.execute(
            LoginInput(email=req.email, password=req.password, ttl_seconds=req.ttl_seconds)
        )
    except (InvalidCredentialsError, CredentialInactiveError, CredentialNotFoundError) as exc:
        # A credential deactivated or deleted between verify and issue reads the same as a bad password.
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_MESSAGE) from exc
    except InvalidSessionTtlError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    _set_session_cookie(response, output.token, output.expires_at)
    return SessionTokenResponse(
        token=output.token,
        credential_id=output.credential_id,
        expires_at=output.expires_at,
    )


@router.post("/v1/auth/sign-out", response_model=OkResponse)
def sign_out(
    response: Response,
    token: str | None = Depends(get_session_token),
    use_case: RevokeSessionUseCase = Depends(get_revoke_session_use_case),
):
    if token:
        try:
            use_case.execute(token=token)
        except StorageUnavailableError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
    _clear_session_cookie(response)
    return OkResponse(ok=True)


@router.get("/v1/auth/session", response_model=CurrentSessionResponse)
def current_session(session: ValidatedSessionOutput = Depends(get_current_session)):
    return CurrentSessionResponse(
        credential_id=session.credential_id,
        expires_at=session.expires_at,
    )


@router.post("/v1/auth/password", response_model=RevokedSessionsResponse)
def rotate_password(
    req: RotatePasswordRequest,
    response: Response,
    session: ValidatedSessionOutput = Depends(get_current_session),
    use_case: RotatePasswordUseCase = Depends(get_rotate_password_use_case),
):
    try:
        revoked = use_case.execute(
            RotatePasswordInput(credential_id=session.credential_id, new_password=req.new_password)
        )
    except WeakPasswordError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CredentialNotFoundError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except StorageUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    _clear_session_cookie(response)
    return RevokedSessionsResponse(revoked_sessions=revoked)


@router.delete("/v1/auth/credential", response_model=RevokedSessionsResponse)
def delete_credential(
    response: Response,
    session: ValidatedSessionOutput = Depends(get_current_session),
    use_case: DeleteCredentialUseCase = Depends(get_delete_credential_use_case),
):
    try:
        removed = use_case.execute(credential_id=session.credential_id)
    except CredentialNotFoundError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except StorageUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    _clear_session_cookie(response)
    return RevokedSessionsResponse(revoked_sessions=removed)
