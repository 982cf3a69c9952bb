from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from authcore.api.deps import (
    get_delete_credential_use_case,
    get_login_use_case,
    get_register_credential_use_case,
    get_revoke_session_use_case,
    get_rotate_password_use_case,
    get_validate_session_use_case,
)
from authcore.application.use_cases.deactivate_credential import DeactivateCredentialUseCase
from authcore.application.use_cases.delete_credential import DeleteCredentialUseCase
from authcore.application.use_cases.issue_session import IssueSessionUseCase
from authcore.application.use_cases.login import LoginUseCase
from authcore.application.use_cases.register_credential import RegisterCredentialUseCase
from authcore.application.use_cases.revoke_session import RevokeSessionUseCase
from authcore.application.use_cases.rotate_password import RotatePasswordUseCase
from authcore.application.use_cases.validate_session import ValidateSessionUseCase
from authcore.application.use_cases.verify_credential import VerifyCredentialUseCase
from authcore.domain.exceptions import StorageUnavailableError
from authcore.main import app

from auth_fakes import (
    NO_DELAY_RETRY,
    SESSION_POLICY,
    FakeAuthStore,
    FakePasswordHasher,
    ManualClock,
    SequentialTokenService,
)


@pytest.fixture
def auth_store():
    auth_store = FakeAuthStore()
    clock = ManualClock()
    hasher = FakePasswordHasher()
    tokens = SequentialTokenService()

    app.dependency_overrides[get_register_credential_use_case] = lambda: RegisterCredentialUseCase(
        auth_store=auth_store,
        password_hasher=hasher,
        password_min_length=6,
    )
    app.dependency_overrides[get_login_use_case] = lambda: LoginUseCase(
        verify_credential_use_case=VerifyCredentialUseCase(
            auth_store=auth_store,
            password_hasher=hasher,
            retry_policy=NO_DELAY_RETRY,
        ),
        issue_session_use_case=IssueSessionUseCase(
            auth_store=auth_store,
            token_port=tokens,
            clock=clock,
            session_policy=SESSION_POLICY,
        ),
    )
    app.dependency_overrides[get_validate_session_use_case] = lambda: ValidateSessionUseCase(
        auth_store=auth_store,
        token_port=tokens,
        clock=clock,
        retry_policy=NO_DELAY_RETRY,
    )
    app.dependency_overrides[get_revoke_session_use_case] = lambda: RevokeSessionUseCase(
        auth_store=auth_store,
        token_port=tokens,
    )
    app.dependency_overrides[get_rotate_password_use_case] = lambda: RotatePasswordUseCase(
        auth_store=auth_store,
        password_hasher=hasher,
        password_min_length=6,
    )
    app.dependency_overrides[get_delete_credential_use_case] = lambda: DeleteCredentialUseCase(
        auth_store=auth_store,
    )
    yield auth_store
    app.dependency_overrides.clear()


def _sign_in(client, email="alice@example.com", password="secret123", **extra):
    return client.post("/v1/auth/sign-in", json={"email": email, "password": password, **extra})


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_sign_up_then_sign_in_returns_token_and_cookie(auth_store):
    client = TestClient(app)

    sign_up = client.post("/v1/auth/sign-up", json={"email": "Alice@Example.com", "password": "secret123"})
    assert sign_up.status_code == 200
    assert sign_up.json()["email"] == "alice@example.com"

    response = _sign_in(client, ttl_seconds=3600)
    assert response.status_code == 200
    payload = response.json()
    assert payload["token_type"] == "bearer"
    assert payload["credential_id"] == sign_up.json()["id"]
    assert "ssid=" in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()

    current = client.get("/v1/auth/session", headers=_bearer(payload["token"]))
    assert current.status_code == 200
    assert current.json()["credential_id"] == payload["credential_id"]


def test_sign_up_maps_domain_errors(auth_store):
    client = TestClient(app)
    client.post("/v1/auth/sign-up", json={"email": "alice@example.com", "password": "secret123"})

    duplicate = client.post("/v1/auth/sign-up", json={"email": "ALICE@example.com", "password": "secret123"})
    weak = client.post("/v1/auth/sign-up", json={"email": "bob@example.com", "password": "123"})
    invalid = client.post("/v1/auth/sign-up", json={"email": "bob-at-example", "password": "secret123"})

    assert duplicate.status_code == 409
    assert weak.status_code == 400
    assert invalid.status_code == 400


def test_sign_in_failures_share_one_response(auth_store):
    client = TestClient(app)
    client.post("/v1/auth/sign-up", json={"email": "alice@example.com", "password": "secret123"})

    wrong_password = _sign_in(client, password="not-it")
    unknown_email = _sign_in(client, email="nobody@example.com")

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_sign_in_rejects_ttl_above_max(auth_store):
    client = TestClient(app)
    client.post("/v1/auth/sign-up", json={"email": "alice@example.com", "password": "secret123"})

    response = _sign_in(client, ttl_seconds=SESSION_POLICY.max_ttl_seconds + 1)

    assert response.status_code == 400


def test_sign_out_revokes_session_and_is_idempotent(auth_store):
    client = TestClient(app)
    client.post("/v1/auth/sign-up", json={"email": "alice@example.com", "password": "secret123"})
    token = _sign_in(client).json()["token"]

    first = client.post("/v1/auth/sign-out", headers=_bearer(token))
    second = client.post("/v1/auth/sign-out", headers=_bearer(token))
    current = client.get("/v1/auth/session", headers=_bearer(token))

    assert first.status_code == second.status_code == 200
    assert current.status_code == 401


def test_session_requires_token(auth_store):
    client = TestClient(app)

    assert client.get("/v1/auth/session").status_code == 401
    assert client.get("/v1/auth/session", headers={"Authorization": "Basic abc"}).status_code == 401
    assert client.get("/v1/auth/session", headers=_bearer("never-issued")).status_code == 401


def test_rotate_password_revokes_all_sessions(auth_store):
    client = TestClient(app)
    client.post("/v1/auth/sign-up", json={"email": "alice@example.com", "password": "secret123"})
    first = _sign_in(client).json()["token"]
    second = _sign_in(client).json()["token"]

    response = client.post("/v1/auth/password", json={"new_password": "new-secret"}, headers=_bearer(first))

    assert response.status_code == 200
    assert response.json() == {"revoked_sessions": 2}
    assert client.get("/v1/auth/session", headers=_bearer(second)).status_code == 401
    assert _sign_in(client).status_code == 401
    assert _sign_in(client, password="new-secret").status_code == 200


def test_delete_credential_removes_sessions(auth_store):
    client = TestClient(app)
    client.post("/v1/auth/sign-up", json={"email": "alice@example.com", "password": "secret123"})
    token = _sign_in(client).json()["token"]

    response = client.delete("/v1/auth/credential", headers=_bearer(token))

    assert response.status_code == 200
    assert response.json() == {"revoked_sessions": 1}
    assert auth_store.credentials == {}
    assert client.get("/v1/auth/session", headers=_bearer(token)).status_code == 401


def test_storage_outage_maps_to_503(auth_store):
    class DownValidateSessionUseCase:
        def execute(self, *, token):
            raise StorageUnavailableError("Storage unavailable.")

    app.dependency_overrides[get_validate_session_use_case] = lambda: DownValidateSessionUseCase()
    client = TestClient(app)

    response = client.get("/v1/auth/session", headers=_bearer("any-token"))

    assert response.status_code == 503


def test_sign_in_with_deactivated_credential_matches_wrong_password(auth_store):
    client = TestClient(app)
    credential_id = client.post(
        "/v1/auth/sign-up", json={"email": "alice@example.com", "password": "secret123"}
    ).json()["id"]
    wrong_password = _sign_in(client, password="not-it")
    DeactivateCredentialUseCase(auth_store=auth_store).execute(credential_id=credential_id)

    inactive = _sign_in(client)

    assert inactive.status_code == 401
    assert inactive.json() == wrong_password.json()


def test_current_session_returns_credential_and_expiry(auth_store):
    client = TestClient(app)
    client.post("/v1/auth/sign-up", json={"email": "alice@example.com", "password": "secret123"})
    issued = _sign_in(client, ttl_seconds=600).json()

    current = client.get("/v1/auth/session", headers=_bearer(issued["token"]))

    assert current.json() == {
        "credential_id": issued["credential_id"],
        "expires_at": issued["expires_at"],
    }
