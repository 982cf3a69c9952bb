from __future__ import annotations

import pytest

from authcore.infrastructure.security.password_hasher import PasswordHasher
from authcore.infrastructure.security.session_token_service import SessionTokenService


@pytest.fixture
def hasher():
    hasher = PasswordHasher(max_workers=2)
    yield hasher
    hasher.shutdown()


def test_password_hasher_round_trip(hasher):
    password_hash = hasher.hash("secret123")

    assert password_hash != "secret123"
    assert password_hash.startswith("$argon2")
    assert hasher.verify("secret123", password_hash) is True
    assert hasher.verify("secret124", password_hash) is False


def test_password_hasher_salts_each_hash(hasher):
    assert hasher.hash("secret123") != hasher.hash("secret123")


def test_password_hasher_rejects_malformed_hash(hasher):
    assert hasher.verify("secret123", "not-a-hash") is False
    assert hasher.verify_and_update("secret123", "not-a-hash") == (False, None)


def test_password_hasher_current_scheme_needs_no_upgrade(hasher):
    password_hash = hasher.hash("secret123")

    assert hasher.verify_and_update("secret123", password_hash) == (True, None)


def test_dummy_hash_is_stable_and_never_matches_user_input(hasher):
    dummy = hasher.dummy_hash()

    assert hasher.dummy_hash() == dummy
    assert hasher.verify("secret123", dummy) is False


def test_session_token_service_hashes_deterministically():
    service = SessionTokenService()
    token = service.generate_token()

    assert token != service.generate_token()
    assert len(token) >= 64
    assert service.hash_token(token=token) == service.hash_token(token=token)
    assert service.hash_token(token=token) != token
    assert len(service.hash_token(token=token)) == 64


def test_dummy_hash_is_ready_before_first_use(hasher, monkeypatch):
    def _no_more_hashing(raw_password):
        raise AssertionError("dummy hash derived lazily")

    monkeypatch.setattr(hasher, "hash", _no_more_hashing)

    assert hasher.dummy_hash().startswith("$argon2")
