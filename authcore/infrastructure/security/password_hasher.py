from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import secrets

from passlib.context import CryptContext

from authcore.application.ports.password_hasher_port import PasswordHasherPort


class PasswordHasher(PasswordHasherPort):
    """passlib-backed hasher; derivations run on a dedicated bounded pool.

    Callers still block on the result, but the number of concurrent
    CPU-heavy derivations is capped independently of the request pool.
    """

    def __init__(self, *, max_workers: int = 4):
        self._ctx = CryptContext(
            schemes=["argon2", "bcrypt"],
            deprecated="auto",
        )
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="password-hasher",
        )
        self._dummy_hash = self.hash(secrets.token_urlsafe(32))

    def hash(self, raw_password: str) -> str:
        return self._executor.submit(self._ctx.hash, raw_password).result()

    def verify(self, raw_password: str, password_hash: str) -> bool:
        try:
            return bool(self._executor.submit(self._ctx.verify, raw_password, password_hash).result())
        except (ValueError, TypeError):
            return False

    def verify_and_update(self, raw_password: str, password_hash: str) -> tuple[bool, str | None]:
        try:
            verified, replacement_hash = self._executor.submit(
                self._ctx.verify_and_update,
                raw_password,
                password_hash,
            ).result()
        except (ValueError, TypeError):
            return False, None
        return bool(verified), replacement_hash

    def dummy_hash(self) -> str:
        return self._dummy_hash

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
