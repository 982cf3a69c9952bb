from __future__ import annotations

from typing import Protocol


class PasswordHasherPort(Protocol):
    def hash(self, raw_password: str) -> str:
        ...

    def verify(self, raw_password: str, password_hash: str) -> bool:
        ...

    def verify_and_update(self, raw_password: str, password_hash: str) -> tuple[bool, str | None]:
        ...

    def dummy_hash(self) -> str:
        """Hash of a throwaway secret, verified against when no credential matches."""
        ...
