from __future__ import annotations

from typing import Protocol


class SessionTokenPort(Protocol):
    def generate_token(self) -> str:
        ...

    def hash_token(self, *, token: str) -> str:
        ...
