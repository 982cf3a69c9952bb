from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


CredentialState = Literal["active", "deactivated"]


@dataclass(frozen=True)
class Credential:
    id: str
    email: str
    password_hash: str = field(repr=False)
    active: bool

    @property
    def state(self) -> CredentialState:
        return "active" if self.active else "deactivated"
