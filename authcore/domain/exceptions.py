from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""

    kind = "DomainError"


class DuplicateEmailError(DomainError):
    """Email already registered (case-insensitive)."""

    kind = "DuplicateEmail"


class NotFoundError(DomainError):
    kind = "NotFound"


class CredentialNotFoundError(NotFoundError):
    """Credential does not exist."""


class SessionNotFoundError(NotFoundError):
    """Session token is unknown."""


class InvalidCredentialsError(DomainError):
    """Email/password pair rejected."""

    kind = "InvalidCredentials"


class WeakPasswordError(DomainError):
    """Password rejected by policy."""

    kind = "WeakPassword"


class InvalidEmailError(DomainError):
    """Email rejected by format policy."""

    kind = "InvalidEmail"


class InvalidSessionTtlError(DomainError):
    """Requested session ttl outside the configured bounds."""

    kind = "InvalidSessionTtl"


class SessionExpiredError(DomainError):
    kind = "Expired"


class SessionRevokedError(DomainError):
    kind = "Revoked"


class CredentialInactiveError(DomainError):
    """Owning credential is deactivated or gone."""

    kind = "CredentialInactive"


class StorageUnavailableError(DomainError):
    """Backing store failed; only read paths may retry."""

    kind = "StorageUnavailable"
