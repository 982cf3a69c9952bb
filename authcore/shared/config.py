from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: str) -> bool:
    return (_env(name, default) or "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str
    auto_create_schema: bool
    session_default_ttl_seconds: int
    session_max_ttl_seconds: int
    session_sweep_grace_seconds: int
    password_min_length: int
    password_hash_workers: int
    storage_read_retries: int
    storage_retry_base_delay_seconds: float
    session_cookie_name: str
    session_cookie_secure: bool
    log_level: str


def get_settings() -> Settings:
    return Settings(
        database_url=_env("AUTH_DATABASE_URL", "sqlite:///./authcore.db"),
        auto_create_schema=_bool("AUTH_AUTO_CREATE_SCHEMA", "true"),
        session_default_ttl_seconds=int(_env("AUTH_SESSION_DEFAULT_TTL_SECONDS", "86400")),
        session_max_ttl_seconds=int(_env("AUTH_SESSION_MAX_TTL_SECONDS", "2592000")),
        session_sweep_grace_seconds=int(_env("AUTH_SESSION_SWEEP_GRACE_SECONDS", "3600")),
        password_min_length=int(_env("AUTH_PASSWORD_MIN_LENGTH", "6")),
        password_hash_workers=int(_env("AUTH_PASSWORD_HASH_WORKERS", "4")),
        storage_read_retries=int(_env("AUTH_STORAGE_READ_RETRIES", "3")),
        storage_retry_base_delay_seconds=float(_env("AUTH_STORAGE_RETRY_BASE_DELAY_SECONDS", "0.05")),
        session_cookie_name=_env("AUTH_SESSION_COOKIE_NAME", "ssid"),
        session_cookie_secure=_bool("AUTH_SESSION_COOKIE_SECURE", "true"),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
