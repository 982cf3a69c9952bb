from __future__ import annotations

import logging

from authcore.application.dto.auth import SessionPolicy
from authcore.application.use_cases.sweep_expired_sessions import SweepExpiredSessionsUseCase
from authcore.core.db import get_engine
from authcore.core.logging_config import configure_logging
from authcore.infrastructure.db.models.auth import create_schema
from authcore.infrastructure.db.repositories.auth_repository import SqlAuthRepository
from authcore.infrastructure.system_clock import SystemClock
from authcore.shared.config import get_settings


logger = logging.getLogger(__name__)


def sweep_expired_sessions() -> int:
    settings = get_settings()
    engine = get_engine(settings.database_url)
    if settings.auto_create_schema:
        create_schema(engine)

    use_case = SweepExpiredSessionsUseCase(
        auth_store=SqlAuthRepository(engine),
        clock=SystemClock(),
        session_policy=SessionPolicy(
            default_ttl_seconds=settings.session_default_ttl_seconds,
            max_ttl_seconds=settings.session_max_ttl_seconds,
            sweep_grace_seconds=settings.session_sweep_grace_seconds,
        ),
    )
    return use_case.execute()


def main() -> None:
    configure_logging(get_settings().log_level)
    purged = sweep_expired_sessions()
    logger.info("maintenance: sweep_finished purged=%s", purged)


if __name__ == "__main__":
    main()
