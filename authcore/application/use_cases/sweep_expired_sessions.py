from __future__ import annotations

import logging
from datetime import timedelta

from authcore.application.dto.auth import SessionPolicy
from authcore.application.ports.auth_store_port import AuthStorePort
from authcore.application.ports.clock_port import ClockPort


logger = logging.getLogger(__name__)


class SweepExpiredSessionsUseCase:
    """Purge sessions that expired more than the grace window ago.

    Storage hygiene only; validation never depends on it.
    """

    def __init__(self, *, auth_store: AuthStorePort, clock: ClockPort, session_policy: SessionPolicy):
        self._auth_store = auth_store
        self._clock = clock
        self._session_policy = session_policy

    def execute(self) -> int:
        cutoff = self._clock.now() - timedelta(seconds=max(0, self._session_policy.sweep_grace_seconds))
        purged = self._auth_store.delete_sessions_expired_before(cutoff=cutoff)
        logger.info(
            "sweep_expired_sessions: purged=%s cutoff=%s",
            purged,
            cutoff.isoformat(),
        )
        return purged
