from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from functools import wraps
import logging
from typing import Callable, Iterator

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from authcore.application.ports.auth_store_port import AuthStorePort, TAuthResult
from authcore.core.db import UtcDateTime
from authcore.domain.exceptions import DuplicateEmailError, StorageUnavailableError
from authcore.infrastructure.db.mappers.auth_mapper import (
    map_row_to_credential,
    map_row_to_session,
    map_row_to_session_with_credential,
)


logger = logging.getLogger(__name__)


def _storage_errors(method):
    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error(
                "auth_repository: storage_error operation=%s error_type=%s",
                method.__name__,
                exc.__class__.__name__,
            )
            raise StorageUnavailableError("Storage unavailable.") from exc

    return wrapper


def _timestamps(sql: str, *names: str):
    return text(sql).bindparams(*(bindparam(name, type_=UtcDateTime()) for name in names))


class SqlAuthRepository(AuthStorePort):
    def __init__(self, engine: Engine, *, connection: Connection | None = None):
        self._engine = engine
        self._connection = connection

    @contextmanager
    def _begin(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return
        with self._engine.begin() as conn:
            yield conn

    @contextmanager
    def _connect(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return
        with self._engine.connect() as conn:
            yield conn

    def _lock_clause(self) -> str:
        if self._engine.dialect.name == "postgresql":
            return " FOR UPDATE"
        return ""

    def _take_sqlite_write_lock(self, conn: Connection, credential_id: str) -> None:
        # SQLite rejects FOR UPDATE and pysqlite opens transactions deferred, so a
        # no-op write takes the database write lock before the row is read.
        conn.execute(
            text("UPDATE credentials SET active = active WHERE id = :credential_id"),
            {"credential_id": credential_id},
        )

    @_storage_errors
    def execute_in_transaction(self, fn: Callable[[AuthStorePort], TAuthResult]) -> TAuthResult:
        if self._connection is not None:
            return fn(self)
        with self._engine.begin() as conn:
            return fn(SqlAuthRepository(self._engine, connection=conn))

    @_storage_errors
    def get_credential_by_id(self, *, credential_id: str, for_update: bool = False):
        sql = f"""
            SELECT id, email, password, active
            FROM credentials
            WHERE id = :credential_id
            LIMIT 1{self._lock_clause() if for_update else ""}
        """
        opener = self._begin if for_update else self._connect
        with opener() as conn:
            if for_update and self._engine.dialect.name == "sqlite":
                self._take_sqlite_write_lock(conn, credential_id)
            row = conn.execute(text(sql), {"credential_id": credential_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_credential(row)

    @_storage_errors
    def get_credential_by_email(self, *, email: str):
        sql = """
            SELECT id, email, password, active
            FROM credentials
            WHERE email = :email
            LIMIT 1
        """
        with self._connect() as conn:
            row = conn.execute(text(sql), {"email": email.lower()}).mappings().first()
        if row is None:
            return None
        return map_row_to_credential(row)

    @_storage_errors
    def create_credential(
        self,
        *,
        credential_id: str,
        email: str,
        password_hash: str,
        active: bool,
    ):
        sql = """
            INSERT INTO credentials (id, email, password, active)
            VALUES (:id, :email, :password, :active)
            RETURNING id, email, password, active
        """
        params = {
            "id": credential_id,
            "email": email,
            "password": password_hash,
            "active": active,
        }
        try:
            with self._begin() as conn:
                row = conn.execute(text(sql), params).mappings().one()
        except IntegrityError as exc:
            raise DuplicateEmailError("Email already in use.") from exc
        return map_row_to_credential(row)

    @_storage_errors
    def update_credential_active(self, *, credential_id: str, active: bool) -> None:
        sql = """
            UPDATE credentials
            SET active = :active
            WHERE id = :credential_id
        """
        with self._begin() as conn:
            conn.execute(text(sql), {"credential_id": credential_id, "active": active})

    @_storage_errors
    def update_credential_password(self, *, credential_id: str, password_hash: str) -> None:
        sql = """
            UPDATE credentials
            SET password = :password
            WHERE id = :credential_id
        """
        with self._begin() as conn:
            conn.execute(text(sql), {"credential_id": credential_id, "password": password_hash})

    @_storage_errors
    def replace_credential_password_hash(self, *, credential_id: str, current_hash: str, new_hash: str) -> bool:
        sql = """
            UPDATE credentials
            SET password = :new_hash
            WHERE id = :credential_id
              AND password = :current_hash
        """
        with self._begin() as conn:
            result = conn.execute(
                text(sql),
                {
                    "credential_id": credential_id,
                    "current_hash": current_hash,
                    "new_hash": new_hash,
                },
            )
        return result.rowcount > 0

    @_storage_errors
    def delete_credential(self, *, credential_id: str) -> bool:
        # sessions.credential_id is ON DELETE CASCADE.
        sql = """
            DELETE FROM credentials
            WHERE id = :credential_id
        """
        with self._begin() as conn:
            result = conn.execute(text(sql), {"credential_id": credential_id})
        return result.rowcount > 0

    @_storage_errors
    def count_sessions_for_credential(self, *, credential_id: str) -> int:
        sql = """
            SELECT COUNT(*) AS total
            FROM sessions
            WHERE credential_id = :credential_id
        """
        with self._connect() as conn:
            total = conn.execute(text(sql), {"credential_id": credential_id}).scalar_one()
        return int(total)

    @_storage_errors
    def create_session(
        self,
        *,
        session_id: str,
        credential_id: str,
        created_at: datetime,
        expires_at: datetime,
    ):
        sql = _timestamps(
            """
            INSERT INTO sessions (id, created_at, expires_at, credential_id, active)
            VALUES (:id, :created_at, :expires_at, :credential_id, :active)
            RETURNING id, created_at, expires_at, credential_id, active
            """,
            "created_at",
            "expires_at",
        ).columns(created_at=UtcDateTime(), expires_at=UtcDateTime())
        params = {
            "id": session_id,
            "created_at": created_at,
            "expires_at": expires_at,
            "credential_id": credential_id,
            "active": True,
        }
        with self._begin() as conn:
            row = conn.execute(sql, params).mappings().one()
        return map_row_to_session(row)

    @_storage_errors
    def get_session_with_credential(self, *, session_id: str):
        sql = text(
            """
            SELECT
                s.id,
                s.created_at,
                s.expires_at,
                s.credential_id,
                s.active,
                c.active AS credential_active
            FROM sessions s
            LEFT JOIN credentials c
              ON c.id = s.credential_id
            WHERE s.id = :session_id
            LIMIT 1
            """
        ).columns(created_at=UtcDateTime(), expires_at=UtcDateTime())
        with self._connect() as conn:
            row = conn.execute(sql, {"session_id": session_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_session_with_credential(row)

    @_storage_errors
    def revoke_session(self, *, session_id: str) -> None:
        sql = """
            UPDATE sessions
            SET active = :inactive
            WHERE id = :session_id
              AND active = :active
        """
        with self._begin() as conn:
            conn.execute(text(sql), {"session_id": session_id, "active": True, "inactive": False})

    @_storage_errors
    def revoke_sessions_for_credential(self, *, credential_id: str) -> int:
        sql = """
            UPDATE sessions
            SET active = :inactive
            WHERE credential_id = :credential_id
              AND active = :active
        """
        with self._begin() as conn:
            result = conn.execute(
                text(sql),
                {"credential_id": credential_id, "active": True, "inactive": False},
            )
        return result.rowcount

    @_storage_errors
    def delete_sessions_expired_before(self, *, cutoff: datetime) -> int:
        sql = _timestamps(
            """
            DELETE FROM sessions
            WHERE expires_at < :cutoff
            """,
            "cutoff",
        )
        with self._begin() as conn:
            result = conn.execute(sql, {"cutoff": cutoff})
        return result.rowcount
