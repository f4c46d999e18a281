"""Database connection management."""

from __future__ import annotations

from datetime import datetime, timedelta
from types import TracebackType

import psycopg

from ..config import DatabaseConfig
from ..utils.exceptions import DBConnectionError, ReadOnlyEnforcementError
from ..utils.logging_config import get_logger
from ..utils.security import SecureCredentials

logger = get_logger(__name__)


class ConnectionManager:
    """
    Lazily opens and reuses a read-only PostgreSQL connection.

    The connection is recreated once it has been idle for longer than the
    configured TTL.
    """

    def __init__(
        self,
        config: DatabaseConfig,
        credentials: SecureCredentials,
        ttl_minutes: int = 30,
    ) -> None:
        self.config = config
        self.credentials = credentials
        self.ttl = timedelta(minutes=ttl_minutes)
        self._connection: psycopg.Connection | None = None
        self._last_used: datetime | None = None
        self._is_read_only = False

    @property
    def is_read_only(self) -> bool:
        return self._is_read_only

    def get_connection(self) -> psycopg.Connection:
        """
        Get an open connection, creating it if needed.

        Raises:
            DBConnectionError: If the connection cannot be established
            ReadOnlyEnforcementError: If the session cannot be made read-only
        """
        if self._connection is not None and self._is_connection_expired():
            logger.info("Connection expired, reconnecting")
            self.close()

        if self._connection is None:
            self._connection = self._connect()

        self._last_used = datetime.now()
        return self._connection

    def _connect(self) -> psycopg.Connection:
        logger.info(
            f"Connecting to {self.config.host}:{self.config.port}/{self.config.database}"
        )
        try:
            conn = psycopg.connect(
                host=self.config.host,
                port=self.config.port,
                dbname=self.config.database,
                user=self.config.user,
                password=self.credentials.get_password(),
            )
        except psycopg.Error as e:
            raise DBConnectionError(f"Database connection failed: {e}") from e

        try:
            with conn.cursor() as cur:
                cur.execute("SET SESSION CHARACTERISTICS AS TRANSACTION READ ONLY")
        except psycopg.Error as e:
            conn.close()
            raise ReadOnlyEnforcementError(
                f"Could not enforce read-only session: {e}"
            ) from e

        self._is_read_only = True
        return conn

    def _is_connection_expired(self) -> bool:
        if self._connection is None or self._last_used is None:
            return False
        return datetime.now() - self._last_used > self.ttl

    def close(self) -> None:
        """Close the connection if open."""
        if self._connection is not None:
            try:
                self._connection.close()
            finally:
                self._connection = None
                self._last_used = None
                self._is_read_only = False

    def __enter__(self) -> ConnectionManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
