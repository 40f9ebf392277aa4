"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so one Database can serve many threads.

A `Database` instance is created by the embedding application and handed
to the repositories that need it; there is no process-wide pool.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN, DB_STATEMENT_TIMEOUT_MS
from utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """Owns one connection pool and hands out connections with a deadline."""

    def __init__(
        self,
        dsn: Optional[str] = None,
        min_conn: Optional[int] = None,
        max_conn: Optional[int] = None,
        statement_timeout_ms: Optional[int] = None,
    ):
        """
        Initialize the database connection pool.

        Args:
            dsn: libpq connection string (default: DATABASE_URL).
            min_conn: Minimum number of connections to keep open.
            max_conn: Maximum number of connections allowed.
            statement_timeout_ms: Default deadline applied to every
                transaction; 0 disables it.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        self.dsn = dsn or DATABASE_URL
        self.statement_timeout_ms = (
            DB_STATEMENT_TIMEOUT_MS if statement_timeout_ms is None else statement_timeout_ms
        )
        try:
            self._pool: Optional[pool.ThreadedConnectionPool] = pool.ThreadedConnectionPool(
                min_conn if min_conn is not None else DB_POOL_MIN,
                max_conn if max_conn is not None else DB_POOL_MAX,
                self.dsn,
            )
            logger.info("Database connection pool initialized successfully.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    @contextmanager
    def connection(self, timeout: Optional[float] = None) -> Iterator:
        """
        Borrow a connection from the pool for the duration of a block.

        Any transaction still open when the block exits is rolled back, so
        callers must commit explicitly. The connection always goes back to
        the pool.

        Args:
            timeout: Deadline in seconds for statements run in the block.
                Overrides the pool default when given.

        Raises:
            psycopg2.pool.PoolError: If the pool is closed or exhausted.
            psycopg2.extensions.QueryCanceledError: If the deadline fires.
        """
        if self._pool is None:
            raise pool.PoolError("connection pool is closed")
        conn = self._pool.getconn()
        try:
            timeout_ms = self._timeout_ms(timeout)
            if timeout_ms:
                with conn.cursor() as cur:
                    cur.execute("SET LOCAL statement_timeout = %s;", (timeout_ms,))
            yield conn
        finally:
            broken = bool(conn.closed)
            if not broken:
                try:
                    conn.rollback()
                except psycopg2.Error as e:
                    # Unusable connection: discard it, keep the block's own error.
                    logger.warning(f"Rollback failed, discarding connection: {e}")
                    broken = True
            self._pool.putconn(conn, close=broken)

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")

    def _timeout_ms(self, timeout: Optional[float]) -> int:
        if timeout is None:
            return self.statement_timeout_ms
        # statement_timeout = 0 means "no limit", so an expired deadline maps to 1ms.
        return max(1, int(timeout * 1000))
