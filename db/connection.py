"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so request threads can lease
connections concurrently.

A single `Database` instance is created by the application at startup
and handed to every repository; nothing here is module-global.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence

import psycopg2
from psycopg2 import extras, pool

from utils.errors import DatabaseConnectionError, StatementError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class QueryResult:
    """
    Outcome of a single statement.

    Attributes:
        rows: Returned rows as dicts keyed by column name (empty for DML
            without RETURNING).
        row_count: Rows affected or returned, as reported by the driver.
        inserted_id: First column of the first returned row for an
            ``INSERT ... RETURNING`` statement, otherwise None.
    """
    rows: list[dict] = field(default_factory=list)
    row_count: int = 0
    inserted_id: Optional[Any] = None

    def first(self) -> Optional[dict]:
        return self.rows[0] if self.rows else None


def _translate(exc: psycopg2.Error) -> Exception:
    """Map a driver exception onto the service error taxonomy."""
    if isinstance(exc, (psycopg2.OperationalError, psycopg2.InterfaceError, pool.PoolError)):
        return DatabaseConnectionError(str(exc).strip() or "Database unavailable")
    diag = getattr(exc, "diag", None)
    constraint = getattr(diag, "constraint_name", None) if diag is not None else None
    return StatementError(
        str(exc).strip() or "Statement failed",
        pgcode=getattr(exc, "pgcode", None),
        constraint=constraint,
    )


def _run(conn, statement: str, parameters: Sequence[Any]) -> QueryResult:
    try:
        with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
            cur.execute(statement, tuple(parameters))
            rows = [dict(r) for r in cur.fetchall()] if cur.description else []
            row_count = cur.rowcount
    except psycopg2.Error as e:
        raise _translate(e) from e

    inserted_id = None
    if rows and statement.lstrip().upper().startswith("INSERT"):
        inserted_id = next(iter(rows[0].values()), None)
    return QueryResult(rows=rows, row_count=row_count, inserted_id=inserted_id)


class Transaction:
    """A leased connection inside an open transaction."""

    def __init__(self, conn):
        self._conn = conn

    def execute(self, statement: str, parameters: Sequence[Any] = ()) -> QueryResult:
        """Run one statement inside the enclosing transaction."""
        return _run(self._conn, statement, parameters)


class Database:
    """
    Process-scoped owner of the connection pool.

    Every public call leases a connection and returns it to the pool on
    every exit path, including errors.
    """

    def __init__(self, dsn: str, min_conn: int = 1, max_conn: int = 5):
        self.dsn = dsn
        self.min_conn = min_conn
        self.max_conn = max_conn
        self._pool: Optional[pool.ThreadedConnectionPool] = None
        self._lock = threading.Lock()
        # ThreadedConnectionPool raises instead of blocking when exhausted
        self._slots = threading.BoundedSemaphore(max_conn)

    # ── Lifecycle ─────────────────────────────────────────

    def open(self) -> None:
        """
        Initialize the connection pool.

        Raises:
            DatabaseConnectionError: If the database is unreachable.
        """
        with self._lock:
            if self._pool is not None:
                return
            try:
                self._pool = pool.ThreadedConnectionPool(self.min_conn, self.max_conn, self.dsn)
                logger.info("Database connection pool initialized successfully.")
            except psycopg2.Error as e:
                logger.error(f"Failed to initialize database pool: {e}")
                raise DatabaseConnectionError("Database unavailable") from e

    def close(self) -> None:
        """Close all connections in the pool."""
        with self._lock:
            if self._pool is not None:
                self._pool.closeall()
                self._pool = None
                logger.info("Database connection pool closed.")

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    # ── Statements ────────────────────────────────────────

    def execute(self, statement: str, parameters: Sequence[Any] = ()) -> QueryResult:
        """
        Run a single statement in its own transaction.

        Args:
            statement: SQL with ``%s`` placeholders.
            parameters: Values bound positionally to the placeholders.

        Raises:
            DatabaseConnectionError: The database is unreachable.
            StatementError: The statement is malformed or violates a constraint.
        """
        with self.transaction() as tx:
            return tx.execute(statement, parameters)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """
        Lease one connection for a unit of work.

        Commits when the block exits normally and rolls back when it raises.
        """
        conn = self._acquire()
        broken = False
        try:
            yield Transaction(conn)
            try:
                conn.commit()
            except psycopg2.Error as e:
                raise _translate(e) from e
        except DatabaseConnectionError:
            broken = True
            raise
        except BaseException:
            broken = not self._rollback(conn)
            raise
        finally:
            self._release(conn, broken)

    # ── Pool helpers ──────────────────────────────────────

    def _acquire(self):
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call open() first.")
        self._slots.acquire()
        try:
            return self._pool.getconn()
        except psycopg2.Error as e:
            self._slots.release()
            logger.error(f"Failed to lease a database connection: {e}")
            raise _translate(e) from e

    def _release(self, conn, broken: bool) -> None:
        try:
            if self._pool is not None:
                self._pool.putconn(conn, close=broken or bool(conn.closed))
        finally:
            self._slots.release()

    @staticmethod
    def _rollback(conn) -> bool:
        try:
            conn.rollback()
            return True
        except psycopg2.Error as e:
            logger.error(f"Rollback failed, discarding connection: {e}")
            return False
