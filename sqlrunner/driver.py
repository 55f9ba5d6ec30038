from __future__ import annotations
import concurrent.futures
from contextlib import contextmanager

import mysql.connector

from sqlrunner.config import Settings
from sqlrunner.errors import DatabaseConnectionError, StatementTimeout


class MySQLConnection:
    """
    One open mysql‑connector connection with a per‑statement timeout.

    Statements run on a single worker thread so the caller can stop waiting
    after *timeout* seconds.  A timed‑out connection is shut down: the
    statement may still be running server side and the socket is no longer
    in a usable state.
    """

    def __init__(self, cnx) -> None:
        self._cnx = cnx
        self._worker = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="sqlrunner-query"
        )
        self.closed: bool = False

    def _run(self, sql: str) -> None:
        # buffered: result sets are drained so the next statement can run
        with self._cnx.cursor(buffered=True) as cur:
            cur.execute(sql)

    def query(self, sql: str, timeout: float) -> None:
        future = self._worker.submit(self._run, sql)
        try:
            future.result(timeout=timeout)
        except concurrent.futures.TimeoutError as exc:
            self._cnx.shutdown()
            raise StatementTimeout(f"Query inactivity timeout after {timeout:g}s") from exc

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._worker.shutdown(wait=False)
        try:
            self._cnx.close()
        except mysql.connector.Error:
            # socket already gone (e.g. after a timeout)
            self._cnx.shutdown()


def connect(settings: Settings) -> MySQLConnection:
    """Open an autocommit connection described by *settings*."""
    try:
        cnx = mysql.connector.connect(
            **settings.dsn(),
            autocommit=True,
            connection_timeout=max(1, int(settings.timeout)),
            use_pure=True,
        )
    except mysql.connector.Error as err:
        raise DatabaseConnectionError(
            f"Cannot connect to {settings.host}:{settings.port} as {settings.user!r}: {err}"
        ) from err
    return MySQLConnection(cnx)


@contextmanager
def connection(settings: Settings, connect=connect):
    """
    Context‑manager yielding an open connection that is closed exactly once
    on exit, whether the block succeeded or raised.
    """
    conn = connect(settings)
    try:
        yield conn
    finally:
        conn.close()
