from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import sqlalchemy as sa
from sqlalchemy.exc import DBAPIError
from sqlalchemy.pool import NullPool

from bookseed.errors import DatabaseConnectionError
from bookseed.logging import logger
from bookseed.settings import MysqlSettings


MAX_WAIT_SECONDS = 30.0
RETRY_INTERVAL_SECONDS = 2.0


def create_engine(settings: MysqlSettings) -> sa.Engine:
    # One connection per run, and every statement commits on its own.
    return sa.create_engine(settings.url(), poolclass=NullPool, isolation_level="AUTOCOMMIT")


def wait_for_connection(
    engine: sa.Engine,
    *,
    max_wait: float = MAX_WAIT_SECONDS,
    retry_interval: float = RETRY_INTERVAL_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> sa.Connection:
    """
    Open a connection, retrying every `retry_interval` seconds.

    Gives up with DatabaseConnectionError once `max_wait` seconds have passed since
    the first attempt. Only driver errors are retried.
    """
    start = clock()
    attempt = 0
    while True:
        attempt += 1
        logger.info("Waiting for db...", attempt=attempt)
        try:
            return engine.connect()
        except DBAPIError as exc:
            elapsed = clock() - start
            if elapsed >= max_wait:
                logger.error(
                    "A connection to the database could not be established.",
                    attempts=attempt,
                    elapsed_s=round(elapsed, 1),
                )
                raise DatabaseConnectionError("A connection to the database could not be established.") from exc
            logger.info("Database not ready", attempt=attempt, elapsed_s=round(elapsed, 1), error=str(exc.orig))
            sleep(retry_interval)


@contextmanager
def connect(engine: sa.Engine, **wait_kwargs) -> Iterator[sa.Connection]:
    conn = wait_for_connection(engine, **wait_kwargs)
    try:
        yield conn
    finally:
        conn.close()
