from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from enum import IntEnum
from typing import TextIO

import sqlalchemy as sa

from bookseed.books import create_table, retrieve_rows, seed_rows
from bookseed.db import connect, create_engine
from bookseed.errors import BookseedError, ConfigurationError
from bookseed.logging import configure_logging, logger
from bookseed.settings import LOG_LEVELS, MysqlSettings, load_settings


SEPARATOR = "---------------------------------"


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1


def report(books: Iterable[str], out: TextIO | None = None) -> None:
    out = out or sys.stdout
    print(SEPARATOR, file=out)
    for book in books:
        print(f"- {book}", file=out)


def run(settings: MysqlSettings, *, engine: sa.Engine | None = None, **wait_kwargs) -> list[str]:
    """
    Wait for the database, then create the table, seed it and read it back.

    Returns the "<id>: <title>" strings in server order. The connection is closed and
    the engine disposed on every exit path.
    """
    if engine is None:
        engine = create_engine(settings)
    try:
        with connect(engine, **wait_kwargs) as conn:
            logger.info("Connected", host=settings.host, port=settings.port, database=settings.db)
            create_table(conn)
            seed_rows(conn)
            return retrieve_rows(conn)
    finally:
        engine.dispose()


def _fallback_log_level() -> str:
    level = os.environ.get("LOG_LEVEL", "").strip().lower()
    return level if level in LOG_LEVELS else "info"


def main() -> int:
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        configure_logging(_fallback_log_level())
        for message in exc.messages():
            logger.error(message)
        return ExitCode.ERROR

    configure_logging(settings.log_level)
    try:
        books = run(settings)
    except BookseedError as exc:
        logger.error("Run failed", error=str(exc), error_type=type(exc).__name__)
        return ExitCode.ERROR

    report(books)
    return ExitCode.SUCCESS
