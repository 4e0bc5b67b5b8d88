from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from bookseed.errors import InvalidBookError, StatementExecutionError
from bookseed.logging import logger


CREATE_TABLE_SQL = (
    "CREATE TABLE IF NOT EXISTS books "
    "(id INT AUTO_INCREMENT, title VARCHAR(20) NOT NULL DEFAULT '', PRIMARY KEY (id))"
)
# REPLACE keys on the primary key, so re-seeding overwrites instead of duplicating.
UPSERT_SQL = "REPLACE INTO books (id, title) VALUES (:id, :title)"
SELECT_ALL_SQL = "SELECT * FROM books"

TITLE_MAX_LEN = 20


@dataclass(frozen=True)
class Book:
    id: int
    title: str

    def display(self) -> str:
        return f"{self.id}: {self.title}"

    def __str__(self) -> str:
        return self.display()


SEED_BOOKS: tuple[Book, ...] = tuple(Book(id=i, title=f"Book {i}") for i in range(1, 5))


def _execute(conn: sa.Connection, sql: str, params: Mapping[str, Any] | None = None) -> sa.CursorResult:
    try:
        return conn.execute(sa.text(sql), dict(params) if params else {})
    except SQLAlchemyError as exc:
        logger.error("Statement failed", sql=sql, error=str(exc))
        raise StatementExecutionError(sql) from exc


def create_table(conn: sa.Connection) -> None:
    logger.info("Creating table if it doesn't already exist...")
    _execute(conn, CREATE_TABLE_SQL)
    logger.info("DONE", step="create_table")


def seed_rows(conn: sa.Connection, books: Iterable[Book] = SEED_BOOKS) -> int:
    """Upsert `books` one statement at a time, in order. The first failure aborts the rest."""
    logger.info("Inserting seed records...")
    n = 0
    for book in books:
        if len(book.title) > TITLE_MAX_LEN:
            raise InvalidBookError(f"title longer than {TITLE_MAX_LEN} characters: {book.title!r}")
        _execute(conn, UPSERT_SQL, {"id": book.id, "title": book.title})
        logger.info("Inserting record... DONE", book_id=book.id)
        n += 1
    logger.info("DONE", step="seed_rows", rows=n)
    return n


def iter_books(conn: sa.Connection) -> Iterator[Book]:
    # No ORDER BY: rows come back in whatever order the server returns them.
    result = _execute(conn, SELECT_ALL_SQL)
    try:
        for row in result:
            yield Book(id=int(row[0]), title=str(row[1]))
    except SQLAlchemyError as exc:
        raise StatementExecutionError(SELECT_ALL_SQL) from exc


def retrieve_rows(conn: sa.Connection) -> list[str]:
    logger.info("Retrieving books...")
    results = [book.display() for book in iter_books(conn)]
    logger.info("DONE", step="retrieve_rows", rows=len(results))
    return results
