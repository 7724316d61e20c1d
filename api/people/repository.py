"""
People persistence (raw SQL).

Table contract: see `people/schema.sql`. `search` is a generated, lowercased
text column over name, nick and stack used for term search.

Each function is one statement against the pool. Driver failures are
wrapped in `StoreError` (or a more specific subclass) and never retried.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

import asyncpg

from core import db

from .entity import STORAGE_COLUMNS, Person, PersonError

SEARCH_LIMIT = 50

_COLUMNS_SQL = ", ".join(STORAGE_COLUMNS)


class NotFound(PersonError):
    def __init__(self, person_id: UUID):
        self.person_id = person_id
        super().__init__(f"Person {person_id} not found.")


class StoreError(PersonError):
    pass


class ConstraintViolation(StoreError):
    pass


class InvalidValue(StoreError):
    """
    The store rejected a bound value (SQLSTATE class 22, data exception).
    """


class InvalidSearchTerm(InvalidValue):
    pass


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except asyncpg.IntegrityConstraintViolationError as exc:
        raise ConstraintViolation(f"{operation}: {exc}") from exc
    except asyncpg.InvalidRegularExpressionError as exc:
        raise InvalidSearchTerm(f"{operation}: {exc}") from exc
    except asyncpg.DataError as exc:
        raise InvalidValue(f"{operation}: {exc}") from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
        raise StoreError(f"{operation}: {exc}") from exc


async def select_by_id(person_id: UUID) -> Person:
    with _store_errors("select_by_id"):
        row = await db.fetch_one(
            f"""
            SELECT {_COLUMNS_SQL}
            FROM people
            WHERE id = $1
            """,
            person_id,
        )
    if row is None:
        raise NotFound(person_id)
    return Person.from_row(row)


async def select_by_term(term: str, *, limit: int = SEARCH_LIMIT) -> list[Person]:
    """
    Case-insensitive regex match (`~*`) of `term` against the precomputed search column.

    No ORDER BY: rows come back in whatever order Postgres returns them.
    """
    with _store_errors("select_by_term"):
        rows = await db.fetch_all(
            f"""
            SELECT {_COLUMNS_SQL}
            FROM people
            WHERE search ~* $1
            LIMIT $2
            """,
            term,
            limit,
        )
    return [Person.from_row(row) for row in rows]


async def count_people() -> int:
    with _store_errors("count_people"):
        count = await db.fetch_val("SELECT count(*) FROM people")
    return int(count or 0)


async def insert_person(person: Person) -> Person:
    """
    Insert a validated person and echo it back (no re-read).
    """
    row = person.to_row()
    with _store_errors("insert_person"):
        await db.execute(
            f"""
            INSERT INTO people ({_COLUMNS_SQL})
            VALUES ($1, $2, $3, $4, $5)
            """,
            *(row[col] for col in STORAGE_COLUMNS),
        )
    return person
