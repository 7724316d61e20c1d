"""
Shared fixtures: wire payloads, a recording fake asyncpg pool and an
in-memory stand-in for `people.repository`.
"""

from __future__ import annotations

import re
from typing import Any
from uuid import UUID

import pytest

from core import db
from people import repository
from people.entity import Person


@pytest.fixture
def wire_payload() -> dict[str, Any]:
    return {
        "nome": "John Doe",
        "apelido": "JD",
        "nascimento": "1999-09-19",
        "stack": ["Rust", "Python", "JavaScript"],
    }


class FakePool:
    """
    Records every statement and answers with canned results.

    Set `error` to make the next call raise it.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self.fetchrow_result: dict[str, Any] | None = None
        self.fetch_result: list[dict[str, Any]] = []
        self.fetchval_result: Any = 0
        self.error: BaseException | None = None

    def _record(self, method: str, sql: str, args: tuple[Any, ...]) -> None:
        self.calls.append((method, " ".join(sql.split()), args))
        if self.error is not None:
            raise self.error

    async def fetchrow(self, sql: str, *args: Any):
        self._record("fetchrow", sql, args)
        return self.fetchrow_result

    async def fetch(self, sql: str, *args: Any):
        self._record("fetch", sql, args)
        return self.fetch_result

    async def fetchval(self, sql: str, *args: Any):
        self._record("fetchval", sql, args)
        return self.fetchval_result

    async def execute(self, sql: str, *args: Any):
        self._record("execute", sql, args)
        return "INSERT 0 1"


@pytest.fixture
def fake_pool(monkeypatch) -> FakePool:
    pool = FakePool()
    monkeypatch.setattr(db, "_pool", pool)
    return pool


class InMemoryPeople:
    """
    Dict-backed replacement for the repository functions.

    Mirrors the SQL contract: unique id and nick, `~*` style search over
    name/nick/stack, 50 row cap.
    """

    def __init__(self) -> None:
        self.rows: dict[UUID, dict[str, Any]] = {}

    async def insert_person(self, person: Person) -> Person:
        row = person.to_row()
        if row["id"] in self.rows or any(r["nick"] == row["nick"] for r in self.rows.values()):
            raise repository.ConstraintViolation("insert_person: duplicate key")
        self.rows[row["id"]] = row
        return person

    async def select_by_id(self, person_id: UUID) -> Person:
        if person_id not in self.rows:
            raise repository.NotFound(person_id)
        return Person.from_row(self.rows[person_id])

    async def select_by_term(self, term: str, *, limit: int = repository.SEARCH_LIMIT) -> list[Person]:
        try:
            pattern = re.compile(term, re.IGNORECASE)
        except re.error as exc:
            raise repository.InvalidSearchTerm(str(exc)) from exc
        found = []
        for row in self.rows.values():
            search = " ".join([row["name"], row["nick"], *row["stack"]]).lower()
            if pattern.search(search):
                found.append(Person.from_row(row))
        return found[:limit]

    async def count_people(self) -> int:
        return len(self.rows)


@pytest.fixture
def people_store(monkeypatch) -> InMemoryPeople:
    store = InMemoryPeople()
    for name in ("insert_person", "select_by_id", "select_by_term", "count_people"):
        monkeypatch.setattr(repository, name, getattr(store, name))
    return store
