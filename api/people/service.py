"""
People business logic.

Translates the typed errors raised by `entity` and `repository` into
HTTP responses and logs the outcome of every call. The entity and
repository modules stay free of FastAPI and logging.
"""

from __future__ import annotations

import logging
from enum import Enum
from uuid import UUID

from fastapi import HTTPException, status

from core import config

from . import repository
from .entity import Person, PersonParserError

logger = logging.getLogger(__name__)


class EmptySearchPolicy(str, Enum):
    """
    What a term search that matches nothing answers with.
    """

    EMPTY_LIST = "empty_list"  # 200 []
    NOT_FOUND = "not_found"  # 404


DEFAULT_EMPTY_SEARCH_POLICY = EmptySearchPolicy.EMPTY_LIST


def empty_search_policy() -> EmptySearchPolicy:
    raw = config.empty_search_policy()
    try:
        return EmptySearchPolicy(raw)
    except ValueError:
        logger.warning("unknown EMPTY_SEARCH_POLICY=%r, using %s", raw, DEFAULT_EMPTY_SEARCH_POLICY.value)
        return DEFAULT_EMPTY_SEARCH_POLICY


def _store_failure(operation: str) -> HTTPException:
    logger.exception("store_failed operation=%s", operation)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database error.",
    )


async def count_people() -> int:
    try:
        return await repository.count_people()
    except repository.StoreError as exc:
        raise _store_failure(operation="count") from exc


async def get_person(person_id: UUID) -> Person:
    try:
        return await repository.select_by_id(person_id)
    except repository.NotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except repository.StoreError as exc:
        raise _store_failure(operation="get_by_id") from exc


async def search_people(term: str) -> list[Person]:
    # The term is a regex; whitespace is part of it and is not trimmed.
    if not term:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Query parameter 't' must not be empty.",
        )

    try:
        people = await repository.select_by_term(term)
    except repository.InvalidValue as exc:
        logger.warning("search_rejected term=%r reason=%s", term, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Search term is not a valid pattern or holds an unsupported character.",
        ) from exc
    except repository.StoreError as exc:
        raise _store_failure(operation="search_by_term") from exc

    if not people and empty_search_policy() is EmptySearchPolicy.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No people match the term.")
    return people


async def create_person(body: str | bytes) -> Person:
    """
    Parse and validate a raw wire body, then insert it.
    """
    try:
        person = Person.deserialize_from_string(body)
    except PersonParserError as exc:
        logger.warning("create_rejected reason=%s", type(exc).__name__)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    try:
        created = await repository.insert_person(person)
    except repository.ConstraintViolation as exc:
        logger.warning("create_conflict id=%s nick=%r", person.id, person.nick)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Person violates a store constraint (duplicate id or nick).",
        ) from exc
    except repository.InvalidValue as exc:
        logger.warning("create_rejected id=%s reason=%s", person.id, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Person has a value the store cannot hold.",
        ) from exc
    except repository.StoreError as exc:
        raise _store_failure(operation="create") from exc

    logger.info("person_created id=%s", created.id)
    return created
