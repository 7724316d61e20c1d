"""
People API endpoints.

Paths and wire field names (nome, apelido, nascimento, stack) are part of
the public contract; see `people/entity.py` for the mapping.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from . import service

router = APIRouter()


@router.get("/contagem-pessoas", response_class=PlainTextResponse)
async def count_people() -> PlainTextResponse:
    count = await service.count_people()
    return PlainTextResponse(str(count))


@router.get("/pessoas/{person_id}")
async def get_person(person_id: UUID) -> JSONResponse:
    person = await service.get_person(person_id)
    return JSONResponse(person.to_wire())


@router.get("/pessoas")
async def search_people(t: str = Query(...)) -> JSONResponse:
    people = await service.search_people(t)
    return JSONResponse([person.to_wire() for person in people])


@router.post("/pessoas", status_code=status.HTTP_201_CREATED)
async def create_person(request: Request) -> JSONResponse:
    """
    Create a person from the raw body.

    The body is parsed by `Person.deserialize_from_string` rather than a
    FastAPI body model so wire errors carry our own messages.
    """
    body = await request.body()
    person = await service.create_person(body)
    return JSONResponse(
        person.to_wire(),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/pessoas/{person.id}"},
    )
