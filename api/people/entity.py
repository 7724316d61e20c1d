"""
Person entity: wire shape, storage shape and the length rules.

A `Person` only exists if it passed `validate_person`. Every entry point
(`Person.new`, `Person.from_wire`, `Person.deserialize_from_string`) runs the
same ordered rules and raises a typed `PersonParserError` instead of
producing a half-valid record.

Field naming:
- wire (JSON exchanged with callers): nome, apelido, nascimento, stack
- storage (the `people` table):      name, nick, birth_date, stack

The mapping lives in `WIRE_FIELD_NAMES` and drives the pydantic aliases, so
there are no per-field alias annotations to keep in sync.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from uuid6 import uuid7

# storage name -> wire name
WIRE_FIELD_NAMES: dict[str, str] = {
    "id": "id",
    "name": "nome",
    "nick": "apelido",
    "birth_date": "nascimento",
    "stack": "stack",
}

STORAGE_COLUMNS: tuple[str, ...] = tuple(WIRE_FIELD_NAMES)

NAME_MAX_CHARS = 100
NICK_MAX_CHARS = 32
STACK_MAX_ENTRIES = 32
TECH_MAX_CHARS = 32

_ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class PersonError(Exception):
    pass


class PersonParserError(PersonError):
    """
    Input could not become a valid Person.
    """


class JsonError(PersonParserError):
    """
    Structural or type mismatch in the wire input (bad dates and NUL characters included).
    """

    def __init__(self, cause: Exception | str):
        self.cause = cause
        super().__init__(str(cause))


class LengthError(PersonParserError):
    """
    A field broke one of the length rules.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(message)


def wire_name(field_name: str) -> str:
    return WIRE_FIELD_NAMES[field_name]


class Person(BaseModel):
    model_config = ConfigDict(
        alias_generator=wire_name,
        frozen=True,
        extra="ignore",
    )

    id: UUID = Field(default_factory=uuid7)
    name: str = Field(..., min_length=1)
    nick: str = Field(..., min_length=1)
    birth_date: date
    stack: list[str] = Field(default_factory=list)

    @field_validator("birth_date", mode="before")
    @classmethod
    def strict_iso_date(cls, value: Any) -> Any:
        # datetime is a date subclass; only plain dates pass through.
        if isinstance(value, date) and not isinstance(value, datetime):
            return value
        if not isinstance(value, str) or not _ISO_DATE_RE.fullmatch(value):
            raise ValueError("birth date must be a YYYY-MM-DD string")
        # Raises for impossible calendar values such as month 13.
        return date.fromisoformat(value)

    @field_validator("stack", mode="before")
    @classmethod
    def absent_stack_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("name", "nick", "stack")
    @classmethod
    def no_nul_characters(cls, value: Any) -> Any:
        # Postgres text cannot hold U+0000.
        texts = value if isinstance(value, list) else [value]
        if any("\x00" in text for text in texts):
            raise ValueError("text must not contain NUL (U+0000) characters")
        return value

    @classmethod
    def new(
        cls,
        name: str,
        nick: str,
        birth_date: date | str,
        stack: list[str] | None = None,
    ) -> Person:
        """
        Build a person with a fresh time-ordered id and validate it.
        """
        return cls.from_wire(
            {
                wire_name("name"): name,
                wire_name("nick"): nick,
                wire_name("birth_date"): birth_date,
                wire_name("stack"): stack,
            }
        )

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> Person:
        try:
            person = cls.model_validate(data)
        except ValidationError as exc:
            raise JsonError(exc) from exc
        return validate_person(person)

    @classmethod
    def deserialize_from_string(cls, text: str | bytes) -> Person:
        """
        Parse raw JSON text in wire format, then apply the length rules.

        An `id` present in the text is kept; an absent one is generated.
        """
        try:
            person = cls.model_validate_json(text)
        except ValidationError as exc:
            raise JsonError(exc) from exc
        return validate_person(person)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Person:
        """
        Rebuild a person from a `people` row (storage names).

        Rows were validated on the way in, so the length rules are not rerun.
        """
        return cls.model_validate({wire_name(col): row[col] for col in STORAGE_COLUMNS})

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_row(self) -> dict[str, Any]:
        return {col: getattr(self, col) for col in STORAGE_COLUMNS}


def validate_person(person: Person) -> Person:
    """
    Apply the length rules in order and raise on the first violation.
    """
    if len(person.nick) > NICK_MAX_CHARS:
        raise LengthError("nick", "nick length must be smaller than 32 characters")
    if len(person.name) > NAME_MAX_CHARS:
        raise LengthError("name", "name length must be smaller than 100 characters")
    if len(person.stack) > STACK_MAX_ENTRIES:
        raise LengthError("stack", "stack length must be smaller than 32 characters")
    for tech in person.stack:
        if len(tech) > TECH_MAX_CHARS:
            raise LengthError("stack", "Tech length must be smaller than 32 characters")
    return person
