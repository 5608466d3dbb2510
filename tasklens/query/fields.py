"""Fields, operators and the field/operator validity table."""

from __future__ import annotations

from datetime import date
from enum import Enum

from tasklens.models import Task


class Field(str, Enum):
    STATUS = "status"
    DUE = "due"
    TAGS = "tags"
    PROJECT = "project"
    AREA = "area"
    NAME = "name"
    NOTES = "notes"

    @classmethod
    def from_name(cls, name: str) -> Field | None:
        """Case-insensitive lookup, including aliases."""
        key = name.lower()
        key = _FIELD_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        return None


_FIELD_ALIASES = {
    "title": "name",
    "duedate": "due",
    "due_date": "due",
}


class Operator(str, Enum):
    EQUALS = "="
    NOT_EQUALS = "!="
    LESS_THAN = "<"
    GREATER_THAN = ">"
    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="
    LIKE = "LIKE"
    CONTAINS = "CONTAINS"
    IN = "IN"
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"

    @property
    def takes_literal(self) -> bool:
        return self not in (Operator.IS_NULL, Operator.IS_NOT_NULL)


ORDERING_OPERATORS = frozenset(
    {
        Operator.LESS_THAN,
        Operator.GREATER_THAN,
        Operator.LESS_EQUAL,
        Operator.GREATER_EQUAL,
    }
)

NULL_OPERATORS = frozenset({Operator.IS_NULL, Operator.IS_NOT_NULL})

_TEXT_OPERATORS = (
    Operator.EQUALS,
    Operator.NOT_EQUALS,
    Operator.LIKE,
    Operator.CONTAINS,
    Operator.IN,
)
_NULLABLE = (Operator.IS_NULL, Operator.IS_NOT_NULL)

VALID_OPERATORS: dict[Field, tuple[Operator, ...]] = {
    Field.STATUS: _TEXT_OPERATORS,
    Field.NAME: _TEXT_OPERATORS,
    Field.NOTES: _TEXT_OPERATORS + _NULLABLE,
    Field.PROJECT: _TEXT_OPERATORS + _NULLABLE,
    Field.AREA: _TEXT_OPERATORS + _NULLABLE,
    Field.DUE: (
        Operator.EQUALS,
        Operator.NOT_EQUALS,
        Operator.LESS_THAN,
        Operator.GREATER_THAN,
        Operator.LESS_EQUAL,
        Operator.GREATER_EQUAL,
    )
    + _NULLABLE,
    Field.TAGS: (Operator.CONTAINS, Operator.IN) + _NULLABLE,
}


def is_valid(field: Field, operator: Operator) -> bool:
    return operator in VALID_OPERATORS[field]


# =============================================================================
# Field resolution
# =============================================================================

FieldValue = str | date | frozenset[str] | None


def resolve_field(task: Task, field: Field) -> FieldValue:
    """Return the task's value for `field`.

    Text fields come back as plain strings, `due` as a date, `tags` as a
    frozenset. Optional fields are None when absent.
    """
    if field is Field.STATUS:
        return task.status.value
    if field is Field.NAME:
        return task.name
    if field is Field.NOTES:
        return task.notes
    if field is Field.PROJECT:
        return task.project
    if field is Field.AREA:
        return task.area
    if field is Field.DUE:
        return task.due_date
    return task.tags
