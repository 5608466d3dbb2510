"""
Task records consumed by the filter engine.

Records arrive from the task manager's scripting bridge or from a cached JSON
snapshot. The bridge emits tags, projects and areas as `{"name": ...}` objects
and uses camelCase keys; both shapes are accepted here.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskLensModel(BaseModel):
    """Base model: camelCase aliases, tolerant of unknown keys."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        use_enum_values=False,
    )


class TaskStatus(str, Enum):
    OPEN = "open"
    COMPLETED = "completed"
    CANCELED = "canceled"

    @classmethod
    def _missing_(cls, value: object) -> TaskStatus | None:
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == "cancelled":
                return cls.CANCELED
            for member in cls:
                if member.value == normalized:
                    return member
        return None


def _name_of(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("name") or value.get("title")
    return value


class Task(TaskLensModel):
    """A single task. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    notes: str | None = None
    status: TaskStatus = TaskStatus.OPEN
    due_date: date | None = Field(None, alias="dueDate")
    tags: frozenset[str] = frozenset()
    project: str | None = None
    area: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("status", mode="before")
    @classmethod
    def _status_spelling(cls, value: Any) -> Any:
        if isinstance(value, str):
            return TaskStatus(value)
        return value

    @field_validator("notes", "project", "area", mode="before")
    @classmethod
    def _empty_is_absent(cls, value: Any) -> Any:
        value = _name_of(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def _calendar_date(cls, value: Any) -> Any:
        # Bridge dates are timestamps at local midnight; only the calendar day matters.
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            if len(value) > 10 and value[4] == "-" and value[10] in "T ":
                return value[:10]
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_names(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple, set, frozenset)):
            names = (_name_of(item) for item in value)
            return frozenset(n.strip() for n in names if isinstance(n, str) and n.strip())
        return value

    @property
    def is_open(self) -> bool:
        return self.status is TaskStatus.OPEN

    def summary(self) -> str:
        """Human-readable one-liner: name, project and tags."""
        parts = [self.name]
        if self.project:
            parts.append(f"[{self.project}]")
        if self.tags:
            parts.append(" ".join(f"#{t}" for t in sorted(self.tags)))
        return " ".join(parts)
