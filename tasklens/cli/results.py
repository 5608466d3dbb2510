from __future__ import annotations

from typing import Any

from pydantic import Field

from tasklens.models import TaskLensModel


class ErrorInfo(TaskLensModel):
    type: str
    message: str
    hint: str | None = None
    details: dict[str, Any] | None = None


class CommandMeta(TaskLensModel):
    duration_ms: int = Field(..., alias="durationMs")
    profile: str | None = None
    resolved: dict[str, Any] | None = None
    columns: list[dict[str, Any]] | None = None


class CommandResult(TaskLensModel):
    ok: bool
    command: str
    data: Any | None = None
    warnings: list[str] = Field(default_factory=list)
    meta: CommandMeta
    error: ErrorInfo | None = None
