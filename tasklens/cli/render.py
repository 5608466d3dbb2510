from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console, Group
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from .results import CommandResult

TASK_COLUMNS = ("name", "status", "dueDate", "project", "area", "tags")


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int
    pager: bool | None  # None=auto


def _error_title(error_type: str) -> str:
    mapping = {
        "usage_error": "Usage error",
        "filter_error": "Invalid filter",
        "snapshot_error": "Snapshot error",
        "config_error": "Configuration error",
        "file_exists": "File exists",
        "permission_denied": "Permission denied",
        "io_error": "I/O error",
        "internal_error": "Internal error",
    }
    return mapping.get((error_type or "").strip(), "Error")


def _render_error_details(
    *,
    stderr: Console,
    command: str,
    error_type: str,
    hint: str | None,
    details: dict[str, Any] | None,
    settings: RenderSettings,
) -> None:
    if error_type == "filter_error" and details:
        pointer = details.get("pointer")
        if isinstance(pointer, str) and pointer:
            stderr.print(Text(pointer), soft_wrap=True)
    if hint:
        stderr.print(Text(f"Hint: {hint}"))
    elif error_type == "usage_error":
        stderr.print(f"Hint: run `tasklens {command} --help`", markup=False)
    if details and settings.verbosity >= 1 and error_type != "filter_error":
        stderr.print(Panel.fit(Text(json.dumps(details, ensure_ascii=False, indent=2))))


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _tasks_table(rows: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    if not rows:
        table.add_column("result")
        table.add_row("No results")
        return table
    for column in TASK_COLUMNS:
        table.add_column("due" if column == "dueDate" else column)
    for row in rows:
        table.add_row(*[_format_cell(row.get(c)) for c in TASK_COLUMNS])
    return table


def _kv_table(obj: dict[str, Any]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("field")
    table.add_column("value")
    for k, v in obj.items():
        table.add_row(str(k), _format_cell(v))
    return table


def _render_explain(data: dict[str, Any]) -> Any:
    return Group(
        Text(str(data.get("canonical", "")), style="bold"),
        Syntax(json.dumps(data.get("ast"), indent=2), "json", theme="ansi_dark"),
    )


def _render_human_data(*, command: str, data: Any, resolved: dict[str, Any] | None) -> Any:
    if command == "list" and isinstance(data, dict):
        rows = [r for r in data.get("tasks") or [] if isinstance(r, dict)]
        table = _tasks_table(rows)
        filter_text = (resolved or {}).get("filter")
        if filter_text:
            return Group(Text(f"Filter: {filter_text}", style="dim"), table)
        return table
    if isinstance(data, dict):
        return _kv_table(data)
    return Panel.fit(Text(str(data) if data is not None else "OK"))


def _should_use_pager(*, settings: RenderSettings, stdout: Console, renderable: Any) -> bool:
    if settings.pager is False:
        return False
    if settings.pager is True:
        return True
    if not sys.stdout.isatty():
        return False
    height = stdout.size.height
    if not height:
        return False
    lines = stdout.render_lines(renderable, options=stdout.options, pad=False)
    return len(lines) > height


def render_result(result: CommandResult, *, settings: RenderSettings) -> int:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return 0

    if not result.ok:
        if result.error is not None:
            title = _error_title(result.error.type)
            stderr.print(Text(f"{title}: {result.error.message}"))
            _render_error_details(
                stderr=stderr,
                command=result.command,
                error_type=result.error.type,
                hint=result.error.hint,
                details=result.error.details,
                settings=settings,
            )
        else:
            stderr.print("Error")
        return 0

    renderable: Any
    if result.command == "version" and isinstance(result.data, dict):
        renderable = Text(result.data.get("version", ""), style="bold")
    elif result.command == "config path" and isinstance(result.data, dict):
        renderable = Text(str(result.data.get("path", "")))
    elif result.command == "config init" and isinstance(result.data, dict):
        renderable = Panel.fit(Text(f"Initialized config at {result.data.get('path', '')}"))
    elif result.command == "explain" and isinstance(result.data, dict):
        renderable = _render_explain(result.data)
    else:
        renderable = _render_human_data(
            command=result.command, data=result.data, resolved=result.meta.resolved
        )

    if _should_use_pager(settings=settings, stdout=stdout, renderable=renderable):
        with stdout.pager():
            stdout.print(renderable)
    else:
        stdout.print(renderable)
    return 0
