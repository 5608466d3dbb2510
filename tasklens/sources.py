"""Task snapshots.

A snapshot is a JSON export of tasks, written by the task manager bridge or by
``tasklens list --json``. Accepted shapes:

- ``[{...task...}, ...]``
- ``{"tasks": [...]}``
- ``{"data": {"tasks": [...]}}`` (a tasklens command result)
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from pydantic import ValidationError

from .exceptions import SnapshotError
from .models import Task

logger = logging.getLogger(__name__)

STDIN = "-"


def _extract_task_list(payload: Any, *, source: str) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        tasks = payload.get("tasks")
        if tasks is None and isinstance(payload.get("data"), dict):
            tasks = payload["data"].get("tasks")
        if isinstance(tasks, list):
            return tasks
    raise SnapshotError(
        f"Snapshot {source} does not contain a task list "
        '(expected a JSON array or an object with a "tasks" array)',
        source=source,
    )


def parse_tasks(payload: Any, *, source: str = "<memory>") -> list[Task]:
    """Validate a decoded snapshot into Task records, keeping order."""
    tasks: list[Task] = []
    for index, raw in enumerate(_extract_task_list(payload, source=source)):
        try:
            tasks.append(Task.model_validate(raw))
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            detail = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
            raise SnapshotError(
                f"Invalid task at index {index} in {source}: {detail}", source=source
            ) from exc
    return tasks


def read_tasks(stream: TextIO, *, source: str) -> list[Task]:
    try:
        payload = json.load(stream)
    except json.JSONDecodeError as exc:
        raise SnapshotError(
            f"Snapshot {source} is not valid JSON: {exc.msg} (line {exc.lineno})",
            source=source,
        ) from exc
    except UnicodeDecodeError as exc:
        raise SnapshotError(f"Snapshot {source} is not valid UTF-8 text", source=source) from exc
    return parse_tasks(payload, source=source)


def load_tasks(path: str | Path) -> list[Task]:
    """Load tasks from a snapshot file, or from stdin when `path` is ``-``."""
    if str(path) == STDIN:
        tasks = read_tasks(sys.stdin, source="<stdin>")
    else:
        snapshot = Path(path).expanduser()
        try:
            with snapshot.open(encoding="utf-8") as fh:
                tasks = read_tasks(fh, source=str(snapshot))
        except FileNotFoundError as exc:
            raise SnapshotError(f"Snapshot not found: {snapshot}", source=str(snapshot)) from exc
        except IsADirectoryError as exc:
            raise SnapshotError(
                f"Snapshot path is a directory: {snapshot}", source=str(snapshot)
            ) from exc
    logger.debug("Loaded %d tasks from %s", len(tasks), path)
    return tasks
