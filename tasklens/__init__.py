"""
tasklens: a command-line companion for a personal task manager.

The library surface is the filter engine and the task model:

    from tasklens import Task, filter_items, parse_filter

    tasks = [Task(name="Write report", tags=["work"])]
    expr = parse_filter("tags CONTAINS 'WORK' AND status = open")
    assert filter_items(tasks, expr) == tasks
"""

from __future__ import annotations

from .exceptions import ConfigError, SnapshotError, TaskLensError
from .models import Task, TaskStatus
from .query import (
    FilterError,
    FilterExpression,
    LexError,
    ParseError,
    evaluate,
    filter_items,
    parse_filter,
)

__version__ = "0.4.0"

__all__ = [
    "ConfigError",
    "FilterError",
    "FilterExpression",
    "LexError",
    "ParseError",
    "SnapshotError",
    "Task",
    "TaskLensError",
    "TaskStatus",
    "__version__",
    "evaluate",
    "filter_items",
    "parse_filter",
]
