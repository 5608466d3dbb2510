"""
Exception hierarchy for tasklens.

Filter-language errors live in `tasklens.query.exceptions` and derive from
`TaskLensError` so callers can catch everything the library raises at once.
"""

from __future__ import annotations


class TaskLensError(Exception):
    """Base class for all tasklens errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class SnapshotError(TaskLensError):
    """The task snapshot could not be read or did not contain valid tasks."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class ConfigError(TaskLensError):
    """The configuration file is malformed."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
