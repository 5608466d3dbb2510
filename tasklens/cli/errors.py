from __future__ import annotations

from typing import Any

from tasklens.exceptions import ConfigError, SnapshotError, TaskLensError
from tasklens.query import FilterError


class CLIError(Exception):
    """A failure the CLI reports as a result envelope instead of a traceback.

    `error_type` is the machine-readable `error.type` of the JSON result;
    `details` is rendered only with -v in table mode.
    """

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 1,
        error_type: str = "error",
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.hint = hint
        self.details = details

    @classmethod
    def from_library_error(cls, exc: TaskLensError) -> CLIError:
        """Bad filters, snapshots and config files are all the user's to fix: exit 2."""
        if isinstance(exc, FilterError):
            return cls(
                exc.message,
                exit_code=2,
                error_type="filter_error",
                hint=exc.hint,
                details=exc.to_details(),
            )
        if isinstance(exc, SnapshotError):
            details = {"source": exc.source} if exc.source else None
            return cls(exc.message, exit_code=2, error_type="snapshot_error", details=details)
        if isinstance(exc, ConfigError):
            details = {"path": exc.path} if exc.path else None
            return cls(exc.message, exit_code=2, error_type="config_error", details=details)
        return cls(exc.message, exit_code=2)

    def __str__(self) -> str:  # pragma: no cover
        return self.message
