from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from tasklens.exceptions import TaskLensError

from .config import LoadedConfig, ProfileConfig, load_config
from .errors import CLIError
from .paths import CliPaths, get_paths
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]

SNAPSHOT_ENV = "TASKLENS_SNAPSHOT"
PROFILE_ENV = "TASKLENS_PROFILE"


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    pager: bool | None
    profile: str | None
    log_file: Path | None
    enable_log_file: bool

    _paths: CliPaths = field(default_factory=get_paths)
    _loaded_config: LoadedConfig | None = None

    @property
    def paths(self) -> CliPaths:
        return self._paths

    def load_config(self) -> LoadedConfig:
        if self._loaded_config is None:
            self._loaded_config = load_config(self.paths.config_path)
        return self._loaded_config

    def effective_profile(self) -> str:
        return self.profile or os.getenv(PROFILE_ENV) or "default"

    def profile_config(self) -> ProfileConfig:
        cfg = self.load_config()
        name = self.effective_profile()
        if name == "default":
            return cfg.default
        if name not in cfg.profiles:
            raise CLIError(
                f"Unknown profile: {name!r}",
                exit_code=2,
                error_type="config_error",
                hint="Profiles are defined as [profiles.<name>] tables in the config file.",
            )
        return cfg.profiles[name]

    def resolve_snapshot_path(self, explicit: str | None) -> str:
        """Pick the snapshot: --input, then $TASKLENS_SNAPSHOT, then the profile."""
        if explicit:
            return explicit
        env_path = os.getenv(SNAPSHOT_ENV, "").strip()
        if env_path:
            return env_path
        prof = self.profile_config()
        if prof.snapshot_path:
            return prof.snapshot_path
        raise CLIError(
            "No task snapshot given.",
            exit_code=2,
            error_type="usage_error",
            hint=(
                f"Pass --input PATH (or '-' for stdin), set {SNAPSHOT_ENV}, "
                "or set snapshot_path in the config file."
            ),
        )


def normalize_exception(exc: Exception) -> Exception:
    """Turn library errors into CLIError with a user-facing type and exit code."""
    if isinstance(exc, CLIError):
        return exc
    if isinstance(exc, TaskLensError):
        return CLIError.from_library_error(exc)
    if isinstance(exc, PermissionError):
        return CLIError(str(exc), exit_code=2, error_type="permission_denied")
    if isinstance(exc, OSError):
        return CLIError(str(exc), exit_code=1, error_type="io_error")
    return exc


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, TaskLensError):
        return 2
    return 1


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type, message=exc.message, hint=exc.hint, details=exc.details
        )
    return ErrorInfo(type="internal_error", message=f"{exc.__class__.__name__}: {exc}")


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    profile: str | None,
    resolved: dict[str, Any] | None = None,
    columns: list[dict[str, Any]] | None = None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    meta = CommandMeta(
        duration_ms=duration_ms,
        profile=profile,
        resolved=resolved,
        columns=columns,
    )
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=meta,
        error=error,
    )
