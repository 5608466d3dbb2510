"""TOML configuration with named profiles.

    [default]
    snapshot_path = "~/Library/Caches/tasklens/tasks.json"

    [profiles.work]
    snapshot_path = "~/work-tasks.json"
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from pydantic import Field, ValidationError

from tasklens.exceptions import ConfigError
from tasklens.models import TaskLensModel


class ProfileConfig(TaskLensModel):
    snapshot_path: str | None = None


class LoadedConfig(TaskLensModel):
    path: Path | None = None
    default: ProfileConfig = Field(default_factory=ProfileConfig)
    profiles: dict[str, ProfileConfig] = Field(default_factory=dict)


def load_config(path: Path) -> LoadedConfig:
    """Read the config file; a missing file yields an empty configuration."""
    if not path.exists():
        return LoadedConfig(path=None)
    try:
        with path.open("rb") as fh:
            raw = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}", path=str(path)) from exc
    try:
        return LoadedConfig(
            path=path,
            default=raw.get("default", {}),
            profiles=raw.get("profiles", {}),
        )
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigError(
            f"Invalid config value at {location} in {path}: {first.get('msg')}",
            path=str(path),
        ) from exc


def config_init_template() -> str:
    return (
        "# tasklens configuration\n"
        "#\n"
        "# The [default] profile is used unless --profile or TASKLENS_PROFILE selects another.\n"
        "\n"
        "[default]\n"
        "# JSON task snapshot used by `tasklens list` when --input is not given.\n"
        '# snapshot_path = "~/tasks.json"\n'
        "\n"
        "# [profiles.work]\n"
        '# snapshot_path = "~/work-tasks.json"\n'
    )
