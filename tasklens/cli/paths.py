from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

APP_NAME = "tasklens"


@dataclass(frozen=True, slots=True)
class CliPaths:
    config_dir: Path
    config_path: Path
    log_dir: Path
    log_file: Path


def get_paths() -> CliPaths:
    config_dir = Path(user_config_dir(APP_NAME, appauthor=False))
    log_dir = Path(user_log_dir(APP_NAME, appauthor=False))
    return CliPaths(
        config_dir=config_dir,
        config_path=config_dir / "config.toml",
        log_dir=log_dir,
        log_file=log_dir / "tasklens.log",
    )
