from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TASKLENS_SNAPSHOT", raising=False)
    monkeypatch.delenv("TASKLENS_PROFILE", raising=False)


@pytest.fixture
def cli_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the CLI's config and log paths into a temp dir."""
    pytest.importorskip("platformdirs")
    from tasklens.cli.paths import CliPaths

    paths = CliPaths(
        config_dir=tmp_path / "config",
        config_path=tmp_path / "config" / "config.toml",
        log_dir=tmp_path / "logs",
        log_file=tmp_path / "logs" / "tasklens.log",
    )
    monkeypatch.setattr("tasklens.cli.main.get_paths", lambda: paths)
    return paths
