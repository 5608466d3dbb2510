from __future__ import annotations

import json
import stat
import sys

import pytest

pytest.importorskip("rich_click")
pytest.importorskip("rich")
pytest.importorskip("platformdirs")

from click.testing import CliRunner

import tasklens
from tasklens.cli.main import cli


def test_cli_no_args_shows_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output


def test_cli_version_table_output() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "version"])
    assert result.exit_code == 0
    assert tasklens.__version__ in result.output


def test_cli_version_lists_filter_fields() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "--json", "version"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["data"]["tasklens"] == tasklens.__version__
    assert payload["data"]["fields"] == [
        "area",
        "due",
        "name",
        "notes",
        "project",
        "status",
        "tags",
    ]
    assert payload["meta"]["resolved"]["operators"]["tags"] == [
        "CONTAINS",
        "IN",
        "IS NULL",
        "IS NOT NULL",
    ]


def test_cli_version_option() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert tasklens.__version__ in result.output


def test_cli_config_path_json(cli_paths) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "--json", "config", "path"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["ok"] is True
    assert payload["command"] == "config path"
    assert payload["data"] == {"path": str(cli_paths.config_path), "exists": False}
    assert "durationMs" in payload["meta"]


def test_cli_config_init_writes_template(cli_paths) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "--json", "config", "init"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["data"]["created"] is True
    assert payload["data"]["overwritten"] is False
    assert "[default]" in cli_paths.config_path.read_text(encoding="utf-8")
    if sys.platform != "win32":
        assert stat.S_IMODE(cli_paths.config_path.stat().st_mode) == 0o600


def test_cli_config_init_refuses_overwrite(cli_paths) -> None:
    cli_paths.config_dir.mkdir(parents=True)
    cli_paths.config_path.write_text("# mine\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "config", "init"])
    assert result.exit_code == 2
    assert "--force" in result.output
    assert cli_paths.config_path.read_text(encoding="utf-8") == "# mine\n"

    forced = runner.invoke(cli, ["--no-log-file", "--json", "config", "init", "--force"])
    assert forced.exit_code == 0
    assert json.loads(forced.output.strip())["data"]["overwritten"] is True


def test_cli_config_show_reports_profile_snapshot(
    cli_paths, monkeypatch: pytest.MonkeyPatch
) -> None:
    cli_paths.config_dir.mkdir(parents=True)
    cli_paths.config_path.write_text(
        '[default]\nsnapshot_path = "home.json"\n\n[profiles.work]\nsnapshot_path = "work.json"\n',
        encoding="utf-8",
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "--json", "--profile", "work", "config", "show"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["data"] == {
        "profile": "work",
        "snapshotPath": "work.json",
        "profiles": ["default", "work"],
    }
    assert payload["warnings"] == []

    monkeypatch.setenv("TASKLENS_SNAPSHOT", "env.json")
    result = runner.invoke(cli, ["--no-log-file", "--json", "config", "show"])
    payload = json.loads(result.output.strip())
    assert payload["data"]["snapshotPath"] == "env.json"
    assert payload["warnings"] == ["TASKLENS_SNAPSHOT overrides the profile's snapshot_path."]


def test_cli_completion_table_emits_script() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "completion", "bash"])
    assert result.exit_code == 0
    assert "_TASKLENS_COMPLETE=bash_source" in result.output


def test_cli_completion_fish() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "completion", "fish"])
    assert result.exit_code == 0
    assert result.output == "_TASKLENS_COMPLETE=fish_source tasklens | source\n"


def test_cli_explain_json() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--no-log-file", "--json", "explain", "status = open AND NOT tags IS NULL"]
    )
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["data"]["canonical"] == "(status = 'open') AND (NOT (tags IS NULL))"
    assert payload["data"]["ast"]["type"] == "and"
    assert payload["data"]["ast"]["right"] == {
        "type": "not",
        "expr": {"type": "comparison", "field": "tags", "operator": "IS NULL"},
    }


def test_cli_explain_table() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "explain", "due < today"])
    assert result.exit_code == 0
    assert "due < 'today'" in result.output


def test_cli_explain_reports_filter_error() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "explain", "status = 'open' AND"])
    assert result.exit_code == 2
    assert "Invalid filter:" in result.output
    assert "status = 'open' AND\n" in result.output
    assert " " * 19 + "^" in result.output
