from __future__ import annotations

import os
from contextlib import suppress
from pathlib import Path

from ..click_compat import RichCommand, RichGroup, click
from ..config import config_init_template
from ..context import SNAPSHOT_ENV, CLIContext
from ..errors import CLIError
from ..runner import CommandOutput, run_command


@click.group(name="config", cls=RichGroup)
def config_group() -> None:
    """Where tasklens looks for its snapshot, per profile."""


@config_group.command(name="path", cls=RichCommand)
@click.pass_obj
def config_path(ctx: CLIContext) -> None:
    """Show the config file location."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        path = ctx.paths.config_path
        return CommandOutput(data={"path": str(path), "exists": path.exists()})

    run_command(ctx, command="config path", fn=fn)


@config_group.command(name="show", cls=RichCommand)
@click.pass_obj
def config_show(ctx: CLIContext) -> None:
    """Show the active profile and the snapshot `list` would read."""

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        loaded = ctx.load_config()
        profile = ctx.effective_profile()
        snapshot = ctx.profile_config().snapshot_path
        if os.getenv(SNAPSHOT_ENV, "").strip():
            snapshot = os.environ[SNAPSHOT_ENV].strip()
            warnings.append(f"{SNAPSHOT_ENV} overrides the profile's snapshot_path.")
        return CommandOutput(
            data={
                "profile": profile,
                "snapshotPath": snapshot,
                "profiles": ["default", *sorted(loaded.profiles)],
            },
            resolved={"configPath": str(loaded.path) if loaded.path else None},
        )

    run_command(ctx, command="config show", fn=fn)


def _write_private(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    if os.name == "posix":
        with suppress(OSError):
            path.chmod(0o600)


@config_group.command(name="init", cls=RichCommand)
@click.option("--force", is_flag=True, help="Replace an existing config file.")
@click.pass_obj
def config_init(ctx: CLIContext, *, force: bool) -> None:
    """Write a commented config template with an empty default profile."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        path = ctx.paths.config_path
        existed = path.exists()
        if existed and not force:
            raise CLIError(
                f"Config already exists: {path}",
                exit_code=2,
                error_type="file_exists",
                hint="Pass --force to replace it.",
            )
        _write_private(path, config_init_template())
        return CommandOutput(data={"path": str(path), "created": True, "overwritten": existed})

    run_command(ctx, command="config init", fn=fn)
