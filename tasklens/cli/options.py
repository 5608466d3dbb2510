"""Result format flags shared by the group and the commands that print results."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from .click_compat import click
from .context import CLIContext

F = TypeVar("F", bound=Callable[..., object])

OUTPUT_FORMATS = ("table", "json")


def _override_output(ctx: click.Context, param: click.Parameter, value: str | bool | None) -> None:
    # Flags given after the subcommand win over the group-level --output.
    if not value or not isinstance(ctx.obj, CLIContext):
        return
    ctx.obj.output = "json" if param.name == "json" else value  # type: ignore[assignment]


def result_format(fn: F) -> F:
    """Let `tasklens list -f ... --json` work as well as `tasklens --json list -f ...`."""
    fn = click.option(
        "--output",
        type=click.Choice(OUTPUT_FORMATS),
        default=None,
        help="Render matching tasks or the parsed filter as a table or a JSON result.",
        callback=_override_output,
        expose_value=False,
    )(fn)
    return click.option(
        "--json",
        is_flag=True,
        help="Same as --output json.",
        callback=_override_output,
        expose_value=False,
    )(fn)
