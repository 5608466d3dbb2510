from __future__ import annotations

import platform

import tasklens
from tasklens.query import MAX_DEPTH, VALID_OPERATORS

from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..runner import CommandOutput, run_command


def filter_language() -> dict[str, list[str]]:
    """Fields the filter language knows, each with the operators it accepts."""
    return {field.value: [op.value for op in ops] for field, ops in VALID_OPERATORS.items()}


@click.command(name="version", cls=RichCommand)
@click.pass_obj
def version_cmd(ctx: CLIContext) -> None:
    """Show the tasklens version and the filter fields it understands."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        return CommandOutput(
            data={
                "tasklens": tasklens.__version__,
                "python": platform.python_version(),
                "fields": sorted(field.value for field in VALID_OPERATORS),
                "maxFilterDepth": MAX_DEPTH,
            },
            resolved={"operators": filter_language()},
        )

    run_command(ctx, command="version", fn=fn)
