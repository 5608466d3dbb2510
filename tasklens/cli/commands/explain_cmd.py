from __future__ import annotations

from tasklens.query import parse_filter

from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..options import result_format
from ..runner import CommandOutput, run_command


@click.command(name="explain", cls=RichCommand)
@click.argument("expression")
@result_format
@click.pass_obj
def explain_cmd(ctx: CLIContext, expression: str) -> None:
    """Parse a filter and show its canonical form and expression tree.

    No task data is read.
    """

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        expr = parse_filter(expression)
        return CommandOutput(
            data={
                "expression": expression,
                "canonical": expr.to_string(),
                "ast": expr.to_dict(),
            }
        )

    run_command(ctx, command="explain", fn=fn)
