from __future__ import annotations

from ..click_compat import RichCommand, click

_COMPLETE_VAR = "_TASKLENS_COMPLETE"

_EVAL_LINES = {
    "bash": 'eval "$({var}=bash_source tasklens)"',
    "zsh": 'eval "$({var}=zsh_source tasklens)"',
    "fish": "{var}=fish_source tasklens | source",
}


@click.command(name="completion", cls=RichCommand)
@click.argument("shell", type=click.Choice(sorted(_EVAL_LINES)))
def completion_cmd(shell: str) -> None:
    """Print the line to add to your shell profile for tab completion.

    Completes subcommands, options and the --output choices.
    """
    click.echo(_EVAL_LINES[shell].format(var=_COMPLETE_VAR))
