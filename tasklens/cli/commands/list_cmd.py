from __future__ import annotations

import logging
from typing import Any

from tasklens.models import Task
from tasklens.query import filter_items, parse_filter
from tasklens.sources import load_tasks

from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..options import result_format
from ..runner import CommandOutput, run_command

logger = logging.getLogger(__name__)


def serialize_task(task: Task) -> dict[str, Any]:
    payload = task.model_dump(by_alias=True, mode="json")
    payload["tags"] = sorted(task.tags)
    return payload


@click.command(name="list", cls=RichCommand)
@click.option(
    "--filter",
    "-f",
    "filter_text",
    type=str,
    default=None,
    help="Filter expression, e.g. \"status = open AND due < today\".",
)
@click.option(
    "--input",
    "-i",
    "input_path",
    type=str,
    default=None,
    help="Task snapshot (JSON file, or '-' for stdin).",
)
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=None,
    help="Show at most N matching tasks.",
)
@result_format
@click.pass_obj
def list_cmd(
    ctx: CLIContext,
    *,
    filter_text: str | None,
    input_path: str | None,
    limit: int | None,
) -> None:
    """List tasks from a snapshot, optionally filtered.

    The filter is parsed before any task data is read, so a bad expression
    fails fast.
    """

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        expr = parse_filter(filter_text) if filter_text is not None else None
        source = ctx.resolve_snapshot_path(input_path)
        tasks = load_tasks(source)

        matched = filter_items(tasks, expr) if expr is not None else list(tasks)
        total = len(matched)
        if limit is not None and total > limit:
            matched = matched[:limit]
            warnings.append(f"Showing {limit} of {total} matching tasks (--limit).")
        logger.info("Listed %d of %d tasks from %s", len(matched), len(tasks), source)

        resolved: dict[str, Any] = {"source": source, "total": len(tasks), "matched": total}
        if expr is not None:
            resolved["filter"] = expr.to_string()
        return CommandOutput(
            data={"tasks": [serialize_task(t) for t in matched]},
            resolved=resolved,
        )

    run_command(ctx, command="list", fn=fn)
