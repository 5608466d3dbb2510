"""Evaluate expression trees against tasks.

Evaluation is total: a tree produced by the parser never raises here. Missing
values are handled by the rules below rather than reported.

- Text comparisons ignore case.
- An absent optional value (no due date, no project, ...) satisfies no
  comparison except the null tests. The one exception is ``!=`` on an absent
  text field, which is true so that it stays the negation of ``=``. An absent
  ``due`` fails ``!=`` as well.
- IS NULL on ``tags`` is true for an empty tag set.
- Date keywords resolve against ``today``, which defaults to the local date
  at the time of the call.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date

from tasklens.models import Task

from .fields import Field, FieldValue, Operator, resolve_field
from .models import (
    AndExpression,
    Comparison,
    DateKeyword,
    FilterExpression,
    NotExpression,
    OrExpression,
    TextList,
    TextLiteral,
)

_DATE_OPERATORS: dict[Operator, Callable[[date, date], bool]] = {
    Operator.EQUALS: lambda a, b: a == b,
    Operator.NOT_EQUALS: lambda a, b: a != b,
    Operator.LESS_THAN: lambda a, b: a < b,
    Operator.GREATER_THAN: lambda a, b: a > b,
    Operator.LESS_EQUAL: lambda a, b: a <= b,
    Operator.GREATER_EQUAL: lambda a, b: a >= b,
}


def _like_pattern(pattern: str) -> re.Pattern[str]:
    """Translate a SQL LIKE pattern (% and _ wildcards) into an anchored regex."""
    parts: list[str] = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def _like(text: str, pattern: str) -> bool:
    """Substring match, or a wildcard match when the pattern uses ``%``."""
    if "%" in pattern:
        return _like_pattern(pattern).fullmatch(text) is not None
    return pattern.casefold() in text.casefold()


def _compare_text(operator: Operator, value: str, literal: TextLiteral | TextList) -> bool:
    if isinstance(literal, TextList):
        folded = value.casefold()
        return any(folded == item.casefold() for item in literal.values)

    target = literal.value
    if operator is Operator.EQUALS:
        return value.casefold() == target.casefold()
    if operator is Operator.NOT_EQUALS:
        return value.casefold() != target.casefold()
    if operator is Operator.LIKE:
        return _like(value, target)
    if operator is Operator.CONTAINS:
        return target.casefold() in value.casefold()
    return False


def _compare_tags(tags: frozenset[str], literal: TextLiteral | TextList) -> bool:
    folded = {tag.casefold() for tag in tags}
    if isinstance(literal, TextList):
        return any(item.casefold() in folded for item in literal.values)
    return literal.value.casefold() in folded


def _is_null(field: Field, value: FieldValue) -> bool:
    if field is Field.TAGS:
        return not value
    return value is None


def _evaluate_comparison(node: Comparison, task: Task, today: date) -> bool:
    value = resolve_field(task, node.field)

    if node.operator is Operator.IS_NULL:
        return _is_null(node.field, value)
    if node.operator is Operator.IS_NOT_NULL:
        return not _is_null(node.field, value)

    literal = node.literal
    if value is None or literal is None:
        return node.operator is Operator.NOT_EQUALS and node.field is not Field.DUE

    if isinstance(value, date):
        if not isinstance(literal, DateKeyword):
            return False
        target = literal.resolve(today)
        compare = _DATE_OPERATORS.get(node.operator)
        if target is None or compare is None:
            return False
        return compare(value, target)

    if isinstance(literal, DateKeyword):
        # Only reachable for trees built by hand; treat the keyword as text.
        literal = TextLiteral(literal.raw)

    if isinstance(value, frozenset):
        return _compare_tags(value, literal)
    return _compare_text(node.operator, value, literal)


def evaluate(expr: FilterExpression, task: Task, *, today: date | None = None) -> bool:
    """Evaluate `expr` against one task.

    Args:
        expr: A tree produced by `parse_filter` (or built from the node classes).
        task: The record to test. It is never modified.
        today: Reference date for date keywords; defaults to the local date now.
    """
    if today is None:
        today = date.today()
    return _evaluate(expr, task, today)


def _evaluate(expr: FilterExpression, task: Task, today: date) -> bool:
    if isinstance(expr, Comparison):
        return _evaluate_comparison(expr, task, today)
    if isinstance(expr, AndExpression):
        # Short-circuits: the right operand is skipped once the result is known.
        return _evaluate(expr.left, task, today) and _evaluate(expr.right, task, today)
    if isinstance(expr, OrExpression):
        return _evaluate(expr.left, task, today) or _evaluate(expr.right, task, today)
    if isinstance(expr, NotExpression):
        return not _evaluate(expr.expr, task, today)
    return False
