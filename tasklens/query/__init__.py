"""Filter expression engine.

Parses SQL-flavoured filter text into an expression tree and evaluates it
against tasks:

    from tasklens.query import filter_items, parse_filter

    expr = parse_filter("status = 'open' AND due < today")
    overdue = filter_items(tasks, expr)

Parsing and evaluation are pure functions. A parsed expression can be reused
across calls and days because date keywords are resolved when it is evaluated.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import TypeVar

from tasklens.models import Task

from .dates import is_date_keyword, resolve_date_keyword
from .evaluator import evaluate
from .exceptions import (
    FilterError,
    LexError,
    NestingTooDeepError,
    OperatorNotValidForFieldError,
    ParseError,
    TrailingInputError,
    UnbalancedParensError,
    UnexpectedCharacterError,
    UnexpectedEndError,
    UnexpectedTokenError,
    UnknownFieldError,
    UnterminatedStringError,
)
from .fields import VALID_OPERATORS, Field, Operator
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
from .parser import MAX_DEPTH, MAX_NESTING, parse
from .tokenizer import tokenize
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Task)


def parse_filter(text: str) -> FilterExpression:
    """Compile filter text into an expression tree.

    Args:
        text: The filter expression, e.g. ``tags CONTAINS 'urgent' AND NOT project = Archive``.

    Returns:
        The root of the parsed expression tree.

    Raises:
        FilterError: A `LexError` or `ParseError` carrying the offset of the
            problem and the original text (see `FilterError.describe`).

    Examples:
        >>> expr = parse_filter("status = open AND due < today")
        >>> isinstance(expr, AndExpression)
        True
    """
    try:
        tokens = tokenize(text)
        expr = parse(tokens, text)
    except FilterError as exc:
        raise exc.with_text(text) from None
    logger.debug("Parsed filter %r as %s", text, expr)
    return expr


def filter_items(
    records: Sequence[T], expr: FilterExpression, *, today: date | None = None
) -> list[T]:
    """Return the records matching `expr`, in input order.

    The returned list holds the same objects as `records`. ``today`` is fixed
    once for the whole scan so every record sees the same reference date.
    """
    if today is None:
        today = date.today()
    matched = [record for record in records if evaluate(expr, record, today=today)]
    logger.debug("Filter matched %d of %d records", len(matched), len(records))
    return matched


__all__ = [
    "AndExpression",
    "Comparison",
    "DateKeyword",
    "Field",
    "FilterError",
    "FilterExpression",
    "LexError",
    "MAX_DEPTH",
    "MAX_NESTING",
    "NestingTooDeepError",
    "NotExpression",
    "Operator",
    "OperatorNotValidForFieldError",
    "OrExpression",
    "ParseError",
    "TextList",
    "TextLiteral",
    "Token",
    "TokenType",
    "TrailingInputError",
    "UnbalancedParensError",
    "UnexpectedCharacterError",
    "UnexpectedEndError",
    "UnexpectedTokenError",
    "UnknownFieldError",
    "UnterminatedStringError",
    "VALID_OPERATORS",
    "evaluate",
    "filter_items",
    "is_date_keyword",
    "parse",
    "parse_filter",
    "resolve_date_keyword",
    "tokenize",
]
