"""Expression tree for parsed filters.

Nodes are frozen dataclasses. Two trees are structurally equal exactly when
they compare equal with ``==``. ``to_string()`` renders a canonical form that
parses back into an equal tree.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from datetime import date
from typing import TYPE_CHECKING, Any

from .dates import resolve_date_keyword
from .fields import Field, Operator

if TYPE_CHECKING:
    from tasklens.models import Task


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    escaped = escaped.replace("\n", "\\n").replace("\t", "\\t").replace("\r", "\\r")
    return f"'{escaped}'"


# =============================================================================
# Literals
# =============================================================================


@dataclass(frozen=True)
class TextLiteral:
    value: str

    def to_string(self) -> str:
        return _quote(self.value)

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.value}


@dataclass(frozen=True)
class DateKeyword:
    """An unresolved date: ``today``, ``tomorrow+2``, ``2024-12-25`` ..."""

    raw: str

    def resolve(self, today: date) -> date | None:
        return resolve_date_keyword(self.raw, today)

    def to_string(self) -> str:
        return _quote(self.raw)

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.raw}


@dataclass(frozen=True)
class TextList:
    """Right-hand side of ``IN``."""

    values: tuple[str, ...]

    def to_string(self) -> str:
        return "(" + ", ".join(_quote(v) for v in self.values) + ")"

    def to_dict(self) -> dict[str, Any]:
        return {"list": list(self.values)}


Literal = TextLiteral | DateKeyword | TextList


# =============================================================================
# Expressions
# =============================================================================


class FilterExpression(ABC):
    """Base class for filter expressions.

    Every node carries ``depth``, the height of the subtree it roots, computed
    when the node is built.
    """

    depth: int

    @abstractmethod
    def to_string(self) -> str:
        """Convert the expression to its canonical filter string."""
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly dump of the tree."""
        ...

    def matches(self, task: Task, *, today: date | None = None) -> bool:
        """Evaluate the expression against one task."""
        from .evaluator import evaluate

        return evaluate(self, task, today=today)

    def __str__(self) -> str:
        return self.to_string()


def _chain_to_string(expr: AndExpression | OrExpression, keyword: str) -> str:
    # AND and OR are left-associative, so a left-leaning run of the same
    # operator prints without nesting and parses back to the same tree.
    kind = type(expr)
    operands: list[FilterExpression] = []
    node: FilterExpression = expr
    while type(node) is kind:
        operands.append(node.right)  # type: ignore[attr-defined]
        node = node.left  # type: ignore[attr-defined]
    operands.append(node)
    return f" {keyword} ".join(f"({o.to_string()})" for o in reversed(operands))


@dataclass(frozen=True)
class Comparison(FilterExpression):
    """``field operator literal``; ``literal`` is None for null tests."""

    field: Field
    operator: Operator
    literal: Literal | None = None
    depth: int = dataclass_field(default=1, init=False, repr=False, compare=False)

    def to_string(self) -> str:
        if self.literal is None:
            return f"{self.field.value} {self.operator.value}"
        return f"{self.field.value} {self.operator.value} {self.literal.to_string()}"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "type": "comparison",
            "field": self.field.value,
            "operator": self.operator.value,
        }
        if self.literal is not None:
            out["literal"] = self.literal.to_dict()
        return out


@dataclass(frozen=True)
class AndExpression(FilterExpression):
    left: FilterExpression
    right: FilterExpression
    depth: int = dataclass_field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "depth", 1 + max(self.left.depth, self.right.depth))

    def to_string(self) -> str:
        return _chain_to_string(self, "AND")

    def to_dict(self) -> dict[str, Any]:
        return {"type": "and", "left": self.left.to_dict(), "right": self.right.to_dict()}


@dataclass(frozen=True)
class OrExpression(FilterExpression):
    left: FilterExpression
    right: FilterExpression
    depth: int = dataclass_field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "depth", 1 + max(self.left.depth, self.right.depth))

    def to_string(self) -> str:
        return _chain_to_string(self, "OR")

    def to_dict(self) -> dict[str, Any]:
        return {"type": "or", "left": self.left.to_dict(), "right": self.right.to_dict()}


@dataclass(frozen=True)
class NotExpression(FilterExpression):
    expr: FilterExpression
    depth: int = dataclass_field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "depth", 1 + self.expr.depth)

    def to_string(self) -> str:
        return f"NOT ({self.expr.to_string()})"

    def to_dict(self) -> dict[str, Any]:
        return {"type": "not", "expr": self.expr.to_dict()}
