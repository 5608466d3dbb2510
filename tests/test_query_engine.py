"""End-to-end properties of parse_filter + filter_items."""

from __future__ import annotations

import itertools
from datetime import date, timedelta

import pytest

from tasklens import Task
from tasklens.query import (
    AndExpression,
    FilterExpression,
    NotExpression,
    OrExpression,
    UnexpectedEndError,
    evaluate,
    filter_items,
    parse_filter,
)

TODAY = date(2024, 6, 12)

TASKS = [
    Task(name="Pay rent", status="open", due_date=TODAY, tags=["home", "money"], project="Home"),
    Task(name="File taxes", status="completed", due_date=TODAY - timedelta(days=3)),
    Task(name="Book flights", tags=["travel"], area="Personal", notes="window seat"),
    Task(name="Quarterly report", tags=["work", "urgent"], project="Work", due_date=TODAY),
    Task(name="Call plumber", status="canceled", project="Home", notes=""),
    Task(name="Read a book"),
]

PREDICATES = [
    "status = open",
    "due < today+1",
    "tags CONTAINS work",
    "project = home",
    "notes IS NULL",
    "name LIKE book",
]


def _eval(expr: FilterExpression, task: Task) -> bool:
    return evaluate(expr, task, today=TODAY)


# =============================================================================
# Scenarios
# =============================================================================


@pytest.mark.req("FILTER-EVAL-001")
def test_open_and_due_before_tomorrow() -> None:
    a = Task(name="A", status="open", due_date=TODAY)
    b = Task(name="B", status="completed")
    expr = parse_filter("status = 'open' AND due < today+1")
    assert filter_items([a, b], expr, today=TODAY) == [a]


@pytest.mark.req("FILTER-EVAL-002")
def test_tag_contains_ignores_case() -> None:
    task = Task(name="t", tags=["urgent", "work"])
    assert filter_items([task], parse_filter("tags CONTAINS 'URGENT'")) == [task]


@pytest.mark.req("FILTER-PARSE-001")
def test_missing_literal_is_unexpected_end() -> None:
    with pytest.raises(UnexpectedEndError):
        parse_filter("status = ")


@pytest.mark.req("FILTER-EVAL-003")
def test_notes_is_null_treats_empty_notes_as_absent() -> None:
    empty = Task(name="e", notes="")
    filled = Task(name="f", notes="x")
    expr = parse_filter("notes IS NULL")
    assert filter_items([empty, filled], expr) == [empty]


@pytest.mark.req("FILTER-PARSE-002")
def test_and_binds_tighter_than_or_structurally() -> None:
    a, b, c = "status = open", "tags CONTAINS work", "project = home"
    assert parse_filter(f"{a} AND {b} OR {c}") == parse_filter(f"({a} AND {b}) OR {c}")
    assert parse_filter(f"{a} AND {b} OR {c}") != parse_filter(f"{a} AND ({b} OR {c})")


# =============================================================================
# Properties
# =============================================================================


@pytest.mark.parametrize("left,right", list(itertools.combinations(PREDICATES, 2)))
def test_and_is_commutative(left: str, right: str) -> None:
    ab = parse_filter(f"{left} AND {right}")
    ba = parse_filter(f"{right} AND {left}")
    for task in TASKS:
        assert _eval(ab, task) == _eval(ba, task)


@pytest.mark.parametrize("left,right", list(itertools.combinations(PREDICATES, 2)))
def test_de_morgan(left: str, right: str) -> None:
    a, b = parse_filter(left), parse_filter(right)
    lhs = NotExpression(AndExpression(a, b))
    rhs = OrExpression(NotExpression(a), NotExpression(b))
    for task in TASKS:
        assert _eval(lhs, task) == _eval(rhs, task)


@pytest.mark.parametrize("text", PREDICATES + ["NOT status = open OR tags IS NULL"])
def test_result_is_ordered_subset_by_identity(text: str) -> None:
    result = filter_items(TASKS, parse_filter(text), today=TODAY)
    assert len(result) <= len(TASKS)
    positions = [next(i for i, t in enumerate(TASKS) if t is r) for r in result]
    assert positions == sorted(positions)


@pytest.mark.parametrize("text", PREDICATES)
def test_filtering_twice_is_idempotent(text: str) -> None:
    expr = parse_filter(text)
    once = filter_items(TASKS, expr, today=TODAY)
    twice = filter_items(once, expr, today=TODAY)
    assert [id(t) for t in twice] == [id(t) for t in once]


@pytest.mark.parametrize("text", PREDICATES)
def test_empty_input_gives_empty_output(text: str) -> None:
    assert filter_items([], parse_filter(text)) == []


def test_no_match_is_not_an_error() -> None:
    assert filter_items(TASKS, parse_filter("name = 'nothing like this'")) == []


def test_canonical_form_round_trips_for_combinations() -> None:
    for left, right in itertools.combinations(PREDICATES, 2):
        for template in ("{} AND {}", "{} OR NOT {}", "NOT ({} OR {})"):
            expr = parse_filter(template.format(left, right))
            assert parse_filter(expr.to_string()) == expr


def test_parsed_expression_is_reusable() -> None:
    expr = parse_filter("due <= today")
    due_today = [t for t in TASKS if t.due_date == TODAY]
    overdue_first = filter_items(TASKS, expr, today=TODAY)
    assert all(t.due_date is not None and t.due_date <= TODAY for t in overdue_first)
    assert len(overdue_first) == len(due_today) + 1
    assert filter_items(TASKS, expr, today=TODAY - timedelta(days=10)) == []


def test_worked_example() -> None:
    expr = parse_filter("(status = open OR status = completed) AND (due IS NULL OR due < today)")
    names = [t.name for t in filter_items(TASKS, expr, today=TODAY)]
    assert names == ["File taxes", "Book flights", "Read a book"]


def test_not_equals_keeps_tasks_without_that_field() -> None:
    bare = Task(name="no project")
    archived = Task(name="old", project="Archive")
    assert filter_items([bare, archived], parse_filter("project != 'Archive'")) == [bare]
