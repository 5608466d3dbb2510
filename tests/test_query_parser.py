"""Tests for the filter parser: tree shape, precedence and error reporting."""

from __future__ import annotations

import pytest

from tasklens.query import (
    AndExpression,
    Comparison,
    DateKeyword,
    Field,
    MAX_DEPTH,
    MAX_NESTING,
    FilterError,
    NestingTooDeepError,
    NotExpression,
    Operator,
    OperatorNotValidForFieldError,
    OrExpression,
    TextList,
    TextLiteral,
    TrailingInputError,
    UnbalancedParensError,
    UnexpectedEndError,
    UnexpectedTokenError,
    UnknownFieldError,
    parse_filter,
)

STATUS_OPEN = Comparison(Field.STATUS, Operator.EQUALS, TextLiteral("open"))
TAG_WORK = Comparison(Field.TAGS, Operator.CONTAINS, TextLiteral("work"))
DUE_TODAY = Comparison(Field.DUE, Operator.LESS_THAN, DateKeyword("today"))


# =============================================================================
# Tree shape
# =============================================================================


def test_parse_simple_equality() -> None:
    assert parse_filter("status = open") == STATUS_OPEN


def test_quoted_and_bare_values_are_equal() -> None:
    assert parse_filter("status = 'open'") == parse_filter("status = open")


def test_field_names_are_case_insensitive_and_aliased() -> None:
    assert parse_filter("STATUS = open") == STATUS_OPEN
    assert parse_filter("title = x") == Comparison(Field.NAME, Operator.EQUALS, TextLiteral("x"))
    assert parse_filter("dueDate < today") == DUE_TODAY


def test_due_literal_is_unresolved_keyword() -> None:
    expr = parse_filter("due >= tomorrow+2")
    assert expr == Comparison(Field.DUE, Operator.GREATER_EQUAL, DateKeyword("tomorrow+2"))


def test_quoted_date_is_accepted_for_due() -> None:
    assert parse_filter("due < '2024-12-25'") == Comparison(
        Field.DUE, Operator.LESS_THAN, DateKeyword("2024-12-25")
    )


def test_null_tests_have_no_literal() -> None:
    assert parse_filter("notes IS NULL") == Comparison(Field.NOTES, Operator.IS_NULL)
    assert parse_filter("due IS NOT NULL") == Comparison(Field.DUE, Operator.IS_NOT_NULL)


def test_in_list() -> None:
    expr = parse_filter("project IN (Home, 'Side Project')")
    assert expr == Comparison(Field.PROJECT, Operator.IN, TextList(("Home", "Side Project")))


def test_and_binds_tighter_than_or() -> None:
    expr = parse_filter("status = open OR tags CONTAINS work AND due < today")
    assert expr == OrExpression(STATUS_OPEN, AndExpression(TAG_WORK, DUE_TODAY))


def test_parentheses_override_precedence() -> None:
    expr = parse_filter("(status = open OR tags CONTAINS work) AND due < today")
    assert expr == AndExpression(OrExpression(STATUS_OPEN, TAG_WORK), DUE_TODAY)


def test_not_binds_tighter_than_and() -> None:
    expr = parse_filter("NOT status = open AND tags CONTAINS work")
    assert expr == AndExpression(NotExpression(STATUS_OPEN), TAG_WORK)


def test_double_not() -> None:
    assert parse_filter("NOT NOT status = open") == NotExpression(NotExpression(STATUS_OPEN))


def test_and_is_left_associative() -> None:
    expr = parse_filter("status = open AND tags CONTAINS work AND due < today")
    assert expr == AndExpression(AndExpression(STATUS_OPEN, TAG_WORK), DUE_TODAY)


def test_redundant_parentheses() -> None:
    assert parse_filter("((status = open))") == STATUS_OPEN


def test_quoted_field_name() -> None:
    assert parse_filter("'status' = open") == STATUS_OPEN


def test_depth() -> None:
    assert STATUS_OPEN.depth == 1
    assert parse_filter("NOT status = open").depth == 2
    assert parse_filter("status = open AND tags CONTAINS work OR due < today").depth == 3


# =============================================================================
# Canonical form
# =============================================================================


@pytest.mark.parametrize(
    "text",
    [
        "status = open",
        "NOT status = open AND tags CONTAINS work",
        "(status = open OR project = 'Home Office') AND due <= friday",
        "name LIKE '%report%' OR notes IS NULL",
        "tags IN (a, 'b c') AND area IS NOT NULL",
        r"name = 'it\'s'",
        "due = 2024-02-29",
    ],
)
def test_canonical_form_round_trips(text: str) -> None:
    expr = parse_filter(text)
    assert parse_filter(expr.to_string()) == expr


def test_canonical_form_text() -> None:
    expr = parse_filter("status = open and not notes is null")
    assert expr.to_string() == "(status = 'open') AND (NOT (notes IS NULL))"
    assert str(expr) == expr.to_string()


def test_canonical_form_flattens_chains() -> None:
    expr = parse_filter("status = open AND tags CONTAINS work AND due < today")
    assert expr.to_string() == "(status = 'open') AND (tags CONTAINS 'work') AND (due < 'today')"
    grouped = parse_filter("status = open AND (tags CONTAINS work AND due < today)")
    assert grouped.to_string() == (
        "(status = 'open') AND ((tags CONTAINS 'work') AND (due < 'today'))"
    )
    assert parse_filter(grouped.to_string()) == grouped


def test_to_dict() -> None:
    assert parse_filter("NOT tags IN (a)").to_dict() == {
        "type": "not",
        "expr": {
            "type": "comparison",
            "field": "tags",
            "operator": "IN",
            "literal": {"list": ["a"]},
        },
    }


# =============================================================================
# Errors
# =============================================================================


def test_dangling_and_is_unexpected_end() -> None:
    with pytest.raises(UnexpectedEndError) as exc_info:
        parse_filter("status = 'open' AND")
    err = exc_info.value
    assert err.offset == 19
    assert err.text == "status = 'open' AND"
    assert err.pointer().splitlines()[1] == " " * 19 + "^"


def test_empty_filter_is_unexpected_end() -> None:
    with pytest.raises(UnexpectedEndError) as exc_info:
        parse_filter("")
    assert exc_info.value.offset == 0


def test_unknown_field() -> None:
    with pytest.raises(UnknownFieldError) as exc_info:
        parse_filter("priority = high")
    err = exc_info.value
    assert err.offset == 0
    assert err.name == "priority"
    assert err.hint is not None and "status" in err.hint


def test_unknown_field_in_second_operand() -> None:
    with pytest.raises(UnknownFieldError) as exc_info:
        parse_filter("status = open OR color = red")
    assert exc_info.value.offset == 17


def test_operator_not_valid_for_field() -> None:
    with pytest.raises(OperatorNotValidForFieldError) as exc_info:
        parse_filter("tags = work")
    err = exc_info.value
    assert err.offset == 5
    assert err.kind == "operator_not_valid_for_field"


@pytest.mark.parametrize(
    "text",
    ["status IS NULL", "name < b", "due LIKE today", "tags != a"],
)
def test_operator_validity_table(text: str) -> None:
    with pytest.raises(OperatorNotValidForFieldError):
        parse_filter(text)


def test_due_requires_a_date() -> None:
    with pytest.raises(UnexpectedTokenError) as exc_info:
        parse_filter("due < someday")
    assert exc_info.value.offset == 6


def test_missing_field_before_operator() -> None:
    with pytest.raises(UnexpectedTokenError) as exc_info:
        parse_filter("= open")
    assert exc_info.value.offset == 0
    assert exc_info.value.hint is not None


def test_double_equals_hint() -> None:
    with pytest.raises(UnexpectedTokenError) as exc_info:
        parse_filter("status == open")
    assert exc_info.value.offset == 8
    assert "'='" in (exc_info.value.hint or "")


def test_unclosed_paren_points_at_open_paren() -> None:
    with pytest.raises(UnbalancedParensError) as exc_info:
        parse_filter("status = open AND (tags CONTAINS a")
    assert exc_info.value.offset == 18


def test_extra_close_paren() -> None:
    with pytest.raises(UnbalancedParensError) as exc_info:
        parse_filter("status = open)")
    assert exc_info.value.offset == 13


def test_trailing_value_suggests_quoting() -> None:
    with pytest.raises(TrailingInputError) as exc_info:
        parse_filter("name = Buy milk")
    err = exc_info.value
    assert err.offset == 11
    assert err.hint is not None and "quoted" in err.hint


def test_is_without_null() -> None:
    with pytest.raises(UnexpectedTokenError) as exc_info:
        parse_filter("notes IS empty")
    assert exc_info.value.offset == 9


def test_unterminated_in_list() -> None:
    with pytest.raises(UnbalancedParensError):
        parse_filter("tags IN (a, b")


def test_lex_errors_surface_through_parse_filter() -> None:
    with pytest.raises(FilterError) as exc_info:
        parse_filter("status = open | due < today")
    assert exc_info.value.kind == "unexpected_character"
    assert exc_info.value.offset == 14


def test_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        parse_filter("status =")


def test_describe_includes_pointer_and_hint() -> None:
    with pytest.raises(FilterError) as exc_info:
        parse_filter("tags = work")
    text = exc_info.value.describe()
    assert "(at position 5)" in text
    assert "tags = work\n     ^" in text
    assert "Hint:" in text


def test_to_details() -> None:
    with pytest.raises(FilterError) as exc_info:
        parse_filter("status = open AND")
    details = exc_info.value.to_details()
    assert details["kind"] == "unexpected_end"
    assert details["offset"] == 17
    assert details["expression"] == "status = open AND"


# =============================================================================
# Nesting limits
# =============================================================================


def test_long_and_chain_is_rejected() -> None:
    text = " AND ".join(["status = open"] * 1500)
    with pytest.raises(NestingTooDeepError) as exc_info:
        parse_filter(text)
    err = exc_info.value
    assert isinstance(err, FilterError)
    assert err.kind == "nesting_too_deep"
    assert err.limit == MAX_DEPTH
    assert text[err.offset :].startswith("AND")
    assert "IN (...)" in (err.hint or "")


def test_long_or_chain_is_rejected() -> None:
    with pytest.raises(NestingTooDeepError):
        parse_filter(" OR ".join(f"project = p{i}" for i in range(MAX_DEPTH + 1)))


def test_chain_within_limit_round_trips() -> None:
    expr = parse_filter(" AND ".join(["status = open"] * 200))
    assert expr.depth == 200
    assert parse_filter(expr.to_string()) == expr


@pytest.mark.parametrize(
    "text",
    [
        "NOT " * (MAX_NESTING + 1) + "status = open",
        "(" * (MAX_NESTING + 1) + "status = open" + ")" * (MAX_NESTING + 1),
    ],
)
def test_deep_nesting_is_rejected(text: str) -> None:
    with pytest.raises(NestingTooDeepError) as exc_info:
        parse_filter(text)
    assert exc_info.value.limit == MAX_NESTING


def test_nesting_at_the_limit_is_accepted() -> None:
    text = "(" * MAX_NESTING + "status = open" + ")" * MAX_NESTING
    assert parse_filter(text) == STATUS_OPEN
    assert parse_filter("NOT " * MAX_NESTING + "status = open").depth == MAX_NESTING + 1
