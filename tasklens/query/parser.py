"""Recursive descent parser for filter expressions.

Grammar, lowest precedence first:

    expr        := or_expr
    or_expr     := and_expr ( "OR" and_expr )*
    and_expr    := not_expr ( "AND" not_expr )*
    not_expr    := "NOT" not_expr | atom
    atom        := comparison | "(" expr ")"
    comparison  := field operator literal
                 | field "IS" ["NOT"] "NULL"
                 | field "IN" "(" literal ( "," literal )* ")"
    field       := bare word or quoted string naming a field

A quoted field name is accepted, so ``'status' = open`` parses like
``status = open``.

Trees are limited to MAX_DEPTH levels and parentheses or NOT to MAX_NESTING
levels; deeper input raises `NestingTooDeepError`.
"""

from __future__ import annotations

from .dates import is_date_keyword
from .exceptions import (
    NestingTooDeepError,
    OperatorNotValidForFieldError,
    ParseError,
    TrailingInputError,
    UnbalancedParensError,
    UnexpectedEndError,
    UnexpectedTokenError,
    UnknownFieldError,
)
from .fields import VALID_OPERATORS, Field, Operator, is_valid
from .models import (
    AndExpression,
    Comparison,
    DateKeyword,
    FilterExpression,
    Literal,
    NotExpression,
    OrExpression,
    TextList,
    TextLiteral,
)
from .tokens import Token, TokenType

MAX_DEPTH = 256
MAX_NESTING = 64

_VALUE_TOKENS = (TokenType.STRING, TokenType.IDENTIFIER, TokenType.DATE)
_DATE_EXPECTED = "a date (today, tomorrow, yesterday, today+N, a weekday or YYYY-MM-DD)"


class Parser:
    """Parses one token sequence. Holds nothing but its cursor."""

    def __init__(self, tokens: list[Token], text: str = ""):
        if not tokens or tokens[-1].type is not TokenType.EOF:
            end = tokens[-1].pos + len(tokens[-1].value) if tokens else len(text)
            tokens = [*tokens, Token(TokenType.EOF, "", end)]
        self.tokens = tokens
        self.text = text
        self.pos = 0
        self.nesting = 0

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        """Advance to next token and return previous."""
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _unexpected(self, token: Token, expected: str, hint: str | None = None) -> ParseError:
        if token.type is TokenType.EOF:
            return UnexpectedEndError(expected, offset=token.pos, text=self.text)
        return UnexpectedTokenError(
            token.describe(), expected, offset=token.pos, text=self.text, hint=hint
        )

    def _check_depth(self, expr: FilterExpression, token: Token) -> FilterExpression:
        if expr.depth > MAX_DEPTH:
            raise NestingTooDeepError(MAX_DEPTH, offset=token.pos, text=self.text)
        return expr

    def _enter(self, token: Token) -> None:
        self.nesting += 1
        if self.nesting > MAX_NESTING:
            raise NestingTooDeepError(MAX_NESTING, offset=token.pos, text=self.text)

    def parse(self) -> FilterExpression:
        """Parse the token stream into a FilterExpression."""
        expr = self._parse_or_expr()

        token = self._current()
        if token.type is TokenType.EOF:
            return expr
        if token.type is TokenType.RPAREN:
            raise UnbalancedParensError(
                "Unbalanced parentheses: ')' without matching '('",
                offset=token.pos,
                text=self.text,
            )
        hint = None
        if token.type in _VALUE_TOKENS:
            hint = "Values with spaces must be quoted, and conditions joined with AND / OR"
        raise TrailingInputError(token.describe(), offset=token.pos, text=self.text, hint=hint)

    def _parse_or_expr(self) -> FilterExpression:
        """Parse OR expressions (lowest precedence)."""
        left = self._parse_and_expr()

        while self._current().type is TokenType.OR:
            op = self._advance()
            right = self._parse_and_expr()
            left = self._check_depth(OrExpression(left, right), op)

        return left

    def _parse_and_expr(self) -> FilterExpression:
        """Parse AND expressions (medium precedence)."""
        left = self._parse_not_expr()

        while self._current().type is TokenType.AND:
            op = self._advance()
            right = self._parse_not_expr()
            left = self._check_depth(AndExpression(left, right), op)

        return left

    def _parse_not_expr(self) -> FilterExpression:
        """Parse NOT expressions (high precedence)."""
        if self._current().type is TokenType.NOT:
            op = self._advance()
            self._enter(op)
            expr = self._parse_not_expr()  # NOT is right-associative
            self.nesting -= 1
            return self._check_depth(NotExpression(expr), op)

        return self._parse_atom()

    def _parse_atom(self) -> FilterExpression:
        """Parse atomic expressions: comparisons or parenthesized expressions."""
        token = self._current()

        if token.type is TokenType.LPAREN:
            self._advance()  # consume (
            self._enter(token)
            expr = self._parse_or_expr()
            self.nesting -= 1
            closing = self._current()
            if closing.type is TokenType.EOF:
                raise UnbalancedParensError(
                    "Unbalanced parentheses: '(' is never closed",
                    offset=token.pos,
                    text=self.text,
                )
            if closing.type is not TokenType.RPAREN:
                raise self._unexpected(closing, "')', AND or OR")
            self._advance()  # consume )
            return expr

        if token.type in _VALUE_TOKENS:
            return self._parse_comparison()

        if token.type is TokenType.OPERATOR:
            raise UnexpectedTokenError(
                token.value,
                "a field name",
                offset=token.pos,
                text=self.text,
                hint=f"Missing field name before operator '{token.value}'",
            )
        raise self._unexpected(token, "a field name, NOT or '('")

    def _parse_comparison(self) -> FilterExpression:
        """Parse ``field operator [literal]``."""
        field_token = self._advance()
        field = Field.from_name(field_token.value)
        if field is None:
            raise UnknownFieldError(
                field_token.value,
                offset=field_token.pos,
                text=self.text,
                known=tuple(f.value for f in Field),
            )

        op_token = self._current()
        if op_token.type is not TokenType.OPERATOR:
            if op_token.type is TokenType.KEYWORD and op_token.value == "IS":
                nxt = self.tokens[self.pos + 1] if self.pos + 1 < len(self.tokens) else op_token
                raise self._unexpected(nxt, "NULL or NOT NULL after IS")
            raise self._unexpected(op_token, f"an operator after '{field_token.value}'")
        self._advance()
        operator = Operator(op_token.value)

        if not is_valid(field, operator):
            raise OperatorNotValidForFieldError(
                field.value,
                operator.value,
                offset=op_token.pos,
                text=self.text,
                valid=tuple(op.value for op in VALID_OPERATORS[field]),
            )

        if not operator.takes_literal:
            return Comparison(field, operator)
        if operator is Operator.IN:
            return Comparison(field, operator, self._parse_list())
        return Comparison(field, operator, self._parse_literal(field))

    def _parse_literal(self, field: Field) -> Literal:
        token = self._current()
        if token.type not in _VALUE_TOKENS:
            if token.type is TokenType.OPERATOR and token.value == "=":
                raise UnexpectedTokenError(
                    "=",
                    "a value",
                    offset=token.pos,
                    text=self.text,
                    hint="Use single '=' for equality, not '=='",
                )
            raise self._unexpected(token, _DATE_EXPECTED if field is Field.DUE else "a value")
        self._advance()

        if field is Field.DUE:
            if not is_date_keyword(token.value):
                raise UnexpectedTokenError(
                    token.describe(), _DATE_EXPECTED, offset=token.pos, text=self.text
                )
            return DateKeyword(token.value)
        return TextLiteral(token.value)

    def _parse_list(self) -> TextList:
        opening = self._current()
        if opening.type is not TokenType.LPAREN:
            raise self._unexpected(opening, "'(' to start the IN list")
        self._advance()

        values: list[str] = []
        while True:
            token = self._current()
            if token.type is TokenType.EOF:
                raise UnbalancedParensError(
                    "Unbalanced parentheses: IN list is never closed",
                    offset=opening.pos,
                    text=self.text,
                )
            if token.type not in _VALUE_TOKENS:
                raise self._unexpected(token, "a value in the IN list")
            values.append(self._advance().value)

            separator = self._current()
            if separator.type is TokenType.RPAREN:
                self._advance()
                return TextList(tuple(values))
            if separator.type is TokenType.EOF:
                raise UnbalancedParensError(
                    "Unbalanced parentheses: IN list is never closed",
                    offset=opening.pos,
                    text=self.text,
                )
            if separator.type is not TokenType.COMMA:
                raise self._unexpected(separator, "',' or ')' in the IN list")
            self._advance()


def parse(tokens: list[Token], text: str = "") -> FilterExpression:
    """Parse a token sequence produced by `tokenize`.

    Raises:
        ParseError: If the tokens do not form exactly one expression.
    """
    return Parser(tokens, text).parse()
