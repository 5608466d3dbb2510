"""Filter expression errors.

Every failure to turn filter text into an expression tree is a `FilterError`.
Errors carry the original text and a character offset so callers can point at
the offending spot:

    status = 'open' AND
                       ^
"""

from __future__ import annotations

from tasklens.exceptions import TaskLensError


class FilterError(TaskLensError, ValueError):
    """Base class for lexing and parsing errors."""

    kind = "filter_error"

    def __init__(self, message: str, *, offset: int, text: str = "", hint: str | None = None):
        super().__init__(message)
        self.offset = offset
        self.text = text
        self.hint = hint

    def with_text(self, text: str) -> FilterError:
        """Attach the source text if the raiser did not have it."""
        if not self.text:
            self.text = text
        return self

    def pointer(self) -> str:
        """The source text with a caret under the offending offset."""
        line = self.text.replace("\n", " ").replace("\t", " ")
        column = max(0, min(self.offset, len(line)))
        return f"{line}\n{' ' * column}^"

    def describe(self) -> str:
        """Full diagnostic: message, position, pointer and hint."""
        parts = [f"{self.message} (at position {self.offset})"]
        if self.text:
            parts.append(self.pointer())
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        return "\n".join(parts)

    def to_details(self) -> dict[str, object]:
        details: dict[str, object] = {
            "kind": self.kind,
            "offset": self.offset,
            "expression": self.text,
        }
        if self.text:
            details["pointer"] = self.pointer()
        if self.hint:
            details["hint"] = self.hint
        return details


# =============================================================================
# Lexing
# =============================================================================


class LexError(FilterError):
    kind = "lex_error"


class UnexpectedCharacterError(LexError):
    kind = "unexpected_character"

    def __init__(self, ch: str, *, offset: int, text: str = "", hint: str | None = None):
        super().__init__(
            f"Unexpected character {ch!r}", offset=offset, text=text, hint=hint
        )
        self.ch = ch


class UnterminatedStringError(LexError):
    kind = "unterminated_string"

    def __init__(self, *, offset: int, text: str = ""):
        super().__init__(
            "Unterminated quoted string",
            offset=offset,
            text=text,
            hint="Close the string with the same quote character it was opened with",
        )


# =============================================================================
# Parsing
# =============================================================================


class ParseError(FilterError):
    kind = "parse_error"


class UnexpectedTokenError(ParseError):
    kind = "unexpected_token"

    def __init__(
        self,
        found: str,
        expected: str,
        *,
        offset: int,
        text: str = "",
        hint: str | None = None,
    ):
        super().__init__(
            f"Unexpected {found!r}, expected {expected}", offset=offset, text=text, hint=hint
        )
        self.found = found
        self.expected = expected


class UnexpectedEndError(ParseError):
    kind = "unexpected_end"

    def __init__(self, expected: str, *, offset: int, text: str = ""):
        super().__init__(
            f"Unexpected end of expression, expected {expected}", offset=offset, text=text
        )
        self.expected = expected


class UnbalancedParensError(ParseError):
    kind = "unbalanced_parens"

    def __init__(self, message: str, *, offset: int, text: str = ""):
        super().__init__(message, offset=offset, text=text)


class UnknownFieldError(ParseError):
    kind = "unknown_field"

    def __init__(self, name: str, *, offset: int, text: str = "", known: tuple[str, ...] = ()):
        hint = f"Known fields: {', '.join(known)}" if known else None
        super().__init__(f"Unknown field {name!r}", offset=offset, text=text, hint=hint)
        self.name = name


class OperatorNotValidForFieldError(ParseError):
    kind = "operator_not_valid_for_field"

    def __init__(
        self,
        field: str,
        operator: str,
        *,
        offset: int,
        text: str = "",
        valid: tuple[str, ...] = (),
    ):
        hint = f"Operators valid for {field}: {', '.join(valid)}" if valid else None
        super().__init__(
            f"Operator {operator} is not valid for field {field!r}",
            offset=offset,
            text=text,
            hint=hint,
        )
        self.field = field
        self.operator = operator


class TrailingInputError(ParseError):
    kind = "trailing_input"

    def __init__(self, found: str, *, offset: int, text: str = "", hint: str | None = None):
        super().__init__(
            f"Unexpected {found!r} after a complete expression",
            offset=offset,
            text=text,
            hint=hint,
        )
        self.found = found


class NestingTooDeepError(ParseError):
    kind = "nesting_too_deep"

    def __init__(self, limit: int, *, offset: int, text: str = ""):
        super().__init__(
            f"Expression is nested more than {limit} levels deep",
            offset=offset,
            text=text,
            hint="Use IN (...) instead of long OR chains, or drop redundant parentheses",
        )
        self.limit = limit
