"""Tokenizer for filter strings."""

from __future__ import annotations

from .dates import is_date_keyword
from .exceptions import UnexpectedCharacterError, UnterminatedStringError
from .tokens import Token, TokenType

_WHITESPACE = " \t\n\r\f\v"
_WORD_PUNCTUATION = "_-+.:/@#%"
_QUOTES = "'\""
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}

_LOGICAL = {
    "AND": TokenType.AND,
    "OR": TokenType.OR,
    "NOT": TokenType.NOT,
}
_WORD_OPERATORS = frozenset({"LIKE", "CONTAINS", "IN"})

_HINTS = {
    "&": "Use AND to combine conditions: status = open AND due < today",
    "|": "Use OR for alternatives: status = open OR status = canceled",
    "!": "Use != for inequality or NOT to negate a condition",
    "~": "Use LIKE or CONTAINS for substring matches",
}


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in _WORD_PUNCTUATION


class Tokenizer:
    """Single-pass scanner over one filter string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def _read_quoted_string(self) -> str:
        """Read a quoted string, handling escapes."""
        quote = self.text[self.pos]
        start_pos = self.pos
        self.pos += 1  # Skip opening quote
        result: list[str] = []

        while self.pos < self.length:
            ch = self.text[self.pos]
            if ch == quote:
                self.pos += 1  # Skip closing quote
                return "".join(result)
            if ch == "\\":
                self.pos += 1
                if self.pos >= self.length:
                    break
                escaped = self.text[self.pos]
                result.append(_ESCAPES.get(escaped, escaped))
            else:
                result.append(ch)
            self.pos += 1

        raise UnterminatedStringError(offset=start_pos, text=self.text)

    def _read_word(self) -> str:
        start = self.pos
        while self.pos < self.length and _is_word_char(self.text[self.pos]):
            self.pos += 1
        return self.text[start : self.pos]

    def _peek_word(self) -> tuple[str, int]:
        """Look at the next bare word without consuming it; returns (word, end)."""
        saved = self.pos
        self._skip_whitespace()
        word = self._read_word()
        end = self.pos
        self.pos = saved
        return word, end

    def _read_null_test(self, start_pos: int) -> Token:
        """Called after IS: fold IS NULL / IS NOT NULL into one operator token."""
        word, end = self._peek_word()
        if word.upper() == "NULL":
            self.pos = end
            return Token(TokenType.OPERATOR, "IS NULL", start_pos)
        if word.upper() == "NOT":
            saved = self.pos
            self.pos = end
            after, after_end = self._peek_word()
            if after.upper() == "NULL":
                self.pos = after_end
                return Token(TokenType.OPERATOR, "IS NOT NULL", start_pos)
            self.pos = saved
        return Token(TokenType.KEYWORD, "IS", start_pos)

    def _word_token(self, word: str, start_pos: int) -> Token:
        upper = word.upper()
        if upper in _LOGICAL:
            return Token(_LOGICAL[upper], upper, start_pos)
        if upper in _WORD_OPERATORS:
            return Token(TokenType.OPERATOR, upper, start_pos)
        if upper == "IS":
            return self._read_null_test(start_pos)
        if upper == "NULL":
            return Token(TokenType.KEYWORD, "NULL", start_pos)
        if is_date_keyword(word):
            return Token(TokenType.DATE, word, start_pos)
        return Token(TokenType.IDENTIFIER, word, start_pos)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire filter string."""
        tokens: list[Token] = []

        while True:
            self._skip_whitespace()

            if self.pos >= self.length:
                tokens.append(Token(TokenType.EOF, "", self.pos))
                break

            ch = self.text[self.pos]
            start_pos = self.pos
            nxt = self.text[self.pos + 1] if self.pos + 1 < self.length else ""

            if ch == "(":
                tokens.append(Token(TokenType.LPAREN, "(", start_pos))
                self.pos += 1
            elif ch == ")":
                tokens.append(Token(TokenType.RPAREN, ")", start_pos))
                self.pos += 1
            elif ch == ",":
                tokens.append(Token(TokenType.COMMA, ",", start_pos))
                self.pos += 1
            elif ch == "=":
                tokens.append(Token(TokenType.OPERATOR, "=", start_pos))
                self.pos += 1
            elif ch == "!" and nxt == "=":
                tokens.append(Token(TokenType.OPERATOR, "!=", start_pos))
                self.pos += 2
            elif ch in "<>":
                op = ch + "=" if nxt == "=" else ch
                tokens.append(Token(TokenType.OPERATOR, op, start_pos))
                self.pos += len(op)
            elif ch in _QUOTES:
                value = self._read_quoted_string()
                tokens.append(Token(TokenType.STRING, value, start_pos))
            elif _is_word_char(ch):
                word = self._read_word()
                tokens.append(self._word_token(word, start_pos))
            else:
                raise UnexpectedCharacterError(
                    ch, offset=start_pos, text=self.text, hint=_HINTS.get(ch)
                )

        return tokens


def tokenize(text: str) -> list[Token]:
    """Scan `text` into tokens, ending with an EOF token.

    Raises:
        LexError: On an unterminated string or a character the language
            does not use.
    """
    return Tokenizer(text).tokenize()
