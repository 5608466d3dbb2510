from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Token types for the filter language."""

    IDENTIFIER = auto()  # Bare word: field name or unquoted value
    STRING = auto()  # 'quoted' or "quoted"
    DATE = auto()  # today, tomorrow+1, 2024-12-25, ...
    OPERATOR = auto()  # =, !=, <, >, <=, >=, LIKE, CONTAINS, IN, IS NULL, IS NOT NULL
    AND = auto()
    OR = auto()
    NOT = auto()
    KEYWORD = auto()  # IS or NULL outside a null test
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A token from the filter string."""

    type: TokenType
    value: str
    pos: int  # Character offset in the original string

    def describe(self) -> str:
        if self.type is TokenType.EOF:
            return "end of input"
        return self.value
