"""Split formula text into tokens."""

import dataclasses
import enum
import re
from typing import List

from ..exceptions import FormulaSyntaxError


class TokenKind(enum.Enum):
    NUMBER = "number"
    NAME = "name"
    OPERATOR = "operator"
    LPAREN = "("
    RPAREN = ")"
    END = "end"


@dataclasses.dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int


_TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<number>\d+\.?\d*|\.\d+)
    | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<operator>[-+*/])
    | (?P<lparen>\()
    | (?P<rparen>\))
    """,
    re.VERBOSE,
)

_KINDS = {
    "number": TokenKind.NUMBER,
    "name": TokenKind.NAME,
    "operator": TokenKind.OPERATOR,
    "lparen": TokenKind.LPAREN,
    "rparen": TokenKind.RPAREN,
}


def tokenize(text: str) -> List[Token]:
    """Convert formula text into a list of tokens ending with an END token.

    Raises
    ------
    FormulaSyntaxError
        If the text contains a character that cannot start a token.

    """
    tokens = []
    position = 0
    while position < len(text):
        match = _TOKEN_PATTERN.match(text, position)
        if match is None:
            raise FormulaSyntaxError(
                f"Unexpected character {text[position]!r}", text, position=position
            )

        group = match.lastgroup
        if group != "space":
            tokens.append(Token(_KINDS[group], match.group(), position))
        position = match.end()

    tokens.append(Token(TokenKind.END, "", len(text)))
    return tokens
