"""Recursive-descent parser producing a syntax tree for a formula.

The grammar is::

    expr   := term (("+" | "-") term)*
    term   := factor (("*" | "/") factor)*
    factor := ("+" | "-") factor | NUMBER | NAME | "(" expr ")"

All binary operators are left-associative.

"""

import dataclasses
from typing import Iterator, List, NoReturn, Union

from ..exceptions import FormulaSyntaxError
from ._lexer import Token, TokenKind, tokenize


#: the deepest nesting of parentheses and signs a formula may contain
MAX_DEPTH = 100


# syntax tree ==========================================================================


@dataclasses.dataclass(frozen=True)
class Number:
    value: float


@dataclasses.dataclass(frozen=True)
class Name:
    name: str
    position: int = dataclasses.field(default=0, compare=False)


@dataclasses.dataclass(frozen=True)
class UnaryOp:
    operator: str
    operand: "Node"


@dataclasses.dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: "Node"
    right: "Node"
    position: int = dataclasses.field(default=0, compare=False)


Node = Union[Number, Name, UnaryOp, BinaryOp]


# parser ===============================================================================


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens: List[Token] = tokenize(text)
        self.index = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.current
        self.index += 1
        return token

    def _fail(self, message: str, token: Token) -> NoReturn:
        raise FormulaSyntaxError(message, self.text, position=token.position)

    def _describe(self, token: Token) -> str:
        if token.kind is TokenKind.END:
            return "end of formula"
        return repr(token.text)

    def parse(self) -> Node:
        if self.current.kind is TokenKind.END:
            self._fail("Formula is empty", self.current)

        tree = self._expr()

        if self.current.kind is not TokenKind.END:
            self._fail(f"Unexpected {self._describe(self.current)}", self.current)

        return tree

    def _expr(self) -> Node:
        node = self._term()
        while self.current.kind is TokenKind.OPERATOR and self.current.text in "+-":
            operator = self._advance()
            node = BinaryOp(operator.text, node, self._term(), operator.position)
        return node

    def _term(self) -> Node:
        node = self._factor()
        while self.current.kind is TokenKind.OPERATOR and self.current.text in "*/":
            operator = self._advance()
            node = BinaryOp(operator.text, node, self._factor(), operator.position)
        return node

    def _factor(self) -> Node:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            self._fail("Formula is nested too deeply", self.current)

        try:
            return self._primary()
        finally:
            self.depth -= 1

    def _primary(self) -> Node:
        token = self.current

        if token.kind is TokenKind.OPERATOR and token.text in "+-":
            self._advance()
            return UnaryOp(token.text, self._factor())

        if token.kind is TokenKind.NUMBER:
            self._advance()
            return Number(float(token.text))

        if token.kind is TokenKind.NAME:
            self._advance()
            return Name(token.text, token.position)

        if token.kind is TokenKind.LPAREN:
            self._advance()
            node = self._expr()
            if self.current.kind is not TokenKind.RPAREN:
                self._fail(
                    f"Expected ')' but found {self._describe(self.current)}",
                    self.current,
                )
            self._advance()
            return node

        self._fail(f"Expected a number, name or '(' but found {self._describe(token)}", token)


def parse_tree(text: str) -> Node:
    """Parse formula text into a syntax tree.

    Raises
    ------
    FormulaSyntaxError
        If the text is not a well-formed arithmetic expression.

    """
    return _Parser(text).parse()


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield every node in the tree, parents before children, left to right."""
    stack = [node]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, UnaryOp):
            stack.append(node.operand)
        elif isinstance(node, BinaryOp):
            stack.append(node.right)
            stack.append(node.left)


def iter_names(node: Node) -> Iterator[Name]:
    """Yield every :class:`Name` node in the tree, left to right."""
    return (n for n in iter_nodes(node) if isinstance(n, Name))
