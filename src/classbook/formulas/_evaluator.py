"""Evaluate formulas by walking their syntax tree."""

import math
from typing import Mapping, Optional, Tuple

from ..exceptions import DivisionByZero, FormulaError, FormulaSyntaxError, UnknownVariable
from ._parser import BinaryOp, Name, Node, Number, UnaryOp, iter_names, parse_tree


def _apply(operator: str, left: float, right: float, formula: str) -> float:
    if operator == "+":
        return left + right
    if operator == "-":
        return left - right
    if operator == "*":
        return left * right
    if right == 0:
        raise DivisionByZero(formula)
    return left / right


def evaluate_tree(node: Node, bindings: Mapping[str, float], formula: str = "") -> float:
    """Evaluate a syntax tree against a mapping of variable values.

    The tree is walked with an explicit stack, so long chains such as
    ``N1 + N2 + ... + N300`` do not approach the recursion limit.

    Raises
    ------
    UnknownVariable
        If a name in the tree is not in `bindings`.
    DivisionByZero
        If a divisor evaluates to zero.

    """
    values = []
    # (node, visited) pairs; a node is combined once its children are evaluated
    stack = [(node, False)]

    while stack:
        current, visited = stack.pop()

        if isinstance(current, Number):
            values.append(current.value)

        elif isinstance(current, Name):
            try:
                values.append(float(bindings[current.name]))
            except KeyError:
                raise UnknownVariable(current.name, formula) from None

        elif isinstance(current, UnaryOp):
            if visited:
                operand = values.pop()
                values.append(-operand if current.operator == "-" else operand)
            else:
                stack.append((current, True))
                stack.append((current.operand, False))

        elif isinstance(current, BinaryOp):
            if visited:
                right = values.pop()
                left = values.pop()
                values.append(_apply(current.operator, left, right, formula))
            else:
                stack.append((current, True))
                stack.append((current.right, False))
                stack.append((current.left, False))

        else:
            raise TypeError(f"Unexpected node in formula tree: {current!r}")

    (result,) = values
    if not math.isfinite(result):
        raise FormulaError("Formula does not evaluate to a finite number.", formula)
    return result


class Formula:
    """A parsed formula that can be evaluated repeatedly.

    Parsing happens once, when the object is created, so a syntax error is
    raised immediately rather than on first evaluation.

    Parameters
    ----------
    text : str
        The formula, e.g., ``"N1*0.4 + N2*0.6"``.
    max_length : Optional[int]
        If given, formulas longer than this many characters are rejected.

    Raises
    ------
    FormulaSyntaxError
        If the text is not a well-formed arithmetic expression.

    Example
    -------

    >>> formula = Formula("(N1 + N2) / 2")
    >>> formula.variables
    ('N1', 'N2')
    >>> formula.evaluate({"N1": 6, "N2": 9})
    7.5

    """

    def __init__(self, text: str, max_length: Optional[int] = None):
        if not isinstance(text, str):
            raise FormulaSyntaxError(f"Formula must be a string, not {type(text).__name__}")
        if max_length is not None and len(text) > max_length:
            raise FormulaSyntaxError(
                f"Formula is longer than {max_length} characters", text
            )
        self.text = text
        self.tree = parse_tree(text)

    def __repr__(self):
        return f"Formula({self.text!r})"

    def __eq__(self, other):
        if not isinstance(other, Formula):
            return NotImplemented
        return self.tree == other.tree

    def __hash__(self):
        return hash(self.tree)

    @property
    def variables(self) -> Tuple[str, ...]:
        """The names used by the formula, in order of first appearance."""
        seen = dict.fromkeys(node.name for node in iter_names(self.tree))
        return tuple(seen)

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        """Evaluate the formula with the given variable values."""
        return evaluate_tree(self.tree, bindings, self.text)


def parse(text: str, max_length: Optional[int] = None) -> Formula:
    """Parse formula text. See :class:`Formula`."""
    return Formula(text, max_length=max_length)


def evaluate(text: str, bindings: Mapping[str, float]) -> float:
    """Parse and evaluate a formula in one step.

    Parameters
    ----------
    text : str
        The formula.
    bindings : Mapping[str, float]
        The value of every variable the formula refers to.

    Returns
    -------
    float
        The unrounded result.

    Raises
    ------
    FormulaSyntaxError
        If the formula is malformed.
    UnknownVariable
        If the formula refers to a name missing from `bindings`.
    DivisionByZero
        If the formula divides by zero.

    Example
    -------

    >>> evaluate("N1*0.5 + N2*0.5", {"N1": 8, "N2": 6})
    7.0

    """
    return Formula(text).evaluate(bindings)
