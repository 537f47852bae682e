"""Check a formula before it is assigned to a unit or a class.

These checks need no grades. Errors that depend on grades, such as dividing
by an item a student has not been graded on, surface during evaluation.

"""

import math
import re
from typing import Collection, Optional

from ..exceptions import BadRequest, DivisionByZero, FormulaError
from ._evaluator import Formula, evaluate_tree
from ._parser import BinaryOp, Number, iter_names, iter_nodes


_INDEX_REFERENCE = re.compile(r"^(?P<prefix>[A-Za-z]+)(?P<position>[1-9]\d*)$")


def _is_constant(node) -> bool:
    return not any(True for _ in iter_names(node))


def _check_literals_are_finite(formula: Formula):
    for node in iter_nodes(formula.tree):
        if isinstance(node, Number) and not math.isfinite(node.value):
            raise BadRequest(
                f"Formula {formula.text!r} contains a number that is too large."
            )


def _check_literal_division_by_zero(formula: Formula):
    for node in iter_nodes(formula.tree):
        if not (isinstance(node, BinaryOp) and node.operator == "/"):
            continue
        if not _is_constant(node.right):
            continue
        try:
            divisor = evaluate_tree(node.right, {}, formula.text)
        except DivisionByZero:
            divisor = 0
        except FormulaError as exc:
            raise BadRequest(f"Invalid formula: {exc}") from exc
        if divisor == 0:
            raise BadRequest(
                f"Formula {formula.text!r} divides by zero at position {node.position}."
            )


def validate_formula(
    text: Optional[str],
    slot_count: int,
    prefixes: Collection[str] = ("N",),
    aliases: Collection[str] = (),
    require_all: bool = False,
    max_length: Optional[int] = None,
) -> Formula:
    """Validate formula text against the number of available slots.

    Parameters
    ----------
    text : Optional[str]
        The formula to validate.
    slot_count : int
        How many sub-scores the formula can refer to: evaluation items for a
        unit formula, units for a class formula.
    prefixes : Collection[str]
        The prefixes of positional references, e.g., ``("N", "u")`` for a
        class formula. Default: ``("N",)``.
    aliases : Collection[str]
        Additional names that may be used, such as sanitized item names.
    require_all : bool
        If True, every slot from 1 to `slot_count` must be referenced (through
        any prefix). Default: False.
    max_length : Optional[int]
        Maximum formula length in characters.

    Returns
    -------
    Formula
        The parsed formula.

    Raises
    ------
    BadRequest
        If the formula is missing, malformed, refers to a slot that does not
        exist or to an unknown name, leaves slots unused when `require_all` is
        set, contains a number too large to represent, or divides by a literal
        zero.

    """
    if text is None or (isinstance(text, str) and not text.strip()):
        raise BadRequest("A formula is required for personalized averaging.")

    if slot_count < 1:
        raise BadRequest("A formula needs at least one value to refer to.")

    try:
        formula = Formula(text, max_length=max_length)
    except FormulaError as exc:
        raise BadRequest(f"Invalid formula: {exc}") from exc

    valid_references = ", ".join(
        f"{prefix}{i}" for prefix in prefixes for i in range(1, slot_count + 1)
    )

    used_positions = set()
    for name in formula.variables:
        if name in aliases:
            continue

        match = _INDEX_REFERENCE.match(name)
        if match is None or match.group("prefix") not in prefixes:
            raise BadRequest(
                f"Formula refers to unknown name '{name}'. "
                f"Valid references are: {valid_references}."
            )

        position = int(match.group("position"))
        if not 1 <= position <= slot_count:
            raise BadRequest(
                f"Formula refers to {name}, but there are only {slot_count} "
                f"values. Valid references are: {valid_references}."
            )
        used_positions.add(position)

    if require_all:
        missing = [i for i in range(1, slot_count + 1) if i not in used_positions]
        if missing:
            prefix = next(iter(prefixes))
            names = ", ".join(f"{prefix}{i}" for i in missing)
            raise BadRequest(
                f"Formula does not refer to every value. Missing: {names}."
            )

    _check_literals_are_finite(formula)
    _check_literal_division_by_zero(formula)

    return formula
