"""A small arithmetic language for teacher-supplied averaging formulas.

Formulas are parsed into a syntax tree and evaluated by walking it. Only
numbers, variables, ``+ - * /`` and parentheses are understood.

"""

from ._evaluator import Formula, evaluate, parse
from ._parser import MAX_DEPTH
from .binding import bind_items, bind_units, index_name
from .validation import validate_formula
from .._util import round_half_away, sanitize_name
from ..exceptions import (
    DivisionByZero,
    FormulaError,
    FormulaSyntaxError,
    UnknownVariable,
)

__all__ = [
    "Formula",
    "parse",
    "evaluate",
    "MAX_DEPTH",
    "bind_items",
    "bind_units",
    "index_name",
    "validate_formula",
    "round_half_away",
    "sanitize_name",
    "FormulaError",
    "FormulaSyntaxError",
    "UnknownVariable",
    "DivisionByZero",
]
