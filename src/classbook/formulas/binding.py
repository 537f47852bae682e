"""Build the variables a formula can refer to.

A formula never sees entity ids. Sub-scores are exposed by their position:

- In a unit formula, the i-th evaluation item (1-based) is bound to ``N{i}``
  and also to its sanitized name (lowercased, whitespace replaced by ``_``),
  so that an item named "Final Exam" can be used as ``final_exam``.
- In a class formula, the i-th unit average is bound to ``N{i}`` and ``u{i}``.
  Units have no name-based alias.

A missing grade is bound to zero, so a formula can refer to every slot
unconditionally. Note that this differs from the simple mean, which ignores
missing grades instead of counting them as zero.

"""

import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .._util import sanitize_name


logger = logging.getLogger(__name__)


def index_name(position: int, prefix: str = "N") -> str:
    """The positional variable name for a 1-based position, e.g., ``N3``."""
    return f"{prefix}{position}"


def bind_items(items: Iterable[Tuple[str, Optional[float]]]) -> Dict[str, float]:
    """Bind an ordered list of evaluation items to formula variables.

    Parameters
    ----------
    items : Iterable[Tuple[str, Optional[float]]]
        ``(name, value)`` pairs in item order. A value of `None` means the
        student has no grade for that item.

    Returns
    -------
    dict[str, float]
        Maps ``N1``, ``N2``, ... and each item's sanitized name to its value.
        When two names sanitize to the same alias, the earlier item keeps it.
        Positional names always take precedence over aliases.

    """
    items = list(items)
    bindings = {}
    aliases = {}

    for position, (name, value) in enumerate(items, start=1):
        value = 0.0 if value is None else float(value)
        bindings[index_name(position)] = value

        alias = sanitize_name(name)
        if not alias:
            continue
        if alias in aliases:
            logger.debug(
                "Item %r sanitizes to %r, already bound to item %d; skipping alias.",
                name,
                alias,
                aliases[alias],
            )
            continue
        aliases[alias] = position

    for alias, position in aliases.items():
        bindings.setdefault(alias, bindings[index_name(position)])

    return bindings


def bind_units(averages: Sequence[float]) -> Dict[str, float]:
    """Bind an ordered list of unit averages to class formula variables.

    Example
    -------

    >>> bind_units([7.0, 6.5])
    {'N1': 7.0, 'u1': 7.0, 'N2': 6.5, 'u2': 6.5}

    """
    bindings = {}
    for position, average in enumerate(averages, start=1):
        bindings[index_name(position)] = float(average)
        bindings[index_name(position, "u")] = float(average)
    return bindings
