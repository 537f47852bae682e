"""Private helper utilities."""

import decimal
import re

import pandas as pd


_WHITESPACE = re.compile(r"\s+")


def round_half_away(value: float, places: int = 2) -> float:
    """Round to a number of decimal places, breaking ties away from zero.

    The decimal representation of the float is rounded rather than its binary
    value, so that ``7.005`` becomes ``7.01`` even though ``7.005 * 100`` is
    slightly less than ``700.5`` in binary floating point.

    Parameters
    ----------
    value : float
        The number to round.
    places : int
        The number of decimal places to keep. Default: 2.

    Returns
    -------
    float

    """
    quantum = decimal.Decimal(1).scaleb(-places)
    rounded = decimal.Decimal(repr(float(value))).quantize(
        quantum, rounding=decimal.ROUND_HALF_UP
    )
    # avoid reporting -0.0
    return float(rounded) + 0.0


def sanitize_name(name: str) -> str:
    """Lowercase a name and replace internal whitespace with underscores."""
    return _WHITESPACE.sub("_", name.strip()).lower()


def mean_or_zero(values) -> float:
    """The arithmetic mean of the values, or zero if there are none."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def median_or_zero(values) -> float:
    values = pd.Series(list(values), dtype=float)
    if values.empty:
        return 0.0
    return float(values.median())

