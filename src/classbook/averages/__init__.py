"""Unit, class and roster averages."""

from ._common import EngineOptions
from ._results import (
    ItemGrade,
    UnitAverageResult,
    ClassAverageResult,
    StudentAverage,
    RosterAverages,
)
from ._unit import UnitAverageCalculator
from ._class import ClassAverageCalculator
from ._roster import RosterAverageAggregator

__all__ = [
    "EngineOptions",
    "ItemGrade",
    "UnitAverageResult",
    "ClassAverageResult",
    "StudentAverage",
    "RosterAverages",
    "UnitAverageCalculator",
    "ClassAverageCalculator",
    "RosterAverageAggregator",
]
