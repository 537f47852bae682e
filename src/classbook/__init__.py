"""A package for computing unit and class averages from teacher-defined rules."""

from .core import (
    AveragingMode,
    SchoolClass,
    Unit,
    EvaluationItem,
    Grade,
    Student,
    Students,
    Gradebook,
    Records,
    InMemoryRecords,
    MIN_GRADE,
    MAX_GRADE,
)
from .averages import (
    EngineOptions,
    UnitAverageCalculator,
    ClassAverageCalculator,
    RosterAverageAggregator,
    ItemGrade,
    UnitAverageResult,
    ClassAverageResult,
    StudentAverage,
    RosterAverages,
)
from .reports import TopPerformersReporter

from . import exceptions
from . import formulas
from . import reports
from . import summarize

__all__ = [
    "AveragingMode",
    "SchoolClass",
    "Unit",
    "EvaluationItem",
    "Grade",
    "Student",
    "Students",
    "Gradebook",
    "Records",
    "InMemoryRecords",
    "MIN_GRADE",
    "MAX_GRADE",
    "EngineOptions",
    "UnitAverageCalculator",
    "ClassAverageCalculator",
    "RosterAverageAggregator",
    "ItemGrade",
    "UnitAverageResult",
    "ClassAverageResult",
    "StudentAverage",
    "RosterAverages",
    "TopPerformersReporter",
    "exceptions",
    "formulas",
    "reports",
    "summarize",
]
