from ._entities import (
    AveragingMode,
    SchoolClass,
    Unit,
    EvaluationItem,
    Grade,
    MIN_GRADE,
    MAX_GRADE,
)
from ._student import Student, Students
from ._gradebook import Gradebook
from ._records import Records, InMemoryRecords

__all__ = [
    "AveragingMode",
    "SchoolClass",
    "Unit",
    "EvaluationItem",
    "Grade",
    "MIN_GRADE",
    "MAX_GRADE",
    "Student",
    "Students",
    "Gradebook",
    "Records",
    "InMemoryRecords",
]
