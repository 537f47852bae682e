"""The records that make up a class: units, evaluation items and grades."""

import dataclasses
import enum
from typing import Optional, Union

from ..exceptions import BadRequest


MIN_GRADE = 0.0
MAX_GRADE = 10.0


class AveragingMode(enum.Enum):
    """How the sub-scores of a unit or class are combined into one average."""

    SIMPLE = "simple"
    PERSONALIZED = "personalized"

    @classmethod
    def coerce(cls, value: Union["AveragingMode", str]) -> "AveragingMode":
        """Convert a mode or its (case-insensitive) string value to a mode.

        Raises
        ------
        BadRequest
            If the value does not name a mode.

        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        choices = ", ".join(repr(m.value) for m in cls)
        raise BadRequest(f"Unknown averaging mode {value!r}; expected one of {choices}.")


def _check_mode_and_formula(kind: str, mode, formula: Optional[str]):
    mode = AveragingMode.coerce(mode)
    has_formula = formula is not None and formula.strip() != ""
    if mode is AveragingMode.PERSONALIZED and not has_formula:
        raise BadRequest(f"{kind} uses personalized averaging but has no formula.")
    if mode is AveragingMode.SIMPLE and has_formula:
        raise BadRequest(f"{kind} uses simple averaging and cannot have a formula.")
    return mode, (formula if has_formula else None)


@dataclasses.dataclass(frozen=True)
class SchoolClass:
    """A class taught by one teacher.

    Attributes
    ----------
    id : str
        Identifier of the class.
    name : str
        Display name, e.g., "Mathematics 9A".
    teacher_id : str
        The teacher who owns the class. Only they may compute its averages.
    mode : AveragingMode
        How unit averages combine into the class average.
    formula : Optional[str]
        The class formula. Present exactly when `mode` is personalized.

    """

    id: str
    name: str
    teacher_id: str
    mode: AveragingMode = AveragingMode.SIMPLE
    formula: Optional[str] = None

    def __post_init__(self):
        mode, formula = _check_mode_and_formula(f"Class {self.id}", self.mode, self.formula)
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "formula", formula)

    @property
    def is_personalized(self) -> bool:
        return self.mode is AveragingMode.PERSONALIZED


@dataclasses.dataclass(frozen=True)
class Unit:
    """A group of evaluation items with its own averaging rule."""

    id: str
    class_id: str
    name: str
    mode: AveragingMode = AveragingMode.SIMPLE
    formula: Optional[str] = None

    def __post_init__(self):
        mode, formula = _check_mode_and_formula(f"Unit {self.id}", self.mode, self.formula)
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "formula", formula)

    @property
    def is_personalized(self) -> bool:
        return self.mode is AveragingMode.PERSONALIZED


@dataclasses.dataclass(frozen=True)
class EvaluationItem:
    """A single graded component of a unit, such as "Test 1"."""

    id: str
    unit_id: str
    name: str


@dataclasses.dataclass(frozen=True)
class Grade:
    """A student's grade on one evaluation item.

    Attributes
    ----------
    student_id : str
    evaluation_item_id : str
    value : float
        Between :data:`MIN_GRADE` and :data:`MAX_GRADE`, inclusive.
    comment : Optional[str]

    """

    student_id: str
    evaluation_item_id: str
    value: float
    comment: Optional[str] = None
