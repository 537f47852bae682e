"""The values produced by the averaging engine."""

import dataclasses
from collections import Counter
from typing import List, Optional

import pandas as pd

from ..exceptions import Error


@dataclasses.dataclass(frozen=True)
class ItemGrade:
    """A student's grade on one evaluation item; `value` is `None` if ungraded."""

    evaluation_item_id: str
    evaluation_item_name: str
    value: Optional[float]


@dataclasses.dataclass(frozen=True)
class UnitAverageResult:
    """One student's average in one unit, rounded to two decimal places."""

    student_id: str
    student_name: Optional[str]
    unit_id: str
    unit_name: str
    average: float
    grades: List[ItemGrade]


@dataclasses.dataclass(frozen=True)
class ClassAverageResult:
    """One student's class average and the unit averages it was computed from."""

    student_id: str
    student_name: Optional[str]
    class_id: str
    average: float
    unit_averages: List[UnitAverageResult]


@dataclasses.dataclass(frozen=True)
class StudentAverage:
    """A roster entry.

    If the student's average could not be computed, `average` is `None`,
    `unit_averages` is empty and `error` holds the reason.

    """

    student_id: str
    student_name: Optional[str]
    registration: Optional[str]
    average: Optional[float]
    unit_averages: List[UnitAverageResult]
    error: Optional[Error] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclasses.dataclass(frozen=True)
class RosterAverages:
    """The class averages of every student in a class, in enrollment order."""

    class_id: str
    class_name: str
    student_averages: List[StudentAverage]

    @property
    def succeeded(self) -> List[StudentAverage]:
        """The entries whose average was computed."""
        return [s for s in self.student_averages if s.ok]

    @property
    def failed(self) -> List[StudentAverage]:
        """The entries whose average could not be computed."""
        return [s for s in self.student_averages if not s.ok]

    def to_frame(self) -> pd.DataFrame:
        """The roster as a table with one row per student.

        Returns
        -------
        pandas.DataFrame
            Indexed by student id, with columns ``name`` and ``registration``,
            one column per unit holding the unit average, then ``average`` and
            ``error``. Unit columns are named after the unit, or
            ``"name (unit id)"`` when several units share a name. Failed
            students have `NaN` averages and the error message in ``error``.

        """
        units = {}
        for entry in self.student_averages:
            for unit in entry.unit_averages:
                units.setdefault(unit.unit_id, unit.unit_name)

        name_counts = Counter(units.values())
        columns = {
            unit_id: name if name_counts[name] == 1 else f"{name} ({unit_id})"
            for unit_id, name in units.items()
        }

        rows = []
        for entry in self.student_averages:
            row = {"name": entry.student_name, "registration": entry.registration}
            by_id = {u.unit_id: u.average for u in entry.unit_averages}
            for unit_id, column in columns.items():
                row[column] = by_id.get(unit_id, float("nan"))
            row["average"] = float("nan") if entry.average is None else entry.average
            row["error"] = None if entry.error is None else str(entry.error)
            rows.append(row)

        return pd.DataFrame(
            rows,
            index=pd.Index([s.student_id for s in self.student_averages], name="student_id"),
            columns=["name", "registration", *columns.values(), "average", "error"],
        )
