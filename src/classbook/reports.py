"""Reports built on roster averages: top performers and descriptive statistics."""

import dataclasses
import logging
from typing import List, Optional

import pandas as pd

from . import summarize
from ._util import median_or_zero, round_half_away
from .averages import EngineOptions, RosterAverageAggregator, RosterAverages
from .averages._common import load_owned_class
from .core import MAX_GRADE, Records
from .exceptions import BadRequest, Forbidden, NotFound


logger = logging.getLogger(__name__)

DEFAULT_TOP_COUNT = 10
DEFAULT_PASS_MARK = 5.0

# (min, max) of each range; all but the last exclude their max
GRADE_RANGES = ((0.0, 4.0), (4.0, 6.0), (6.0, 8.0), (8.0, MAX_GRADE))


# result types =========================================================================


@dataclasses.dataclass(frozen=True)
class RankedStudent:
    """A student's position in a :class:`TopStudentsReport`.

    `unit_average` is set only when the report ranks a single unit.

    """

    rank: int
    student_id: str
    student_name: Optional[str]
    registration: Optional[str]
    average: float
    unit_average: Optional[float] = None


@dataclasses.dataclass(frozen=True)
class TopStudentsReport:
    class_id: str
    class_name: str
    unit_id: Optional[str]
    unit_name: Optional[str]
    total_students: int
    top_students: List[RankedStudent]


@dataclasses.dataclass(frozen=True)
class ClassSummary:
    """Descriptive statistics of the class averages of a roster.

    `approval_rate` is a percentage of `total_students`.

    """

    class_id: str
    class_name: str
    class_average: float
    total_students: int
    students_approved: int
    approval_rate: float
    highest_grade: float
    lowest_grade: float
    median_grade: float


@dataclasses.dataclass(frozen=True)
class UnitStatistics:
    unit_id: str
    unit_name: str
    average: float
    highest_grade: float
    lowest_grade: float
    median_grade: float


@dataclasses.dataclass(frozen=True)
class GradeRange:
    min: float
    max: float
    count: int
    percentage: float


# private helpers ======================================================================


def _class_averages(roster: RosterAverages) -> pd.Series:
    """Class averages of the students that have one, indexed by student id."""
    return pd.Series(
        {s.student_id: s.average for s in roster.succeeded}, dtype=float
    )


def _unit_averages(roster: RosterAverages, unit_id: str) -> pd.Series:
    """Averages in one unit, indexed by student id, in roster order."""
    averages = {}
    for entry in roster.succeeded:
        for unit in entry.unit_averages:
            if unit.unit_id == unit_id:
                averages[entry.student_id] = unit.average
    return pd.Series(averages, dtype=float)


def _describe(values: pd.Series):
    """Mean, max, min and median, rounded; all zero for an empty series."""
    if values.empty:
        return 0.0, 0.0, 0.0, 0.0
    return (
        round_half_away(values.mean()),
        round_half_away(values.max()),
        round_half_away(values.min()),
        round_half_away(median_or_zero(values)),
    )


# statistics ===========================================================================


def class_summary(roster: RosterAverages, pass_mark: float = DEFAULT_PASS_MARK) -> ClassSummary:
    """Summarize the class averages of a roster.

    Students whose average could not be computed count towards
    `total_students` but not towards any statistic, so they are never
    approved.

    Parameters
    ----------
    roster : RosterAverages
        As computed by :meth:`RosterAverageAggregator.compute_all_averages`.
    pass_mark : float
        The lowest class average that approves a student. Default: 5.0.

    Returns
    -------
    ClassSummary

    """
    averages = _class_averages(roster)
    total = len(roster.student_averages)
    approved = int((averages >= pass_mark).sum())
    mean, highest, lowest, median = _describe(averages)

    return ClassSummary(
        class_id=roster.class_id,
        class_name=roster.class_name,
        class_average=mean,
        total_students=total,
        students_approved=approved,
        approval_rate=round_half_away(approved / total * 100) if total else 0.0,
        highest_grade=highest,
        lowest_grade=lowest,
        median_grade=median,
    )


def unit_statistics(roster: RosterAverages) -> List[UnitStatistics]:
    """Descriptive statistics of every unit's averages.

    Units are listed in class order, as they appear in the roster's entries.
    A roster in which no student has an average yields an empty list.

    """
    units = {}
    for entry in roster.succeeded:
        for unit in entry.unit_averages:
            units.setdefault(unit.unit_id, unit.unit_name)

    result = []
    for unit_id, unit_name in units.items():
        mean, highest, lowest, median = _describe(_unit_averages(roster, unit_id))
        result.append(UnitStatistics(unit_id, unit_name, mean, highest, lowest, median))
    return result


def grade_distribution(
    roster: RosterAverages, unit_id: Optional[str] = None
) -> List[GradeRange]:
    """Count the averages that fall in each grade range.

    The ranges are ``[0, 4)``, ``[4, 6)``, ``[6, 8)`` and ``[8, 10]``.

    Parameters
    ----------
    roster : RosterAverages
    unit_id : Optional[str]
        If given, the unit averages of this unit are counted instead of the
        class averages.

    Returns
    -------
    list[GradeRange]
        One entry per range, with the percentage of all counted averages.
        Empty if there are no averages to count.

    """
    if unit_id is None:
        averages = _class_averages(roster)
    else:
        averages = _unit_averages(roster, unit_id)

    if averages.empty:
        return []

    distribution = []
    for i, (low, high) in enumerate(GRADE_RANGES):
        if i == len(GRADE_RANGES) - 1:
            in_range = (averages >= low) & (averages <= high)
        else:
            in_range = (averages >= low) & (averages < high)
        count = int(in_range.sum())
        distribution.append(
            GradeRange(low, high, count, round_half_away(count / len(averages) * 100))
        )
    return distribution


# TopPerformersReporter ================================================================


class TopPerformersReporter:
    """Ranks the students of a class by class average or by one unit's average.

    Parameters
    ----------
    records : Records
    options : Optional[EngineOptions]
        Passed on to the :class:`RosterAverageAggregator` that computes the
        averages.

    """

    def __init__(self, records: Records, options: Optional[EngineOptions] = None):
        self.records = records
        self.aggregator = RosterAverageAggregator(records, options)

    async def top_students(
        self,
        class_id: str,
        teacher_id: str,
        count: int = DEFAULT_TOP_COUNT,
        unit_id: Optional[str] = None,
    ) -> TopStudentsReport:
        """The best students of a class.

        Students with equal averages keep their enrollment order. Students
        whose average could not be computed are left out of the ranking but
        are counted in :attr:`TopStudentsReport.total_students`.

        Parameters
        ----------
        class_id : str
        teacher_id : str
            The teacher asking. They must own the class.
        count : int
            How many students to return at most. Default: 10.
        unit_id : Optional[str]
            If given, students are ranked by their average in this unit.

        Returns
        -------
        TopStudentsReport

        Raises
        ------
        BadRequest
            If `count` is negative.
        NotFound
            If the class or the unit does not exist.
        Forbidden
            If the teacher does not own the class, or the unit belongs to
            another class.

        """
        if count < 0:
            raise BadRequest(f"count must not be negative, not {count}.")

        await load_owned_class(self.records, class_id, teacher_id)

        unit_name = None
        if unit_id is not None:
            unit = await self.records.find_unit(unit_id)
            if unit is None:
                raise NotFound("Unit", unit_id)
            if unit.class_id != class_id:
                raise Forbidden(f"Unit {unit_id} does not belong to class {class_id}.")
            unit_name = unit.name

        roster = await self.aggregator.compute_all_averages(class_id, teacher_id)

        class_averages = _class_averages(roster)
        if unit_id is None:
            scores = class_averages
            unit_averages = None
        else:
            unit_averages = _unit_averages(roster, unit_id)
            scores = unit_averages

        entries = {s.student_id: s for s in roster.student_averages}
        top = []
        for student_id, position in summarize.rank(scores).head(count).items():
            entry = entries[student_id]
            top.append(
                RankedStudent(
                    rank=int(position),
                    student_id=student_id,
                    student_name=entry.student_name,
                    registration=entry.registration,
                    average=float(class_averages[student_id]),
                    unit_average=(
                        None if unit_averages is None else float(unit_averages[student_id])
                    ),
                )
            )

        logger.debug(
            "Ranked %d of %d students of class %s%s.",
            len(top),
            len(roster.student_averages),
            class_id,
            "" if unit_id is None else f" by unit {unit_id}",
        )
        return TopStudentsReport(
            class_id=roster.class_id,
            class_name=roster.class_name,
            unit_id=unit_id,
            unit_name=unit_name,
            total_students=len(roster.student_averages),
            top_students=top,
        )
