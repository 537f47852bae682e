"""Class averages of every student in a class."""

import asyncio
import logging
from typing import List, Optional

from ..core import Records, SchoolClass, Student, Unit
from ..exceptions import ComputationTimeout, FormulaError
from ._class import ClassAverageCalculator
from ._common import EngineOptions, load_owned_class, with_timeout
from ._results import RosterAverages, StudentAverage


logger = logging.getLogger(__name__)


class RosterAverageAggregator:
    """Computes the class average of every student in a class.

    Students are computed concurrently, at most
    :attr:`EngineOptions.max_concurrency` at a time. A student whose average
    cannot be computed, because of a formula error or a timeout, does not
    stop the others: their entry carries the error instead of an average.

    Parameters
    ----------
    records : Records
    options : Optional[EngineOptions]

    Example
    -------

    .. code::

        aggregator = RosterAverageAggregator(records)
        roster = await aggregator.compute_all_averages("c1", teacher_id="t1")
        roster.to_frame()

    """

    def __init__(self, records: Records, options: Optional[EngineOptions] = None):
        self.records = records
        self.options = options if options is not None else EngineOptions()
        self.class_calculator = ClassAverageCalculator(records, self.options)

    async def compute_all_averages(self, class_id: str, teacher_id: str) -> RosterAverages:
        """Compute the class average of every enrolled student.

        Parameters
        ----------
        class_id : str
        teacher_id : str
            The teacher asking. They must own the class.

        Returns
        -------
        RosterAverages
            One entry per student, in enrollment order. Empty if the class
            has no students.

        Raises
        ------
        NotFound
            If the class does not exist.
        Forbidden
            If the teacher does not own the class.

        """
        school_class = await load_owned_class(self.records, class_id, teacher_id)
        students = await self.records.find_students_by_class(class_id)
        units = await self.records.find_units_by_class(class_id)

        semaphore = asyncio.Semaphore(self.options.max_concurrency)

        async def compute(student):
            async with semaphore:
                return await self._compute_student(student, school_class, units)

        student_averages = await asyncio.gather(*(compute(s) for s in students))

        roster = RosterAverages(school_class.id, school_class.name, list(student_averages))
        logger.info(
            "Computed averages for %d students of class %s; %d failed.",
            len(roster.student_averages),
            class_id,
            len(roster.failed),
        )
        return roster

    async def _compute_student(
        self, student: Student, school_class: SchoolClass, units: List[Unit]
    ) -> StudentAverage:
        try:
            result = await with_timeout(
                self.class_calculator.compute(student, school_class, units),
                self.options.student_timeout,
                f"the class average of student {student.id}",
            )
        except (FormulaError, ComputationTimeout) as exc:
            logger.warning(
                "Could not compute the average of student %s in class %s: %s",
                student.id,
                school_class.id,
                exc,
            )
            return StudentAverage(
                student.id, student.name, student.registration, None, [], error=exc
            )

        return StudentAverage(
            student.id,
            student.name,
            student.registration,
            result.average,
            result.unit_averages,
        )
