"""Averages of one student across all units of a class."""

import asyncio
import logging
from typing import List, Optional

from .._util import mean_or_zero, round_half_away
from ..core import Records, SchoolClass, Student, Unit
from ..exceptions import FormulaError
from ..formulas import bind_units, parse
from ._common import EngineOptions, load_enrolled_student, load_owned_class, with_timeout
from ._results import ClassAverageResult, UnitAverageResult
from ._unit import UnitAverageCalculator


logger = logging.getLogger(__name__)


class ClassAverageCalculator:
    """Computes a student's class average from their unit averages.

    Every unit of the class is computed concurrently. In simple mode the
    class average is the mean of all unit averages, including units that
    averaged zero. In personalized mode the class formula is evaluated with
    the i-th unit average bound to ``N{i}`` and ``u{i}``.

    A formula error, in the class formula or any unit formula, is raised to
    the caller. The engine never falls back to the simple mean.

    Parameters
    ----------
    records : Records
    options : Optional[EngineOptions]

    """

    def __init__(self, records: Records, options: Optional[EngineOptions] = None):
        self.records = records
        self.options = options if options is not None else EngineOptions()
        self.unit_calculator = UnitAverageCalculator(records, self.options)

    async def compute_class_average(
        self, student_id: str, class_id: str, teacher_id: str
    ) -> ClassAverageResult:
        """Compute one student's class average.

        Raises
        ------
        NotFound
            If the class or the student does not exist.
        Forbidden
            If the teacher does not own the class, or the student is not
            enrolled in it.
        FormulaError
            If the class formula or a unit formula cannot be evaluated.
        ComputationTimeout
            If a unit takes longer than :attr:`EngineOptions.unit_timeout`.

        """
        school_class = await load_owned_class(self.records, class_id, teacher_id)
        student = await load_enrolled_student(self.records, student_id, school_class)
        return await self.compute(student, school_class)

    async def compute(
        self,
        student: Student,
        school_class: SchoolClass,
        units: Optional[List[Unit]] = None,
    ) -> ClassAverageResult:
        """Compute the class average without checking ownership or enrollment.

        `units` may be passed when the caller has already looked them up.

        """
        if units is None:
            units = await self.records.find_units_by_class(school_class.id)

        if not units:
            logger.debug("Class %s has no units; average is 0.", school_class.id)
            return ClassAverageResult(student.id, student.name, school_class.id, 0.0, [])

        unit_averages = await asyncio.gather(
            *(self._compute_unit(student, unit) for unit in units)
        )

        if school_class.is_personalized:
            raw = self._evaluate_formula(student, school_class, unit_averages)
        else:
            raw = mean_or_zero(u.average for u in unit_averages)

        average = round_half_away(raw)
        logger.debug(
            "Class %s average for student %s: %s (%s mode, %d units)",
            school_class.id,
            student.id,
            average,
            school_class.mode.value,
            len(units),
        )
        return ClassAverageResult(
            student.id, student.name, school_class.id, average, list(unit_averages)
        )

    async def _compute_unit(self, student: Student, unit: Unit) -> UnitAverageResult:
        return await with_timeout(
            self.unit_calculator.compute(student, unit),
            self.options.unit_timeout,
            f"unit {unit.id} for student {student.id}",
        )

    def _evaluate_formula(self, student, school_class, unit_averages) -> float:
        try:
            formula = parse(school_class.formula, max_length=self.options.max_formula_length)
            return formula.evaluate(bind_units([u.average for u in unit_averages]))
        except FormulaError as exc:
            raise exc.with_context(
                hint="check the class's formula",
                student_id=student.id,
                student_name=student.name,
                class_id=school_class.id,
                class_name=school_class.name,
            ) from exc
