"""Averages of one student in one unit."""

import logging
from typing import Optional

from .._util import mean_or_zero, round_half_away
from ..core import Records, Student, Unit
from ..exceptions import FormulaError, NotFound
from ..formulas import bind_items, parse
from ._common import EngineOptions, load_enrolled_student, load_owned_class
from ._results import ItemGrade, UnitAverageResult


logger = logging.getLogger(__name__)


class UnitAverageCalculator:
    """Computes a student's average in a unit.

    In simple mode the average is the mean of the grades the student has;
    ungraded items are left out of both the sum and the count. In
    personalized mode the unit's formula is evaluated with ungraded items
    counted as zero. Either way the result is rounded to two decimal places,
    ties away from zero.

    Parameters
    ----------
    records : Records
        Where units, items, students and grades are looked up.
    options : Optional[EngineOptions]
        If not provided, default options are used.

    """

    def __init__(self, records: Records, options: Optional[EngineOptions] = None):
        self.records = records
        self.options = options if options is not None else EngineOptions()

    async def compute_unit_average(
        self, student_id: str, unit_id: str, teacher_id: str
    ) -> UnitAverageResult:
        """Compute one student's average in one unit.

        Parameters
        ----------
        student_id : str
        unit_id : str
        teacher_id : str
            The teacher asking. They must own the unit's class.

        Returns
        -------
        UnitAverageResult

        Raises
        ------
        NotFound
            If the unit, its class or the student does not exist. Checked in
            that order.
        Forbidden
            If the teacher does not own the class, or the student is not
            enrolled in it.
        FormulaError
            If the unit's formula cannot be evaluated. The error names the
            student and the unit.

        """
        unit = await self.records.find_unit(unit_id)
        if unit is None:
            raise NotFound("Unit", unit_id)

        school_class = await load_owned_class(self.records, unit.class_id, teacher_id)
        student = await load_enrolled_student(self.records, student_id, school_class)

        return await self.compute(student, unit)

    async def compute(self, student: Student, unit: Unit) -> UnitAverageResult:
        """Compute the average without checking ownership or enrollment."""
        items = await self.records.find_items_by_unit(unit.id)

        if not items:
            logger.debug("Unit %s has no evaluation items; average is 0.", unit.id)
            return UnitAverageResult(student.id, student.name, unit.id, unit.name, 0.0, [])

        grades = await self.records.find_grades_by_student_and_unit(student.id, unit.id)
        values = {grade.evaluation_item_id: grade.value for grade in grades}
        item_grades = [ItemGrade(item.id, item.name, values.get(item.id)) for item in items]

        if unit.is_personalized:
            raw = self._evaluate_formula(student, unit, item_grades)
        else:
            raw = mean_or_zero(g.value for g in item_grades if g.value is not None)

        average = round_half_away(raw)
        logger.debug(
            "Unit %s average for student %s: %s (%s mode, %d items, %d graded)",
            unit.id,
            student.id,
            average,
            unit.mode.value,
            len(items),
            len(values),
        )
        return UnitAverageResult(
            student.id, student.name, unit.id, unit.name, average, item_grades
        )

    def _evaluate_formula(self, student, unit, item_grades) -> float:
        try:
            formula = parse(unit.formula, max_length=self.options.max_formula_length)
            bindings = bind_items(
                (g.evaluation_item_name, g.value) for g in item_grades
            )
            return formula.evaluate(bindings)
        except FormulaError as exc:
            raise exc.with_context(
                hint="check the unit's formula",
                student_id=student.id,
                student_name=student.name,
                unit_id=unit.id,
                unit_name=unit.name,
            ) from exc
