"""A type for managing the records of one class."""

import copy
import dataclasses
import math
from numbers import Real
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from .._util import sanitize_name
from ..exceptions import BadRequest, NotFound
from ..formulas import validate_formula
from ._entities import (
    MAX_GRADE,
    MIN_GRADE,
    AveragingMode,
    EvaluationItem,
    Grade,
    SchoolClass,
    Unit,
)
from ._student import Student, Students


# type alias for the ways a grade can be given to :meth:`Gradebook.upsert_grades`
GradeEntry = Union[Grade, Tuple[str, float], Tuple[str, float, Optional[str]]]


# private helper functions =============================================================


def _empty_table(dtype) -> pd.DataFrame:
    return pd.DataFrame(
        index=pd.Index([], dtype=object), columns=pd.Index([], dtype=object), dtype=dtype
    )


def _check_grade_value(value) -> float:
    """Make sure that a grade is a number between the bounds. Returns it as a float."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise BadRequest(f"Grade must be a number, not {value!r}.")

    value = float(value)
    if math.isnan(value) or not MIN_GRADE <= value <= MAX_GRADE:
        raise BadRequest(
            f"Grade must be between {MIN_GRADE:g} and {MAX_GRADE:g}, not {value!r}."
        )
    return value


def _unpack_entry(student_id: str, entry: GradeEntry) -> Grade:
    """Convert a batch entry to a Grade for the given student."""
    if isinstance(entry, Grade):
        if entry.student_id != student_id:
            raise BadRequest(
                f"Grade for student {entry.student_id} given in a batch for "
                f"student {student_id}."
            )
        return entry

    if not isinstance(entry, tuple) or len(entry) not in (2, 3):
        raise BadRequest(
            f"Grade entries must be Grade objects or (item_id, value[, comment]) "
            f"tuples, not {entry!r}."
        )

    return Grade(student_id, *entry)


# Gradebook ============================================================================


class Gradebook:
    """Stores the units, evaluation items, students and grades of a class.

    Grades are kept in a table with one row per student and one column per
    evaluation item; a missing grade is `NaN`. Units, items and students are
    kept in the order they were added, which is the order averages and
    formula variables use.

    Parameters
    ----------
    school_class : SchoolClass
        The class these records belong to.

    Attributes
    ----------
    school_class : SchoolClass
        The class. Replaced (not mutated) when its formula changes.
    grades : pandas.DataFrame
        Grade values indexed by student id, with evaluation item ids as
        columns.
    comments : pandas.DataFrame
        Same shape as `grades`, holding the optional comment of each grade.

    Example
    -------

    >>> gradebook = Gradebook(SchoolClass("c1", "Mathematics", "t1"))
    >>> gradebook.add_unit(Unit("u1", "c1", "Algebra"))
    >>> gradebook.add_evaluation_item(EvaluationItem("i1", "u1", "Test 1"))
    >>> gradebook.add_student(Student("s1", "Ana", "2024001", "c1"))
    >>> gradebook.set_grade("s1", "i1", 8.5)
    >>> gradebook.grades_for("s1", "u1")
    [Grade(student_id='s1', evaluation_item_id='i1', value=8.5, comment=None)]

    """

    def __init__(self, school_class: SchoolClass):
        self.school_class = school_class
        self._units: Dict[str, Unit] = {}
        self._items: Dict[str, EvaluationItem] = {}
        self._students: Dict[str, Student] = {}
        self.grades = _empty_table(float)
        self.comments = _empty_table(object)

    def __repr__(self):
        return (
            f"<{self.__class__.__name__} object for {self.school_class.name!r} with "
            f"{len(self._units)} units, "
            f"{len(self._items)} evaluation items "
            f"and {len(self._students)} students>"
        )

    # properties -----------------------------------------------------------------------

    @property
    def class_id(self) -> str:
        return self.school_class.id

    @property
    def units(self) -> List[Unit]:
        """The units of the class, in the order they were added.

        This is a derived attribute; it should not be modified.

        """
        return list(self._units.values())

    @property
    def students(self) -> Students:
        """All students as Student objects, in the order they were added.

        This is a derived attribute; it should not be modified.

        """
        return Students(list(self._students.values()))

    # lookups --------------------------------------------------------------------------

    def unit(self, unit_id: str) -> Unit:
        """The unit with the given id. Raises :class:`NotFound` if there is none."""
        try:
            return self._units[unit_id]
        except KeyError:
            raise NotFound("Unit", unit_id) from None

    def student(self, student_id: str) -> Student:
        """The student with the given id. Raises :class:`NotFound` if there is none."""
        try:
            return self._students[student_id]
        except KeyError:
            raise NotFound("Student", student_id) from None

    def evaluation_item(self, item_id: str) -> EvaluationItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFound("Evaluation item", item_id) from None

    def has_unit(self, unit_id: str) -> bool:
        return unit_id in self._units

    def has_student(self, student_id: str) -> bool:
        return student_id in self._students

    def evaluation_items(self, unit_id: str) -> List[EvaluationItem]:
        """The evaluation items of a unit, in the order they were added.

        Raises
        ------
        NotFound
            If the unit is not part of this class.

        """
        self.unit(unit_id)
        return [item for item in self._items.values() if item.unit_id == unit_id]

    def grades_for(self, student_id: str, unit_id: str) -> List[Grade]:
        """The grades a student has in a unit, in evaluation item order.

        Items the student has no grade for are left out.

        Raises
        ------
        NotFound
            If the student or the unit is not part of this class.

        """
        self.student(student_id)
        result = []
        for item in self.evaluation_items(unit_id):
            value = self.grades.at[student_id, item.id]
            if pd.isna(value):
                continue
            comment = self.comments.at[student_id, item.id]
            result.append(
                Grade(
                    student_id,
                    item.id,
                    float(value),
                    None if pd.isna(comment) else comment,
                )
            )
        return result

    # adding records -------------------------------------------------------------------

    def add_unit(self, unit: Unit):
        """Add a unit to the end of the class's unit list.

        Raises
        ------
        BadRequest
            If the unit belongs to another class or its id is already taken.

        """
        if unit.class_id != self.class_id:
            raise BadRequest(f"Unit {unit.id} belongs to class {unit.class_id}, not {self.class_id}.")
        if unit.id in self._units:
            raise BadRequest(f"Duplicate unit id: {unit.id}")
        if unit.is_personalized:
            raise BadRequest(
                f"Unit {unit.id} has no evaluation items yet, so it cannot use a formula."
            )
        self._units[unit.id] = unit

    def add_evaluation_item(self, item: EvaluationItem):
        """Add an evaluation item to the end of its unit.

        Raises
        ------
        BadRequest
            If the item's unit is not part of this class, the id is already
            taken, or the unit already has an item with the same name.

        """
        if item.unit_id not in self._units:
            raise BadRequest(f"Unit {item.unit_id} is not part of class {self.class_id}.")
        if item.id in self._items:
            raise BadRequest(f"Duplicate evaluation item id: {item.id}")
        if any(
            other.unit_id == item.unit_id and other.name == item.name
            for other in self._items.values()
        ):
            raise BadRequest(
                f"Unit {item.unit_id} already has an evaluation item named {item.name!r}."
            )

        self._items[item.id] = item
        columns = [*self.grades.columns, item.id]
        self.grades = self.grades.reindex(columns=columns).astype(float)
        self.comments = self.comments.reindex(columns=columns).astype(object)

    def add_student(self, student: Student):
        """Enroll a student in the class.

        The gradebook stores a copy of `student`; a copy without a `class_id` is
        assigned to this class.

        Raises
        ------
        BadRequest
            If the student belongs to another class, the id is already taken,
            or another student has the same registration.

        """
        student = copy.copy(student)
        if student.class_id is None:
            student.class_id = self.class_id
        if student.class_id != self.class_id:
            raise BadRequest(
                f"Student {student.id} belongs to class {student.class_id}, not {self.class_id}."
            )
        if student.id in self._students:
            raise BadRequest(f"Duplicate student id: {student.id}")
        if student.registration is not None and any(
            other.registration == student.registration for other in self._students.values()
        ):
            raise BadRequest(f"Duplicate registration: {student.registration}")

        self._students[student.id] = student
        index = [*self.grades.index, student.id]
        self.grades = self.grades.reindex(index=index).astype(float)
        self.comments = self.comments.reindex(index=index).astype(object)

    # grades ---------------------------------------------------------------------------

    def set_grade(
        self,
        student_id: str,
        evaluation_item_id: str,
        value: float,
        comment: Optional[str] = None,
    ):
        """Create or replace a single grade. See :meth:`upsert_grades`."""
        self.upsert_grades(student_id, [(evaluation_item_id, value, comment)])

    def upsert_grades(self, student_id: str, grades: Iterable[GradeEntry]) -> List[Grade]:
        """Create or replace a batch of grades for one student.

        The whole batch is validated before anything is written, so either
        every grade is stored or none is.

        Parameters
        ----------
        student_id : str
            The student the grades belong to.
        grades : Iterable[GradeEntry]
            :class:`Grade` objects or ``(evaluation_item_id, value)`` /
            ``(evaluation_item_id, value, comment)`` tuples.

        Returns
        -------
        list[Grade]
            The grades that were stored.

        Raises
        ------
        BadRequest
            If the batch is empty, names an item twice, contains a malformed
            entry, or a value is not a number between 0 and 10.
        NotFound
            If the student or an evaluation item is not part of this class.

        """
        grades = [_unpack_entry(student_id, entry) for entry in grades]
        if not grades:
            raise BadRequest("No grades given.")

        self.student(student_id)

        checked = []
        seen = set()
        for grade in grades:
            self.evaluation_item(grade.evaluation_item_id)
            if grade.evaluation_item_id in seen:
                raise BadRequest(
                    f"Evaluation item {grade.evaluation_item_id} appears more than once "
                    "in the batch."
                )
            seen.add(grade.evaluation_item_id)
            checked.append(
                dataclasses.replace(grade, value=_check_grade_value(grade.value))
            )

        for grade in checked:
            self.grades.at[student_id, grade.evaluation_item_id] = grade.value
            self.comments.at[student_id, grade.evaluation_item_id] = grade.comment

        return checked

    def remove_grade(self, student_id: str, evaluation_item_id: str):
        """Delete a grade. Raises :class:`NotFound` if there is no such grade."""
        self.student(student_id)
        self.evaluation_item(evaluation_item_id)
        if pd.isna(self.grades.at[student_id, evaluation_item_id]):
            raise NotFound("Grade", (student_id, evaluation_item_id))
        self.grades.at[student_id, evaluation_item_id] = float("nan")
        self.comments.at[student_id, evaluation_item_id] = None

    def remove_evaluation_item(self, evaluation_item_id: str):
        """Delete an evaluation item together with every grade given for it."""
        self.evaluation_item(evaluation_item_id)
        del self._items[evaluation_item_id]
        self.grades = self.grades.drop(columns=[evaluation_item_id])
        self.comments = self.comments.drop(columns=[evaluation_item_id])

    # formulas -------------------------------------------------------------------------

    def set_unit_formula(
        self,
        unit_id: str,
        mode: Union[AveragingMode, str],
        formula: Optional[str] = None,
        max_length: Optional[int] = None,
    ) -> Unit:
        """Change how a unit's evaluation items combine into its average.

        Switching to simple averaging clears the formula. A personalized
        formula may refer to the unit's items as ``N1``, ``N2``, ... or by
        their sanitized names.

        Parameters
        ----------
        unit_id : str
        mode : Union[AveragingMode, str]
        formula : Optional[str]
            Required when `mode` is personalized.
        max_length : Optional[int]
            Maximum formula length in characters.

        Returns
        -------
        Unit
            The updated unit.

        Raises
        ------
        NotFound
            If the unit is not part of this class.
        BadRequest
            If the unit has no evaluation items, the formula is missing or it
            does not pass :func:`classbook.formulas.validate_formula`.

        """
        unit = self.unit(unit_id)
        mode = AveragingMode.coerce(mode)

        if mode is AveragingMode.SIMPLE:
            updated = dataclasses.replace(unit, mode=mode, formula=None)
        else:
            items = self.evaluation_items(unit_id)
            if not items:
                raise BadRequest(
                    f"Unit {unit_id} has no evaluation items, so it cannot use a formula."
                )
            validate_formula(
                formula,
                len(items),
                aliases=[sanitize_name(item.name) for item in items],
                max_length=max_length,
            )
            updated = dataclasses.replace(unit, mode=mode, formula=formula)

        self._units[unit_id] = updated
        return updated

    def set_class_formula(
        self,
        mode: Union[AveragingMode, str],
        formula: Optional[str] = None,
        max_length: Optional[int] = None,
    ) -> SchoolClass:
        """Change how unit averages combine into the class average.

        A personalized class formula refers to units as ``N1``/``u1``, ``N2``/``u2``,
        ... and must refer to every unit of the class.

        Raises
        ------
        BadRequest
            If the class has no units, the formula is missing, or it does not
            pass :func:`classbook.formulas.validate_formula`.

        """
        mode = AveragingMode.coerce(mode)

        if mode is AveragingMode.SIMPLE:
            updated = dataclasses.replace(self.school_class, mode=mode, formula=None)
        else:
            if not self._units:
                raise BadRequest(
                    f"Class {self.class_id} has fewer units than a formula requires."
                )
            validate_formula(
                formula,
                len(self._units),
                prefixes=("N", "u"),
                require_all=True,
                max_length=max_length,
            )
            updated = dataclasses.replace(self.school_class, mode=mode, formula=formula)

        self.school_class = updated
        return updated
