"""Options and precondition checks shared by the calculators."""

import asyncio
import dataclasses
from typing import Awaitable, Optional, TypeVar

from ..core import Records, SchoolClass, Student
from ..exceptions import ComputationTimeout, Forbidden, NotFound


T = TypeVar("T")


@dataclasses.dataclass
class EngineOptions:
    """Configures the behavior of the averaging engine.

    Attributes
    ----------
    max_concurrency : int
        How many students of a roster are computed at the same time.
        Default: 8.
    student_timeout : Optional[float]
        Seconds allowed for one student's class average when computing a
        roster. `None` means no limit. Default: None.
    unit_timeout : Optional[float]
        Seconds allowed for one unit average. `None` means no limit.
        Default: None.
    max_formula_length : int
        Formulas longer than this many characters are rejected as syntax
        errors. Default: 1000.

    """

    max_concurrency: int = 8
    student_timeout: Optional[float] = None
    unit_timeout: Optional[float] = None
    max_formula_length: int = 1000

    def __post_init__(self):
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least one.")
        for name in ("student_timeout", "unit_timeout"):
            timeout = getattr(self, name)
            if timeout is not None and timeout <= 0:
                raise ValueError(f"{name} must be positive or None.")


async def with_timeout(awaitable: Awaitable[T], timeout: Optional[float], what: str) -> T:
    """Await, raising :class:`ComputationTimeout` if it takes longer than `timeout`."""
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except ComputationTimeout:
        # raised by an inner deadline; keep its message
        raise
    except asyncio.TimeoutError:
        raise ComputationTimeout(
            f"Computing {what} took longer than {timeout:g} seconds."
        ) from None


async def load_owned_class(records: Records, class_id: str, teacher_id: str) -> SchoolClass:
    """Find a class and check that the teacher owns it.

    Raises
    ------
    NotFound
        If there is no such class.
    Forbidden
        If the class belongs to another teacher.

    """
    school_class = await records.find_class(class_id)
    if school_class is None:
        raise NotFound("Class", class_id)
    if school_class.teacher_id != teacher_id:
        raise Forbidden(f"Teacher {teacher_id} does not own class {class_id}.")
    return school_class


async def load_enrolled_student(
    records: Records, student_id: str, school_class: SchoolClass
) -> Student:
    """Find a student and check that they are enrolled in the class.

    Raises
    ------
    NotFound
        If there is no such student.
    Forbidden
        If the student is enrolled in another class.

    """
    student = await records.find_student(student_id)
    if student is None:
        raise NotFound("Student", student_id)
    if student.class_id != school_class.id:
        raise Forbidden(f"Student {student_id} is not enrolled in class {school_class.id}.")
    return student
