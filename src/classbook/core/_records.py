"""Read-only access to class records, as used by the averaging engine."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from ..exceptions import NotFound
from ._entities import EvaluationItem, Grade, SchoolClass, Unit
from ._gradebook import Gradebook
from ._student import Student


class Records(ABC):
    """The lookups the engine needs, as coroutines.

    Implementations wrap whatever store holds the records: a database, a
    remote service, or :class:`InMemoryRecords`. Single-record lookups
    return `None` when nothing matches; list lookups return records in the
    order they were created, which is the order formula variables use.

    """

    @abstractmethod
    async def find_class(self, class_id: str) -> Optional[SchoolClass]: ...

    @abstractmethod
    async def find_unit(self, unit_id: str) -> Optional[Unit]: ...

    @abstractmethod
    async def find_student(self, student_id: str) -> Optional[Student]: ...

    @abstractmethod
    async def find_units_by_class(self, class_id: str) -> List[Unit]: ...

    @abstractmethod
    async def find_students_by_class(self, class_id: str) -> List[Student]: ...

    @abstractmethod
    async def find_items_by_unit(self, unit_id: str) -> List[EvaluationItem]: ...

    @abstractmethod
    async def find_grades_by_student_and_unit(
        self, student_id: str, unit_id: str
    ) -> List[Grade]: ...


class InMemoryRecords(Records):
    """Records held in :class:`Gradebook` objects, one per class.

    Parameters
    ----------
    gradebooks : Iterable[Gradebook]
        The gradebooks to serve. More can be added with :meth:`add_gradebook`.

    """

    def __init__(self, gradebooks: Iterable[Gradebook] = ()):
        self._gradebooks: Dict[str, Gradebook] = {}
        for gradebook in gradebooks:
            self.add_gradebook(gradebook)

    def __repr__(self):
        return f"<{self.__class__.__name__} object with {len(self._gradebooks)} classes>"

    def add_gradebook(self, gradebook: Gradebook):
        self._gradebooks[gradebook.class_id] = gradebook

    def gradebook(self, class_id: str) -> Gradebook:
        """The gradebook of a class. Raises :class:`NotFound` if there is none."""
        try:
            return self._gradebooks[class_id]
        except KeyError:
            raise NotFound("Class", class_id) from None

    def _gradebook_with_unit(self, unit_id: str) -> Optional[Gradebook]:
        for gradebook in self._gradebooks.values():
            if gradebook.has_unit(unit_id):
                return gradebook
        return None

    def _gradebook_with_student(self, student_id: str) -> Optional[Gradebook]:
        for gradebook in self._gradebooks.values():
            if gradebook.has_student(student_id):
                return gradebook
        return None

    # Records --------------------------------------------------------------------------

    async def find_class(self, class_id):
        gradebook = self._gradebooks.get(class_id)
        return None if gradebook is None else gradebook.school_class

    async def find_unit(self, unit_id):
        gradebook = self._gradebook_with_unit(unit_id)
        return None if gradebook is None else gradebook.unit(unit_id)

    async def find_student(self, student_id):
        gradebook = self._gradebook_with_student(student_id)
        return None if gradebook is None else gradebook.student(student_id)

    async def find_units_by_class(self, class_id):
        gradebook = self._gradebooks.get(class_id)
        return [] if gradebook is None else gradebook.units

    async def find_students_by_class(self, class_id):
        gradebook = self._gradebooks.get(class_id)
        return [] if gradebook is None else list(gradebook.students)

    async def find_items_by_unit(self, unit_id):
        gradebook = self._gradebook_with_unit(unit_id)
        return [] if gradebook is None else gradebook.evaluation_items(unit_id)

    async def find_grades_by_student_and_unit(self, student_id, unit_id):
        gradebook = self._gradebook_with_unit(unit_id)
        if gradebook is None or not gradebook.has_student(student_id):
            return []
        return gradebook.grades_for(student_id, unit_id)
