"""Represents a student in a class."""

import typing


class Student:
    """Represents a student.

    Attributes
    ----------
    id : str
        The student's identifier.
    name : Optional[str]
        The student's name. If not available, this will be `None`.
    registration : Optional[str]
        The registration number, unique within the class.
    class_id : Optional[str]
        The class the student is enrolled in.

    When a :class:`Student` instance is printed, the student's name is
    displayed if available; however, when two :class:`Student` instances are
    compared for equality, the :code:`.id` attribute is used. A student also
    compares equal to their bare id, so they can be used to index tables whose
    index holds ids:

    .. code::

        gradebook.grades.loc[student, "item-3"]

    """

    def __init__(self, id, name=None, registration=None, class_id=None):
        self.id = id
        self.name = name
        self.registration = registration
        self.class_id = class_id

    def __repr__(self):
        """String representation uses name, if available; id otherwise."""
        if self.name is not None:
            s = self.name
        else:
            s = self.id

        return f"<{s}>"

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        """Equality checks always use the id."""
        if isinstance(other, Student):
            return other.id == self.id
        else:
            return self.id == other

    def __lt__(self, other):
        """Less-than checks always use the id."""
        if isinstance(other, Student):
            return self.id < other.id
        else:
            return self.id < other


class Students(typing.Sequence[Student]):
    """A sequence of :class:`Student` instances.

    This behaves like a list of :class:`Student` instances, but also provides
    :meth:`find` to look up a student by (part of) their name and
    :meth:`by_registration` to look one up by registration number.

    """

    def __init__(self, students: typing.Sequence[Student]):
        self._students = list(students)

    def __getitem__(self, ix):
        return self._students[ix]

    def __len__(self):
        return len(self._students)

    def find(self, pattern: str) -> Student:
        """Finds a student from a substring of their name.

        The search is case-insensitive.

        Parameters
        ----------
        pattern : str
            A pattern to search for in the student's name. All students whose
            (lowercased) names contain this pattern as a substring will be
            considered matches.

        Returns
        -------
        Student
            The matching student.

        Raises
        ------
        ValueError
            If no student matches, or if more than one student matches.

        """

        def is_match(student):
            if student.name is None:
                return False
            return pattern.lower() in student.name.lower()

        matches = [s for s in self._students if is_match(s)]

        if len(matches) == 0:
            raise ValueError(f"No names matched {pattern}.")

        if len(matches) > 1:
            raise ValueError(f'More than one name matched "{pattern}": {matches}')

        return matches[0]

    def by_registration(self, registration: str) -> Student:
        """The student with the given registration number.

        Raises
        ------
        KeyError
            If no student has that registration.

        """
        for student in self._students:
            if student.registration == registration:
                return student
        raise KeyError(registration)
