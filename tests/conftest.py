"""Shared fixtures.

The ``gradebook`` fixture is a class "Mathematics" (id ``c1``, owned by
teacher ``t1``, simple averaging) with two units:

- ``u1`` "Algebra", simple averaging, items ``i1`` "Test 1" and ``i2`` "Test 2"
- ``u2`` "Geometry", formula ``N1*0.3 + N2*0.7``, items ``i3`` "Project" and
  ``i4`` "Final Exam"

and three students:

========  =========  ======  ======  ========  ==========  =====  =====  =====
student   name       Test 1  Test 2  Project   Final Exam  u1     u2     class
========  =========  ======  ======  ========  ==========  =====  =====  =====
s1        Ana        8       6       10        5           7.0    6.5    6.75
s2        Bruno      9       10      7         8           9.5    7.7    8.6
s3        Carla      5       --      --        4           5.0    2.8    3.9
========  =========  ======  ======  ========  ==========  =====  =====  =====

"""

import pytest

from classbook import (
    EvaluationItem,
    Gradebook,
    InMemoryRecords,
    SchoolClass,
    Student,
    Unit,
)


def make_gradebook():
    gradebook = Gradebook(SchoolClass("c1", "Mathematics", teacher_id="t1"))

    gradebook.add_unit(Unit("u1", "c1", "Algebra"))
    gradebook.add_unit(Unit("u2", "c1", "Geometry"))

    gradebook.add_evaluation_item(EvaluationItem("i1", "u1", "Test 1"))
    gradebook.add_evaluation_item(EvaluationItem("i2", "u1", "Test 2"))
    gradebook.add_evaluation_item(EvaluationItem("i3", "u2", "Project"))
    gradebook.add_evaluation_item(EvaluationItem("i4", "u2", "Final Exam"))

    gradebook.set_unit_formula("u2", "personalized", "N1*0.3 + N2*0.7")

    gradebook.add_student(Student("s1", "Ana", registration="2024001", class_id="c1"))
    gradebook.add_student(Student("s2", "Bruno", registration="2024002", class_id="c1"))
    gradebook.add_student(Student("s3", "Carla", registration="2024003", class_id="c1"))

    gradebook.upsert_grades("s1", [("i1", 8), ("i2", 6), ("i3", 10), ("i4", 5)])
    gradebook.upsert_grades("s2", [("i1", 9), ("i2", 10), ("i3", 7), ("i4", 8)])
    gradebook.upsert_grades("s3", [("i1", 5), ("i4", 4)])

    return gradebook


def make_other_gradebook():
    """A class owned by another teacher, with one unit and one student."""
    gradebook = Gradebook(SchoolClass("c2", "History", teacher_id="t2"))
    gradebook.add_unit(Unit("u9", "c2", "Antiquity"))
    gradebook.add_evaluation_item(EvaluationItem("i9", "u9", "Essay"))
    gradebook.add_student(Student("s9", "Zoe", registration="2024009", class_id="c2"))
    gradebook.set_grade("s9", "i9", 9.0)
    return gradebook


@pytest.fixture
def gradebook():
    return make_gradebook()


@pytest.fixture
def other_gradebook():
    return make_other_gradebook()


@pytest.fixture
def records(gradebook, other_gradebook):
    return InMemoryRecords([gradebook, other_gradebook])


@pytest.fixture
def empty_class_records():
    """A class with no units and no students."""
    gradebook = Gradebook(SchoolClass("c3", "Empty", teacher_id="t1"))
    return InMemoryRecords([gradebook])
