"""Tests of the in-memory implementation of the Records interface."""

import pytest

from classbook import Grade, InMemoryRecords, Records
from classbook.exceptions import NotFound


def test_records_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Records()  # type: ignore


def test_gradebook_lookup(records, gradebook):
    assert records.gradebook("c1") is gradebook
    with pytest.raises(NotFound):
        records.gradebook("c404")


@pytest.mark.asyncio
async def test_single_record_lookups(records):
    assert (await records.find_class("c2")).name == "History"
    assert (await records.find_unit("u2")).name == "Geometry"
    assert (await records.find_student("s9")).class_id == "c2"


@pytest.mark.asyncio
async def test_missing_records_are_none(records):
    assert await records.find_class("c404") is None
    assert await records.find_unit("u404") is None
    assert await records.find_student("s404") is None


@pytest.mark.asyncio
async def test_list_lookups_are_in_creation_order(records):
    units = await records.find_units_by_class("c1")
    students = await records.find_students_by_class("c1")
    items = await records.find_items_by_unit("u2")

    assert [u.id for u in units] == ["u1", "u2"]
    assert [s.id for s in students] == ["s1", "s2", "s3"]
    assert [i.name for i in items] == ["Project", "Final Exam"]


@pytest.mark.asyncio
async def test_list_lookups_of_missing_records_are_empty(records):
    assert await records.find_units_by_class("c404") == []
    assert await records.find_students_by_class("c404") == []
    assert await records.find_items_by_unit("u404") == []
    assert await records.find_grades_by_student_and_unit("s1", "u404") == []


@pytest.mark.asyncio
async def test_grades_by_student_and_unit(records):
    grades = await records.find_grades_by_student_and_unit("s1", "u2")
    assert grades == [Grade("s1", "i3", 10.0), Grade("s1", "i4", 5.0)]


@pytest.mark.asyncio
async def test_grades_of_a_student_in_another_classes_unit_are_empty(records):
    assert await records.find_grades_by_student_and_unit("s9", "u1") == []


@pytest.mark.asyncio
async def test_changes_to_a_gradebook_are_visible(records, gradebook):
    # when
    gradebook.set_grade("s3", "i2", 9)

    # then
    grades = await records.find_grades_by_student_and_unit("s3", "u1")
    assert [g.value for g in grades] == [5.0, 9.0]


def test_empty_records():
    assert repr(InMemoryRecords()) == "<InMemoryRecords object with 0 classes>"
