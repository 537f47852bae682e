import pytest  # pyright: ignore

import classbook

# find ---------------------------------------------------------------------------------


def test_find_student_is_case_insensitive():
    # given
    students = classbook.Students(
        [
            classbook.Student("s1", "Justin"),
            classbook.Student("s2", "tyler"),
            classbook.Student("s3", "tyrant"),
        ]
    )

    # when
    s = students.find("JUSTIN")

    # then
    assert s == classbook.Student("s1", "justin")


def test_find_student_raises_on_multiple_matches():
    # given
    students = classbook.Students(
        [
            classbook.Student("s1", "justin"),
            classbook.Student("s2", "tyler"),
            classbook.Student("s3", "tyrant"),
        ]
    )

    # when/then
    with pytest.raises(ValueError):
        students.find("ty")


def test_find_student_raises_on_no_match():
    # given
    students = classbook.Students([classbook.Student("s1", "justin")])

    # when/then
    with pytest.raises(ValueError):
        students.find("zoe")


def test_find_student_skips_students_without_names():
    # given
    students = classbook.Students(
        [classbook.Student("s1"), classbook.Student("s2", "Zoe")]
    )

    # when
    s = students.find("zo")

    # then
    assert s.id == "s2"


# by_registration ----------------------------------------------------------------------


def test_by_registration():
    # given
    students = classbook.Students(
        [
            classbook.Student("s1", "Ana", registration="001"),
            classbook.Student("s2", "Bruno", registration="002"),
        ]
    )

    # when
    s = students.by_registration("002")

    # then
    assert s.name == "Bruno"


def test_by_registration_raises_key_error_when_missing():
    students = classbook.Students([classbook.Student("s1", "Ana", registration="001")])
    with pytest.raises(KeyError):
        students.by_registration("999")


# Student ------------------------------------------------------------------------------


def test_students_compare_by_id_and_to_bare_ids():
    assert classbook.Student("s1", "Ana") == classbook.Student("s1", "Another name")
    assert classbook.Student("s1", "Ana") == "s1"
    assert classbook.Student("s1") < classbook.Student("s2")
    assert hash(classbook.Student("s1", "Ana")) == hash("s1")


def test_student_repr_uses_name_when_available():
    assert repr(classbook.Student("s1", "Ana")) == "<Ana>"
    assert repr(classbook.Student("s1")) == "<s1>"
