"""Tests of ClassAverageCalculator."""

import asyncio

import pytest

from classbook import (
    ClassAverageCalculator,
    EngineOptions,
    InMemoryRecords,
    Student,
    Unit,
)
from classbook.exceptions import ComputationTimeout, DivisionByZero, Forbidden, NotFound


class SlowRecords(InMemoryRecords):
    """Takes `delay` seconds to look up the grades of one unit."""

    def __init__(self, gradebooks, slow_unit_id, delay):
        super().__init__(gradebooks)
        self.slow_unit_id = slow_unit_id
        self.delay = delay

    async def find_grades_by_student_and_unit(self, student_id, unit_id):
        if unit_id == self.slow_unit_id:
            await asyncio.sleep(self.delay)
        return await super().find_grades_by_student_and_unit(student_id, unit_id)


# end to end ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_simple_class_average_of_simple_and_personalized_units(records):
    # when
    result = await ClassAverageCalculator(records).compute_class_average("s1", "c1", "t1")

    # then
    assert [u.average for u in result.unit_averages] == [7.0, 6.5]
    assert result.average == 6.75
    assert result.student_name == "Ana"
    assert result.class_id == "c1"


@pytest.mark.asyncio
async def test_unit_averages_are_in_unit_order(records):
    # given
    records = SlowRecords([records.gradebook("c1")], slow_unit_id="u1", delay=0.05)

    # when
    result = await ClassAverageCalculator(records).compute_class_average("s2", "c1", "t1")

    # then
    assert [u.unit_id for u in result.unit_averages] == ["u1", "u2"]
    assert result.average == 8.6


@pytest.mark.asyncio
async def test_simple_mode_counts_units_that_average_zero(records, gradebook):
    # given
    gradebook.add_unit(Unit("u3", "c1", "Statistics"))

    # when
    result = await ClassAverageCalculator(records).compute_class_average("s1", "c1", "t1")

    # then
    assert [u.average for u in result.unit_averages] == [7.0, 6.5, 0.0]
    assert result.average == 4.5


@pytest.mark.asyncio
async def test_class_with_no_units_averages_zero(empty_class_records):
    # given
    gradebook = empty_class_records.gradebook("c3")
    gradebook.add_student(Student("s1", "Ana", registration="1"))

    # when
    result = await ClassAverageCalculator(empty_class_records).compute_class_average(
        "s1", "c3", "t1"
    )

    # then
    assert result.average == 0.0
    assert result.unit_averages == []


# personalized mode --------------------------------------------------------------------


@pytest.mark.asyncio
async def test_personalized_class_formula(records, gradebook):
    # given
    gradebook.set_class_formula("personalized", "u1 * 0.4 + N2 * 0.6")

    # when
    result = await ClassAverageCalculator(records).compute_class_average("s1", "c1", "t1")

    # then
    assert result.average == 6.7


@pytest.mark.asyncio
async def test_class_formula_error_propagates_with_class_context(records, gradebook):
    # given
    gradebook.set_class_formula("personalized", "u1 / u2")
    gradebook.add_student(Student("s4", "Dora", registration="2024004"))
    gradebook.set_grade("s4", "i1", 10)

    # when
    with pytest.raises(DivisionByZero) as exc:
        await ClassAverageCalculator(records).compute_class_average("s4", "c1", "t1")

    # then
    assert exc.value.context["class_id"] == "c1"
    assert exc.value.context["student_name"] == "Dora"
    assert "Check the class's formula." in str(exc.value)


@pytest.mark.asyncio
async def test_unit_formula_error_propagates(records, gradebook):
    # given
    gradebook.set_unit_formula("u1", "personalized", "N1 / N2")
    gradebook.remove_grade("s1", "i2")

    # when
    with pytest.raises(DivisionByZero) as exc:
        await ClassAverageCalculator(records).compute_class_average("s1", "c1", "t1")

    # then
    assert exc.value.context["unit_id"] == "u1"


# preconditions ------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_unknown_class_is_not_found(records):
    with pytest.raises(NotFound, match="Class"):
        await ClassAverageCalculator(records).compute_class_average("s1", "c404", "t1")


@pytest.mark.asyncio
async def test_teacher_must_own_the_class(records):
    with pytest.raises(Forbidden):
        await ClassAverageCalculator(records).compute_class_average("s1", "c1", "t2")


@pytest.mark.asyncio
async def test_unknown_student_is_not_found(records):
    with pytest.raises(NotFound, match="Student"):
        await ClassAverageCalculator(records).compute_class_average("s404", "c1", "t1")


@pytest.mark.asyncio
async def test_student_of_another_class_is_forbidden(records):
    with pytest.raises(Forbidden):
        await ClassAverageCalculator(records).compute_class_average("s9", "c1", "t1")


# timeouts -----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_slow_unit_times_out(gradebook):
    # given
    records = SlowRecords([gradebook], slow_unit_id="u2", delay=5)
    calculator = ClassAverageCalculator(records, EngineOptions(unit_timeout=0.05))

    # when/then
    with pytest.raises(ComputationTimeout, match="unit u2"):
        await calculator.compute_class_average("s1", "c1", "t1")


@pytest.mark.asyncio
async def test_unit_within_timeout_succeeds(gradebook):
    # given
    records = SlowRecords([gradebook], slow_unit_id="u2", delay=0.01)
    calculator = ClassAverageCalculator(records, EngineOptions(unit_timeout=5))

    # when
    result = await calculator.compute_class_average("s1", "c1", "t1")

    # then
    assert result.average == 6.75


# idempotence --------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_computing_twice_gives_the_same_result(records):
    calculator = ClassAverageCalculator(records)
    first = await calculator.compute_class_average("s3", "c1", "t1")
    second = await calculator.compute_class_average("s3", "c1", "t1")
    assert first == second
    assert first.average == 3.9
