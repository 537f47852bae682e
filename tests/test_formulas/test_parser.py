"""Tests of formula parsing."""

import pytest

from classbook.formulas import MAX_DEPTH, Formula, FormulaSyntaxError, parse
from classbook.formulas._parser import BinaryOp, Name, Number, UnaryOp, parse_tree


# precedence and associativity ---------------------------------------------------------


def test_multiplication_binds_tighter_than_addition():
    # when
    tree = parse_tree("N1 + N2 * 2")

    # then
    assert tree == BinaryOp("+", Name("N1"), BinaryOp("*", Name("N2"), Number(2.0)))


def test_subtraction_is_left_associative():
    # when
    tree = parse_tree("8 - 2 - 1")

    # then
    assert tree == BinaryOp("-", BinaryOp("-", Number(8.0), Number(2.0)), Number(1.0))


def test_parentheses_override_precedence():
    # when
    tree = parse_tree("(N1 + N2) * 2")

    # then
    assert tree == BinaryOp("*", BinaryOp("+", Name("N1"), Name("N2")), Number(2.0))


def test_signs_are_parsed_as_unary_operators():
    # when
    tree = parse_tree("-N1 + +2")

    # then
    assert tree == BinaryOp("+", UnaryOp("-", Name("N1")), UnaryOp("+", Number(2.0)))


@pytest.mark.parametrize("text, value", [("12", 12.0), ("1.5", 1.5), (".5", 0.5), ("3.", 3.0)])
def test_number_literal_forms(text, value):
    assert parse_tree(text) == Number(value)


def test_whitespace_is_ignored():
    assert parse("N1*0.4+N2*0.6") == parse("  N1 * 0.4\t+ N2 * 0.6 ")


# variables ----------------------------------------------------------------------------


def test_variables_are_listed_in_order_of_first_appearance():
    # when
    formula = parse("(test_2 + N1) / 2 + N1 * test_2 + u3")

    # then
    assert formula.variables == ("test_2", "N1", "u3")


def test_formula_without_variables_has_none():
    assert parse("1 + 2").variables == ()


# syntax errors ------------------------------------------------------------------------


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "N1 +",
        "* N1",
        "(N1 + N2",
        "N1 + N2)",
        "N1 N2",
        "N1 + ()",
        "2 3",
        "1..2",
    ],
)
def test_malformed_formulas_raise_syntax_error(text):
    with pytest.raises(FormulaSyntaxError):
        parse(text)


@pytest.mark.parametrize(
    "text",
    [
        "__import__('os').system('ls')",
        "N1 ** 2",
        "N1 % 2",
        "max(N1, N2)",
        "N1 if N2 else 0",
        "N1; N2",
        "N1 == N2",
    ],
)
def test_anything_beyond_arithmetic_is_rejected(text):
    with pytest.raises(FormulaSyntaxError):
        parse(text)


def test_syntax_error_reports_position_of_unexpected_character():
    # when
    with pytest.raises(FormulaSyntaxError) as exc:
        parse("N1 + N2 $ 3")

    # then
    assert exc.value.position == 8
    assert exc.value.formula == "N1 + N2 $ 3"
    assert "position 8" in str(exc.value)


def test_empty_formula_message():
    with pytest.raises(FormulaSyntaxError, match="empty"):
        parse("")


def test_non_string_formula_is_a_syntax_error():
    with pytest.raises(FormulaSyntaxError):
        Formula(None)  # type: ignore


# limits -------------------------------------------------------------------------------


def test_nesting_up_to_the_limit_is_accepted():
    # given
    depth = MAX_DEPTH - 1
    text = "(" * depth + "N1" + ")" * depth

    # when
    formula = parse(text)

    # then
    assert formula.evaluate({"N1": 4}) == 4


def test_nesting_beyond_the_limit_is_rejected():
    # given
    text = "(" * (MAX_DEPTH + 1) + "N1" + ")" * (MAX_DEPTH + 1)

    # when/then
    with pytest.raises(FormulaSyntaxError, match="nested too deeply"):
        parse(text)


def test_long_chain_of_signs_is_rejected():
    with pytest.raises(FormulaSyntaxError, match="nested too deeply"):
        parse("-" * 500 + "1")


def test_formula_longer_than_max_length_is_rejected():
    # given
    text = " + ".join(["N1"] * 100)

    # when/then
    with pytest.raises(FormulaSyntaxError, match="longer than"):
        parse(text, max_length=50)


def test_formula_at_max_length_is_accepted():
    assert parse("N1+N2", max_length=5).variables == ("N1", "N2")
