from __future__ import annotations

import math

import pytest

from tests.support.harness import (
    OrcaBool,
    OrcaNumber,
    OrcaTypeError,
    Program,
    UnaryExpression,
    binop,
    evaluate,
    num,
    run_runtime_case,
)

ARITHMETIC_CASES = [
    pytest.param("1 + 2 * 3", ("number", 7), None, id="mul-before-add"),
    pytest.param("3 * 2 + 1", ("number", 7), None, id="mul-then-add"),
    pytest.param("2 ^ 3 + 1", ("number", 9), None, id="pow-before-add"),
    pytest.param("12 / 2 / 3", ("number", 2), None, id="div-left-assoc"),
    pytest.param("10 - 4 - 3", ("number", 3), None, id="sub-left-assoc"),
    pytest.param("(1 + 2) * 3", ("number", 9), None, id="group"),
    pytest.param("(-2) ^ 2", ("number", 4), None, id="grouped-negative-pow"),
    pytest.param("-2 ^ 2", ("number", -4), None, id="negated-pow"),
    pytest.param("-2 * 3", ("number", -6), None, id="negated-mul"),
    pytest.param("2 ^ 3 ^ 2", ("number", 512), None, id="pow-right-assoc"),
    pytest.param("--3", ("number", 3), None, id="double-negation"),
    pytest.param("7 / 2", ("number", 3.5), None, id="true-division"),
    pytest.param("0.5 + 0.25", ("number", 0.75), None, id="decimals"),
    pytest.param("4 ^ 0.5", ("number", 2), None, id="fractional-pow"),
    pytest.param("2 ^ -1", ("number", 0.5), None, id="negative-exponent"),
    pytest.param("x = 4\ny = x * x\ny - 1", ("number", 15), None, id="through-variables"),
]

IEEE_CASES = [
    pytest.param("1 / 0", ("number", math.inf), None, id="div-zero-positive"),
    pytest.param("-1 / 0", ("number", -math.inf), None, id="div-zero-negative"),
    pytest.param("0 / 0", ("number", math.nan), None, id="zero-over-zero"),
    pytest.param("0 ^ -1", ("number", math.inf), None, id="zero-negative-pow"),
    pytest.param("(-8) ^ 0.5", ("number", math.nan), None, id="negative-fractional-pow"),
    pytest.param("10 ^ 400", ("number", math.inf), None, id="pow-overflow"),
    pytest.param("(-10) ^ 401", ("number", -math.inf), None, id="pow-overflow-odd-negative"),
    pytest.param("1 / 0 - 1 / 0", ("number", math.nan), None, id="inf-minus-inf"),
]


@pytest.mark.parametrize("source,expectation,expected_exc", ARITHMETIC_CASES + IEEE_CASES)
def test_arithmetic(source, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


COMPARE_CASES = [
    pytest.param(2, ">", 1, True, id="gt-true"),
    pytest.param(1, ">", 2, False, id="gt-false"),
    pytest.param(1, "<", 2, True, id="lt-true"),
    pytest.param(2, ">=", 2, True, id="gte-equal"),
    pytest.param(1, ">=", 2, False, id="gte-false"),
    pytest.param(2, "<=", 2, True, id="lte-equal"),
    pytest.param(3, "<=", 2, False, id="lte-false"),
    pytest.param(3, "==", 3, True, id="eq-true"),
    pytest.param(3, "==", 4, False, id="eq-false"),
]


@pytest.mark.parametrize("left,op,right,expected", COMPARE_CASES)
def test_number_comparisons(left, op, right, expected) -> None:
    (value,) = evaluate(Program((binop(num(left), op, num(right)),)))

    assert value == OrcaBool(expected)


def test_boolean_equality() -> None:
    truth = binop(num(1), "<", num(2))
    falsity = binop(num(2), "<", num(1))

    program = Program((
        binop(truth, "==", truth),
        binop(truth, "==", falsity),
    ))

    assert evaluate(program) == [OrcaBool(True), OrcaBool(False)]


def test_nan_never_equal() -> None:
    nan = binop(num(0), "/", num(0))
    (value,) = evaluate(Program((binop(nan, "==", nan),)))

    assert value == OrcaBool(False)


BOOL_OP_CASES = [
    pytest.param(">", "unable to compare booleans", id="bool-gt"),
    pytest.param("<=", "unable to compare booleans", id="bool-lte"),
    pytest.param("+", "can only perform mathematical expressions on numbers", id="bool-add"),
    pytest.param("^", "can only perform mathematical expressions on numbers", id="bool-pow"),
]


@pytest.mark.parametrize("op,fragment", BOOL_OP_CASES)
def test_boolean_operands_rejected(op: str, fragment: str) -> None:
    truth = binop(num(1), "<", num(2))

    with pytest.raises(OrcaTypeError) as exc_info:
        evaluate(Program((binop(truth, op, truth),)))

    assert fragment in str(exc_info.value)


def test_number_bool_mismatch() -> None:
    truth = binop(num(1), "<", num(2))

    with pytest.raises(OrcaTypeError, match="type mismatch"):
        evaluate(Program((binop(num(1), "==", truth),)))


def test_negating_bool_yields_nothing() -> None:
    truth = binop(num(1), "<", num(2))

    assert evaluate(Program((UnaryExpression(truth),))) == [None]


def test_valueless_operand_short_circuits() -> None:
    src = "func f() {\n}\nf() + 1"
    run_runtime_case(src, ("none", None), None)


def test_number_display() -> None:
    assert repr(OrcaNumber(3.0)) == "3"
    assert repr(OrcaNumber(-0.5)) == "-0.5"
    assert repr(OrcaBool(True)) == "true"
