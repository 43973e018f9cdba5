from __future__ import annotations

import pytest

from tests.support.harness import (
    Evaluator,
    LexError,
    OrcaArityError,
    OrcaNotCallableError,
    OrcaRuntimeError,
    OrcaTypeError,
    OrcaUnboundNameError,
    ParseError,
    parse_source,
    run_program,
)
from orca_ref.runner import run_in

ERROR_CASES = [
    pytest.param("x", OrcaUnboundNameError, id="unbound-name"),
    pytest.param("1 $ 2", LexError, id="lex-error"),
    pytest.param("x = (", ParseError, id="parse-error"),
    pytest.param("y = 2\ny(1)", OrcaNotCallableError, id="not-callable"),
    pytest.param("func f(a) {\n}\nf()", OrcaArityError, id="arity"),
]


@pytest.mark.parametrize("source,exc", ERROR_CASES)
def test_error_kinds(source: str, exc: type) -> None:
    with pytest.raises(exc):
        run_program(source)


@pytest.mark.parametrize(
    "exc",
    [
        pytest.param(OrcaUnboundNameError, id="unbound"),
        pytest.param(OrcaNotCallableError, id="not-callable"),
        pytest.param(OrcaArityError, id="arity"),
        pytest.param(OrcaTypeError, id="type"),
    ],
)
def test_runtime_errors_share_base(exc: type) -> None:
    assert issubclass(exc, OrcaRuntimeError)


def test_lex_and_parse_errors_are_not_runtime_errors() -> None:
    assert not issubclass(LexError, OrcaRuntimeError)
    assert not issubclass(ParseError, OrcaRuntimeError)


def test_runtime_error_location_is_innermost_node() -> None:
    with pytest.raises(OrcaUnboundNameError) as exc_info:
        run_program("a = 1\nb = a + missing")

    err = exc_info.value
    assert (err.line, err.column) == (2, 9)
    assert str(err) == "Name 'missing' not found (line 2, col 9)"


def test_error_inside_function_points_at_body() -> None:
    src = "func f() {\n  return 1 + nope\n}\nf()"

    with pytest.raises(OrcaUnboundNameError) as exc_info:
        run_program(src)

    assert exc_info.value.line == 2


def test_error_without_location_has_plain_message() -> None:
    err = OrcaRuntimeError("plain")
    assert str(err) == "plain"


def test_failed_statement_keeps_earlier_bindings() -> None:
    evaluator = Evaluator()

    with pytest.raises(OrcaUnboundNameError):
        run_in("x = 2\ny = nope", evaluator)

    assert run_in("x", evaluator)[-1].value == 2
    assert evaluator.env.depth == 1


def test_parse_error_runs_nothing() -> None:
    evaluator = Evaluator()

    with pytest.raises(ParseError):
        evaluator.evaluate(parse_source("x = 1\n)"))

    assert "x" not in evaluator.env
