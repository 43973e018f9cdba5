from __future__ import annotations

import pytest

from tests.support.harness import (
    Environment,
    OrcaNumber,
    OrcaRuntimeError,
    OrcaUnboundNameError,
)
from orca_ref.runtime import GLOBAL_SCOPE


def test_starts_with_global_scope() -> None:
    env = Environment()

    assert env.depth == 1
    assert env.labels() == [GLOBAL_SCOPE]


def test_global_scope_cannot_be_popped() -> None:
    env = Environment()

    with pytest.raises(OrcaRuntimeError, match="Cannot pop the global scope"):
        env.pop_scope()

    assert env.depth == 1


def test_push_and_pop() -> None:
    env = Environment()
    env.push_scope("f")
    env.push_scope("if")

    assert env.labels() == [GLOBAL_SCOPE, "f", "if"]

    env.pop_scope()
    assert env.labels() == [GLOBAL_SCOPE, "f"]


def test_lookup_walks_outward() -> None:
    env = Environment()
    env.insert("x", OrcaNumber(1.0))
    env.push_scope("f")

    assert env.get("x") == OrcaNumber(1.0)
    assert "x" in env


def test_insert_targets_innermost_scope() -> None:
    env = Environment()
    env.insert("x", OrcaNumber(1.0))
    env.push_scope("f")
    env.insert("x", OrcaNumber(2.0))

    assert env.get("x") == OrcaNumber(2.0)

    env.pop_scope()
    assert env.get("x") == OrcaNumber(1.0)


def test_inner_bindings_vanish_on_pop() -> None:
    env = Environment()
    env.push_scope("f")
    env.insert("y", OrcaNumber(3.0))
    env.pop_scope()

    assert "y" not in env
    with pytest.raises(OrcaUnboundNameError, match="Name 'y' not found"):
        env.get("y")


def test_rebinding_overwrites() -> None:
    env = Environment()
    env.insert("x", OrcaNumber(1.0))
    env.insert("x", OrcaNumber(5.0))

    assert env.get("x") == OrcaNumber(5.0)


def test_scope_context_manager_yields_new_scope() -> None:
    env = Environment()

    with env.scope("call") as frame:
        env.insert("a", OrcaNumber(1.0))
        assert frame.label == "call"
        assert "a" in frame.vars
        assert env.depth == 2

    assert env.depth == 1
    assert "a" not in env


def test_scope_context_manager_pops_on_error() -> None:
    env = Environment()

    with pytest.raises(OrcaUnboundNameError):
        with env.scope("call"):
            env.get("missing")

    assert env.depth == 1


def test_unbound_error_carries_name() -> None:
    with pytest.raises(OrcaUnboundNameError) as exc_info:
        Environment().get("ghost")

    assert exc_info.value.name == "ghost"
