from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from ..runtime import (
    Environment,
    OrcaArityError,
    OrcaFn,
    OrcaNotCallableError,
    OrcaNumber,
    OrcaRuntimeError,
    OrcaValue,
    UnresolvedVariable,
)
from ..tree import CallArgument, FunctionCall, FunctionDefinition, Node, NumberLiteral, ReturnStatement, VariableReference

logger = logging.getLogger(__name__)

EvalFunc = Callable[[Node, Environment], Optional[OrcaValue]]

def eval_fn_def(node: FunctionDefinition, env: Environment) -> None:
    env.insert(node.name, OrcaFn(node))
    return None

def argument_symbol(arg: CallArgument) -> OrcaNumber | UnresolvedVariable:
    match arg:
        case NumberLiteral(value=value):
            return OrcaNumber(value)
        case VariableReference(name=name):
            return UnresolvedVariable(name)
        case _:
            raise OrcaRuntimeError(f"Unsupported call argument {arg!r}")

def resolve_args(fn: OrcaFn, args: Tuple[CallArgument, ...], env: Environment) -> List[Tuple[str, OrcaValue]]:
    """Pair parameters with argument values; surplus arguments are never looked at."""
    bound: List[Tuple[str, OrcaValue]] = []

    for param, arg in zip(fn.params, args):
        symbol = argument_symbol(arg)
        value = env.get(symbol.name) if isinstance(symbol, UnresolvedVariable) else symbol
        bound.append((param, value))

    return bound

def eval_call(node: FunctionCall, env: Environment, eval_func: EvalFunc) -> Optional[OrcaValue]:
    callee = env.get(node.name)

    if not isinstance(callee, OrcaFn):
        raise OrcaNotCallableError(node.name, callee)

    if len(node.args) < len(callee.params):
        raise OrcaArityError(callee.name, len(callee.params), len(node.args))

    # Arguments resolve against the caller's scopes, before the callee scope exists.
    bound = resolve_args(callee, node.args, env)
    logger.debug("call %s(%s)", callee.name, ", ".join(f"{k}={v!r}" for k, v in bound))

    with env.scope(callee.name):
        for name, value in bound:
            env.insert(name, value)

        return run_body(callee.definition, env, eval_func)

def run_body(definition: FunctionDefinition, env: Environment, eval_func: EvalFunc) -> Optional[OrcaValue]:
    """Run statements until the first top-level return; no return means no value."""
    for stmt in definition.body:
        if isinstance(stmt, ReturnStatement):
            return eval_func(stmt.expression, env)

        eval_func(stmt, env)

    return None
