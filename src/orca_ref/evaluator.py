from __future__ import annotations

from typing import List, Optional

from .runtime import Environment, OrcaNumber, OrcaRuntimeError, OrcaValue
from .tree import (
    Assignment,
    BinaryExpression,
    FunctionCall,
    FunctionDefinition,
    IfStatement,
    Node,
    NumberLiteral,
    Program,
    ReturnStatement,
    UnaryExpression,
    VariableReference,
)
from .eval.control import eval_if_stmt
from .eval.expr import eval_binary, eval_unary
from .eval.fn import eval_call, eval_fn_def

# ---------------- Public API ----------------

class Evaluator:
    """Owns one environment; each top-level statement yields an optional value."""

    def __init__(self, env: Optional[Environment] = None):
        self.env = env if env is not None else Environment()

    def evaluate(self, program: Program) -> List[Optional[OrcaValue]]:
        return [eval_node(stmt, self.env) for stmt in program.statements]

def evaluate(program: Program, env: Optional[Environment] = None) -> List[Optional[OrcaValue]]:
    return Evaluator(env).evaluate(program)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> Optional[OrcaValue]:
    try:
        return _eval_node_inner(n, env)
    except OrcaRuntimeError as e:
        e.attach_location(n)
        raise

def _eval_node_inner(n: Node, env: Environment) -> Optional[OrcaValue]:
    match n:
        case NumberLiteral(value=value):
            return OrcaNumber(value)
        case VariableReference(name=name):
            return env.get(name)
        case Assignment():
            return _eval_assignment(n, env)
        case FunctionDefinition():
            return eval_fn_def(n, env)
        case FunctionCall():
            return eval_call(n, env, eval_node)
        case UnaryExpression():
            return eval_unary(n, env, eval_node)
        case BinaryExpression():
            return eval_binary(n, env, eval_node)
        case IfStatement():
            return eval_if_stmt(n, env, eval_node)
        case ReturnStatement():
            # Only a function body's top level gives return a meaning.
            return None
        case _:
            raise OrcaRuntimeError(f"Unknown node: {type(n).__name__}")

def _eval_assignment(n: Assignment, env: Environment) -> None:
    value = eval_node(n.value, env)

    # A valueless right-hand side binds nothing.
    if value is not None:
        env.insert(n.name, value)

    return None
