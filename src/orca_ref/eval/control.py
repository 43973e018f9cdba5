from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..runtime import Environment, OrcaValue
from ..tree import IfStatement, Node, ReturnStatement, Statement
from .helpers import is_truthy

EvalFunc = Callable[[Node, Environment], Optional[OrcaValue]]

IF_SCOPE = "if"

def eval_if_stmt(node: IfStatement, env: Environment, eval_func: EvalFunc) -> None:
    """
    Run the consequence in a fresh scope when the condition is truthy.

    The else branch is parsed but never run, and the statement never
    produces a value.
    """
    if not is_truthy(eval_func(node.condition, env)):
        return None

    with env.scope(IF_SCOPE):
        eval_block(node.consequence, env, eval_func)

    return None

def eval_block(statements: Sequence[Statement], env: Environment, eval_func: EvalFunc) -> None:
    """Evaluate statements for effect; a return ends this block only."""
    for stmt in statements:
        if isinstance(stmt, ReturnStatement):
            eval_func(stmt.expression, env)
            return

        eval_func(stmt, env)
