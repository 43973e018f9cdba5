from __future__ import annotations

import math
from typing import Callable, Optional

from ..runtime import Environment, OrcaBool, OrcaNumber, OrcaRuntimeError, OrcaTypeError, OrcaValue
from ..tree import BinaryExpression, BinaryOp, Node, UnaryExpression

EvalFunc = Callable[[Node, Environment], Optional[OrcaValue]]

def eval_unary(node: UnaryExpression, env: Environment, eval_func: EvalFunc) -> Optional[OrcaValue]:
    operand = eval_func(node.operand, env)

    match operand:
        case OrcaNumber(value=num):
            return OrcaNumber(-num)
        case _:
            # Negating anything but a number quietly yields nothing.
            return None

def eval_binary(node: BinaryExpression, env: Environment, eval_func: EvalFunc) -> Optional[OrcaValue]:
    lhs = eval_func(node.left, env)
    if lhs is None:
        return None

    rhs = eval_func(node.right, env)
    if rhs is None:
        return None

    if node.operator.is_comparison:
        return compare(lhs, node.operator, rhs)

    return arithmetic(lhs, node.operator, rhs)

def arithmetic(lhs: OrcaValue, op: BinaryOp, rhs: OrcaValue) -> OrcaNumber:
    if not isinstance(lhs, OrcaNumber) or not isinstance(rhs, OrcaNumber):
        raise OrcaTypeError(
            f"{lhs!r} {op} {rhs!r}: can only perform mathematical expressions on numbers"
        )

    l, r = lhs.value, rhs.value

    match op:
        case BinaryOp.ADD:
            return OrcaNumber(l + r)
        case BinaryOp.SUB:
            return OrcaNumber(l - r)
        case BinaryOp.MUL:
            return OrcaNumber(l * r)
        case BinaryOp.DIV:
            return OrcaNumber(float_div(l, r))
        case BinaryOp.POW:
            return OrcaNumber(float_pow(l, r))
        case _:
            raise OrcaRuntimeError(f"invalid arithmetic operator {op}")

def compare(lhs: OrcaValue, op: BinaryOp, rhs: OrcaValue) -> OrcaBool:
    match lhs, rhs:
        case OrcaNumber(value=l), OrcaNumber(value=r):
            return OrcaBool(compare_numbers(l, op, r))
        case OrcaBool(value=l), OrcaBool(value=r):
            if op is not BinaryOp.EQ:
                raise OrcaTypeError(f"{lhs!r} {op} {rhs!r}: unable to compare booleans")
            return OrcaBool(l == r)
        case _:
            raise OrcaTypeError(f"{lhs!r} {op} {rhs!r}: type mismatch")

def compare_numbers(l: float, op: BinaryOp, r: float) -> bool:
    match op:
        case BinaryOp.EQ:
            return l == r
        case BinaryOp.GT:
            return l > r
        case BinaryOp.LT:
            return l < r
        case BinaryOp.GTE:
            return l >= r
        case BinaryOp.LTE:
            return l <= r
        case _:
            raise OrcaRuntimeError(f"expected a comparison, got {op}")

# Python raises where IEEE-754 produces inf/nan; these restore the float results.

def float_div(l: float, r: float) -> float:
    if r != 0.0:
        return l / r

    if l == 0.0 or math.isnan(l):
        return math.nan

    return math.copysign(math.inf, l) * math.copysign(1.0, r)

def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1

def float_pow(base: float, exp: float) -> float:
    try:
        return math.pow(base, exp)
    except OverflowError:
        if base < 0 and _is_odd_integer(exp):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0.0:
            # zero to a negative power
            if _is_odd_integer(exp):
                return math.copysign(math.inf, base)
            return math.inf
        # negative base, fractional exponent
        return math.nan
