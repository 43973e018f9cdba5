"""AST node model for Orca.

The node set is closed: every consumer dispatches on the concrete classes
below and treats anything else as an internal error. Nodes are frozen and the
parser builds each tree exactly once.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List, Optional, Tuple, Union
from typing_extensions import TypeAlias


class BinaryOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"
    EQ = "=="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="

    @property
    def is_comparison(self) -> bool:
        return self in _COMPARISON_OPS

    def __str__(self) -> str:
        return self.value


_COMPARISON_OPS = frozenset({BinaryOp.EQ, BinaryOp.GT, BinaryOp.LT, BinaryOp.GTE, BinaryOp.LTE})


@dataclass(frozen=True)
class Node:
    """Base for all AST nodes; position info never takes part in equality."""

    line: Optional[int] = field(default=None, compare=False, repr=False, kw_only=True)
    column: Optional[int] = field(default=None, compare=False, repr=False, kw_only=True)


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: float


@dataclass(frozen=True)
class VariableReference(Node):
    name: str


@dataclass(frozen=True)
class UnaryExpression(Node):
    operand: Expression


@dataclass(frozen=True)
class BinaryExpression(Node):
    left: Expression
    operator: BinaryOp
    right: Expression


@dataclass(frozen=True)
class Assignment(Node):
    name: str
    value: Expression


@dataclass(frozen=True)
class ReturnStatement(Node):
    expression: Expression


@dataclass(frozen=True)
class FunctionCall(Node):
    name: str
    args: Tuple[CallArgument, ...]


@dataclass(frozen=True, eq=False)
class FunctionDefinition(Node):
    """Named function with positional parameters.

    Definitions never compare equal, not even to an identical definition;
    comparing bodies structurally has no meaning for callers.
    """

    name: str
    params: Tuple[str, ...]
    body: Tuple[Statement, ...]

    def __eq__(self, other: object) -> bool:
        return False

    __hash__ = object.__hash__


@dataclass(frozen=True)
class IfStatement(Node):
    condition: Expression
    consequence: Tuple[Statement, ...]
    alternative: Optional[Tuple[Statement, ...]] = None


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Statement, ...]


CallArgument: TypeAlias = Union[NumberLiteral, VariableReference]

Expression: TypeAlias = Union[
    NumberLiteral,
    VariableReference,
    UnaryExpression,
    BinaryExpression,
    FunctionCall,
    ReturnStatement,
]

Statement: TypeAlias = Union[
    Assignment,
    FunctionDefinition,
    IfStatement,
    Expression,
]

NODE_TYPES: Tuple[type, ...] = (
    Program,
    FunctionDefinition,
    FunctionCall,
    ReturnStatement,
    Assignment,
    BinaryExpression,
    UnaryExpression,
    IfStatement,
    VariableReference,
    NumberLiteral,
)


def is_node(value: object) -> bool:
    return isinstance(value, NODE_TYPES)


def node_label(node: Node) -> str:
    return type(node).__name__


def pretty(node: Node, indent: str = '  ') -> str:
    """Return pretty-printed tree representation."""
    lines: List[str] = []

    def _emit(value: object, level: int, label: Optional[str] = None) -> None:
        prefix = indent * level + (f"{label}: " if label else "")

        if isinstance(value, tuple):
            lines.append(f"{prefix}[{len(value)}]")
            for item in value:
                _emit(item, level + 1)
            return

        if not is_node(value):
            lines.append(f"{prefix}{value!s}")
            return

        scalars = []
        children = []
        for f in fields(value):
            if f.name in ('line', 'column'):
                continue
            attr = getattr(value, f.name)
            if is_node(attr) or isinstance(attr, tuple):
                children.append((f.name, attr))
            else:
                scalars.append(f"{attr!s}")

        head = node_label(value)
        if scalars:
            head += " " + " ".join(scalars)
        lines.append(prefix + head)

        for name, child in children:
            _emit(child, level + 1, name)

    _emit(node, 0)
    return "\n".join(lines) + "\n"
