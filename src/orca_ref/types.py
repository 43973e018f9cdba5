from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

from .tree import FunctionDefinition, Node

# ---------- Value Model ----------

@dataclass
class OrcaNumber:
    value: float
    def __repr__(self) -> str:
        v = self.value
        return str(int(v)) if v.is_integer() else str(v)

@dataclass
class OrcaBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(eq=False)
class OrcaFn:
    """Function value; shares the definition with every later call site."""
    definition: FunctionDefinition

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def params(self) -> Tuple[str, ...]:
        return self.definition.params

    def __eq__(self, other: object) -> bool:
        # Follows the definition: functions are never equal.
        return False

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        param_desc = ", ".join(self.params) if self.params else "nullary"
        return f"<func {self.name} params={param_desc}>"

@dataclass
class UnresolvedVariable:
    """Call argument naming a variable that has not been looked up yet."""
    name: str
    def __repr__(self) -> str:
        return f"<unresolved {self.name}>"

OrcaValue: TypeAlias = OrcaNumber | OrcaBool | OrcaFn

_ORCA_VALUE_TYPES: Tuple[type, ...] = (OrcaNumber, OrcaBool, OrcaFn)

def is_orca_value(value: object) -> TypeGuard[OrcaValue]:
    return isinstance(value, _ORCA_VALUE_TYPES)

def type_name(value: Optional[object]) -> str:
    match value:
        case None:
            return "nothing"
        case OrcaNumber():
            return "number"
        case OrcaBool():
            return "bool"
        case OrcaFn():
            return "function"
        case UnresolvedVariable():
            return "unresolved variable"
        case _:
            return type(value).__name__

# ---------- Exceptions ----------

class OrcaRuntimeError(Exception):
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str):
        super().__init__(message)
        self.line = None
        self.column = None

    def attach_location(self, node: Node) -> None:
        if self.line is not None or node.line is None:
            return
        self.line = node.line
        self.column = node.column

    def __str__(self) -> str:
        msg = super().__str__()

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class OrcaUnboundNameError(OrcaRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Name '{name}' not found")
        self.name = name

class OrcaNotCallableError(OrcaRuntimeError):
    def __init__(self, name: str, value: OrcaValue):
        super().__init__(f"'{name}' is a {type_name(value)}, not a function")
        self.name = name
        self.value = value

class OrcaArityError(OrcaRuntimeError):
    def __init__(self, name: str, expected: int, received: int):
        super().__init__(f"{name} missing function args: expected {expected}, received {received}")
        self.name = name
        self.expected = expected
        self.received = received

class OrcaTypeError(OrcaRuntimeError):
    pass
