from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List

from .types import (
    OrcaBool, OrcaFn, OrcaNumber, OrcaValue, UnresolvedVariable,
    OrcaRuntimeError, OrcaUnboundNameError, OrcaNotCallableError, OrcaArityError, OrcaTypeError,
    is_orca_value, type_name,
)

logger = logging.getLogger(__name__)

GLOBAL_SCOPE = "global"

class Scope:
    """One frame of bindings; the label is diagnostic only."""

    def __init__(self, label: str):
        self.label = label
        self.vars: Dict[str, OrcaValue] = {}

    def __repr__(self) -> str:
        return f"Scope({self.label!r}, {sorted(self.vars)!r})"

class Environment:
    """
    Stack of scopes, innermost last.

    The global scope is created here and can never be popped. Lookups walk
    from the innermost scope outward; inserts only touch the innermost one.
    """

    def __init__(self) -> None:
        self._scopes: List[Scope] = [Scope(GLOBAL_SCOPE)]

    @property
    def depth(self) -> int:
        return len(self._scopes)

    def labels(self) -> List[str]:
        return [scope.label for scope in self._scopes]

    def push_scope(self, label: str) -> None:
        self._scopes.append(Scope(label))
        logger.debug("push scope %r (depth %d)", label, len(self._scopes))

    def pop_scope(self) -> None:
        if len(self._scopes) == 1:
            raise OrcaRuntimeError("Cannot pop the global scope")

        scope = self._scopes.pop()
        logger.debug("pop scope %r (depth %d)", scope.label, len(self._scopes))

    @contextmanager
    def scope(self, label: str) -> Iterator[Scope]:
        """Push a scope for the duration of the block; popped on every exit path."""
        self.push_scope(label)

        try:
            yield self._scopes[-1]
        finally:
            self.pop_scope()

    def insert(self, name: str, val: OrcaValue) -> None:
        self._scopes[-1].vars[name] = val

    def get(self, name: str) -> OrcaValue:
        for scope in reversed(self._scopes):
            if name in scope.vars:
                return scope.vars[name]

        raise OrcaUnboundNameError(name)

    def __contains__(self, name: object) -> bool:
        return any(name in scope.vars for scope in self._scopes)

    def __repr__(self) -> str:
        return f"Environment({self._scopes!r})"

__all__ = [
    "Environment",
    "Scope",
    "GLOBAL_SCOPE",
    "OrcaBool",
    "OrcaFn",
    "OrcaNumber",
    "OrcaValue",
    "UnresolvedVariable",
    "OrcaRuntimeError",
    "OrcaUnboundNameError",
    "OrcaNotCallableError",
    "OrcaArityError",
    "OrcaTypeError",
    "is_orca_value",
    "type_name",
]
