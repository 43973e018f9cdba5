from __future__ import annotations

from typing import Optional

from ..runtime import OrcaBool, OrcaNumber, OrcaValue

def is_truthy(val: Optional[OrcaValue]) -> bool:
    """Only `if` conditions use this: nonzero numbers and true are truthy."""
    match val:
        case OrcaBool(value=b):
            return b
        case OrcaNumber(value=num):
            return num != 0
        case _:
            return False
