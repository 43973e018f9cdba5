from __future__ import annotations

import os
from typing import Iterable, List, Optional

from .types import OrcaValue, is_orca_value

DEBUG_PY_TRACE_ENV = "ORCA_DEBUG_PY_TRACE"

_FALSY_FLAGS = {"", "0", "false", "no", "off"}


def debug_py_trace_enabled() -> bool:
    """True when ORCA_DEBUG_PY_TRACE asks for Python tracebacks after errors."""
    raw = os.environ.get(DEBUG_PY_TRACE_ENV)
    if raw is None:
        return False

    return raw.strip().lower() not in _FALSY_FLAGS


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        os.environ.pop(DEBUG_PY_TRACE_ENV, None)


def stringify(value: Optional[OrcaValue]) -> str:
    if value is None:
        return ""

    return repr(value)


def format_results(results: Iterable[Optional[OrcaValue]]) -> List[str]:
    """One display line per produced value; valueless statements are skipped."""
    return [stringify(value) for value in results if is_orca_value(value)]
