from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional, Sequence

from .evaluator import Evaluator
from .lexer import LexError, tokenize
from .parser_rd import ParseError, parse_source
from .runtime import OrcaRuntimeError, OrcaValue
from .tree import pretty
from .utils import debug_py_trace_enabled, format_results

logger = logging.getLogger(__name__)

USAGE = "usage: orca [--tokens | --ast] [--debug] [FILE | - | SOURCE]"

def run(src: str) -> List[Optional[OrcaValue]]:
    """Parse and evaluate `src` against a fresh environment."""
    return run_in(src, Evaluator())

def run_in(src: str, evaluator: Evaluator) -> List[Optional[OrcaValue]]:
    """Parse and evaluate `src`, keeping bindings in `evaluator` between calls."""
    program = parse_source(src)
    logger.debug("parsed %d top-level statement(s)", len(program.statements))
    return evaluator.evaluate(program)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def report_error(exc: BaseException) -> None:
    print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def main(argv: Optional[Sequence[str]] = None) -> int:
    mode = "run"
    debug = False
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token in ("-h", "--help"):
            print(USAGE)
            return 0

        if token == "--tokens":
            mode = "tokens"
            continue

        if token == "--ast":
            mode = "ast"
            continue

        if token == "--debug":
            debug = True
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s")

    if arg is None and mode == "run" and sys.stdin.isatty():
        from .repl import repl  # prompt_toolkit is only needed interactively
        repl()
        return 0

    source = _load_source(arg)

    try:
        if mode == "tokens":
            for tok in tokenize(source):
                print(tok)
            return 0

        if mode == "ast":
            print(pretty(parse_source(source)), end="")
            return 0

        for line in format_results(run(source)):
            print(line)
    except (LexError, ParseError, OrcaRuntimeError) as exc:
        report_error(exc)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
