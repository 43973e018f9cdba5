"""Orca: a small scripting language with a recursive-descent parser and a
tree-walking evaluator."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
