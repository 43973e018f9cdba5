"""Evaluator helper modules for the Orca runtime."""

__all__ = [
    "control",
    "expr",
    "fn",
    "helpers",
]
