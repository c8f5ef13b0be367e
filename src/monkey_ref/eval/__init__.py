"""Evaluator helper modules for the Monkey runtime."""

__all__ = [
    "blocks",
    "chains",
    "control",
    "expr",
    "fn",
    "helpers",
    "let",
    "literals",
    "objects",
    "quote",
]
