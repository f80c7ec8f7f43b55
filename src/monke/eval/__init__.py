"""Evaluator helper modules for the Monke runtime."""

__all__ = [
    "blocks",
    "control",
    "expr",
    "fn",
    "helpers",
]
