"""Editing core for a scriptable structural text editor."""

__all__ = [
    "buffer",
    "expressions",
    "actions",
    "runtime",
]

__version__ = "0.1.0"
