"""Edit actions that mutate a buffer through a selection."""

from .engine import execute, resolve_text
from .models import (
    Action,
    CopyAction,
    DeleteAction,
    LoopAction,
    SequenceAction,
    TextAction,
    TextActionKind,
    append_action,
    insert_action,
    replace_action,
)

__all__ = [
    "Action",
    "TextActionKind",
    "DeleteAction",
    "TextAction",
    "CopyAction",
    "SequenceAction",
    "LoopAction",
    "insert_action",
    "append_action",
    "replace_action",
    "execute",
    "resolve_text",
]
