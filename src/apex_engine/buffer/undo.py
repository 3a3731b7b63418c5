"""Undo records for gap buffer edits and the LIFO stack that holds them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Union

from .status import Status

if TYPE_CHECKING:
    from .gap import GapBuffer


@dataclass(slots=True)
class InsertRecord:
    """``length`` bytes were inserted at ``start``; undo cuts them back out."""

    buffer: "GapBuffer"
    start: int
    length: int
    cursor_before: int

    @property
    def label(self) -> str:
        return "insert"

    def undo(self) -> Status:
        status = self.buffer.move_cursor_to(self.start)
        if not status.ok:
            return status
        self.buffer.cut(self.length)
        return self.buffer.move_cursor_to(self.cursor_before)


@dataclass(slots=True)
class DeleteRecord:
    """``data`` was removed from ``position``; undo puts it back."""

    buffer: "GapBuffer"
    position: int
    data: bytes
    cursor_before: int

    @property
    def label(self) -> str:
        return "delete"

    def undo(self) -> Status:
        status = self.buffer.move_cursor_to(self.position)
        if not status.ok:
            return status
        self.buffer.insert_chars(self.data)
        return self.buffer.move_cursor_to(self.cursor_before)


UndoRecord = Union[InsertRecord, DeleteRecord]


class UndoStack:
    """Single-level LIFO undo history. There is no redo."""

    def __init__(self) -> None:
        self._entries: List[UndoRecord] = []

    def push(self, entry: UndoRecord) -> None:
        self._entries.append(entry)

    def pop(self) -> Optional[UndoRecord]:
        if not self._entries:
            return None
        return self._entries.pop()

    def peek(self) -> Optional[UndoRecord]:
        return self._entries[-1] if self._entries else None

    def can_undo(self) -> bool:
        return bool(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["InsertRecord", "DeleteRecord", "UndoRecord", "UndoStack"]
