"""Gap buffer: the mutable byte store behind every editing operation.

Content is split at the cursor into ``_pre`` (bytes before the cursor, in
order) and ``_post`` (bytes after the cursor, stored reversed so that popping
yields the byte nearest the cursor). The logical content is always
``_pre + reversed(_post)`` and the cursor position is ``len(_pre)``.

Line (1-based) and column (0-based) of the cursor are maintained
incrementally and always agree with a left-to-right scan from offset 0.
Every fallible call returns a :class:`Status` instead of raising.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple, Union

from apex_engine.runtime import telemetry

from . import io as buffer_io
from .registers import RegisterBank
from .status import ResultCode, Status
from .undo import DeleteRecord, InsertRecord, UndoStack

NEWLINE = 0x0A
ENCODING = "utf-8"

ByteLike = Union[bytes, bytearray, memoryview]
PathLike = Union[str, "os.PathLike[str]"]


def _encode(text: str) -> bytes:
    return text.encode(ENCODING, errors="surrogateescape")


def _decode(data: ByteLike) -> str:
    return bytes(data).decode(ENCODING, errors="surrogateescape")


class GapBuffer:
    def __init__(self, *, filename: Optional[PathLike] = None) -> None:
        self._pre = bytearray()
        self._post = bytearray()
        self._line = 1
        self._column = 0
        self._dirty = False
        self._undoing = False
        self.filename: Optional[str] = os.fspath(filename) if filename else None
        self.undo_stack = UndoStack()
        self.registers = RegisterBank()

    @classmethod
    def from_text(cls, text: Union[str, ByteLike]) -> "GapBuffer":
        """Build a clean buffer (no undo history) holding ``text``."""

        buffer = cls()
        data = _encode(text) if isinstance(text, str) else bytes(text)
        with buffer._replaying():
            buffer.insert_chars(data)
        buffer._dirty = False
        return buffer

    @classmethod
    def from_file(cls, filename: PathLike) -> Tuple[Optional["GapBuffer"], Status]:
        buffer = cls(filename=filename)
        status = buffer.read()
        if not status.ok:
            return None, status
        return buffer, status

    # ------------------------------------------------------------------
    # State accessors

    @property
    def length(self) -> int:
        return len(self._pre) + len(self._post)

    def __len__(self) -> int:
        return self.length

    @property
    def position(self) -> int:
        return len(self._pre)

    @property
    def line(self) -> int:
        return self._line

    @property
    def column(self) -> int:
        return self._column

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def undoing(self) -> bool:
        return self._undoing

    def to_bytes(self) -> bytes:
        return bytes(self._pre) + bytes(self._post[::-1])

    def __str__(self) -> str:
        return _decode(self.to_bytes())

    def __repr__(self) -> str:
        return (
            f"GapBuffer(length={self.length}, position={self.position}, "
            f"line={self._line}, column={self._column}, dirty={self._dirty})"
        )

    def string_pair(self) -> Tuple[str, str]:
        """Return the text before and after the gap, for debugging."""

        return _decode(self._pre), _decode(self._post[::-1])

    # ------------------------------------------------------------------
    # Line/column bookkeeping

    def _column_from_pre(self) -> int:
        return len(self._pre) - (self._pre.rfind(b"\n") + 1)

    def _absorb(self, data: bytes) -> None:
        # line/column after ``data`` has been appended to ``_pre``
        newlines = data.count(b"\n")
        if newlines:
            self._line += newlines
            self._column = len(data) - data.rfind(b"\n") - 1
        else:
            self._column += len(data)

    # ------------------------------------------------------------------
    # Cursor movement

    def step_forward(self) -> Status:
        if not self._post:
            return Status.failure(ResultCode.PAST_END, "cursor is at buffer end")
        c = self._post.pop()
        self._pre.append(c)
        if c == NEWLINE:
            self._line += 1
            self._column = 0
        else:
            self._column += 1
        return Status.success()

    def step_backward(self) -> Status:
        if not self._pre:
            return Status.failure(ResultCode.BEFORE_START, "cursor is at buffer start")
        c = self._pre.pop()
        self._post.append(c)
        if c == NEWLINE:
            self._line -= 1
            self._column = self._column_from_pre()
        else:
            self._column -= 1
        return Status.success()

    def move_cursor_by(self, delta: int) -> Status:
        step = self.step_forward if delta >= 0 else self.step_backward
        for _ in range(abs(delta)):
            status = step()
            if not status.ok:
                return status
        return Status.success()

    def move_cursor_to(self, pos: int) -> Status:
        return self.move_cursor_by(pos - len(self._pre))

    def move_to_line(self, linenum: int) -> Status:
        """Move to the first byte of ``linenum``; the cursor stays put on failure.

        Lines follow :meth:`get_position_of_line`, so the empty tail after a
        trailing newline is not a line.
        """

        pos, status = self.get_position_of_line(linenum)
        if not status.ok:
            return Status.failure(ResultCode.INVALID_LINE, status.message)
        return self.move_cursor_to(pos)

    def move_to_column(self, col: int) -> Status:
        if col < 0:
            return Status.failure(ResultCode.INVALID_COLUMN, f"no column {col}")
        while self._column < col:
            if not self._post or self._post[-1] == NEWLINE:
                return Status.failure(
                    ResultCode.INVALID_COLUMN, f"line {self._line} has no column {col}"
                )
            self.step_forward()
        while self._column > col:
            self.step_backward()
        return Status.success()

    # ------------------------------------------------------------------
    # Editing at the cursor

    def insert_char(self, c: Union[int, ByteLike]) -> None:
        if isinstance(c, int):
            self.insert_chars(bytes((c,)))
        else:
            self.insert_chars(bytes(c)[:1])

    def insert_string(self, text: str) -> None:
        self.insert_chars(_encode(text))

    def insert_chars(self, data: ByteLike) -> None:
        data = bytes(data)
        if not data:
            return
        start = len(self._pre)
        self._dirty = True
        self._pre.extend(data)
        self._absorb(data)
        if not self._undoing:
            self.undo_stack.push(InsertRecord(self, start, len(data), start))

    def cut(self, dist: int) -> Tuple[bytes, Status]:
        """Remove up to ``|dist|`` bytes after (``dist >= 0``) or before the cursor."""

        cursor = len(self._pre)
        if dist >= 0:
            count = min(dist, len(self._post))
            split = len(self._post) - count
            removed = bytes(self._post[split:][::-1])
            del self._post[split:]
            position = cursor
        else:
            count = min(-dist, len(self._pre))
            position = cursor - count
            removed = bytes(self._pre[position:])
            del self._pre[position:]
            self._line -= removed.count(b"\n")
            self._column = self._column_from_pre()
        if removed:
            self._dirty = True
            if not self._undoing:
                self.undo_stack.push(DeleteRecord(self, position, removed, cursor))
        return removed, Status.success()

    def copy(self, dist: int) -> Tuple[bytes, Status]:
        """Return up to ``|dist|`` bytes next to the cursor without changing anything."""

        if dist >= 0:
            count = min(dist, len(self._post))
            data = bytes(self._post[len(self._post) - count :][::-1])
        else:
            count = min(-dist, len(self._pre))
            data = bytes(self._pre[len(self._pre) - count :])
        if 0 in data:
            return b"", Status.failure(ResultCode.INVALID, "copy reached a NUL byte")
        return data, Status.success()

    def clear(self) -> None:
        self.move_cursor_to(0)
        self.cut(self.length)

    def delete_range(self, start: int, end: int) -> Tuple[bytes, Status]:
        if end < start:
            return b"", Status.failure(ResultCode.INVALID_RANGE, "start comes after end")
        status = self.move_cursor_to(start)
        if not status.ok:
            return b"", status
        return self.cut(end - start)

    def insert_string_at(self, pos: int, text: str) -> Status:
        return self.insert_chars_at(pos, _encode(text))

    def insert_chars_at(self, pos: int, data: ByteLike) -> Status:
        status = self.move_cursor_to(pos)
        if status.ok:
            self.insert_chars(data)
        return status

    # ------------------------------------------------------------------
    # Cursorless queries

    def _slice(self, start: int, end: int) -> bytes:
        split = len(self._pre)
        out = bytearray(self._pre[start : min(end, split)]) if start < split else bytearray()
        if end > split:
            size = len(self._post)
            lo = max(start, split) - split
            hi = end - split
            out += self._post[size - hi : size - lo][::-1]
        return bytes(out)

    def get_char_at(self, pos: int) -> Tuple[int, Status]:
        if pos < 0:
            return 0, Status.failure(ResultCode.BEFORE_START, f"position {pos}")
        if pos >= self.length:
            return 0, Status.failure(ResultCode.PAST_END, f"position {pos}")
        split = len(self._pre)
        if pos < split:
            return self._pre[pos], Status.success()
        return self._post[len(self._post) - (pos - split) - 1], Status.success()

    def get_range(self, start: int, end: int) -> Tuple[bytes, Status]:
        if start < 0 or end < 0:
            return b"", Status.failure(ResultCode.BEFORE_START, f"range [{start}, {end})")
        if start > self.length or end > self.length:
            return b"", Status.failure(ResultCode.PAST_END, f"range [{start}, {end})")
        if end < start:
            return b"", Status.failure(ResultCode.INVALID_RANGE, "start comes after end")
        return self._slice(start, end), Status.success()

    def get_position_of_line(self, linenum: int) -> Tuple[int, Status]:
        """Offset of the first byte of line ``linenum``.

        A line only exists if it holds at least one byte, so the empty tail
        after a trailing newline is past the end. Line 1 always exists.
        """

        if linenum < 1:
            return 0, Status.failure(ResultCode.INVALID_LINE, f"no line {linenum}")
        if linenum == 1:
            return 0, Status.success()
        content = self.to_bytes()
        pos = -1
        for _ in range(linenum - 1):
            pos = content.find(b"\n", pos + 1)
            if pos < 0:
                return 0, Status.failure(ResultCode.PAST_END, f"no line {linenum}")
        if pos + 1 >= len(content):
            return 0, Status.failure(ResultCode.PAST_END, f"no line {linenum}")
        return pos + 1, Status.success()

    def get_position_of_line_and_column(
        self, linenum: int, colnum: int
    ) -> Tuple[int, Status]:
        pos, status = self.get_position_of_line(linenum)
        if not status.ok:
            return 0, Status.failure(ResultCode.INVALID_LINE, status.message)
        if colnum < 0:
            return 0, Status.failure(ResultCode.INVALID_COLUMN, f"no column {colnum}")
        for _ in range(colnum):
            c, char_status = self.get_char_at(pos)
            if not char_status.ok or c == NEWLINE:
                return 0, Status.failure(
                    ResultCode.INVALID_COLUMN, f"line {linenum} has no column {colnum}"
                )
            pos += 1
        return pos, Status.success()

    def get_coordinates(self, pos: int) -> Tuple[int, int, Status]:
        """Line and column of ``pos``.

        This rescans from the start of the buffer on every call; a table of
        periodic checkpoints would make it cheaper if it ever matters.
        """

        if pos < 0:
            return 0, 0, Status.failure(ResultCode.BEFORE_START, f"position {pos}")
        if pos > self.length:
            return 0, 0, Status.failure(ResultCode.PAST_END, f"position {pos}")
        head = self._slice(0, pos)
        line = head.count(b"\n") + 1
        column = pos - (head.rfind(b"\n") + 1)
        return line, column, Status.success()

    # ------------------------------------------------------------------
    # Undo

    @contextmanager
    def _replaying(self) -> Iterator[None]:
        self._undoing = True
        try:
            yield
        finally:
            self._undoing = False

    def can_undo(self) -> bool:
        return self.undo_stack.can_undo()

    def undo(self) -> Status:
        record = self.undo_stack.pop()
        if record is None:
            return Status.failure(ResultCode.INVALID, "nothing to undo")
        with telemetry.span(
            "buffer::undo", component="buffer", metadata={"record": record.label}
        ) as handle:
            with self._replaying():
                status = record.undo()
            if not status.ok:
                handle.reject(status.message)
        return status

    # ------------------------------------------------------------------
    # Files

    def read(self) -> Status:
        if not self.filename:
            return Status.failure(ResultCode.IO_ERROR, "buffer has no file name")
        return self.read_from(self.filename)

    def read_from(self, filename: PathLike) -> Status:
        """Replace the buffer contents with the bytes of ``filename``.

        A successful load binds the buffer to ``filename``, leaves it clean
        and drops the undo history. On failure the buffer is untouched.
        """

        path = os.fspath(filename)
        data, status = buffer_io.load(path)
        if not status.ok or data is None:
            return status
        with self._replaying():
            self.clear()
            self.insert_chars(data)
        self.move_cursor_to(0)
        self.undo_stack.clear()
        self.filename = path
        self._dirty = False
        return status

    def write(self) -> Status:
        if not self._dirty:
            return Status.success()
        if not self.filename:
            return Status.failure(ResultCode.IO_ERROR, "buffer has no file name")
        status = buffer_io.save(self.filename, self.to_bytes())
        if status.ok:
            self._dirty = False
        return status

    def write_to(self, filename: PathLike) -> Status:
        self.filename = os.fspath(filename)
        self._dirty = True
        return self.write()


__all__ = ["GapBuffer", "NEWLINE", "ENCODING"]
