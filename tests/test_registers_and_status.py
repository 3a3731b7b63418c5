from __future__ import annotations

import pytest

from apex_engine.buffer import (
    UNNAMED,
    GapBuffer,
    InsertRecord,
    RegisterBank,
    ResultCode,
    Status,
    UndoStack,
)


def test_status_success_is_shared_and_truthy() -> None:
    assert Status.success() is Status.success()
    assert Status.success().ok
    assert bool(Status.success()) is True


def test_status_failure_defaults_message() -> None:
    status = Status.failure(ResultCode.MATCH_FAILED)

    assert not status
    assert status.message == "match_failed"


def test_status_failure_requires_error_code() -> None:
    with pytest.raises(ValueError):
        Status.failure(ResultCode.SUCCEEDED)


def test_register_writes_mirror_into_unnamed() -> None:
    bank = RegisterBank()

    bank.store("a", b"alpha")
    bank.store(None, b"plain", source="cut")

    assert bank.get("a").data == b"alpha"
    assert bank.get(UNNAMED).data == b"plain"
    assert bank.get(UNNAMED).source == "cut"
    assert bank.get("z").data == b""
    assert bank.names() == ('"', "a")


def test_register_append() -> None:
    bank = RegisterBank()
    bank.store("a", b"one ", source="cut")

    bank.append("a", b"two")

    assert bank.get("a").data == b"one two"
    assert bank.get("a").source == "cut"
    assert bank.get().data == b"one two"


def test_undo_stack_is_lifo() -> None:
    buffer = GapBuffer()
    stack = UndoStack()
    first = InsertRecord(buffer, 0, 1, 0)
    second = InsertRecord(buffer, 1, 2, 1)

    assert stack.pop() is None
    stack.push(first)
    stack.push(second)

    assert len(stack) == 2
    assert stack.peek() is second
    assert stack.pop() is second
    assert stack.pop() is first
    assert stack.can_undo() is False


def test_empty_edits_leave_no_history() -> None:
    buffer = GapBuffer.from_text("abc")

    buffer.insert_string("")
    removed, status = buffer.cut(5)

    assert status.ok and removed == b""
    assert buffer.can_undo() is False
    assert buffer.dirty is False
