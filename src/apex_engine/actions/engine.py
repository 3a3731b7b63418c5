"""Executes actions against a validated range, driving the gap buffer."""

from __future__ import annotations

from typing import Tuple

from apex_engine.buffer import ENCODING, ResultCode, Status
from apex_engine.expressions import (
    PatternRange,
    Range,
    StartRelativeLocation,
    evaluate,
)
from apex_engine.runtime.telemetry import record_event, span

from .models import (
    Action,
    CopyAction,
    DeleteAction,
    LoopAction,
    SequenceAction,
    TextAction,
    TextActionKind,
)


def _label(action: Action) -> str:
    if isinstance(action, TextAction):
        return action.kind.value
    return type(action).__name__.removesuffix("Action").lower()


def resolve_text(action: TextAction, target: Range) -> Tuple[bytes, Status]:
    if isinstance(target, PatternRange):
        return target.instantiate_template(action.text)
    text = action.text
    if isinstance(text, str):
        text = text.encode(ENCODING)
    return bytes(text), Status.success()


def _delete(action: DeleteAction, target: Range) -> Status:
    status = target.validate()
    if not status.ok:
        return status
    buffer = target.buffer
    buffer.move_cursor_to(target.start.get_absolute())
    removed, status = buffer.cut(target.length)
    if action.register is not None:
        buffer.registers.store(action.register, removed, source="cut")
    return status


def _text(action: TextAction, target: Range) -> Status:
    status = target.validate()
    if not status.ok:
        return status
    text, status = resolve_text(action, target)
    if not status.ok:
        return status

    buffer = target.buffer
    if action.kind is TextActionKind.APPEND:
        buffer.move_cursor_to(target.end.get_absolute())
    else:
        length = target.length
        buffer.move_cursor_to(target.start.get_absolute())
        if action.kind is TextActionKind.REPLACE:
            buffer.cut(length)
    buffer.insert_chars(text)
    return Status.success()


def _copy(action: CopyAction, target: Range) -> Status:
    contents, status = target.get_contents()
    if status.ok:
        target.buffer.registers.store(action.register, contents, source="copy")
    return status


def _sequence(action: SequenceAction, target: Range) -> Status:
    status = target.validate()
    if not status.ok:
        return status
    scope = target.normalize()
    for step in action.actions:
        status = execute(step, scope)
        if not status.ok:
            return status
    return Status.success()


def _loop(action: LoopAction, target: Range) -> Status:
    """Apply the body to each match, resuming after the edited match region.

    Each match is normalized before the body runs, so its end follows
    whatever the body inserted or removed inside it; the next search starts
    there. An empty match moves the search on by one more byte.
    """

    status = target.validate()
    if not status.ok:
        return status
    buffer = target.buffer
    scope = target.normalize()
    resume = scope.start.get_absolute()
    iterations = 0

    while resume <= scope.end.get_absolute():
        window = Range(buffer, StartRelativeLocation(buffer, resume), scope.end)
        found, status = evaluate(action.pattern, window)
        if found is None:
            if status.code == ResultCode.MATCH_FAILED:
                break
            return status
        found = found.normalize()
        empty = found.length == 0
        status = execute(action.body, found)
        if not status.ok:
            return status
        iterations += 1
        resume = found.end.get_absolute()
        if empty:
            resume = max(resume, window.start.get_absolute()) + 1

    record_event("action.loop", level="debug", data={"iterations": iterations})
    return Status.success()


def _dispatch(action: Action, target: Range) -> Status:
    match action:
        case DeleteAction():
            return _delete(action, target)
        case TextAction():
            return _text(action, target)
        case CopyAction():
            return _copy(action, target)
        case SequenceAction():
            return _sequence(action, target)
        case LoopAction():
            return _loop(action, target)
    raise TypeError(f"Unsupported action {type(action).__name__}")


def execute(action: Action, target: Range) -> Status:
    """Run ``action`` on ``target`` and return its status."""

    with span(
        f"action::{_label(action)}",
        component="actions",
        metadata={"range": target.bounds()},
    ) as handle:
        status = _dispatch(action, target)
        if not status.ok:
            handle.reject(f"{status.code.name}: {status.message}")
    return status


__all__ = ["execute", "resolve_text"]
