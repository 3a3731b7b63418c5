"""Structured expressions: rules that map a selection to a new selection.

Every variant is a small frozen dataclass carrying only its own fields.
:func:`evaluate` dispatches over the closed set of variants and returns
``(range, status)``; on failure the range is ``None``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from apex_engine.buffer import ENCODING, GapBuffer, ResultCode, Status

from .locations import StartRelativeLocation, validate
from .ranges import PatternRange, Range

EvalResult = Tuple[Optional[Range], Status]


class PatternCompileError(ValueError):
    """Raised when a pattern expression is built from an invalid regex."""

    def __init__(self, pattern: Union[str, bytes], reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class _Expr:
    __slots__ = ()

    def eval(self, selection: Range) -> EvalResult:
        return evaluate(self, selection)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class CharLocExpr(_Expr):
    """Absolute byte offset; negative offsets count back from the buffer end."""

    offset: int


@dataclass(frozen=True, slots=True)
class StartRelCharLocExpr(_Expr):
    offset: int


@dataclass(frozen=True, slots=True)
class EndRelCharLocExpr(_Expr):
    offset: int


@dataclass(frozen=True, slots=True)
class LineLocExpr(_Expr):
    """Start of an absolute line; ``line <= 0`` counts back from the last line."""

    line: int


@dataclass(frozen=True, slots=True)
class StartRelLineLocExpr(_Expr):
    delta: int


@dataclass(frozen=True, slots=True)
class EndRelLineLocExpr(_Expr):
    delta: int


@dataclass(frozen=True, slots=True)
class GridLocExpr(_Expr):
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class TwoPointRangeExpr(_Expr):
    start: "Expression"
    end: "Expression"


@dataclass(frozen=True, slots=True)
class PatternRangeExpr(_Expr):
    pattern: Union[str, bytes]
    flags: int = 0
    compiled: "re.Pattern[bytes]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        raw = (
            self.pattern.encode(ENCODING)
            if isinstance(self.pattern, str)
            else self.pattern
        )
        try:
            compiled = re.compile(raw, self.flags)
        except re.error as exc:
            raise PatternCompileError(self.pattern, str(exc)) from exc
        object.__setattr__(self, "compiled", compiled)


@dataclass(frozen=True, slots=True)
class ChoiceExpr(_Expr):
    first: "Expression"
    second: "Expression"


@dataclass(frozen=True, slots=True)
class AfterExpr(_Expr):
    """Find ``before``, then search for ``after`` in what follows it."""

    before: "Expression"
    after: "Expression"


Expression = Union[
    CharLocExpr,
    StartRelCharLocExpr,
    EndRelCharLocExpr,
    LineLocExpr,
    StartRelLineLocExpr,
    EndRelLineLocExpr,
    GridLocExpr,
    TwoPointRangeExpr,
    PatternRangeExpr,
    ChoiceExpr,
    AfterExpr,
]


def _point(buffer: GapBuffer, pos: int) -> EvalResult:
    location = StartRelativeLocation(buffer, pos)
    status = validate(location)
    if not status.ok:
        return None, status
    return Range(buffer, location, location), status


def _line_point(buffer: GapBuffer, linenum: int) -> EvalResult:
    if linenum < 1:
        return None, Status.failure(ResultCode.INVALID_LINE, f"no line {linenum}")
    pos, status = buffer.get_position_of_line(linenum)
    if not status.ok:
        return None, Status.failure(
            ResultCode.INVALID_LINE, f"buffer has no line {linenum}"
        )
    return _point(buffer, pos)


def _relative_line_point(buffer: GapBuffer, base: int, delta: int) -> EvalResult:
    base_line, _, status = buffer.get_coordinates(base)
    if not status.ok:
        return None, Status.failure(ResultCode.INVALID_LINE, status.message)
    return _line_point(buffer, base_line + delta)


def _eval_line(expr: LineLocExpr, selection: Range) -> EvalResult:
    buffer = selection.buffer
    if expr.line > 0:
        return _line_point(buffer, expr.line)
    last_line, _, _ = buffer.get_coordinates(buffer.length)
    return _line_point(buffer, last_line + expr.line)


def _eval_two_point(expr: TwoPointRangeExpr, selection: Range) -> EvalResult:
    status = selection.validate()
    if not status.ok:
        return None, status
    start, status = evaluate(expr.start, selection)
    if start is None:
        return None, status
    end, status = evaluate(expr.end, selection)
    if end is None:
        return None, status
    if start.start.get_absolute() > end.end.get_absolute():
        return None, Status.failure(
            ResultCode.INVALID_RANGE, "range start comes after its end"
        )
    return Range(selection.buffer, start.start, end.end), Status.success()


def _eval_pattern(expr: PatternRangeExpr, selection: Range) -> EvalResult:
    contents, status = selection.get_contents()
    if not status.ok:
        return None, status
    match = expr.compiled.search(contents)
    if match is None:
        return None, Status.failure(
            ResultCode.MATCH_FAILED, f"no match for {expr.pattern!r}"
        )
    buffer = selection.buffer
    base = selection.start.get_absolute()
    spans = tuple(match.span(group) for group in range(expr.compiled.groups + 1))
    result = PatternRange(
        buffer,
        StartRelativeLocation(buffer, base + match.start()),
        StartRelativeLocation(buffer, base + match.end()),
        selected=contents,
        spans=spans,
    )
    return result, Status.success()


def _eval_choice(expr: ChoiceExpr, selection: Range) -> EvalResult:
    result, status = evaluate(expr.first, selection)
    if result is not None:
        return result, status
    return evaluate(expr.second, selection)


def _eval_after(expr: AfterExpr, selection: Range) -> EvalResult:
    found, status = evaluate(expr.before, selection)
    if found is None:
        return None, status
    remainder = Range(selection.buffer, found.end, selection.end).normalize()
    if remainder.start.get_absolute() >= remainder.end.get_absolute():
        return None, Status.failure(
            ResultCode.INVALID_RANGE, "nothing left to search after the first match"
        )
    return evaluate(expr.after, remainder)


def evaluate(expr: Expression, selection: Range) -> EvalResult:
    """Resolve ``expr`` against ``selection``."""

    buffer = selection.buffer
    match expr:
        case CharLocExpr(offset=offset):
            pos = offset if offset >= 0 else buffer.length + offset
            return _point(buffer, pos)
        case StartRelCharLocExpr(offset=offset):
            return _point(buffer, selection.start.get_absolute() + offset)
        case EndRelCharLocExpr(offset=offset):
            return _point(buffer, selection.end.get_absolute() + offset)
        case LineLocExpr():
            return _eval_line(expr, selection)
        case StartRelLineLocExpr(delta=delta):
            return _relative_line_point(buffer, selection.start.get_absolute(), delta)
        case EndRelLineLocExpr(delta=delta):
            return _relative_line_point(buffer, selection.end.get_absolute(), delta)
        case GridLocExpr(line=line, column=column):
            pos, status = buffer.get_position_of_line_and_column(line, column)
            if not status.ok:
                return None, status
            return _point(buffer, pos)
        case TwoPointRangeExpr():
            return _eval_two_point(expr, selection)
        case PatternRangeExpr():
            return _eval_pattern(expr, selection)
        case ChoiceExpr():
            return _eval_choice(expr, selection)
        case AfterExpr():
            return _eval_after(expr, selection)
    raise TypeError(f"Unsupported expression {type(expr).__name__}")


__all__ = [
    "Expression",
    "EvalResult",
    "PatternCompileError",
    "CharLocExpr",
    "StartRelCharLocExpr",
    "EndRelCharLocExpr",
    "LineLocExpr",
    "StartRelLineLocExpr",
    "EndRelLineLocExpr",
    "GridLocExpr",
    "TwoPointRangeExpr",
    "PatternRangeExpr",
    "ChoiceExpr",
    "AfterExpr",
    "evaluate",
]
