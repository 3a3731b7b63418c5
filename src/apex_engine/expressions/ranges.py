"""Concrete selections: plain ranges and ranges produced by a pattern match."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Tuple, Union

from apex_engine.buffer import ENCODING, GapBuffer, ResultCode, Status

from .locations import AnyLocation, EndRelativeLocation, StartRelativeLocation, validate

Span = Tuple[int, int]

_TEMPLATE_REF = re.compile(rb"\$(\d+)")


@dataclass(frozen=True, slots=True, eq=False)
class Range:
    """A ``[start, end)`` selection over one buffer."""

    buffer: GapBuffer
    start: AnyLocation
    end: AnyLocation

    @property
    def length(self) -> int:
        return self.end.get_absolute() - self.start.get_absolute()

    def bounds(self) -> Span:
        return self.start.get_absolute(), self.end.get_absolute()

    def validate(self) -> Status:
        status = validate(self.start)
        if not status.ok:
            return status
        status = validate(self.end)
        if not status.ok:
            return status
        if self.start.get_absolute() > self.end.get_absolute():
            return Status.failure(ResultCode.INVALID_RANGE, "start comes after end")
        return Status.success()

    def get_contents(self) -> Tuple[bytes, Status]:
        status = self.validate()
        if not status.ok:
            return b"", status
        return self.buffer.get_range(*self.bounds())

    def normalize(self) -> "Range":
        """Anchor ``start`` to the buffer start and ``end`` to the buffer end.

        Edits after the start no longer move it, and the end keeps pointing
        at the same byte when the buffer grows or shrinks ahead of it.
        """

        return replace(
            self, start=self.start.as_start_relative(), end=self.end.as_end_relative()
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.start!r}, {self.end!r})"


@dataclass(frozen=True, slots=True, eq=False)
class PatternRange(Range):
    """A range that also remembers the slice it was matched in and its groups.

    ``spans`` holds ``(start, end)`` offsets into ``selected`` for the whole
    match (index 0) and each capture group; an unmatched group is ``(-1, -1)``.
    """

    selected: bytes = b""
    spans: Tuple[Span, ...] = ()

    def get_number_of_matches(self) -> int:
        return max(len(self.spans) - 1, 0)

    def get_match(self, index: int) -> bytes:
        if index < 0 or index >= len(self.spans):
            return b""
        start, end = self.spans[index]
        if start < 0:
            return b""
        return self.selected[start:end]

    def instantiate_template(self, template: Union[str, bytes]) -> Tuple[bytes, Status]:
        """Substitute ``$<n>`` markers in ``template`` with capture ``n``."""

        raw = template.encode(ENCODING) if isinstance(template, str) else template
        out = bytearray()
        last = 0
        for ref in _TEMPLATE_REF.finditer(raw):
            index = int(ref.group(1))
            if index > self.get_number_of_matches():
                return b"", Status.failure(
                    ResultCode.INVALID_REPLACEMENT,
                    f"template refers to ${index} but the match has "
                    f"{self.get_number_of_matches()} groups",
                )
            out += raw[last : ref.start()]
            out += self.get_match(index)
            last = ref.end()
        out += raw[last:]
        return bytes(out), Status.success()


def span_range(buffer: GapBuffer, start: int, end: int) -> Range:
    return Range(
        buffer, StartRelativeLocation(buffer, start), StartRelativeLocation(buffer, end)
    )


def whole_buffer(buffer: GapBuffer) -> Range:
    """The entire buffer, already normalized so it tracks later edits."""

    return Range(buffer, StartRelativeLocation(buffer, 0), EndRelativeLocation(buffer, 0))


def cursor_point(buffer: GapBuffer) -> Range:
    return span_range(buffer, buffer.position, buffer.position)


__all__ = [
    "Range",
    "PatternRange",
    "Span",
    "span_range",
    "whole_buffer",
    "cursor_point",
]
