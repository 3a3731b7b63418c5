"""Buffer offsets anchored either to the buffer start or to the buffer end.

A start-relative location stores its absolute offset. An end-relative
location stores the distance back from the end of the buffer, so its absolute
offset is recomputed from the buffer's *current* length every time it is
asked for. Converting between the two is a snapshot taken at conversion time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union

from apex_engine.buffer import GapBuffer, ResultCode, Status


class Location(Protocol):
    buffer: GapBuffer

    def get_absolute(self) -> int:
        ...

    def as_start_relative(self) -> "StartRelativeLocation":
        ...

    def as_end_relative(self) -> "EndRelativeLocation":
        ...


@dataclass(frozen=True, slots=True, eq=False)
class StartRelativeLocation:
    buffer: GapBuffer
    offset: int

    def get_absolute(self) -> int:
        return self.offset

    def as_start_relative(self) -> "StartRelativeLocation":
        return self

    def as_end_relative(self) -> "EndRelativeLocation":
        return EndRelativeLocation(self.buffer, self.buffer.length - self.offset)

    def __repr__(self) -> str:
        return f"StartRelativeLocation({self.offset})"


@dataclass(frozen=True, slots=True, eq=False)
class EndRelativeLocation:
    buffer: GapBuffer
    offset: int

    def get_absolute(self) -> int:
        return self.buffer.length - self.offset

    def as_start_relative(self) -> StartRelativeLocation:
        return StartRelativeLocation(self.buffer, self.get_absolute())

    def as_end_relative(self) -> "EndRelativeLocation":
        return self

    def __repr__(self) -> str:
        return f"EndRelativeLocation(-{self.offset})"


AnyLocation = Union[StartRelativeLocation, EndRelativeLocation]


def validate(location: Location) -> Status:
    pos = location.get_absolute()
    if pos < 0:
        return Status.failure(
            ResultCode.BEFORE_START, "location points to before buffer start"
        )
    if pos > location.buffer.length:
        return Status.failure(ResultCode.PAST_END, "location points past buffer end")
    return Status.success()


__all__ = [
    "Location",
    "AnyLocation",
    "StartRelativeLocation",
    "EndRelativeLocation",
    "validate",
]
