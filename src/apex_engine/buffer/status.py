"""Result codes returned by every fallible buffer, expression and action call."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ResultCode(IntEnum):
    SUCCEEDED = 0
    PAST_END = 1
    BEFORE_START = 2
    TOO_LONG = 3
    INVALID = 4
    INVALID_RANGE = 5
    INVALID_REPLACEMENT = 6
    MATCH_FAILED = 7
    INVALID_LINE = 8
    INVALID_COLUMN = 9
    IO_ERROR = 10


@dataclass(frozen=True, slots=True)
class Status:
    """Outcome of an operation: a result code plus a human-readable reason."""

    code: ResultCode = ResultCode.SUCCEEDED
    message: str = ""

    @classmethod
    def success(cls) -> "Status":
        return _SUCCESS

    @classmethod
    def failure(cls, code: ResultCode, message: str = "") -> "Status":
        if code == ResultCode.SUCCEEDED:
            raise ValueError("failure() requires a non-success result code")
        return cls(code=code, message=message or code.name.lower())

    @property
    def ok(self) -> bool:
        return self.code == ResultCode.SUCCEEDED

    def __bool__(self) -> bool:
        return self.ok


_SUCCESS = Status()

__all__ = ["ResultCode", "Status"]
