"""Dataclasses describing edit actions. Execution lives in :mod:`.engine`."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Union

from apex_engine.expressions import Expression

if TYPE_CHECKING:
    from apex_engine.buffer import Status
    from apex_engine.expressions import Range


class TextActionKind(str, Enum):
    INSERT = "insert"
    APPEND = "append"
    REPLACE = "replace"


class _Action:
    __slots__ = ()

    def execute(self, target: "Range") -> "Status":
        from .engine import execute

        return execute(self, target)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class DeleteAction(_Action):
    """Cut the range; the removed bytes go to ``register`` when one is named."""

    register: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TextAction(_Action):
    """Insert, append or replace with ``text``.

    When the target is a pattern match, ``text`` is a template and ``$<n>``
    markers are replaced with the match's capture groups.
    """

    kind: TextActionKind
    text: Union[str, bytes]


@dataclass(frozen=True, slots=True)
class CopyAction(_Action):
    register: Optional[str] = None


@dataclass(slots=True)
class SequenceAction(_Action):
    actions: List["Action"] = field(default_factory=list)

    def add_action(self, action: "Action") -> "SequenceAction":
        self.actions.append(action)
        return self


@dataclass(frozen=True, slots=True)
class LoopAction(_Action):
    """Run ``body`` on every match of ``pattern`` inside the target range."""

    pattern: Expression
    body: "Action"


Action = Union[DeleteAction, TextAction, CopyAction, SequenceAction, LoopAction]


def insert_action(text: Union[str, bytes]) -> TextAction:
    return TextAction(TextActionKind.INSERT, text)


def append_action(text: Union[str, bytes]) -> TextAction:
    """Text lands at the end of the range; a normalized range then includes it."""

    return TextAction(TextActionKind.APPEND, text)


def replace_action(text: Union[str, bytes]) -> TextAction:
    return TextAction(TextActionKind.REPLACE, text)


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
]
