"""Named registers that hold text copied or cut by actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

UNNAMED = '"'


@dataclass(frozen=True, slots=True)
class RegisterValue:
    data: bytes = b""
    source: str = "copy"  # copy or cut


class RegisterBank:
    """Tracks the unnamed register plus any named ones.

    Every write to a named register is mirrored into the unnamed register,
    so the unnamed register always holds the most recent copy or cut.
    """

    def __init__(self) -> None:
        self._registers: Dict[str, RegisterValue] = {UNNAMED: RegisterValue()}

    def get(self, name: str = UNNAMED) -> RegisterValue:
        return self._registers.get(name, RegisterValue())

    def set(self, name: str, value: RegisterValue) -> None:
        self._registers[name] = value
        if name != UNNAMED:
            self._registers[UNNAMED] = value

    def append(self, name: str, data: bytes) -> None:
        existing = self.get(name)
        self.set(name, RegisterValue(data=existing.data + data, source=existing.source))

    def store(self, name: str | None, data: bytes, *, source: str = "copy") -> None:
        self.set(name or UNNAMED, RegisterValue(data=bytes(data), source=source))

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._registers))


__all__ = ["RegisterBank", "RegisterValue", "UNNAMED"]
