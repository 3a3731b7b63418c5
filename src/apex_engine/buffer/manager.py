"""Keeps one gap buffer per file so reopening a path returns the same buffer."""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

from apex_engine.runtime.telemetry import span

from .gap import GapBuffer, PathLike
from .status import ResultCode, Status


def _key(path: PathLike) -> str:
    return os.path.abspath(os.fspath(path))


class BufferManager:
    def __init__(self) -> None:
        self._buffers: Dict[str, GapBuffer] = {}

    def get_buffer(self, path: PathLike) -> Optional[GapBuffer]:
        return self._buffers.get(_key(path))

    def open_buffer(
        self, path: PathLike, *, create: bool = False
    ) -> Tuple[Optional[GapBuffer], Status]:
        """Return the buffer for ``path``, loading it on first use.

        A missing file is an ``IO_ERROR`` unless ``create`` is set, in which
        case an empty buffer bound to the path is returned.
        """

        key = _key(path)
        existing = self._buffers.get(key)
        if existing is not None:
            return existing, Status.success()

        with span("buffers::open", component="buffers", metadata={"path": key}):
            if os.path.exists(key):
                buffer, status = GapBuffer.from_file(key)
                if buffer is None:
                    return None, status
            elif create:
                buffer = GapBuffer(filename=key)
            else:
                return None, Status.failure(ResultCode.IO_ERROR, f"no such file {key}")

        self._buffers[key] = buffer
        return buffer, Status.success()

    def close(self, path: PathLike) -> Optional[GapBuffer]:
        return self._buffers.pop(_key(path), None)

    def buffers(self) -> Tuple[GapBuffer, ...]:
        return tuple(self._buffers.values())

    def write_all(self) -> Status:
        """Write every dirty buffer, stopping at the first failure."""

        for buffer in self._buffers.values():
            status = buffer.write()
            if not status.ok:
                return status
        return Status.success()


__all__ = ["BufferManager"]
