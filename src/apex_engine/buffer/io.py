"""Flat-file persistence for gap buffers.

Files are read and written byte for byte. Writing keeps exactly one backup
generation: an existing ``<name>.bak`` is removed, the current file is renamed
to ``<name>.bak``, then the new contents are written.
"""

from __future__ import annotations

import os
from typing import Optional, Tuple

from apex_engine.runtime import telemetry

from .status import ResultCode, Status

BACKUP_SUFFIX = ".bak"


def backup_path(filename: str) -> str:
    return filename + BACKUP_SUFFIX


def _io_failure(op: str, path: str, exc: OSError) -> Status:
    telemetry.record_event(
        "buffer.io_error",
        level="warning",
        data={"op": op, "path": path, "error": str(exc)},
    )
    return Status.failure(ResultCode.IO_ERROR, f"could not {op} {path}: {exc}")


def load(path: str) -> Tuple[Optional[bytes], Status]:
    with telemetry.span("buffer::read", component="buffer_io", metadata={"path": path}):
        try:
            with open(path, "rb") as handle:
                data = handle.read()
        except OSError as exc:
            return None, _io_failure("read", path, exc)
    return data, Status.success()


def save(path: str, data: bytes) -> Status:
    backup = backup_path(path)
    with telemetry.span(
        "buffer::write",
        component="buffer_io",
        metadata={"path": path, "bytes": len(data)},
    ):
        try:
            if os.path.isfile(backup):
                os.remove(backup)
            if os.path.isfile(path):
                os.rename(path, backup)
            with open(path, "wb") as handle:
                handle.write(data)
        except OSError as exc:
            return _io_failure("write", path, exc)
    return Status.success()


__all__ = ["BACKUP_SUFFIX", "backup_path", "load", "save"]
