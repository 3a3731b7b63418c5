"""Gap buffer, undo records, registers and file persistence."""

from .gap import ENCODING, NEWLINE, GapBuffer
from .io import BACKUP_SUFFIX, backup_path
from .manager import BufferManager
from .registers import UNNAMED, RegisterBank, RegisterValue
from .status import ResultCode, Status
from .undo import DeleteRecord, InsertRecord, UndoRecord, UndoStack

__all__ = [
    "GapBuffer",
    "NEWLINE",
    "ENCODING",
    "BACKUP_SUFFIX",
    "backup_path",
    "BufferManager",
    "RegisterBank",
    "RegisterValue",
    "UNNAMED",
    "ResultCode",
    "Status",
    "InsertRecord",
    "DeleteRecord",
    "UndoRecord",
    "UndoStack",
]
