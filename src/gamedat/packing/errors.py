"""Error definitions for the GAMEDAT codec."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_FORMAT = "E_FORMAT"
E_COUNT = "E_COUNT"
E_DIRECTORY_BOUNDS = "E_DIRECTORY_BOUNDS"
E_ENTRY_BOUNDS = "E_ENTRY_BOUNDS"
E_NAME_ENCODE = "E_NAME_ENCODE"
E_FILE_SIZE = "E_FILE_SIZE"
E_OPTIONS = "E_OPTIONS"
E_ABORTED = "E_ABORTED"
E_ENTRY_NOT_FOUND = "E_ENTRY_NOT_FOUND"
E_UNSAFE_NAME = "E_UNSAFE_NAME"


@dataclass
class GameDatError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class FormatMismatchError(GameDatError):
    pass


class CorruptDirectoryError(GameDatError):
    pass


class InvalidFileNameError(GameDatError):
    pass


class FileSizeError(GameDatError):
    pass


class OptionsError(GameDatError):
    pass


class OperationAborted(GameDatError):
    pass


class EntryNotFoundError(GameDatError):
    pass


def corrupt_directory(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> CorruptDirectoryError:
    return CorruptDirectoryError(code=code, message=message, context=context)


__all__ = [
    "GameDatError",
    "FormatMismatchError",
    "CorruptDirectoryError",
    "InvalidFileNameError",
    "FileSizeError",
    "OptionsError",
    "OperationAborted",
    "EntryNotFoundError",
    "corrupt_directory",
    "E_FORMAT",
    "E_COUNT",
    "E_DIRECTORY_BOUNDS",
    "E_ENTRY_BOUNDS",
    "E_NAME_ENCODE",
    "E_FILE_SIZE",
    "E_OPTIONS",
    "E_ABORTED",
    "E_ENTRY_NOT_FOUND",
    "E_UNSAFE_NAME",
]
