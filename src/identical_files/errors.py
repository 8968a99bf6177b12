"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

errors.py
Error taxonomy shared by the scanner, hasher, pipeline and exporters.

Every error carries enough context (path + underlying cause) for the CLI
to print a single human-readable diagnostic and exit with non-zero status.
"""

from typing import Optional, Union
import os

PathLike = Union[str, "os.PathLike[str]"]


class IdenticalFilesError(Exception):
    """Base class for all errors raised by identical_files."""

    label = "Error"

    def __init__(self, message: str, path: Optional[PathLike] = None, cause: Optional[BaseException] = None):
        self.path = str(path) if path is not None else None
        self.cause = cause
        super().__init__(message)


class _PathError(IdenticalFilesError):
    def __init__(self, path: PathLike, cause: Optional[BaseException] = None):
        text = f"{self.label}: '{path}'"
        if cause is not None:
            text += f"\n{cause}"
        super().__init__(text, path=path, cause=cause)


class NotFoundError(_PathError):
    """A configured path or a scanned file no longer exists."""
    label = "File Not Found Error"


class PermissionDeniedError(_PathError):
    """Path exists but cannot be read or written."""
    label = "Permission Denied Error"


class FileIOError(_PathError):
    """Any other OS-level failure during open/read/write."""
    label = "IO Error"


class SerializationError(IdenticalFilesError):
    """Structured output (JSON/YAML/CSV/XLSX) could not be encoded."""
    label = "Serialization Error"

    def __init__(self, cause: BaseException, path: Optional[PathLike] = None):
        super().__init__(f"{self.label}: {cause}", path=path, cause=cause)


class ValidationError(IdenticalFilesError, ValueError):
    """Configuration invariant violated (detected before any traversal)."""
    label = "Validation Error"


def from_os_error(path: PathLike, exc: OSError) -> IdenticalFilesError:
    """Map an OSError raised for `path` onto the matching error kind."""
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(path, exc)
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(path, exc)
    return FileIOError(path, exc)
