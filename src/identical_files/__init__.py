"""
identical-files — find identical files by size and content hash.

Core features:
- Parallel directory walk with depth, size and hidden-entry filters
- Three-stage narrowing: size → partial xxHash64 → full digest (BLAKE3, xxHash, SHA-2, BLAKE2b)
- Reports in JSON, YAML or human-readable text, plus CSV and XLSX export
- Read-only: no file is ever modified or deleted
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("identical-files")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from identical_files.commands import SearchCommand
from identical_files.core import (
    Algorithm, ErrorPolicy, ResultFormat, SearchParams, Group, Key, FileRecord, Summary)
from identical_files.errors import (
    IdenticalFilesError, NotFoundError, PermissionDeniedError, FileIOError,
    SerializationError, ValidationError)
from identical_files.utils.convert_utils import ConvertUtils
from identical_files.services import ReportService, ExportService

__all__ = [
    "SearchCommand",
    "SearchParams",
    "Algorithm",
    "ErrorPolicy",
    "ResultFormat",
    "Group",
    "Key",
    "FileRecord",
    "Summary",
    "IdenticalFilesError",
    "NotFoundError",
    "PermissionDeniedError",
    "FileIOError",
    "SerializationError",
    "ValidationError",
    "ConvertUtils",
    "ReportService",
    "ExportService",
    "__version__",
]
