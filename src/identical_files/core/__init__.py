"""
Core engine: directory walker, hasher, grouper and pipeline orchestrator.

This package contains the performance-critical foundation of identical-files:
- DirectoryWalkerImpl: parallel directory traversal with depth/size/hidden filters
- HasherImpl: xxHash64 partial digests and pluggable full-content digests
- FileGrouperImpl: Key-based grouping with an inclusive frequency window
- DeduplicatorImpl: size → partial digest → full digest pipeline
- WorkerPool: the single thread pool shared by one run
- Models: Key, FileRecord, Group, Summary and SearchParams

Nothing here writes to stdout; rendering lives in the services package.
"""

from .scanner import DirectoryWalkerImpl
from .grouper import FileGrouperImpl
from .hasher import HasherImpl, get_algorithm
from .deduplicator import DeduplicatorImpl
from .sorter import Sorter
from .workers import WorkerPool
from .models import (
    Algorithm, ErrorPolicy, ResultFormat, Key, FileRecord, Group, PathRow,
    Summary, FileFailure, PipelineStats, SearchParams)

__all__ = [
    "DirectoryWalkerImpl",
    "FileGrouperImpl",
    "HasherImpl",
    "get_algorithm",
    "DeduplicatorImpl",
    "Sorter",
    "WorkerPool",
    "Algorithm",
    "ErrorPolicy",
    "ResultFormat",
    "Key",
    "FileRecord",
    "Group",
    "PathRow",
    "Summary",
    "FileFailure",
    "PipelineStats",
    "SearchParams",
]
