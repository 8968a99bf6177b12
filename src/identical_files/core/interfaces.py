"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the pipeline.
These protocols enforce structural typing using Python's `typing.Protocol` to keep
components swappable and easy to fake in tests.

Key Components:
---------------
- HashAlgorithm: Standardized interface for hash functions (xxHash, BLAKE3, SHA-2...).
- Hasher: Interface for computing partial and full digests of files.
- DirectoryWalker: Interface for traversing a directory tree into FileRecords.
- FileGrouper: Interface for grouping records by Key with a frequency window.
- Stage: Interface for one step of the staged pipeline.
- Deduplicator: Interface for the engine coordinating all stages.
"""

from typing import Protocol, List, Optional, Callable, Tuple
from identical_files.core.models import (
    Algorithm,
    FileRecord,
    Group,
    PipelineStats,
    SearchParams,
)


class DigestState(Protocol):
    """Incremental hasher object returned by HashAlgorithm.new()."""
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like BLAKE3, SHA-256 or xxHash
    without affecting the rest of the pipeline logic.
    """

    def new(self) -> DigestState:
        """Returns a fresh incremental hasher."""
        ...


class Hasher(Protocol):
    """Interface for hashing files."""
    def compute_partial_digest(self, path: str) -> str: ...
    def compute_full_digest(self, path: str, algorithm: Optional[Algorithm] = None) -> str: ...


class DirectoryWalker(Protocol):
    """
    Interface for traversing a directory tree.

    Methods:
        walk: Returns one FileRecord (digest=None) per regular file that passed the filters.
    """
    def walk(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[FileRecord]:
        ...


class FileGrouper(Protocol):
    """
    Interface for grouping records that share an identical Key.
    """
    def group_by_key(
        self,
        records: List[FileRecord],
        min_frequency: int = 2,
        max_frequency: Optional[int] = None
    ) -> List[Group]:
        ...


# =============================
# Stage Interfaces
# =============================


class Stage(Protocol):
    """
    Interface for one refinement step of the pipeline.

    Each implementation re-keys the members of the incoming groups and regroups
    them, returning only the groups that are still plausible duplicates.
    """

    def get_stage_name(self) -> str:
        """Return the name of this stage (used in logging and stats)."""
        ...

    def process(
        self,
        groups: List[Group],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[Group]:
        ...


class Deduplicator(Protocol):
    """
    Interface for the main engine.

    Coordinates size → partial digest → full digest and collects statistics.
    """
    def find_duplicates(
        self,
        records: List[FileRecord],
        params: SearchParams,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[Group], PipelineStats]:
        """
        Run the full pipeline.

        Args:
            records: FileRecords produced by the directory walker.
            params: Unified configuration (algorithm, frequency window, sort, error policy).
            stopped_flag: Optional function to check for cancellation.
            progress_callback: Optional callback for progress updates (stage, current, total).

        Returns:
            A tuple containing:
                - Final groups, sorted
                - Statistics collected during processing
        """
        ...
