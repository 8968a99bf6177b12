"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Pipeline stages for identical-file detection.

CLASS HIERARCHY
---------------
SizeStageImpl          : Initial grouping of all scanned records by size
HashStageBase          : Shared re-hash-and-regroup logic for hashing stages
PartialHashStage       : Re-keys members by (size, xxHash64 of the first bytes)
FullHashStage          : Re-keys members by (size, full-content digest)

STAGE CONTRACTS
---------------
Each hashing stage implements `process()`:
  • Accepts the surviving groups of the previous stage
  • Hashes only the member paths of those groups, concurrently across all groups
  • Regroups each group independently with a fresh Key per path
  • Returns the refined groups for the next stage
  • Reports progress via callback (stage name, processed count, total count)
  • Respects cancellation via stopped_flag callback

FREQUENCY WINDOW
----------------
Size and partial stages apply only the minimum frequency: a large group may
still split into groups that satisfy the maximum later. The full stage applies
both bounds.

FAILURES
--------
ErrorPolicy.ABORT re-raises the first hashing error. ErrorPolicy.SKIP drops the
failing path from its group, logs a warning and keeps it in `failures`.
"""

import logging
from typing import List, Optional, Callable, Tuple

from identical_files.core.models import (
    Algorithm, ErrorPolicy, FileFailure, FileRecord, Group, Stage)
from identical_files.core.grouper import FileGrouperImpl
from identical_files.core.hasher import HasherImpl
from identical_files.core.interfaces import Stage as StageProtocol
from identical_files.core.workers import WorkerPool
from identical_files.errors import IdenticalFilesError

logger = logging.getLogger(__name__)

# (digest, error); exactly one of them is set, both None when cancelled
_HashResult = Tuple[Optional[str], Optional[IdenticalFilesError]]


# =============================
# Size stage
# =============================
class SizeStageImpl:
    def __init__(self, grouper: FileGrouperImpl, min_frequency: int = 2):
        self.grouper = grouper
        self.min_frequency = min_frequency

    def get_stage_name(self) -> str:
        return Stage.SIZE.value

    def process(
            self,
            records: List[FileRecord],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[Group]:
        """
        Group by file size.
        Returns groups of at least min_frequency files of the same size.
        """
        if stopped_flag and stopped_flag():
            return []

        groups = self.grouper.group_by_size(records, min_frequency=self.min_frequency)

        if progress_callback:
            total_files = len(records)
            progress_callback(self.get_stage_name(), total_files, total_files)

        return groups


# =============================
# Hashing stages
# =============================
class HashStageBase(StageProtocol):
    """
    Base class for stages that re-key group members by a content digest.
    Subclasses provide the digest and the frequency window.
    """

    def __init__(
            self,
            grouper: FileGrouperImpl,
            hasher: HasherImpl,
            pool: Optional[WorkerPool] = None,
            min_frequency: int = 2,
            error_policy: ErrorPolicy = ErrorPolicy.ABORT,
    ):
        self.grouper = grouper
        self.hasher = hasher
        self.pool = pool
        self.min_frequency = min_frequency
        self.error_policy = error_policy
        self.failures: List[FileFailure] = []

    def get_stage_name(self) -> str:
        raise NotImplementedError

    def get_max_frequency(self) -> Optional[int]:
        """Intermediate stages never enforce the maximum."""
        return None

    def compute_digest(self, path: str) -> str:
        raise NotImplementedError

    def process(
        self,
        groups: List[Group],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[Group]:
        self.failures = []
        if stopped_flag and stopped_flag():
            return []

        paths = [path for group in groups for path in group.paths]
        total_files = len(paths)

        def hash_one(path: str) -> _HashResult:
            if stopped_flag and stopped_flag():
                return None, None
            try:
                return self.compute_digest(path), None
            except IdenticalFilesError as e:
                if self.error_policy == ErrorPolicy.ABORT:
                    raise
                return None, e

        if self.pool is not None:
            results = list(self.pool.map(hash_one, paths))
        else:
            results = [hash_one(path) for path in paths]

        if stopped_flag and stopped_flag():
            return []

        refined: List[Group] = []
        processed_files = 0
        offset = 0
        for group in groups:
            if stopped_flag and stopped_flag():
                return []

            group_results = results[offset:offset + group.count]
            offset += group.count

            refined.extend(self._regroup(group, group_results))

            processed_files += group.count
            if progress_callback:
                progress_callback(self.get_stage_name(), processed_files, total_files)

        logger.debug(
            f"{self.get_stage_name()}: {len(groups)} groups in, {len(refined)} groups out, "
            f"{len(self.failures)} files skipped"
        )
        return refined

    def _regroup(self, group: Group, results: List[_HashResult]) -> List[Group]:
        records = []
        for path, (digest, error) in zip(group.paths, results):
            if error is not None:
                logger.warning(f"Skipping {path}: {error}")
                self.failures.append(FileFailure(path=path, stage=self.get_stage_name(), reason=str(error)))
                continue
            if digest is None:
                continue
            records.append(FileRecord(key=group.key.with_digest(digest), path=path))

        return self.grouper.group_by_key(
            records,
            min_frequency=self.min_frequency,
            max_frequency=self.get_max_frequency(),
        )


class PartialHashStage(HashStageBase):
    def get_stage_name(self) -> str:
        return Stage.PARTIAL.value

    def compute_digest(self, path: str) -> str:
        return self.hasher.compute_partial_digest(path)


class FullHashStage(HashStageBase):
    def __init__(
            self,
            grouper: FileGrouperImpl,
            hasher: HasherImpl,
            pool: Optional[WorkerPool] = None,
            min_frequency: int = 2,
            max_frequency: Optional[int] = None,
            algorithm: Optional[Algorithm] = None,
            error_policy: ErrorPolicy = ErrorPolicy.ABORT,
    ):
        super().__init__(grouper, hasher, pool=pool, min_frequency=min_frequency, error_policy=error_policy)
        self.max_frequency = max_frequency
        self.algorithm = algorithm

    def get_stage_name(self) -> str:
        return Stage.FULL.value

    def get_max_frequency(self) -> Optional[int]:
        return self.max_frequency

    def compute_digest(self, path: str) -> str:
        return self.hasher.compute_full_digest(path, self.algorithm)
