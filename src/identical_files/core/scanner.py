"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Parallel recursive directory traversal producing FileRecords.
Features:
- Every directory listing is one task in the worker pool; discovered
  subdirectories are submitted as new tasks
- Depth bounds (root = depth 0), hidden-entry exclusion, inclusive size range
- Size filter applied while listing, before any FileRecord is created
- Regular files only: symlinks are neither reported nor followed
"""

import os
import time
import logging
from concurrent.futures import FIRST_COMPLETED, wait
from pathlib import Path
from typing import List, Optional, Callable, Tuple

from identical_files.core.interfaces import DirectoryWalker
from identical_files.core.models import FileRecord, Key, ErrorPolicy, FileFailure
from identical_files.core.workers import WorkerPool
from identical_files.errors import NotFoundError, ValidationError, from_os_error

logger = logging.getLogger(__name__)

# (records, subdirectories with their depth, failures)
_ListingResult = Tuple[List[FileRecord], List[Tuple[str, int]], List[FileFailure]]


class DirectoryWalkerImpl(DirectoryWalker):
    """
    Walks `root_dir` in parallel and returns the regular files that pass the filters.

    Attributes:
        root_dir: Root directory to scan (depth 0)
        min_depth / max_depth: Inclusive depth window for reported files
        omit_hidden: Skip entries whose name starts with '.' (root exempt)
        min_size / max_size: Inclusive size window in bytes
        error_policy: ABORT raises on the first unreadable entry, SKIP records it
        failures: Entries skipped under ErrorPolicy.SKIP during the last walk
    """

    def __init__(
        self,
        root_dir: str,
        min_depth: int = 0,
        max_depth: Optional[int] = None,
        omit_hidden: bool = False,
        min_size: int = 0,
        max_size: Optional[int] = None,
        error_policy: ErrorPolicy = ErrorPolicy.ABORT,
        pool: Optional[WorkerPool] = None,
    ):
        self.root_dir = str(root_dir)
        self.min_depth = min_depth
        self.max_depth = max_depth
        self.omit_hidden = omit_hidden
        self.min_size = min_size
        self.max_size = max_size
        self.error_policy = error_policy
        self.pool = pool
        self.failures: List[FileFailure] = []

    def walk(
            self,
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None) -> List[FileRecord]:
        """
        Returns one FileRecord (digest=None) per accepted file. Order is not significant.
        """
        logger.debug(f"Root directory: {self.root_dir}")
        logger.debug(
            f"Filters: depth=[{self.min_depth}, {self.max_depth}], "
            f"size=[{self.min_size}, {self.max_size}], omit_hidden={self.omit_hidden}"
        )
        self.failures = []

        if stopped_flag and stopped_flag():
            logger.debug("Scan cancelled before start")
            return []

        root_path = Path(self.root_dir)
        if not root_path.exists():
            raise NotFoundError(self.root_dir)
        if not root_path.is_dir():
            raise ValidationError(f"Not a directory: {self.root_dir}")

        # Depth 0 is the root itself, which is never a regular file
        if self.max_depth is not None and self.max_depth < 1:
            return []

        start_time = time.time()
        if self.pool is not None:
            found = self._walk_with(self.pool, stopped_flag, progress_callback)
        else:
            with WorkerPool() as pool:
                found = self._walk_with(pool, stopped_flag, progress_callback)

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Scan completed. Found {len(found)} matching files.")
        return found

    def _walk_with(
            self,
            pool: WorkerPool,
            stopped_flag: Optional[Callable[[], bool]],
            progress_callback: Optional[Callable[[str, int, object], None]]) -> List[FileRecord]:
        found: List[FileRecord] = []
        pending = {pool.submit(self._list_directory, self.root_dir, 0)}

        try:
            while pending:
                if stopped_flag and stopped_flag():
                    logger.debug("Scan interrupted by user")
                    return []

                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    records, subdirs, failures = future.result()
                    found.extend(records)
                    self.failures.extend(failures)
                    for subdir, depth in subdirs:
                        pending.add(pool.submit(self._list_directory, subdir, depth))

                if progress_callback:
                    progress_callback('scanning', len(found), None)
        finally:
            for future in pending:
                future.cancel()

        return found

    def _list_directory(self, directory: str, depth: int) -> _ListingResult:
        """List one directory (at `depth`); its entries are at depth + 1."""
        records: List[FileRecord] = []
        subdirs: List[Tuple[str, int]] = []
        failures: List[FileFailure] = []
        child_depth = depth + 1

        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        record, subdir = self._process_entry(entry, child_depth)
                    except OSError as e:
                        failures.append(self._handle_error(entry.path, e))
                        continue
                    if record is not None:
                        records.append(record)
                    if subdir is not None:
                        subdirs.append((subdir, child_depth))
        except OSError as e:
            failures.append(self._handle_error(directory, e))

        return records, subdirs, failures

    def _process_entry(self, entry: os.DirEntry, depth: int) -> Tuple[Optional[FileRecord], Optional[str]]:
        if self.omit_hidden and entry.name.startswith('.'):
            return None, None

        if entry.is_symlink():
            logger.debug(f"Skipping symbolic link: {entry.path}")
            return None, None

        if entry.is_dir(follow_symlinks=False):
            if self.max_depth is None or depth < self.max_depth:
                return None, entry.path
            return None, None

        if not entry.is_file(follow_symlinks=False):
            return None, None

        if depth < self.min_depth:
            return None, None

        size = entry.stat(follow_symlinks=False).st_size
        if not self._size_passes(size):
            return None, None

        return FileRecord(key=Key(size=size), path=entry.path), None

    def _handle_error(self, path: str, error: OSError) -> FileFailure:
        if self.error_policy == ErrorPolicy.ABORT:
            raise from_os_error(path, error) from error
        logger.warning(f"Skipping unreadable entry {path}: {error}")
        return FileFailure(path=path, stage="scan", reason=str(error))

    def _size_passes(self, size: int) -> bool:
        """
        Check if file size is within configured limits (inclusive).
        """
        if size < self.min_size:
            return False
        if self.max_size is not None and size > self.max_size:
            return False
        return True
