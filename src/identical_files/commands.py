"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

commands.py
Unified command orchestrator for one identical-files run.
This is the single place where the walker, the pipeline and the summary are wired
together; the CLI and library callers both go through it.
"""
import time
import logging
from pathlib import Path
from typing import List, Optional, Callable, Tuple

from identical_files.core.deduplicator import DeduplicatorImpl
from identical_files.core.hasher import HasherImpl
from identical_files.core.models import FileRecord, Group, PipelineStats, SearchParams, Summary
from identical_files.core.scanner import DirectoryWalkerImpl
from identical_files.core.workers import WorkerPool
from identical_files.services.report_service import ReportService

logger = logging.getLogger(__name__)


class SearchCommand:
    """
    Orchestrates the whole workflow:
    1. Build the worker pool from params.workers
    2. Walk the root directory into FileRecords
    3. Run size → partial digest → full digest
    4. Summarize the final groups

    Usage:
        params = SearchParams(root_dir="~/Downloads")
        groups, stats, summary = SearchCommand().execute(params)
    """

    def __init__(self):
        self.records: List[FileRecord] = []

    def execute(
            self,
            params: SearchParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[List[Group], PipelineStats, Summary]:
        """
        Execute one search with the given parameters.

        Args:
            params: Validated search parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)

        Returns:
            Tuple of (final groups, statistics, summary)

        Raises:
            IdenticalFilesError: On a missing root, or on the first I/O failure under ErrorPolicy.ABORT
        """
        root_dir = str(Path(params.root_dir).resolve()) if params.full_path else params.root_dir

        with WorkerPool(params.workers) as pool:
            walker = DirectoryWalkerImpl(
                root_dir,
                min_depth=params.min_depth,
                max_depth=params.max_depth,
                omit_hidden=params.omit_hidden,
                min_size=params.min_size_bytes,
                max_size=params.max_size_bytes,
                error_policy=params.error_policy,
                pool=pool,
            )

            start_time = time.time()
            self.records = walker.walk(stopped_flag=stopped_flag, progress_callback=progress_callback)
            scan_duration = time.time() - start_time
            logger.info(f"Scanned {len(self.records)} files in {scan_duration:.2f}s")

            stats = PipelineStats()
            stats.update_stage("scan", groups_found=0, files_processed=len(self.records), duration=scan_duration)
            stats.total_time = scan_duration
            for failure in walker.failures:
                stats.record_failure(failure.path, failure.stage, failure.reason)

            deduplicator = DeduplicatorImpl(hasher=HasherImpl(params.algorithm), pool=pool)
            groups, stats = deduplicator.find_duplicates(
                self.records,
                params,
                stopped_flag=stopped_flag,
                progress_callback=progress_callback,
                stats=stats,
            )

            summary = ReportService.summarize(groups, len(self.records), params.algorithm, pool=pool)

        return groups, stats, summary
