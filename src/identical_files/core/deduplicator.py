"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Runs the staged pipeline over the records produced by the directory walker:
    size → partial digest (xxHash64 of the first bytes) → full digest (chosen algorithm)
Each stage only re-examines members of groups that survived the previous one.
"""
import time
import logging
from typing import List, Tuple, Optional, Callable

from identical_files.core.models import FileRecord, Group, PipelineStats, SearchParams
from identical_files.core.grouper import FileGrouperImpl
from identical_files.core.hasher import HasherImpl
from identical_files.core.interfaces import Deduplicator
from identical_files.core.sorter import Sorter
from identical_files.core.stages import SizeStageImpl, PartialHashStage, FullHashStage, HashStageBase
from identical_files.core.workers import WorkerPool

logger = logging.getLogger(__name__)


# =============================
# Main Deduplicator Class
# =============================
class DeduplicatorImpl(Deduplicator):
    """
    Implements multi-stage identical-file detection using a pipeline architecture.
    Collects per-stage statistics and the files skipped under ErrorPolicy.SKIP.
    """
    def __init__(
            self,
            hasher: Optional[HasherImpl] = None,
            grouper: Optional[FileGrouperImpl] = None,
            pool: Optional[WorkerPool] = None
    ):
        self.hasher = hasher
        self.pool = pool
        self.grouper = grouper or FileGrouperImpl(pool=pool)

    def find_duplicates(
        self,
        records: List[FileRecord],
        params: SearchParams,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None,
        stats: Optional[PipelineStats] = None
    ) -> Tuple[List[Group], PipelineStats]:
        """
        Main pipeline.
        Args:
            records: FileRecords from the walker (digest=None)
            params: Algorithm, frequency window, ordering and error policy
            stopped_flag (Optional[Callable[[], bool]]): Returns True if the run should stop.
            progress_callback (Optional[Callable[[str, int, int], None]]): Reports progress per stage.
            stats: Existing statistics to extend (e.g. already holding the scan stage)
        Returns:
            Tuple[List[Group], PipelineStats], groups sorted; empty when stopped
        """
        stats = stats or PipelineStats()
        total_start_time = time.time()
        hasher = self.hasher or HasherImpl(params.algorithm)

        # Initial stage: group by size
        size_stage = SizeStageImpl(self.grouper, min_frequency=params.min_frequency)
        start_time = time.time()
        groups = size_stage.process(records, stopped_flag=stopped_flag, progress_callback=progress_callback)
        DeduplicatorImpl._update_stats(stats, "size", time.time() - start_time, groups)

        for stage_name, stage in self._build_pipeline(hasher, params):
            if stopped_flag and stopped_flag():
                break
            start_time = time.time()
            groups = stage.process(groups, stopped_flag=stopped_flag, progress_callback=progress_callback)
            DeduplicatorImpl._update_stats(stats, stage_name, time.time() - start_time, groups)
            for failure in stage.failures:
                stats.record_failure(failure.path, failure.stage, failure.reason)

        if stopped_flag and stopped_flag():
            logger.debug("Pipeline interrupted by user")
            stats.total_time += time.time() - total_start_time
            return [], stats

        Sorter.sort_groups(groups, sort_by_frequency=params.sort_by_frequency)

        # Finalize stats
        stats.total_time += time.time() - total_start_time
        return groups, stats

    def _build_pipeline(self, hasher: HasherImpl, params: SearchParams) -> List[Tuple[str, HashStageBase]]:
        """Partial stage keeps only the lower bound; the full stage applies the whole window."""
        return [
            ("partial", PartialHashStage(
                self.grouper, hasher,
                pool=self.pool,
                min_frequency=params.min_frequency,
                error_policy=params.error_policy,
            )),
            ("full", FullHashStage(
                self.grouper, hasher,
                pool=self.pool,
                min_frequency=params.min_frequency,
                max_frequency=params.max_frequency,
                algorithm=params.algorithm,
                error_policy=params.error_policy,
            )),
        ]

    @staticmethod
    def _update_stats(stats: PipelineStats, stage: str, duration: float, groups: List[Group]):
        """Helper to update PipelineStats with the groups a stage produced."""
        stats.update_stage(
            stage_name=stage,
            groups_found=len(groups),
            files_processed=sum(g.count for g in groups),
            duration=duration
        )
