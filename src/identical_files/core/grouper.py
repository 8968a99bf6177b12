"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups FileRecords that share an identical Key and applies the frequency window.

Large inputs are split into contiguous chunks, each chunk is grouped into a
partial map by a pool task, and the partial maps are merged in chunk order.
The result is identical to the sequential build, including path order.
"""

from typing import List, Dict, Optional, Sequence
from collections import defaultdict

from identical_files.core.interfaces import FileGrouper
from identical_files.core.models import FileRecord, Group, Key
from identical_files.core.workers import WorkerPool

# Below this many records the chunk/merge overhead is not worth it
PARALLEL_THRESHOLD = 10_000


class FileGrouperImpl(FileGrouper):
    """
    Multimap Key -> paths with an inclusive [min_frequency, max_frequency] filter.
    Pure: no I/O, input is never mutated.
    """

    def __init__(self, pool: Optional[WorkerPool] = None, parallel_threshold: int = PARALLEL_THRESHOLD):
        self.pool = pool
        self.parallel_threshold = parallel_threshold

    def group_by_key(
            self,
            records: List[FileRecord],
            min_frequency: int = 2,
            max_frequency: Optional[int] = None
    ) -> List[Group]:
        """
        Groups paths whose records share a Key.
        Args:
            records: Records to group
            min_frequency: Smallest group kept (inclusive)
            max_frequency: Largest group kept (inclusive), None for unbounded
        Returns:
            List[Group] in first-seen key order
        """
        if not records:
            return []

        if self.pool is not None and len(records) >= self.parallel_threshold:
            partial_maps = self.pool.map_chunks(self._build_multimap, records)
            multimap = self._merge(partial_maps)
        else:
            multimap = self._build_multimap(records)

        return [
            Group(key=key, paths=paths)
            for key, paths in multimap.items()
            if self._frequency_passes(len(paths), min_frequency, max_frequency)
        ]

    def group_by_size(self, records: List[FileRecord], min_frequency: int = 2) -> List[Group]:
        """Stage-1 grouping: key is (size, None) whatever digest the record carries."""
        return self.group_by_key(
            [r if r.key.digest is None else FileRecord(key=Key(size=r.key.size), path=r.path) for r in records],
            min_frequency=min_frequency,
        )

    @staticmethod
    def _build_multimap(records: Sequence[FileRecord]) -> Dict[Key, List[str]]:
        groups: Dict[Key, List[str]] = defaultdict(list)
        for record in records:
            groups[record.key].append(record.path)
        return groups

    @staticmethod
    def _merge(partial_maps: List[Dict[Key, List[str]]]) -> Dict[Key, List[str]]:
        merged: Dict[Key, List[str]] = defaultdict(list)
        for partial in partial_maps:
            for key, paths in partial.items():
                merged[key].extend(paths)
        return merged

    @staticmethod
    def _frequency_passes(count: int, min_frequency: int, max_frequency: Optional[int]) -> bool:
        if count < min_frequency:
            return False
        if max_frequency is not None and count > max_frequency:
            return False
        return True
