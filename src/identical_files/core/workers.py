"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/workers.py
Fixed-size worker pool shared by the scanner, grouper, stages and reports.

One pool is created per run from explicit configuration and passed to every
component that needs it. All work submitted here is a bounded map/reduce
over a finite collection.
"""

import os
import logging
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Callable, Iterable, Iterator, List, Optional, TypeVar, Sequence

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def default_worker_count() -> int:
    return os.cpu_count() or 1


def chunked(items: Sequence[T], chunk_count: int) -> List[Sequence[T]]:
    """Split `items` into at most `chunk_count` contiguous, order-preserving slices."""
    if not items:
        return []
    chunk_count = max(1, min(chunk_count, len(items)))
    size, extra = divmod(len(items), chunk_count)
    chunks = []
    start = 0
    for i in range(chunk_count):
        end = start + size + (1 if i < extra else 0)
        chunks.append(items[start:end])
        start = end
    return chunks


class WorkerPool:
    """
    Thin wrapper around ThreadPoolExecutor sized to the available CPUs.
    Usable as a context manager; shut down once the run is over.
    """

    def __init__(self, workers: Optional[int] = None):
        self.workers = workers or default_worker_count()
        self._executor = ThreadPoolExecutor(
            max_workers=self.workers,
            thread_name_prefix="identical-files"
        )
        logger.debug(f"Worker pool started with {self.workers} threads")

    def submit(self, fn: Callable[..., R], *args, **kwargs) -> "Future[R]":
        return self._executor.submit(fn, *args, **kwargs)

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> Iterator[R]:
        """Ordered parallel map. Exceptions surface when the result is consumed."""
        return self._executor.map(fn, items)

    def map_chunks(self, fn: Callable[[Sequence[T]], R], items: Sequence[T]) -> List[R]:
        """Apply `fn` to contiguous chunks of `items` in parallel, results in chunk order."""
        return list(self._executor.map(fn, chunked(items, self.workers)))

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
