"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and configuration for scanning and identical-file detection.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union
from enum import Enum

from identical_files.errors import ValidationError
from identical_files.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class Algorithm(Enum):
    """
    Algorithm used for the full-content digest (last pipeline stage).
    """
    XXH64 = "xxh64"
    XXH3 = "xxh3"
    XXH128 = "xxh128"
    BLAKE3 = "blake3"
    BLAKE2B = "blake2b"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def display_name(self) -> str:
        """Human-readable name for reports."""
        mapping = {
            Algorithm.XXH64: "XXH64",
            Algorithm.XXH3: "XXH3",
            Algorithm.XXH128: "XXH128",
            Algorithm.BLAKE3: "Blake3",
            Algorithm.BLAKE2B: "Blake2b",
            Algorithm.SHA256: "SHA256",
            Algorithm.SHA512: "SHA512",
        }
        return mapping.get(self, self.value)

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            Algorithm.XXH64: "xxHash 64-bit (fast, non-cryptographic)",
            Algorithm.XXH3: "xxHash3 64-bit (fastest, non-cryptographic)",
            Algorithm.XXH128: "xxHash3 128-bit (fast, non-cryptographic)",
            Algorithm.BLAKE3: "BLAKE3 (cryptographic, high throughput)",
            Algorithm.BLAKE2B: "BLAKE2b (cryptographic)",
            Algorithm.SHA256: "SHA-256 (cryptographic)",
            Algorithm.SHA512: "SHA-512 (cryptographic)",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class ResultFormat(Enum):
    JSON = "json"
    YAML = "yaml"
    PERSONAL = "personal"


class ErrorPolicy(Enum):
    """
    What to do when a single file cannot be listed or hashed.
    ABORT stops the whole run on the first failure.
    SKIP drops the file, logs a warning and reports it at the end.
    """
    ABORT = "abort"
    SKIP = "skip"


class Stage(str, Enum):
    SIZE = "Size grouping"
    PARTIAL = "Partial Hash"
    FULL = "Full Hash"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class Key:
    """
    Equality key used at every pipeline stage.
    digest is None until the file has been discriminated beyond its size.
    """
    size: int
    digest: Optional[str] = None

    def with_digest(self, digest: str) -> "Key":
        return Key(size=self.size, digest=digest)

    def sort_digest(self) -> str:
        return self.digest or ""


@dataclass(frozen=True)
class FileRecord:
    """One real file at some point of the pipeline."""
    key: Key
    path: str

    @property
    def size(self) -> int:
        return self.key.size

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.key.size}>"


@dataclass(frozen=True)
class PathRow:
    """A group flattened to one row per file (used by exports)."""
    size: int
    digest: Optional[str]
    path: str
    count: int
    total_size: int


@dataclass
class Group:
    """
    Paths sharing an identical Key that survived the frequency filter.
    Path order is discovery order and carries no meaning.
    """
    key: Key
    paths: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        """How many files are in this group."""
        return len(self.paths)

    @property
    def total_size(self) -> int:
        return self.key.size * self.count

    @property
    def size(self) -> int:
        return self.key.size

    @property
    def digest(self) -> Optional[str]:
        return self.key.digest

    def flatten(self) -> List[PathRow]:
        count = self.count
        total_size = self.total_size
        return [
            PathRow(
                size=self.key.size,
                digest=self.key.digest,
                path=path,
                count=count,
                total_size=total_size,
            )
            for path in self.paths
        ]

    def __repr__(self):
        return f"<Group size={self.key.size}, digest={self.key.digest}, count={self.count}>"


@dataclass(frozen=True)
class Summary:
    """Totals over the final groups. Computed once, read-only."""
    algorithm: Algorithm
    total_files_scanned: int
    total_files_in_final_groups: int
    total_distinct_groups: int
    total_bytes_in_final_groups: int


@dataclass(frozen=True)
class FileFailure:
    """A file that was skipped under ErrorPolicy.SKIP."""
    path: str
    stage: str
    reason: str


class PipelineStats:
    """
    Statistics collected during scanning and the staged pipeline.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self.failures: List[FileFailure] = []

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def record_failure(self, path: str, stage: str, reason: str) -> None:
        self.failures.append(FileFailure(path=path, stage=stage, reason=reason))

    def print_summary(self) -> str:
        labels = {
            "scan": "Scanned files",
            "size": "Size Groups",
            "partial": "Partial Hash Groups",
            "full": "Full Content Hash Groups",
        }

        lines = [
            "Pipeline Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        if self.failures:
            lines.append(f"Skipped files: {len(self.failures)}")

        return "\n".join(lines)


"""
DTO for search parameters with built-in validation.
"""


@dataclass
class SearchParams:
    """Parameters for one identical-files run, validated on creation."""
    root_dir: str
    algorithm: Algorithm = Algorithm.BLAKE3
    min_size_bytes: int = 0
    max_size_bytes: Optional[int] = None
    min_depth: int = 0
    max_depth: Optional[int] = None
    omit_hidden: bool = False
    min_frequency: int = 2
    max_frequency: Optional[int] = None
    sort_by_frequency: bool = False
    result_format: ResultFormat = ResultFormat.PERSONAL
    csv_dir: Optional[str] = None
    xlsx_dir: Optional[str] = None
    full_path: bool = False
    error_policy: ErrorPolicy = ErrorPolicy.ABORT
    workers: Optional[int] = None

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValidationError("Root directory cannot be empty")

        if self.min_size_bytes < 0:
            raise ValidationError("Minimum size cannot be negative")
        if self.max_size_bytes is not None and self.max_size_bytes < self.min_size_bytes:
            raise ValidationError("Maximum size cannot be less than minimum size")

        if self.min_depth < 0:
            raise ValidationError("Minimum depth cannot be negative")
        if self.max_depth is not None and self.max_depth < self.min_depth:
            raise ValidationError("Maximum depth cannot be less than minimum depth")

        if self.min_frequency < 1:
            raise ValidationError("Minimum frequency must be at least 1")
        if self.max_frequency is not None and self.max_frequency < self.min_frequency:
            raise ValidationError("Maximum frequency cannot be less than minimum frequency")

        if self.workers is not None and self.workers < 1:
            raise ValidationError("Number of worker threads must be at least 1")

    @staticmethod
    def from_human_readable(
            root_dir: str,
            min_size_str: str = "0",
            max_size_str: Optional[str] = None,
            **kwargs
    ) -> 'SearchParams':
        """
        Factory method to create params from human-readable size strings.
        """
        try:
            min_size = ConvertUtils.human_to_bytes(min_size_str)
            max_size = ConvertUtils.human_to_bytes(max_size_str) if max_size_str else None
        except ValueError as e:
            raise ValidationError(f"Invalid size format: {e}")

        return SearchParams(
            root_dir=root_dir,
            min_size_bytes=min_size,
            max_size_bytes=max_size,
            **kwargs
        )

