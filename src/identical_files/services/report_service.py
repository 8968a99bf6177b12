"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
Summary totals and text rendering of the final groups.

Formats:
    json      one pretty-printed object per group, blank-line separated
    yaml      one YAML document per group, each opened with "---"
    personal  human-readable block per group, sizes with thousands separator
Rendering never reorders its input.
Paths pass through ConvertUtils.display_path before rendering.
"""

import json
import logging
from typing import List, Dict, Optional, Sequence, Tuple

import yaml

from identical_files.core.models import Algorithm, Group, ResultFormat, Summary
from identical_files.core.workers import WorkerPool
from identical_files.errors import SerializationError
from identical_files.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class ReportService:
    @staticmethod
    def summarize(
            groups: List[Group],
            total_scanned: int,
            algorithm: Algorithm,
            pool: Optional[WorkerPool] = None
    ) -> Summary:
        """
        Totals over the final groups.

        Args:
            groups: Final groups
            total_scanned: Number of records produced by the walker
            algorithm: Full-digest algorithm used for the run
            pool: When given, counts and sizes are reduced per chunk in parallel
        Returns:
            Summary; integer sums are exact whichever path is taken
        """
        if pool is not None and groups:
            partials = pool.map_chunks(ReportService._sum_chunk, groups)
        else:
            partials = [ReportService._sum_chunk(groups)]

        return Summary(
            algorithm=algorithm,
            total_files_scanned=total_scanned,
            total_files_in_final_groups=sum(files for files, _ in partials),
            total_distinct_groups=len(groups),
            total_bytes_in_final_groups=sum(size for _, size in partials),
        )

    @staticmethod
    def _sum_chunk(groups: Sequence[Group]) -> Tuple[int, int]:
        return sum(g.count for g in groups), sum(g.total_size for g in groups)

    # =============================
    # Structured views
    # =============================
    @staticmethod
    def group_to_dict(group: Group) -> Dict:
        return {
            "File information": {
                "size": group.size,
                "hash": group.digest,
            },
            "Paths": [ConvertUtils.display_path(p) for p in group.paths],
            "Number of duplicate files": group.count,
            "Sum of file sizes": group.total_size,
        }

    @staticmethod
    def summary_to_dict(summary: Summary) -> Dict:
        return {
            "Hashing algorithm": summary.algorithm.display_name,
            "Total number of files": summary.total_files_scanned,
            "Total number of duplicate files": summary.total_files_in_final_groups,
            "Total number of different hashes": summary.total_distinct_groups,
            "Total size of duplicate files": summary.total_bytes_in_final_groups,
        }

    # =============================
    # Rendering
    # =============================
    @staticmethod
    def render(groups: List[Group], result_format: ResultFormat) -> str:
        """Render all groups, in the given order, as one string."""
        return "".join(ReportService.render_group(g, result_format) for g in groups)

    @staticmethod
    def render_group(group: Group, result_format: ResultFormat) -> str:
        if result_format == ResultFormat.PERSONAL:
            return ReportService._personal_group(group)
        return ReportService._structured(ReportService.group_to_dict(group), result_format)

    @staticmethod
    def render_summary(summary: Summary, result_format: ResultFormat) -> str:
        if result_format == ResultFormat.PERSONAL:
            return ReportService._personal_summary(summary)
        return ReportService._structured(ReportService.summary_to_dict(summary), result_format)

    @staticmethod
    def _structured(data: Dict, result_format: ResultFormat) -> str:
        try:
            if result_format == ResultFormat.JSON:
                return json.dumps(data, indent=2, ensure_ascii=False) + "\n\n"
            if result_format == ResultFormat.YAML:
                return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, explicit_start=True) + "\n"
        except (TypeError, ValueError, yaml.YAMLError) as e:
            raise SerializationError(e) from e
        raise ValueError(f"Unsupported result format: {result_format}")

    @staticmethod
    def _personal_group(group: Group) -> str:
        lines = [
            f"size: {ConvertUtils.bytes_with_separator(group.size)}",
            f"hash: {group.digest or ''}",
            "Paths: [",
        ]
        lines.extend(f"    {json.dumps(ConvertUtils.display_path(path), ensure_ascii=False)},"
                     for path in group.paths)
        lines.append("]")
        lines.append(f"Number of duplicate files: {group.count}")
        lines.append(f"Sum of file sizes: {ConvertUtils.bytes_with_separator(group.total_size)}")
        return "\n".join(lines) + "\n\n"

    @staticmethod
    def _personal_summary(summary: Summary) -> str:
        lines = [
            f"Hashing algorithm: {summary.algorithm.display_name}",
            f"Total number of files: {summary.total_files_scanned}",
            f"Total number of duplicate files: {summary.total_files_in_final_groups}",
            f"Total number of different hashes: {summary.total_distinct_groups}",
            f"Total size of duplicate files: "
            f"{ConvertUtils.bytes_with_separator(summary.total_bytes_in_final_groups)}",
        ]
        return "\n".join(lines) + "\n\n"
