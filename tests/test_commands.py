"""
Tests for SearchCommand — the single entry point wiring walker, pipeline and summary.
"""
from pathlib import Path

import pytest

from identical_files.commands import SearchCommand
from identical_files.core.models import ErrorPolicy, SearchParams
from identical_files.errors import NotFoundError


class TestSearchCommand:
    def test_execute_returns_groups_stats_and_summary(self, temp_dir, test_files):
        command = SearchCommand()
        groups, stats, summary = command.execute(SearchParams(root_dir=str(temp_dir)))

        assert [g.count for g in groups] == [4, 2]
        assert summary.total_files_scanned == len(test_files)
        assert summary.total_files_in_final_groups == 6
        assert summary.total_distinct_groups == 2
        assert summary.total_bytes_in_final_groups == 4 * 1024 + 2 * 2048
        assert list(stats.stage_stats) == ["scan", "size", "partial", "full"]
        assert len(command.records) == len(test_files)

    def test_filters_are_forwarded_to_walker(self, temp_dir, test_files):
        params = SearchParams(root_dir=str(temp_dir), max_depth=1, omit_hidden=True, min_size_bytes=1)
        groups, _, summary = SearchCommand().execute(params)
        # root-level non-hidden, non-empty files only
        assert summary.total_files_scanned == 8
        assert [g.count for g in groups] == [2, 2]

    def test_full_path_resolves_root(self, temp_dir, test_files, monkeypatch):
        monkeypatch.chdir(temp_dir)
        groups, _, _ = SearchCommand().execute(SearchParams(root_dir=".", full_path=True))
        assert all(Path(p).is_absolute() for g in groups for p in g.paths)

    def test_relative_root_keeps_relative_paths(self, temp_dir, test_files, monkeypatch):
        monkeypatch.chdir(temp_dir)
        groups, _, _ = SearchCommand().execute(SearchParams(root_dir="."))
        assert all(not Path(p).is_absolute() for g in groups for p in g.paths)

    def test_single_worker(self, temp_dir, test_files):
        groups, _, _ = SearchCommand().execute(SearchParams(root_dir=str(temp_dir), workers=1))
        assert [g.count for g in groups] == [4, 2]

    def test_missing_root(self, temp_dir):
        with pytest.raises(NotFoundError):
            SearchCommand().execute(SearchParams(root_dir=str(temp_dir / "missing")))

    def test_progress_and_cancellation(self, temp_dir, test_files):
        calls = []
        groups, _, summary = SearchCommand().execute(
            SearchParams(root_dir=str(temp_dir), error_policy=ErrorPolicy.SKIP),
            progress_callback=lambda *args: calls.append(args[0]),
            stopped_flag=lambda: False,
        )
        assert "scanning" in calls
        assert groups

        groups, _, summary = SearchCommand().execute(
            SearchParams(root_dir=str(temp_dir)), stopped_flag=lambda: True)
        assert groups == []
        assert summary.total_files_scanned == 0
