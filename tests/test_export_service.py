"""
Unit tests for ExportService.
Verifies CSV and XLSX content, sheet splitting, atomic writes and per-target
error isolation.
"""
import csv
import os
import zipfile
from unittest.mock import patch

import pytest

from identical_files.core.models import Group, Key
from identical_files.errors import NotFoundError, SerializationError, ValidationError
from identical_files.services import export_service
from identical_files.services.export_service import ExportService, HEADERS, CSV_FILENAME, XLSX_FILENAME


@pytest.fixture
def groups():
    return [
        Group(key=Key(10, "h1"), paths=["/a/1", "/a/2"]),
        Group(key=Key(1234, "h2"), paths=["/b/1", "/b/2", "/b/3"]),
    ]


def _sheet_names(xlsx_path):
    with zipfile.ZipFile(xlsx_path) as archive:
        workbook_xml = archive.read("xl/workbook.xml").decode("utf-8")
    return workbook_xml


class TestExportCsv:
    def test_writes_one_row_per_path(self, temp_dir, groups):
        target = ExportService.export_csv(groups, temp_dir)

        assert target == temp_dir / CSV_FILENAME
        with open(target, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f, delimiter=";"))

        assert rows[0] == HEADERS
        assert len(rows) == 1 + 5
        assert rows[1] == ["10", "h1", "/a/1", "2", "20"]
        assert rows[-1] == ["1234", "h2", "/b/3", "3", "3702"]

    def test_empty_groups_write_header_only(self, temp_dir):
        target = ExportService.export_csv([], temp_dir)
        assert target.read_text(encoding="utf-8").strip() == ";".join(HEADERS)

    def test_no_temp_files_left(self, temp_dir, groups):
        ExportService.export_csv(groups, temp_dir)
        assert sorted(os.listdir(temp_dir)) == [CSV_FILENAME]

    def test_replaces_existing_file(self, temp_dir, groups):
        (temp_dir / CSV_FILENAME).write_text("old", encoding="utf-8")
        ExportService.export_csv(groups, temp_dir)
        assert (temp_dir / CSV_FILENAME).read_text(encoding="utf-8").startswith("File size")

    def test_failed_write_keeps_previous_file(self, temp_dir, groups):
        (temp_dir / CSV_FILENAME).write_text("old", encoding="utf-8")
        with patch.object(export_service.csv, "writer", side_effect=export_service.csv.Error("boom")):
            with pytest.raises(SerializationError):
                ExportService.export_csv(groups, temp_dir)
        assert (temp_dir / CSV_FILENAME).read_text(encoding="utf-8") == "old"
        assert sorted(os.listdir(temp_dir)) == [CSV_FILENAME]

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_file_mode_follows_umask(self, temp_dir, groups):
        previous = os.umask(0o022)
        try:
            target = ExportService.export_csv(groups, temp_dir)
        finally:
            os.umask(previous)
        assert target.stat().st_mode & 0o777 == 0o644

    def test_undecodable_filename_is_escaped(self, temp_dir):
        group = Group(key=Key(3, "h"), paths=["/d/\udcffa.bin", "/d/\udcffb.bin"])
        target = ExportService.export_csv([group], temp_dir)
        with open(target, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f, delimiter=";"))
        assert [row[2] for row in rows[1:]] == ["/d/\\xffa.bin", "/d/\\xffb.bin"]


class TestExportXlsx:
    def test_writes_workbook(self, temp_dir, groups):
        target = ExportService.export_xlsx(groups, temp_dir)
        assert target == temp_dir / XLSX_FILENAME
        assert zipfile.is_zipfile(target)
        assert "Identical Files" in _sheet_names(target)
        assert sorted(os.listdir(temp_dir)) == [XLSX_FILENAME]

    def test_splits_rows_across_sheets(self, temp_dir, groups):
        with patch.object(export_service, "MAX_ROWS_PER_SHEET", 2):
            target = ExportService.export_xlsx(groups, temp_dir)
        names = _sheet_names(target)
        assert 'name="Identical Files"' in names
        assert 'name="Identical Files 2"' in names
        assert 'name="Identical Files 3"' in names
        assert 'name="Identical Files 4"' not in names

    def test_undecodable_filename_is_escaped(self, temp_dir):
        group = Group(key=Key(3, "h"), paths=["/d/\udcffa.bin", "/d/\udcffb.bin"])
        target = ExportService.export_xlsx([group], temp_dir)
        with zipfile.ZipFile(target) as archive:
            strings = archive.read("xl/sharedStrings.xml").decode("utf-8")
        assert "/d/\\xffa.bin" in strings

    def test_empty_groups_still_write_header_sheet(self, temp_dir):
        target = ExportService.export_xlsx([], temp_dir)
        assert zipfile.is_zipfile(target)


class TestDirectoryChecks:
    def test_missing_directory(self, temp_dir, groups):
        with pytest.raises(NotFoundError):
            ExportService.export_csv(groups, temp_dir / "missing")

    def test_file_instead_of_directory(self, temp_dir, groups):
        not_a_dir = temp_dir / "file.txt"
        not_a_dir.write_text("x", encoding="utf-8")
        with pytest.raises(ValidationError):
            ExportService.export_xlsx(groups, not_a_dir)


class TestExportAll:
    def test_runs_requested_targets(self, temp_dir, groups):
        results = ExportService.export_all(groups, csv_dir=temp_dir, xlsx_dir=temp_dir)
        assert results == {"csv": temp_dir / CSV_FILENAME, "xlsx": temp_dir / XLSX_FILENAME}

    def test_nothing_requested(self, groups):
        assert ExportService.export_all(groups) == {}

    def test_failure_is_isolated(self, temp_dir, groups):
        results = ExportService.export_all(groups, csv_dir=temp_dir / "missing", xlsx_dir=temp_dir)
        assert isinstance(results["csv"], NotFoundError)
        assert results["xlsx"] == temp_dir / XLSX_FILENAME
        assert (temp_dir / XLSX_FILENAME).exists()
