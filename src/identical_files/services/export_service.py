"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/export_service.py
Writes the final groups to CSV and XLSX files, one row per path.

Both writers produce a temporary file inside the target directory and move it
into place only after the file is complete, so a failed export never leaves a
truncated report behind.
"""

import csv
import os
import logging
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Dict, Optional, Union, Callable, Iterator

import xlsxwriter
from xlsxwriter.exceptions import XlsxWriterException
from xlsxwriter.format import Format
from xlsxwriter.workbook import Workbook
from xlsxwriter.worksheet import Worksheet

from identical_files.core.models import Group, PathRow
from identical_files.core.workers import WorkerPool
from identical_files.errors import (
    IdenticalFilesError, NotFoundError, PermissionDeniedError, SerializationError,
    ValidationError, from_os_error)
from identical_files.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

CSV_FILENAME = "identical-files.csv"
XLSX_FILENAME = "identical-files.xlsx"
CSV_DELIMITER = ";"
SHEET_NAME = "Identical Files"
MAX_ROWS_PER_SHEET = 1_000_000

HEADERS = [
    "File size (bytes)",
    "Hash",
    "Path",
    "Number of duplicate files",
    "Sum of file sizes (bytes)",
]

HEADER_FONT_SIZE = 11
FONT_SIZE = 12
FONT_NAME = "Liberation Mono"
DEFAULT_FILE_MODE = 0o666

ExportResult = Dict[str, Union[Path, IdenticalFilesError]]


@dataclass(frozen=True)
class XlsxFormats:
    """Cell formats of one workbook. Built once, shared by every sheet."""
    header: Format
    integer: Format
    text: Format

    @classmethod
    def create(cls, workbook: Workbook) -> "XlsxFormats":
        header = workbook.add_format({
            "bold": True,
            "align": "center",
            "valign": "vcenter",
            "text_wrap": True,
            "font_size": HEADER_FONT_SIZE,
        })
        integer = workbook.add_format({
            "valign": "vcenter",
            "num_format": "#,##0",
            "font_name": FONT_NAME,
            "font_size": FONT_SIZE,
        })
        text = workbook.add_format({
            "valign": "vcenter",
            "font_name": FONT_NAME,
            "font_size": FONT_SIZE,
        })
        return cls(header=header, integer=integer, text=text)


_umask_lock = threading.Lock()


def _current_umask() -> int:
    # os.umask can only be read by setting it; exports run on several threads
    with _umask_lock:
        mask = os.umask(0)
        os.umask(mask)
    return mask


def _rows(groups: List[Group]) -> Iterator[PathRow]:
    for group in groups:
        yield from group.flatten()


class ExportService:
    @staticmethod
    def check_directory(directory: Union[str, Path]) -> Path:
        """The target must be an existing, writable directory."""
        path = Path(directory)
        if not path.exists():
            raise NotFoundError(path)
        if not path.is_dir():
            raise ValidationError(f"Not a directory: {path}", path=path)
        if not os.access(path, os.W_OK):
            raise PermissionDeniedError(path)
        return path

    @staticmethod
    def export_csv(groups: List[Group], directory: Union[str, Path]) -> Path:
        """
        Write `identical-files.csv` into `directory`.
        Columns: size, hash, path, group count, group total size; delimiter ';'.
        """
        target = ExportService.check_directory(directory) / CSV_FILENAME

        def write(tmp_path: str) -> None:
            with open(tmp_path, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, delimiter=CSV_DELIMITER)
                writer.writerow(HEADERS)
                for row in _rows(groups):
                    writer.writerow([row.size, row.digest or "", ConvertUtils.display_path(row.path),
                                     row.count, row.total_size])

        ExportService._write_atomically(target, write)
        logger.info(f"CSV report written to {target}")
        return target

    @staticmethod
    def export_xlsx(groups: List[Group], directory: Union[str, Path]) -> Path:
        """
        Write `identical-files.xlsx` into `directory`.
        Rows beyond MAX_ROWS_PER_SHEET continue on sheets named '<name> 2', '<name> 3', ...
        """
        target = ExportService.check_directory(directory) / XLSX_FILENAME

        def write(tmp_path: str) -> None:
            workbook = xlsxwriter.Workbook(tmp_path)
            workbook.set_properties({
                "title": "Identical Files",
                "subject": "Identical files grouped by size and content hash",
                "keywords": "find, identical, hash algorithm",
            })
            formats = XlsxFormats.create(workbook)

            rows = list(_rows(groups))
            chunks = [rows[i:i + MAX_ROWS_PER_SHEET] for i in range(0, len(rows), MAX_ROWS_PER_SHEET)] or [[]]
            for index, chunk in enumerate(chunks):
                name = SHEET_NAME if index == 0 else f"{SHEET_NAME} {index + 1}"
                ExportService._write_sheet(workbook.add_worksheet(name), chunk, formats)
            workbook.close()

        ExportService._write_atomically(target, write)
        logger.info(f"XLSX report written to {target}")
        return target

    @staticmethod
    def _write_sheet(worksheet: Worksheet, rows: List[PathRow], formats: XlsxFormats) -> None:
        worksheet.set_row(0, 32)
        worksheet.write_row(0, 0, HEADERS, formats.header)
        worksheet.freeze_panes(1, 0)

        for row_index, row in enumerate(rows, start=1):
            worksheet.write_number(row_index, 0, row.size, formats.integer)
            worksheet.write_string(row_index, 1, row.digest or "", formats.text)
            worksheet.write_string(row_index, 2, ConvertUtils.display_path(row.path), formats.text)
            worksheet.write_number(row_index, 3, row.count, formats.integer)
            worksheet.write_number(row_index, 4, row.total_size, formats.integer)

        worksheet.autofit()

    @staticmethod
    def _write_atomically(target: Path, write: Callable[[str], None]) -> None:
        """Run `write` against a temp file next to `target`, then move it into place."""
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        except OSError as e:
            raise from_os_error(target.parent, e) from e
        os.close(fd)

        try:
            write(tmp_path)
            # mkstemp creates 0600; give the report the mode a plain open() would
            os.chmod(tmp_path, DEFAULT_FILE_MODE & ~_current_umask())
            os.replace(tmp_path, target)
        except OSError as e:
            raise from_os_error(target, e) from e
        except (csv.Error, XlsxWriterException, UnicodeError) as e:
            raise SerializationError(e, path=target) from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    @staticmethod
    def export_all(
            groups: List[Group],
            csv_dir: Optional[Union[str, Path]] = None,
            xlsx_dir: Optional[Union[str, Path]] = None,
            pool: Optional[WorkerPool] = None
    ) -> ExportResult:
        """
        Run the requested exports concurrently.
        Returns {"csv": Path or error, "xlsx": Path or error} for each requested target;
        one target failing does not affect the other.
        """
        tasks = {}
        if csv_dir is not None:
            tasks["csv"] = (ExportService.export_csv, csv_dir)
        if xlsx_dir is not None:
            tasks["xlsx"] = (ExportService.export_xlsx, xlsx_dir)
        if not tasks:
            return {}

        own_pool = pool is None
        pool = pool or WorkerPool(workers=len(tasks))
        try:
            futures = {name: pool.submit(fn, groups, directory) for name, (fn, directory) in tasks.items()}
            results: ExportResult = {}
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except IdenticalFilesError as e:
                    logger.error(f"{name.upper()} export failed: {e}")
                    results[name] = e
            return results
        finally:
            if own_pool:
                pool.shutdown()
