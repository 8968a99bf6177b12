#!/usr/bin/env python3
"""
identical-files CLI — find identical files by size and content hash.
Walks a directory tree in parallel, narrows candidates by size, then by a
partial xxHash64 digest, then by a full-content digest, and prints the groups.
Nothing is ever modified or deleted.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

try:
    import blake3
except ImportError:
    _MISSING_DEPS.append("blake3")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install identical-files", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from identical_files.core.models import Group, PipelineStats, SearchParams, Summary
from identical_files.commands import SearchCommand
from identical_files.errors import IdenticalFilesError
from identical_files.services.report_service import ReportService
from identical_files.services.export_service import ExportService
from identical_files.aliases import (
    ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    RESULT_FORMAT_ALIASES, RESULT_FORMAT_CHOICES, RESULT_FORMAT_HELP_TEXT,
    ERROR_POLICY_ALIASES, ERROR_POLICY_CHOICES, ERROR_POLICY_HELP_TEXT,
    EPILOG_TEXT
)

logger = logging.getLogger(__name__)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        sys.stdout.reconfigure(encoding='utf-8', errors='backslashreplace')
        sys.stderr.reconfigure(encoding='utf-8', errors='backslashreplace')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="identical-files",
            description="identical-files — find identical files by size and content hash",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            default=".",
            type=str,
            help="Directory to scan. Default: current directory"
        )
        parser.add_argument(
            "--algorithm", "-a",
            choices=ALGORITHM_CHOICES,
            default="blake3",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )

        # Filtering options
        parser.add_argument(
            "--min-size", "-b",
            default="0",
            type=str,
            metavar='',
            help="Minimum file size (e.g., 1K, 500KB, 1MB). Default: 0"
        )
        parser.add_argument(
            "--max-size", "-B",
            default=None,
            type=str,
            metavar='',
            help="Maximum file size (e.g., 10MB, 1GB). Default: unbounded"
        )
        parser.add_argument(
            "--min-depth", "-d",
            default=0,
            type=int,
            metavar='',
            help="Minimum depth of reported files (the root is depth 0). Default: 0"
        )
        parser.add_argument(
            "--max-depth", "-D",
            default=None,
            type=int,
            metavar='',
            help="Maximum depth of reported files. Default: unbounded"
        )
        parser.add_argument(
            "--omit-hidden", "-o",
            action="store_true",
            help="Skip files and directories whose name starts with '.'"
        )
        parser.add_argument(
            "--min-frequency", "-f",
            default=2,
            type=int,
            metavar='',
            help="Report only groups with at least this many identical files. Default: 2"
        )
        parser.add_argument(
            "--max-frequency", "-F",
            default=None,
            type=int,
            metavar='',
            help="Report only groups with at most this many identical files. Default: unbounded"
        )

        # Output options
        parser.add_argument(
            "--sort", "-s",
            action="store_true",
            help="Sort groups by number of files first, then by size and hash.\n"
                 "Default order: size, hash, number of files"
        )
        parser.add_argument(
            "--result-format", "-r",
            choices=RESULT_FORMAT_CHOICES,
            default="personal",
            type=str,
            help=RESULT_FORMAT_HELP_TEXT
        )
        parser.add_argument(
            "--csv-dir", "-c",
            default=None,
            type=str,
            metavar='',
            help="Also write identical-files.csv into this directory"
        )
        parser.add_argument(
            "--xlsx-dir", "-x",
            default=None,
            type=str,
            metavar='',
            help="Also write identical-files.xlsx into this directory"
        )
        parser.add_argument(
            "--full-path",
            action="store_true",
            help="Report absolute paths"
        )
        parser.add_argument(
            "--on-error",
            choices=ERROR_POLICY_CHOICES,
            default="abort",
            type=str,
            dest="on_error",
            help=ERROR_POLICY_HELP_TEXT
        )
        parser.add_argument(
            "--threads", "-j",
            default=None,
            type=int,
            metavar='',
            help="Number of worker threads. Default: number of CPUs"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and per-stage statistics on stderr"
        )
        parser.add_argument(
            "--time", "-t",
            action="store_true",
            help="Show total execution time"
        )

        return parser.parse_args(args)

    def configure_logging(self) -> None:
        level = logging.WARNING
        if self.verbose:
            level = logging.INFO
        if os.environ.get("DEBUG"):
            level = logging.DEBUG
        logging.getLogger().setLevel(level)

    def create_params(self, args: argparse.Namespace) -> SearchParams:
        """Create SearchParams from CLI arguments. Invalid values exit with status 1."""
        try:
            return SearchParams.from_human_readable(
                root_dir=args.input,
                min_size_str=args.min_size,
                max_size_str=args.max_size,
                algorithm=ALGORITHM_ALIASES[args.algorithm],
                min_depth=args.min_depth,
                max_depth=args.max_depth,
                omit_hidden=args.omit_hidden,
                min_frequency=args.min_frequency,
                max_frequency=args.max_frequency,
                sort_by_frequency=args.sort,
                result_format=RESULT_FORMAT_ALIASES[args.result_format],
                csv_dir=args.csv_dir,
                xlsx_dir=args.xlsx_dir,
                full_path=args.full_path,
                error_policy=ERROR_POLICY_ALIASES[args.on_error],
                workers=args.threads,
            )
        except IdenticalFilesError as e:
            self.error_exit(str(e))

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
            sys.stderr.flush()
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
            sys.stderr.flush()

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (placeholder for signal handling)."""
        return False

    def run_search(self, params: SearchParams):
        """Execute the search workflow."""
        command = SearchCommand()
        try:
            groups, stats, summary = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except IdenticalFilesError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary(), file=sys.stderr)

        return groups, stats, summary

    @staticmethod
    def output_results(groups: List[Group], summary: Summary, params: SearchParams) -> None:
        """Print groups in the order the pipeline produced them, then the summary."""
        sys.stdout.write(ReportService.render(groups, params.result_format))
        sys.stdout.write(ReportService.render_summary(summary, params.result_format))
        sys.stdout.flush()

    def run_exports(self, groups: List[Group], params: SearchParams) -> bool:
        """Returns False if any requested export failed."""
        results = ExportService.export_all(groups, csv_dir=params.csv_dir, xlsx_dir=params.xlsx_dir)
        ok = True
        for name, result in results.items():
            if isinstance(result, IdenticalFilesError):
                print(f"❌ Error: {name.upper()} export failed: {result}", file=sys.stderr)
                ok = False
            elif self.verbose:
                print(f"{name.upper()} written to {result}", file=sys.stderr)
        return ok

    def report_failures(self, stats: PipelineStats) -> None:
        if not stats.failures:
            return
        self.warning(f"{len(stats.failures)} file(s) could not be read and were skipped")
        if self.verbose:
            for failure in stats.failures:
                print(f"   [{failure.stage}] {failure.path}: {failure.reason}", file=sys.stderr)

    @staticmethod
    def warning(message: str) -> None:
        """Print a warning message to stderr."""
        print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.configure_logging()

        params = self.create_params(args)
        logger.info(f"Scanning directory: {params.root_dir}")

        groups, stats, summary = self.run_search(params)
        self.output_results(groups, summary, params)
        self.report_failures(stats)

        exports_ok = self.run_exports(groups, params)

        if args.time:
            elapsed = time.time() - self.start_time
            print(f"Total Execution Time: {elapsed:.3f}s", file=sys.stderr)

        if not exports_ok:
            sys.exit(1)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
