"""Report rendering and file export services."""

from .report_service import ReportService
from .export_service import ExportService, XlsxFormats

__all__ = ["ReportService", "ExportService", "XlsxFormats"]
