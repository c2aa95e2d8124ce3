"""Export serializers (CSV, JSON, PDF) and the export service."""

from expense_tracker.export.csv_export import to_csv
from expense_tracker.export.json_export import to_json
from expense_tracker.export.pdf import PdfRenderer, ReportLabPdfRenderer
from expense_tracker.export.service import (
    ExportArtifact,
    ExportFormat,
    ExportService,
)

__all__ = [
    "ExportArtifact",
    "ExportFormat",
    "ExportService",
    "PdfRenderer",
    "ReportLabPdfRenderer",
    "to_csv",
    "to_json",
]
