"""
Export Service

Selects a serializer, names the output file and audits the result.

Filenames follow `<prefix>-<YYYY-MM-DD>.<ext>`, e.g. expenses-2024-01-31.csv.
Exporting an empty collection is not an error for any format.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from expense_tracker.audit import AuditLogger, get_audit_logger
from expense_tracker.config import ExportSettings
from expense_tracker.exceptions import ExportError, UnsupportedExportFormatError
from expense_tracker.export.csv_export import to_csv
from expense_tracker.export.json_export import to_json
from expense_tracker.export.pdf import PdfRenderer, ReportLabPdfRenderer
from expense_tracker.models.expense import Expense


class ExportFormat(str, Enum):
    """Supported export formats."""
    CSV = "csv"
    JSON = "json"
    PDF = "pdf"


MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
    ExportFormat.PDF: "application/pdf",
}


class ExportArtifact(BaseModel):
    """A generated export ready to be saved or downloaded."""

    filename: str
    content: Union[str, bytes] = Field(
        ...,
        description="Text for CSV/JSON, raw bytes for PDF"
    )
    media_type: str
    record_count: int = Field(ge=0)

    def as_bytes(self) -> bytes:
        """Content encoded for writing to disk or a response body."""
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")


class ExportService:
    """Produces CSV, JSON and PDF exports of an expense collection."""

    def __init__(
        self,
        settings: Optional[ExportSettings] = None,
        pdf_renderer: Optional[PdfRenderer] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or ExportSettings()
        self._pdf_renderer = pdf_renderer or ReportLabPdfRenderer(self._settings.pdf_title)
        self._audit = audit_logger or get_audit_logger()

    def filename_for(self, fmt: ExportFormat, today: date) -> str:
        return f"{self._settings.filename_prefix}-{today.isoformat()}.{fmt.value}"

    def export(
        self,
        expenses: list[Expense],
        fmt: Union[ExportFormat, str],
        *,
        today: Optional[date] = None,
        exported_at: Optional[datetime] = None,
    ) -> ExportArtifact:
        """
        Serialize expenses in the requested format.

        Args:
            expenses: Records to export, already filtered and ordered
            fmt: csv, json or pdf
            today: Date used in the filename; defaults to today
            exported_at: Timestamp written into JSON exports; defaults to now

        Raises:
            UnsupportedExportFormatError: Unknown format
            ExportError: The PDF backend failed
        """
        try:
            fmt = ExportFormat(fmt)
        except ValueError:
            self._audit.log_export_failed(str(fmt), "Unsupported export format")
            raise UnsupportedExportFormatError(f"Unsupported export format: {fmt}")

        records = list(expenses)
        today = today or date.today()

        if fmt == ExportFormat.CSV:
            content: Union[str, bytes] = to_csv(records)
        elif fmt == ExportFormat.JSON:
            content = to_json(
                records,
                exported_at=exported_at or datetime.now(timezone.utc),
                indent=self._settings.json_indent,
            )
        else:
            try:
                content = self._pdf_renderer.render(records, generated_on=today)
            except Exception as e:
                self._audit.log_export_failed(fmt.value, str(e))
                raise ExportError(f"PDF rendering failed: {e}") from e

        artifact = ExportArtifact(
            filename=self.filename_for(fmt, today),
            content=content,
            media_type=MEDIA_TYPES[fmt],
            record_count=len(records),
        )
        self._audit.log_export_generated(fmt.value, artifact.filename, len(records))
        return artifact
