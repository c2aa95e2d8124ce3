"""
PDF export.

DESIGN DECISION: The core only depends on the PdfRenderer interface. The
bundled ReportLab renderer lays out a title, the generation date, totals and
a table of records; another layout engine can be swapped in without touching
the export service.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date
from io import BytesIO
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from expense_tracker.formatting import format_currency, format_date
from expense_tracker.models.expense import Expense


class PdfRenderer(ABC):
    """Renders a collection of expenses as a PDF document."""

    @abstractmethod
    def render(
        self,
        expenses: Iterable[Expense],
        *,
        generated_on: Optional[date] = None,
    ) -> bytes:
        """Return the complete PDF file content."""
        pass


class ReportLabPdfRenderer(PdfRenderer):
    """Tabular expense report built with ReportLab's platypus layout."""

    COLUMN_WIDTHS = [80, 80, 100, 250]

    def __init__(self, title: str = "Expense Report", generated_on: Optional[date] = None):
        self._title = title
        self._generated_on = generated_on

    def render(
        self,
        expenses: Iterable[Expense],
        *,
        generated_on: Optional[date] = None,
    ) -> bytes:
        records = list(expenses)
        total = sum((expense.amount for expense in records), 0.0)
        generated_on = generated_on or self._generated_on or date.today()

        buf = BytesIO()
        doc = SimpleDocTemplate(buf, pagesize=LETTER, title=self._title)
        styles = getSampleStyleSheet()
        story = []

        story.append(Paragraph(escape(self._title), styles["Title"]))
        story.append(Paragraph(f"Generated: {generated_on.isoformat()}", styles["Normal"]))
        story.append(Spacer(1, 12))

        story.append(Paragraph(f"Total Records: {len(records)}", styles["Normal"]))
        story.append(Paragraph(f"Total Spending: {format_currency(total)}", styles["Normal"]))
        story.append(Spacer(1, 12))

        if records:
            rows = [["Date", "Amount", "Category", "Description"]] + [
                [
                    format_date(expense.date),
                    format_currency(expense.amount),
                    expense.category.value,
                    expense.description,
                ]
                for expense in records
            ]
            table = Table(rows, hAlign="LEFT", colWidths=self.COLUMN_WIDTHS, repeatRows=1)
            table.setStyle(
                TableStyle(
                    [
                        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F0F0F0")),
                        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                        ("ALIGN", (1, 1), (1, -1), "RIGHT"),
                    ]
                )
            )
            story.append(table)
        else:
            story.append(Paragraph("No expenses to report.", styles["Italic"]))

        doc.build(story)
        return buf.getvalue()
