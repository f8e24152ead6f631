"""Generic affidavit report.

This is the draft, non-official view of a party's affidavit data: an income
summary followed by one table per category. It renders as HTML (for an
external HTML-to-PDF renderer), plain text, or a PDF built directly with
reportlab when no renderer is configured.
"""

import html
from dataclasses import dataclass, field
from datetime import datetime
from io import BytesIO
from typing import Optional, Protocol, Union, runtime_checkable

import structlog
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .formatting import format_money
from .models import AffidavitData, AffidavitSummary, FormKey

logger = structlog.get_logger()

DISCLAIMER = (
    "This PDF is generated from data entered in FAIS. "
    "It is a draft summary and not an official court form."
)


@runtime_checkable
class HtmlPdfRenderer(Protocol):
    """Turns an HTML document into PDF bytes."""

    async def render(self, html_document: str) -> bytes:
        ...


@dataclass
class ReportTable:
    """One category table of the report."""

    title: str
    headers: list[str]
    rows: list[list[str]]
    right_aligned: set[int] = field(default_factory=set)

    def body_rows(self) -> list[list[str]]:
        """Rows to render; an empty category shows one blank row."""
        return self.rows or [[""] * len(self.headers)]


def _id(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def report_title(form: FormKey) -> str:
    return f"Financial Affidavit ({form.value.title()})"


class AffidavitReportGenerator:
    """
    Generate the generic affidavit report.

    Sections:
    - Income summary (employment-derived gross and threshold)
    - Employment
    - Monthly income, deductions and household expenses
    - Assets and liabilities
    """

    def __init__(self):
        self._tables: list[ReportTable] = []

    def generate(
        self,
        data: AffidavitData,
        summary: AffidavitSummary,
        form: FormKey,
        format: str = "html",
    ) -> Union[str, bytes]:
        """
        Generate the report.

        Args:
            data: The party's line items
            summary: Income summary for the same party
            form: Form variant named in the title
            format: Output format ("html", "text", "pdf")

        Returns:
            Report string, or bytes for PDF format
        """
        self._data = data
        self._summary = summary
        self._form = form
        self._generated = datetime.now()
        self._tables = self._build_tables(data)

        if format == "pdf":
            return self._format_pdf()
        if format == "text":
            return self._format_text()
        return self._format_html()

    def _build_tables(self, data: AffidavitData) -> list[ReportTable]:
        line_headers = ["Type ID", "Description", "Amount"]

        def lines(rows) -> list[list[str]]:
            return [[_id(r.type_id), r.if_other or "", format_money(r.amount)] for r in rows]

        return [
            ReportTable(
                title="Employment",
                headers=["Employer", "Pay rate", "Frequency type ID"],
                rows=[
                    [r.employer_name, format_money(r.pay_rate), _id(r.pay_frequency_type_id)]
                    for r in data.employment
                ],
                right_aligned={1},
            ),
            ReportTable(
                title="Monthly Income",
                headers=line_headers,
                rows=lines(data.monthly_income),
                right_aligned={2},
            ),
            ReportTable(
                title="Monthly Deductions",
                headers=line_headers,
                rows=lines(data.monthly_deductions),
                right_aligned={2},
            ),
            ReportTable(
                title="Monthly Household Expenses",
                headers=line_headers,
                rows=lines(data.monthly_household_expenses),
                right_aligned={2},
            ),
            ReportTable(
                title="Assets",
                headers=["Type ID", "Description", "Market value", "Non-marital type ID"],
                rows=[
                    [
                        _id(r.type_id),
                        r.description,
                        format_money(r.market_value),
                        _id(r.non_marital_type_id),
                    ]
                    for r in data.assets
                ],
                right_aligned={2},
            ),
            ReportTable(
                title="Liabilities",
                headers=["Type ID", "Description", "Amount owed", "Non-marital type ID"],
                rows=[
                    [
                        _id(r.type_id),
                        r.description,
                        format_money(r.amount_owed),
                        _id(r.non_marital_type_id),
                    ]
                    for r in data.liabilities
                ],
                right_aligned={2},
            ),
        ]

    def _summary_pairs(self) -> list[tuple[str, str]]:
        return [
            (
                "Gross annual income (employment-derived):",
                format_money(self._summary.gross_annual_income_from_employment),
            ),
            ("Threshold:", format_money(self._summary.threshold)),
        ]

    def _format_text(self) -> str:
        """Format report as plain text."""
        output = [
            report_title(self._form).upper(),
            "=" * 60,
            f"Generated: {self._generated.strftime('%B %d, %Y %H:%M')}",
            f"User ID: {self._data.owner_id}",
            "",
            "INCOME SUMMARY",
            "-" * 60,
        ]
        output.extend(f"{label} {value}" for label, value in self._summary_pairs())

        for table in self._tables:
            output.append("")
            output.append(table.title.upper())
            output.append("-" * 60)
            output.append(" | ".join(table.headers))
            for row in table.rows:
                output.append(" | ".join(row))
            if not table.rows:
                output.append("(none)")

        output.append("")
        output.append(DISCLAIMER)
        return "\n".join(output)

    def _format_html(self) -> str:
        """Format report as HTML for an HTML-to-PDF renderer."""
        esc = html.escape
        title = esc(report_title(self._form))
        lines = [
            "<!doctype html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8" />',
            f"<title>{title}</title>",
            "<style>",
            "@page { size: letter; margin: 0.6in; }",
            "body { font-family: Arial, Helvetica, sans-serif; font-size: 12px; color: #111; }",
            "h1 { font-size: 18px; margin: 0 0 6px 0; }",
            "h2 { font-size: 14px; margin: 18px 0 6px 0; }",
            ".muted { color: #555; }",
            ".k { font-weight: 700; }",
            "table { width: 100%; border-collapse: collapse; margin-top: 6px; }",
            "th, td { border: 1px solid #ddd; padding: 6px 8px; vertical-align: top; }",
            "th { background: #f6f6f6; text-align: left; }",
            ".right { text-align: right; }",
            "</style>",
            "</head>",
            "<body>",
            f"<h1>{title}</h1>",
            '<div class="muted">',
            f'<div><span class="k">Generated:</span> {esc(self._generated.strftime("%m/%d/%Y %I:%M %p"))}</div>',
            f'<div><span class="k">User ID:</span> {esc(self._data.owner_id)}</div>',
            "</div>",
            "<h2>Income Summary</h2>",
        ]
        for label, value in self._summary_pairs():
            lines.append(f'<div><span class="k">{esc(label)}</span> {esc(value)}</div>')

        for table in self._tables:
            lines.append(f"<h2>{esc(table.title)}</h2>")
            lines.append("<table>")
            header_cells = "".join(
                f'<th class="right">{esc(h)}</th>' if i in table.right_aligned else f"<th>{esc(h)}</th>"
                for i, h in enumerate(table.headers)
            )
            lines.append(f"<thead><tr>{header_cells}</tr></thead>")
            lines.append("<tbody>")
            for row in table.body_rows():
                cells = "".join(
                    f'<td class="right">{esc(c)}</td>' if i in table.right_aligned else f"<td>{esc(c)}</td>"
                    for i, c in enumerate(row)
                )
                lines.append(f"<tr>{cells}</tr>")
            lines.append("</tbody>")
            lines.append("</table>")

        lines.append(f'<p class="muted" style="margin-top: 18px;">{esc(DISCLAIMER)}</p>')
        lines.append("</body>")
        lines.append("</html>")
        return "\n".join(lines)

    def _format_pdf(self) -> bytes:
        """
        Format report as PDF using reportlab.

        Returns:
            PDF content as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=0.6 * inch,
            leftMargin=0.6 * inch,
            topMargin=0.6 * inch,
            bottomMargin=0.6 * inch,
            title=report_title(self._form),
        )

        styles = getSampleStyleSheet()
        styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=styles['Heading1'],
            fontSize=18,
            spaceAfter=6,
        ))
        styles.add(ParagraphStyle(
            name='SectionHeading',
            parent=styles['Heading2'],
            fontSize=14,
            spaceBefore=18,
            spaceAfter=6,
        ))
        styles.add(ParagraphStyle(
            name='Disclaimer',
            parent=styles['Normal'],
            fontSize=8,
            textColor=colors.grey,
            alignment=TA_CENTER,
        ))

        elements = []
        elements.append(Paragraph(html.escape(report_title(self._form)), styles['ReportTitle']))

        header_data = [
            ["Generated:", self._generated.strftime('%B %d, %Y')],
            ["User ID:", self._data.owner_id],
        ] + [list(pair) for pair in self._summary_pairs()]
        header_table = Table(header_data, colWidths=[3 * inch, 3 * inch])
        header_table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTNAME', (1, 0), (1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('ALIGN', (0, 0), (0, -1), 'LEFT'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ]))
        elements.append(header_table)

        for table in self._tables:
            elements.append(Paragraph(html.escape(table.title), styles['SectionHeading']))
            col_width = 7.3 * inch / len(table.headers)
            grid = Table(
                [table.headers] + table.body_rows(),
                colWidths=[col_width] * len(table.headers),
                repeatRows=1,
            )
            style = [
                ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f6f6f6')),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
                ('FONTSIZE', (0, 0), (-1, -1), 9),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#dddddd')),
                ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ]
            for column in table.right_aligned:
                style.append(('ALIGN', (column, 0), (column, -1), 'RIGHT'))
            grid.setStyle(TableStyle(style))
            elements.append(grid)

        elements.append(Spacer(1, 0.3 * inch))
        elements.append(Paragraph(DISCLAIMER, styles['Disclaimer']))

        doc.build(elements)
        logger.debug("generic_report_pdf_built", form=self._form.value, size=buffer.tell())
        return buffer.getvalue()
