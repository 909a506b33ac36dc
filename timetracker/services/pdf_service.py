"""
PDF rendering of monthly cost reports.
"""
from io import BytesIO
from typing import Optional
import calendar
import logging

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from timetracker.models.report import MonthlyReport
from timetracker.models.user import User

logger = logging.getLogger(__name__)

HEADER_COLOR = colors.HexColor("#2c3e50")
TOTALS_COLOR = colors.HexColor("#ecf0f1")
STRIPE_COLOR = colors.HexColor("#f7f9fb")


def _fmt(value) -> str:
    return "-" if value is None else str(value)


class ReportPdfService:
    """Service for rendering MonthlyReport objects as PDF documents."""

    def render(self, report: MonthlyReport, user: Optional[User] = None) -> BytesIO:
        """Return a buffer positioned at the start of the rendered PDF."""
        logger.info("Rendering monthly report PDF user id=%s", report.user_id)

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=landscape(A4),
            rightMargin=0.5 * inch,
            leftMargin=0.5 * inch,
            topMargin=0.5 * inch,
            bottomMargin=0.5 * inch,
            title=f"Monthly report {report.year}-{report.month:02d}",
        )
        styles = getSampleStyleSheet()
        elements = []

        owner = user.full_name if user else f"User #{report.user_id}"
        elements.append(Paragraph(f"Monthly report: {owner}", styles["Heading1"]))
        elements.append(Spacer(1, 0.1 * inch))
        elements.append(
            Paragraph(
                f"Period: {calendar.month_name[report.month]} {report.year} | Currency: {report.currency}",
                styles["Heading2"],
            )
        )
        elements.append(Spacer(1, 0.2 * inch))

        if not report.items:
            elements.append(
                Paragraph("No time entries found for the selected period.", styles["Normal"])
            )
        else:
            rows = [["Date", "Project", "Task", "Hours", "Quantity", "Status", "Description"]]
            for entry in report.items:
                rows.append([
                    entry.date.isoformat(),
                    str(entry.project_id),
                    _fmt(entry.task_id),
                    _fmt(entry.total_hours),
                    _fmt(entry.quantity),
                    entry.status.value,
                    (entry.description or "")[:60],
                ])
            rows.append(["Total", "", "", str(report.totals.total_hours), "", "", ""])

            table = Table(rows, repeatRows=1, hAlign="LEFT")
            style = TableStyle([
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (3, 1), (4, -1), "RIGHT"),
                ("BACKGROUND", (0, -1), (-1, -1), TOTALS_COLOR),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ])
            for i in range(2, len(rows) - 1, 2):
                style.add("BACKGROUND", (0, i), (-1, i), STRIPE_COLOR)
            table.setStyle(style)
            elements.append(table)

        elements.append(Spacer(1, 0.3 * inch))
        # Helvetica has no glyphs for zł or ₴, so amounts carry the ISO code
        summary = Table(
            [
                ["Metric", "Value"],
                ["Total hours", str(report.totals.total_hours)],
                ["Total cost", f"{report.totals.total_cost} {report.currency}"],
                ["PLN to UAH rate", f"{report.rate_info.pl_to_uah_rate} ({report.rate_info.source})"],
                ["Generated at", report.rate_info.updated_at],
            ],
            colWidths=[2.5 * inch, 3.5 * inch],
            hAlign="LEFT",
        )
        summary.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#3498db")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTNAME", (0, 1), (0, -1), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 1, colors.grey),
        ]))
        elements.append(summary)

        doc.build(elements)
        buffer.seek(0)
        logger.info("Monthly report PDF rendered user id=%s", report.user_id)
        return buffer
