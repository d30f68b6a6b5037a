"""Render a weekly time report as a PDF document."""
from __future__ import annotations

from datetime import date
import io
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .reporting import WeeklyReport, format_duration, format_hours, format_time, report_filename
from .stats import WEEKLY_TARGET_HOURS

BRAND = colors.HexColor("#2962ff")
STRIPE = colors.HexColor("#f0f0fa")
MUTED = colors.HexColor("#646464")


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="Brand",
        parent=styles["Heading1"],
        fontSize=20,
        textColor=BRAND,
        alignment=TA_CENTER,
        spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        name="ReportTitle",
        parent=styles["Heading2"],
        fontSize=16,
        alignment=TA_CENTER,
        spaceAfter=2,
    ))
    styles.add(ParagraphStyle(
        name="Period",
        parent=styles["Normal"],
        fontSize=12,
        alignment=TA_CENTER,
        spaceAfter=10,
    ))
    styles.add(ParagraphStyle(
        name="SectionHeader",
        parent=styles["Heading3"],
        fontSize=14,
        textColor=BRAND,
        spaceBefore=10,
        spaceAfter=6,
    ))
    styles.add(ParagraphStyle(
        name="TableCell",
        parent=styles["Normal"],
        fontSize=9,
        leading=11,
    ))
    styles.add(ParagraphStyle(
        name="Footer",
        parent=styles["Normal"],
        fontSize=10,
        textColor=MUTED,
    ))
    return styles


def _table_style() -> TableStyle:
    return TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), BRAND),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, STRIPE]),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#e2e8f0")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ])


def render_pdf(report: WeeklyReport) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        rightMargin=0.6 * inch,
        leftMargin=0.6 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        title=report.title,
    )
    styles = _styles()
    tz = report.generated_at.tzinfo
    story = []

    story.append(Paragraph("TimeTrack", styles["Brand"]))
    story.append(Paragraph(escape(report.title), styles["ReportTitle"]))
    story.append(Paragraph(escape(report.date_range), styles["Period"]))
    story.append(HRFlowable(width="100%", thickness=1, color=BRAND))
    story.append(Spacer(1, 8))

    if report.employee:
        story.append(Paragraph(f"Employee: {escape(report.employee)}", styles["Normal"]))
    story.append(Paragraph(f"Generated on: {report.generated_at.strftime('%B %d, %Y')}", styles["Normal"]))

    # Summary
    story.append(Paragraph("Summary", styles["SectionHeader"]))
    summary = Table(
        [
            ["Total Hours", format_hours(report.total_hours)],
            ["Remaining Hours", format_hours(report.remaining_hours)],
            ["Weekly Target", f"{WEEKLY_TARGET_HOURS}h 0m"],
            ["Progress", f"{report.progress_percentage:.1f}%"],
        ],
        colWidths=[2 * inch, 1.5 * inch],
        hAlign="LEFT",
    )
    summary.setStyle(TableStyle([
        ("FONTSIZE", (0, 0), (-1, -1), 11),
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
    ]))
    story.append(summary)

    # Daily table
    story.append(Paragraph("Daily Summary", styles["SectionHeader"]))
    daily_rows = [["Day", "Hours", "First In", "Last Out", "Entries"]]
    for day in report.days:
        daily_rows.append([
            date.fromisoformat(day.date).strftime("%A, %b %d"),
            format_hours(day.hours),
            format_time(day.first_in, tz),
            format_time(day.last_out, tz),
            str(day.entry_count),
        ])
    daily = Table(daily_rows, colWidths=[2.2 * inch, 1.1 * inch, 1.1 * inch, 1.1 * inch, 0.9 * inch], repeatRows=1)
    daily.setStyle(_table_style())
    story.append(daily)

    # Detailed entries
    story.append(Paragraph("Detailed Time Entries", styles["SectionHeader"]))
    detail_rows = [["Date", "Clock In", "Clock Out", "Duration", "Category", "Description"]]
    for row in report.details:
        detail_rows.append([
            date.fromisoformat(row.date).strftime("%a, %b %d"),
            format_time(row.clock_in, tz),
            format_time(row.clock_out, tz) if row.clock_out else "Active",
            format_duration(row.duration_ms) if row.duration_ms is not None else "In progress",
            Paragraph(escape(row.category or "-"), styles["TableCell"]),
            Paragraph(escape(row.description or "-"), styles["TableCell"]),
        ])
    if len(detail_rows) == 1:
        detail_rows.append(["-", "-", "-", "-", "-", "No entries"])
    details = Table(
        detail_rows,
        colWidths=[1.0 * inch, 0.9 * inch, 0.9 * inch, 0.9 * inch, 1.2 * inch, 2.3 * inch],
        repeatRows=1,
    )
    details.setStyle(_table_style())
    story.append(details)

    story.append(Spacer(1, 14))
    story.append(Paragraph("This report was generated automatically from TimeTrack.", styles["Footer"]))
    story.append(Paragraph(f"Report Period: {escape(report.date_range)}", styles["Footer"]))

    doc.build(story)
    return buffer.getvalue()


def write_pdf_report(report: WeeklyReport, out_dir: Path) -> Path:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    report_path = out_dir / report_filename(report, "pdf")
    report_path.write_bytes(render_pdf(report))
    return report_path
