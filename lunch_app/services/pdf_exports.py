"""Printable PDF export of the per-shift kitchen report."""

from __future__ import annotations

from decimal import Decimal
from io import BytesIO
import logging
from pathlib import Path
import re
from typing import Any
from xml.sax.saxutils import escape

from lunch_app.core.config import settings
from lunch_app.services.shift_report import ShiftReport, ShiftSection, user_totals

logger = logging.getLogger(__name__)

REPORT_FONT_NAME = "LunchUnicode"
FONT_CANDIDATES: tuple[str, ...] = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
)

_fallback_warning_emitted = False


def _reportlab():
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    return {
        "colors": colors,
        "A4": A4,
        "ParagraphStyle": ParagraphStyle,
        "getSampleStyleSheet": getSampleStyleSheet,
        "PageBreak": PageBreak,
        "Paragraph": Paragraph,
        "SimpleDocTemplate": SimpleDocTemplate,
        "Spacer": Spacer,
        "Table": Table,
        "TableStyle": TableStyle,
    }


def find_report_font() -> str | None:
    """Return the configured font path, else the first installed candidate."""
    candidates = (settings.pdf_font_path, *FONT_CANDIDATES) if settings.pdf_font_path else FONT_CANDIDATES
    for candidate in candidates:
        if Path(candidate).is_file():
            return candidate
    return None


def register_report_font() -> str:
    """Register a TTF font once with ReportLab; Helvetica when none is installed."""
    global _fallback_warning_emitted

    font_path = find_report_font()
    if font_path is None:
        if not _fallback_warning_emitted:
            logger.warning("No TTF font found for PDF reports; accented names may render incorrectly.")
            _fallback_warning_emitted = True
        return "Helvetica"

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    if REPORT_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(REPORT_FONT_NAME, font_path))
    return REPORT_FONT_NAME


def sanitize_filename(value: str, max_length: int = 80) -> str:
    """Return a filesystem-friendly filename fragment."""
    normalized = re.sub(r"[\\/:*?\"<>|]+", "_", (value or "").strip())
    normalized = re.sub(r"\s+", "_", normalized)
    normalized = re.sub(r"_+", "_", normalized).strip("._")
    return (normalized or "report")[:max_length]


def report_filename(report: ShiftReport) -> str:
    return f"{sanitize_filename('orders_by_shift_' + report.serve_date.isoformat())}.pdf"


def _money(value: Decimal) -> str:
    return f"${value:.2f}"


def _build_styles() -> dict[str, Any]:
    font_name = register_report_font()
    rl = _reportlab()
    styles = rl["getSampleStyleSheet"]()
    return {
        "font_name": font_name,  # type: ignore[dict-item]
        "title": rl["ParagraphStyle"]("PdfTitle", parent=styles["Title"], fontName=font_name),
        "heading": rl["ParagraphStyle"]("PdfHeading2", parent=styles["Heading2"], fontName=font_name),
        "subheading": rl["ParagraphStyle"]("PdfHeading4", parent=styles["Heading4"], fontName=font_name),
        "normal": rl["ParagraphStyle"]("PdfNormal", parent=styles["Normal"], fontName=font_name),
    }


def _table(rows: list[list[str]], col_widths: list[int], styles: dict[str, Any]) -> Any:
    rl = _reportlab()
    table = rl["Table"](rows, colWidths=col_widths)
    table.setStyle(
        rl["TableStyle"](
            [
                ("BACKGROUND", (0, 0), (-1, 0), rl["colors"].lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.5, rl["colors"].black),
                ("FONTNAME", (0, 0), (-1, -1), styles["font_name"]),
            ]
        )
    )
    return table


def _shift_section_story(section: ShiftSection, styles: dict[str, Any]) -> list[Any]:
    rl = _reportlab()
    story: list[Any] = [rl["Paragraph"](escape(section.label), styles["heading"])]

    if section.order_count == 0:
        story.append(rl["Paragraph"]("No orders for this shift.", styles["normal"]))
        return story

    for group in section.users:
        name = group.profile.full_name if group.profile is not None else f"User #{group.user_id}"
        story.append(rl["Paragraph"](escape(name), styles["subheading"]))
        rows = [["Item", "Qty", "Unit", "Line"]]
        for order in group.orders:
            title = order.menu_item.title if order.menu_item is not None else "Unknown Item"
            rows.append(
                [
                    title,
                    str(order.quantity),
                    _money(Decimal(order.unit_price)),
                    _money(Decimal(order.unit_price) * order.quantity),
                ]
            )
        story.append(_table(rows, [250, 50, 80, 80], styles))
        totals = user_totals(group)
        story.append(
            rl["Paragraph"](
                f"Subtotal {_money(totals.subtotal)} • HST {_money(totals.tax)} • Total {_money(totals.total)}",
                styles["normal"],
            )
        )
        story.append(rl["Spacer"](1, 6))

    story.append(rl["Paragraph"](f"Items Summary: {escape(section.label)}", styles["subheading"]))
    story.append(_table([["Item", "Qty"], *[[title, str(qty)] for title, qty in section.item_summary.items()]], [360, 100], styles))
    story.append(
        rl["Paragraph"](
            f"Shift total {_money(section.totals.total)} (subtotal {_money(section.totals.subtotal)}, HST {_money(section.totals.tax)})",
            styles["normal"],
        )
    )
    return story


def render_shift_report_pdf(report: ShiftReport, meta: dict[str, Any]) -> bytes:
    """Render the shift report, one shift per page, and return PDF bytes."""
    styles = _build_styles()
    rl = _reportlab()

    story: list[Any] = [
        rl["Paragraph"](f"Orders by Shift: {report.serve_date:%A, %B %d, %Y}", styles["title"]),
        rl["Paragraph"](f"Generated: {meta.get('generated_at', '-')}", styles["normal"]),
        rl["Spacer"](1, 12),
    ]

    for index, section in enumerate(report.sections):
        story.extend(_shift_section_story(section, styles))
        if index < len(report.sections) - 1:
            story.append(rl["PageBreak"]())

    story.append(rl["Spacer"](1, 12))
    story.append(
        rl["Paragraph"](
            f"Day total {_money(report.totals.total)} (subtotal {_money(report.totals.subtotal)}, HST {_money(report.totals.tax)})",
            styles["heading"],
        )
    )

    buffer = BytesIO()
    rl["SimpleDocTemplate"](buffer, pagesize=rl["A4"]).build(story)
    return buffer.getvalue()
