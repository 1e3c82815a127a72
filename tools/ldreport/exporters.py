from __future__ import annotations

import csv
import io
import json
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .config import DEFAULT_CONFIG, ReportConfig
from .report import ModalityBreakdown, ReportDocument

CSV_HEADERS = [
    "Report ID",
    "Student Name",
    "Age",
    "Test Date",
    "Combined Score",
    "Risk Level",
    "Confidence",
    "Handwriting Score",
    "Speech Score",
    "Line Straightness",
    "Letter Formation",
    "Fluency",
    "Pronunciation",
]

NOT_AVAILABLE = "N/A"

TITLE_FONT_SIZE = 20
HEADING_FONT_SIZE = 14
BODY_FONT_SIZE = 12
LIST_FONT_SIZE = 10
FOOTER_FONT_SIZE = 8


def to_json(report: ReportDocument) -> str:
    return json.dumps(report.to_dict(), ensure_ascii=False, indent=2)


def _fmt1(x: Optional[float]) -> str:
    # half-up on the exact binary value, same as toFixed(1) in earlier exports
    if x is None or not math.isfinite(x):
        return NOT_AVAILABLE
    return str(Decimal(x).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _finding(breakdown: Optional[ModalityBreakdown], key: str) -> Optional[float]:
    if breakdown is None:
        return None
    return breakdown.key_findings.get(key)


def csv_row(report: ReportDocument) -> List[str]:
    hw = report.handwriting
    sp = report.speech
    risk = report.combined.risk
    return [
        report.metadata.report_id,
        str(report.subject.name),
        str(report.subject.age),
        str(report.subject.test_date),
        _fmt1(report.combined.score),
        risk.label if risk is not None else NOT_AVAILABLE,
        str(report.combined.confidence),
        _fmt1(hw.overall_score if hw is not None else None),
        _fmt1(sp.overall_score if sp is not None else None),
        _fmt1(_finding(hw, "lineStraightness")),
        _fmt1(_finding(hw, "letterFormation")),
        _fmt1(_finding(sp, "fluency")),
        _fmt1(_finding(sp, "pronunciation")),
    ]


def to_csv(report: ReportDocument) -> str:
    """Header plus one data row; fields containing delimiters or quotes are quoted."""
    buf = io.StringIO()
    w = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    w.writerow(CSV_HEADERS)
    w.writerow(csv_row(report))
    return buf.getvalue()


@dataclass(frozen=True)
class PrintLine:
    text: str
    font_size: int
    y_mm: float


@dataclass
class PrintPage:
    lines: List[PrintLine] = field(default_factory=list)


class _Layout:
    def __init__(self, cfg: ReportConfig):
        self.cfg = cfg
        self.pages: List[PrintPage] = [PrintPage()]
        self.y = cfg.page_top_mm

    def line(self, text: str, font_size: int, advance: float) -> None:
        if self.y > self.cfg.page_bottom_margin_mm:
            self.pages.append(PrintPage())
            self.y = self.cfg.page_top_mm
        self.pages[-1].lines.append(PrintLine(text=text, font_size=font_size, y_mm=self.y))
        self.y += advance

    def gap(self, extra: float) -> None:
        self.y += extra


def layout_printable(report: ReportDocument, cfg: ReportConfig = DEFAULT_CONFIG) -> List[PrintPage]:
    """
    Top-to-bottom layout of the printable report:
    title, subject info, overall assessment, numbered recommendations.
    The generation timestamp goes in the footer of the first page only.
    """
    out = _Layout(cfg)
    subject = report.subject
    combined = report.combined

    out.line(cfg.report_title, TITLE_FONT_SIZE, 20)

    out.line("Student Information", HEADING_FONT_SIZE, 10)
    out.line(f"Name: {subject.name}", BODY_FONT_SIZE, 8)
    out.line(f"Age: {subject.age} years", BODY_FONT_SIZE, 8)
    out.line(f"Grade: {subject.grade}", BODY_FONT_SIZE, 8)
    if subject.school:
        out.line(f"School: {subject.school}", BODY_FONT_SIZE, 8)
    if subject.teacher:
        out.line(f"Teacher: {subject.teacher}", BODY_FONT_SIZE, 8)
    out.line(f"Test Date: {subject.test_date}", BODY_FONT_SIZE, 8)
    out.gap(7)

    score = f"{_fmt1(combined.score)}%" if combined.score is not None else NOT_AVAILABLE
    risk = combined.risk.label if combined.risk is not None else NOT_AVAILABLE
    out.line("Overall Assessment", HEADING_FONT_SIZE, 10)
    out.line(f"Combined Score: {score}", BODY_FONT_SIZE, 8)
    out.line(f"Risk Level: {risk}", BODY_FONT_SIZE, 8)
    out.line(f"Confidence: {combined.confidence}%", BODY_FONT_SIZE, 8)
    out.gap(7)

    if report.recommendations:
        out.line("Recommendations", HEADING_FONT_SIZE, 10)
        for i, rec in enumerate(report.recommendations, start=1):
            out.line(f"{i}. {rec}", LIST_FONT_SIZE, 8)

    out.pages[0].lines.append(
        PrintLine(text=f"Generated: {report.metadata.generated_at}", font_size=FOOTER_FONT_SIZE, y_mm=cfg.footer_y_mm)
    )
    return out.pages


def render_pdf(report: ReportDocument, cfg: ReportConfig = DEFAULT_CONFIG) -> bytes:
    pages = layout_printable(report, cfg)
    buf = io.BytesIO()
    _, page_height = A4
    c = canvas.Canvas(buf, pagesize=A4)
    c.setTitle(f"{cfg.report_title} {report.metadata.report_id}")
    for page in pages:
        for ln in page.lines:
            c.setFont("Helvetica", ln.font_size)
            c.drawString(cfg.page_left_mm * mm, page_height - ln.y_mm * mm, ln.text)
        c.showPage()
    c.save()
    return buf.getvalue()
