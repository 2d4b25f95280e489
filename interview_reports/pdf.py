from __future__ import annotations  # Styled PDF rendering for interview reports

import os
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple, Union

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from storage.results import ResultRecord

from .models import EarlyExitReport, FullAnalysisReport, report_from_stored

DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color
SOFT_ACCENT_BG = (243, 248, 255)  # Highlight background

VERDICT_COLORS = {
    "Strong Hire": (30, 142, 62),
    "Hire": (67, 160, 71),
    "Weak Hire": (230, 145, 56),
    "No Hire": (211, 47, 47),
}


def _parse_datetime(value: str | None) -> datetime | None:  # Parse ISO timestamp safely
    if not value:
        return None
    try:
        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _format_datetime(value: datetime | None) -> str:  # Format timestamp for display
    if not value:
        return "-"
    return value.strftime("%d %b %Y, %I:%M %p").lstrip("0").replace(" 0", " ")


def _effective_width(pdf: FPDF) -> float:  # Compute effective page width
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


class ReportPDF(FPDF):  # PDF with custom header/footer styling
    def __init__(self, *args, accent: Tuple[int, int, int] = ACCENT, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.accent = accent
        self.header_title = "Intelligence Report"
        self.font_regular = "Helvetica"
        self.font_bold = "Helvetica"
        self.supports_unicode = False

    def use_unicode_fonts(self) -> None:  # Switch to DejaVu when the system fonts exist
        if not (os.path.exists(DEJAVU_SANS) and os.path.exists(DEJAVU_SANS_BOLD)):
            return
        self.add_font("DejaVu", "", DEJAVU_SANS)
        self.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        self.font_regular = "DejaVu"
        self.font_bold = "DejaVu"
        self.supports_unicode = True

    def prepare_text(self, text: Any) -> str:  # Sanitize text for non-unicode fonts
        value = "" if text is None else str(text)
        if self.supports_unicode:
            return value
        cleaned = value.replace("•", "-").replace("–", "-").replace("—", "-")
        return cleaned.encode("latin-1", "ignore").decode("latin-1")

    def header(self) -> None:  # Render header banner
        usable = _effective_width(self)
        if self.page_no() == 1:
            self.set_fill_color(*self.accent)
            self.rect(0, 0, self.w, 20, style="F")
            self.set_text_color(255, 255, 255)
            self.set_font(self.font_bold, "B", 16)
            self.set_xy(self.l_margin, 6)
            self.multi_cell(usable, 8, self.prepare_text(self.header_title))
            self.set_text_color(*TEXT)
            self.ln(4)
        else:
            self.set_text_color(80, 80, 80)
            self.set_xy(self.l_margin, 8)
            self.set_font(self.font_bold, "B", 12)
            self.multi_cell(usable, 6, self.prepare_text(self.header_title))
            mark = self.get_y()
            self.set_draw_color(*self.accent)
            self.set_line_width(0.4)
            self.line(self.l_margin, mark + 1, self.w - self.r_margin, mark + 1)
            self.set_text_color(*TEXT)
            self.ln(4)

    def footer(self) -> None:  # Render footer with pagination
        self.set_y(-12)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(120, 120, 120)
        self.set_font(self.font_regular, "", 9)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")


def _section_title(pdf: ReportPDF, title: str) -> None:  # Render styled section title
    pdf.set_text_color(*TEXT)
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf.font_bold, "B", 13)
    pdf.cell(0, 9, pdf.prepare_text(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)


def _meta_block(pdf: ReportPDF, rows: List[Tuple[str, str]]) -> None:  # Draw two-column metadata
    col = _effective_width(pdf) / 2.0
    line = 6
    for idx in range(0, len(rows), 2):
        left = rows[idx]
        right = rows[idx + 1] if idx + 1 < len(rows) else ("", "")
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf.font_regular, "", 10)
        pdf.cell(col, line, pdf.prepare_text(left[0]), new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, pdf.prepare_text(right[0]), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf.font_bold, "B", 11)
        pdf.cell(col, line, pdf.prepare_text(left[1]), new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, pdf.prepare_text(right[1]), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


def _render_scores(pdf: ReportPDF, report: Union[EarlyExitReport, FullAnalysisReport]) -> None:  # Draw score table
    rows = [
        ("Final Score", report.finalScore),
        ("Communication", report.communicationScore),
        ("Skills", report.skillsScore),
        ("Knowledge", report.knowledgeScore),
    ]
    widths = [_effective_width(pdf) * 0.7, _effective_width(pdf) * 0.3]
    pdf.set_x(pdf.l_margin)
    pdf.set_fill_color(*ACCENT)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(pdf.font_bold, "B", 10)
    pdf.cell(widths[0], 8, "Dimension", align="L", fill=True)
    pdf.cell(widths[1], 8, "Score", align="L", fill=True)
    pdf.ln(8)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf.font_regular, "", 10)
    for idx, (label, score) in enumerate(rows):
        fill = idx % 2 == 0
        if fill:
            pdf.set_fill_color(247, 250, 255)
        pdf.set_x(pdf.l_margin)
        pdf.cell(widths[0], 7, label, fill=fill)
        pdf.cell(widths[1], 7, f"{score}/100", fill=fill)
        pdf.ln(7)
    pdf.ln(2)


def _render_verdict(pdf: ReportPDF, recommendation: str) -> None:  # Highlight the hiring recommendation
    pdf.set_fill_color(*SOFT_ACCENT_BG)
    top = pdf.get_y()
    pdf.rect(pdf.l_margin, top, _effective_width(pdf), 16, style="F")
    pdf.set_xy(pdf.l_margin + 6, top + 4)
    pdf.set_text_color(*MUTED)
    pdf.set_font(pdf.font_regular, "", 10)
    pdf.cell(_effective_width(pdf) / 2, 8, "Hiring Recommendation")
    pdf.set_text_color(*VERDICT_COLORS.get(recommendation, ACCENT))
    pdf.set_font(pdf.font_bold, "B", 14)
    pdf.cell(_effective_width(pdf) / 2 - 12, 8, recommendation, align="R")
    pdf.set_y(top + 20)
    pdf.set_text_color(*TEXT)


def _render_paragraph(pdf: ReportPDF, text: str) -> None:
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf.font_regular, "", 11)
    pdf.multi_cell(_effective_width(pdf), 6, pdf.prepare_text(text or "-"))
    pdf.ln(2)


def _render_bullets(pdf: ReportPDF, label: Optional[str], items: Sequence[str]) -> None:  # Render labelled bullet list
    bullet = "•" if pdf.supports_unicode else "-"
    if label:
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*ACCENT)
        pdf.set_font(pdf.font_bold, "B", 10)
        pdf.cell(0, 6, pdf.prepare_text(label), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(pdf.font_regular, "", 10)
    if not items:
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.multi_cell(_effective_width(pdf), 5.5, "None recorded.")
    else:
        pdf.set_text_color(*TEXT)
        for item in items:
            pdf.set_x(pdf.l_margin)
            pdf.multi_cell(_effective_width(pdf), 5.5, pdf.prepare_text(f"{bullet} {item}"))
    pdf.set_text_color(*TEXT)
    pdf.ln(2)


def generate_report_pdf(  # Build PDF payload for a stored interview result
    result: ResultRecord,
    *,
    candidate_name: str | None = None,
) -> bytes:
    report = report_from_stored(result.report)
    pdf = ReportPDF()
    pdf.use_unicode_fonts()
    title = result.interview_title or "Interview"
    pdf.header_title = f"{title} - {candidate_name or result.candidate_id} - Intelligence Report"
    pdf.set_margins(15, 22, 15)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    _section_title(pdf, "Overview")
    _meta_block(
        pdf,
        [
            ("Candidate ID", result.candidate_id),
            ("Interview ID", result.interview_id),
            ("Interview Type", result.interview_type or "-"),
            ("Generated By", result.provider_used or "local (early exit)"),
            ("Created", _format_datetime(_parse_datetime(result.created_at))),
            ("Result", f"#{result.id}"),
        ],
    )
    _render_verdict(pdf, report.hiringRecommendation)

    _section_title(pdf, "Scores")
    _render_scores(pdf, report)

    _section_title(pdf, "Summary")
    _render_paragraph(pdf, report.summary)

    _section_title(pdf, "Scorecard")
    _render_bullets(pdf, "Strengths", report.strengths)
    _render_bullets(pdf, "Weaknesses", report.weaknesses)
    _render_bullets(pdf, "Risk Flags", report.riskFlags)

    _section_title(pdf, "Communication Coaching")
    _render_bullets(pdf, "Verbal Delivery", report.communication_coaching.verbal_delivery)
    _render_bullets(pdf, "Structuring Answers", report.communication_coaching.structuring_answers)

    _section_title(pdf, "Resume vs Reality")
    _render_bullets(pdf, "Verified Claims", report.resume_vs_reality.verified_claims)
    _render_bullets(pdf, "Exaggerated Claims", report.resume_vs_reality.exaggerated_claims)
    _render_bullets(pdf, "Missing Skills", report.resume_vs_reality.missing_skills)

    _section_title(pdf, "Strategic Recommendations")
    _render_bullets(pdf, "Resume Edits", report.strategic_recommendations.resume_edits)
    _render_bullets(pdf, "Study Focus", report.strategic_recommendations.study_focus)

    return bytes(pdf.output())


__all__ = ["generate_report_pdf"]
