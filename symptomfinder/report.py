from datetime import date, datetime
from io import BytesIO
from typing import List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from symptomfinder.schemas import SymptomAnalysis

TITLE = "Symptom to Doctor Finder - Analysis Report"
DISCLAIMER = (
    "This AI-generated analysis is for informational purposes only and should not replace "
    "professional medical advice, diagnosis, or treatment. Always consult with qualified "
    "healthcare providers for medical concerns. In case of emergency, call 911 immediately."
)

MARGIN = 20 * mm
HEADER_HEIGHT = 40 * mm
BLUE = (59 / 255, 130 / 255, 246 / 255)
RED = (239 / 255, 68 / 255, 68 / 255)
DARK_RED = (220 / 255, 38 / 255, 38 / 255)


def report_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"symptom-analysis-report-{day.isoformat()}.pdf"


class _ReportWriter:
    """Top-down text cursor over a reportlab canvas, paging when it runs out of room."""

    def __init__(self, buffer: BytesIO):
        self.canvas = canvas.Canvas(buffer, pagesize=A4)
        self.canvas.setTitle(TITLE)
        self.width, self.height = A4
        self.y = self.height - MARGIN
        self.color = (0, 0, 0)

    def _line_height(self, size: float) -> float:
        return size * 1.35

    def new_page(self) -> None:
        self.canvas.showPage()
        self.y = self.height - MARGIN

    def ensure_room(self, needed: float) -> None:
        if self.y - needed < MARGIN:
            self.new_page()

    def text(self, text: str, size: float = 12, bold: bool = False) -> None:
        font = "Helvetica-Bold" if bold else "Helvetica"
        lines = simpleSplit(text, font, size, self.width - 2 * MARGIN) or [""]
        for line in lines:
            self.ensure_room(self._line_height(size))
            self.y -= self._line_height(size)
            self.canvas.setFont(font, size)
            self.canvas.setFillColorRGB(*self.color)
            self.canvas.drawString(MARGIN, self.y, line)
        self.y -= size * 0.4

    def gap(self, amount: float = 5) -> None:
        self.y -= amount

    def heading(self, text: str) -> None:
        self.ensure_room(40)
        self.text(text, 16, bold=True)

    def numbered(self, items: List[str]) -> None:
        for index, item in enumerate(items, 1):
            self.text(f"{index}. {item}")

    def header_bar(self) -> None:
        c = self.canvas
        c.setFillColorRGB(*BLUE)
        c.rect(0, self.height - HEADER_HEIGHT, self.width, HEADER_HEIGHT, stroke=0, fill=1)
        c.setFillColorRGB(1, 1, 1)
        c.setFont("Helvetica-Bold", 20)
        c.drawString(MARGIN, self.height - 25 * mm, TITLE)
        self.y = self.height - HEADER_HEIGHT - 10 * mm

    def disclaimer_box(self) -> None:
        size = 10
        lines = simpleSplit(DISCLAIMER, "Helvetica", size, self.width - 2 * MARGIN)
        box_height = 14 * 1.35 + len(lines) * self._line_height(size) + 20
        self.ensure_room(box_height + 10)
        self.gap(10)
        self.canvas.setFillColorRGB(*RED)
        self.canvas.rect(
            MARGIN - 5, self.y - box_height, self.width - 2 * MARGIN + 10, box_height, stroke=0, fill=1
        )
        self.gap(5)
        self.color = (1, 1, 1)
        self.text("IMPORTANT MEDICAL DISCLAIMER", 14, bold=True)
        self.text(DISCLAIMER, size)
        self.color = (0, 0, 0)

    def finish(self) -> None:
        self.canvas.showPage()
        self.canvas.save()


def render_report(symptoms: str, analysis: SymptomAnalysis, generated_at: Optional[datetime] = None) -> bytes:
    """Render the analysis as a printable PDF and return its bytes."""
    generated_at = generated_at or datetime.now()
    buffer = BytesIO()
    w = _ReportWriter(buffer)

    w.header_bar()
    w.text(f"Generated on: {generated_at.strftime('%B %d, %Y at %I:%M %p')}", 10)
    w.gap(10)

    w.heading("REPORTED SYMPTOMS")
    w.text(symptoms)
    w.gap()

    w.heading("IDENTIFIED SYMPTOMS")
    w.text(", ".join(analysis.symptoms))
    w.gap()

    w.heading("ASSESSMENT")
    w.text(f"Severity Level: {analysis.severity.upper()}", bold=True)
    w.text(f"Urgency: {analysis.urgency.upper()}", bold=True)
    w.text(f"Confidence Score: {round(analysis.confidence * 100)}%", bold=True)
    w.gap()

    w.heading("POSSIBLE CONDITIONS")
    w.numbered(analysis.possible_conditions)
    w.gap()

    w.heading("RECOMMENDED HEALTHCARE PROVIDERS")
    w.numbered(analysis.doctor_types)
    w.gap()

    w.heading("RECOMMENDATIONS")
    w.numbered(analysis.recommendations)
    w.gap()

    if analysis.red_flags:
        w.heading("RED FLAGS - SEEK IMMEDIATE ATTENTION")
        w.color = DARK_RED
        for flag in analysis.red_flags:
            w.text(f"! {flag}", bold=True)
        w.color = (0, 0, 0)
        w.gap()

    if analysis.follow_up_questions:
        w.heading("FOLLOW-UP QUESTIONS FOR YOUR DOCTOR")
        w.numbered(analysis.follow_up_questions)
        w.gap()

    diet = analysis.diet_suggestions
    if diet:
        w.heading("DIETARY SUGGESTIONS")
        for label, items in (
            ("Recommended Foods:", diet.foods),
            ("Foods to Avoid:", diet.avoid),
            ("Suggested Supplements:", diet.supplements),
            ("Hydration Recommendations:", diet.hydration),
        ):
            if items:
                w.text(label, 14, bold=True)
                w.text(", ".join(items))
        w.gap()

    w.disclaimer_box()
    w.finish()
    return buffer.getvalue()
