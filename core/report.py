import io
from datetime import date
from typing import Optional
from xml.sax.saxutils import escape
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib import colors
from core.types import PatientData

DISCLAIMER = (
    "<b>Disclaimer:</b> This report is for informational purposes only and does not constitute "
    "medical advice. Consult a qualified healthcare professional for diagnosis and treatment."
)

def _table(rows: list[list[str]], header: list[str], widths: list[int]) -> Table:
    tbl = Table([header] + rows, hAlign='LEFT', colWidths=widths)
    tbl.setStyle(TableStyle([
        ('BACKGROUND', (0,0), (-1,0), colors.HexColor('#e0f2f1')),
        ('GRID', (0,0), (-1,-1), 0.25, colors.grey),
        ('FONTNAME', (0,0), (-1,0), 'Helvetica-Bold'),
        ('VALIGN', (0,0), (-1,-1), 'TOP'),
        ('ROWBACKGROUNDS', (0,1), (-1,-1), [colors.white, colors.HexColor('#fafafa')]),
    ]))
    return tbl

def build_pdf(patient: PatientData, rows: list[list[str]], generated: Optional[date] = None) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, title="Lung Health Report")
    styles = getSampleStyleSheet()
    cell = styles["BodyText"]
    story = []

    story.append(Paragraph("<b>Lung Health Report</b>", styles["Title"]))
    pinfo = (
        f"<b>Name:</b> {escape(patient.name or '—')} &nbsp;&nbsp; "
        f"<b>Sex:</b> {escape(patient.sex or '—')} &nbsp;&nbsp; "
        f"<b>Age:</b> {int(patient.age) if patient.age is not None else '—'} &nbsp;&nbsp; "
        f"<b>Date:</b> {(generated or date.today()).strftime('%B %d, %Y')}"
    )
    story.append(Paragraph(pinfo, styles["Normal"]))
    story.append(Spacer(1, 8))

    if rows:
        # wrap long interpretations (recommendations) inside the cell
        body = [[r[0], r[1], Paragraph(escape(r[2]), cell)] for r in rows]
        story.append(_table(body, ["Metric", "Value", "Interpretation"], [150, 80, 260]))

    story.append(Spacer(1, 10))
    story.append(Paragraph(DISCLAIMER, styles['Italic']))

    doc.build(story)
    return buf.getvalue()
