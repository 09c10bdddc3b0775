"""
Exportación a PDF del documento renderizado (reportlab).
"""

import io
import re
from datetime import date

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from app.services.document_renderer import PAGE_HEIGHT, RenderedDocument

PDF_AUTHOR = "Laboratório Odontológico"


def write_pdf(document: RenderedDocument) -> bytes:
    """Dibuja cada página y sus pies; retorna el contenido del PDF."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
    pdf.setTitle(document.title)
    pdf.setAuthor(PDF_AUTHOR)

    for page in document.pages:
        for line in page.all_lines():
            pdf.setFont(line.font, line.size)
            x = line.x * mm
            # El layout mide y desde arriba; reportlab desde abajo
            y = (PAGE_HEIGHT - line.y) * mm
            if line.align == "center":
                pdf.drawCentredString(x, y, line.text)
            elif line.align == "right":
                pdf.drawRightString(x, y, line.text)
            else:
                pdf.drawString(x, y, line.text)
        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


def export_filename(patient_name: str, patient_id: str | None, day: date) -> str:
    """
    Nombre del archivo descargado:
    ordem_servico_<Nome_Paciente>[_ID<id>]_<AAAA-MM-DD>.pdf
    """
    info = re.sub(r"\s+", "_", patient_name.strip())
    if patient_id and patient_id.strip():
        pid = re.sub(r"\s+", "_", patient_id.strip())
        info = f"{info}_ID{pid}"
    # Sin separadores de ruta en el nombre
    info = info.replace("/", "_").replace("\\", "_")
    return f"ordem_servico_{info}_{day.isoformat()}.pdf"
