"""
encoder.py — Serialises a finished ``Document`` to PDF bytes.

Replays each page's display list onto a ReportLab canvas in the order the
operations were issued, so later operations paint over earlier ones. No temp
files are written; everything passes through BytesIO.
"""

import io
import logging
from pathlib import Path

from reportlab.lib import colors
from reportlab.pdfgen.canvas import Canvas

from qa_report.document import Document, LineOp, RectOp, TextOp

logger = logging.getLogger(__name__)


def _hex(h: str):
    """Convert a hex colour string to ReportLab Color."""
    h = h.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return colors.Color(r / 255, g / 255, b / 255)


def _draw(canvas: Canvas, op) -> None:
    if isinstance(op, TextOp):
        canvas.setFont(op.font, op.size)
        canvas.setFillColor(_hex(op.color))
        if op.align == "right":
            canvas.drawRightString(op.x, op.y, op.text)
        elif op.align == "center":
            canvas.drawCentredString(op.x, op.y, op.text)
        else:
            canvas.drawString(op.x, op.y, op.text)
    elif isinstance(op, RectOp):
        if op.fill:
            canvas.setFillColor(_hex(op.fill))
        if op.stroke:
            canvas.setStrokeColor(_hex(op.stroke))
            canvas.setLineWidth(op.line_width)
        canvas.rect(op.x, op.y, op.width, op.height,
                    fill=1 if op.fill else 0, stroke=1 if op.stroke else 0)
    elif isinstance(op, LineOp):
        canvas.setStrokeColor(_hex(op.color))
        canvas.setLineWidth(op.thickness)
        canvas.line(op.x1, op.y1, op.x2, op.y2)
    else:
        raise TypeError(f"Unsupported draw operation: {type(op).__name__}")


def encode_pdf(document: Document) -> bytes:
    """Render every page of ``document`` and return the PDF file content."""
    buf = io.BytesIO()
    geo = document.geometry
    canvas = Canvas(buf, pagesize=(geo.width, geo.height), pageCompression=1)
    canvas.setTitle(document.title)
    canvas.setCreator("qa-report")

    for page in document.pages:
        canvas.saveState()
        for op in page.ops:
            _draw(canvas, op)
        canvas.restoreState()
        canvas.showPage()

    canvas.save()
    pdf_bytes = buf.getvalue()
    logger.debug("Encoded %d page(s) into %d bytes", document.page_count, len(pdf_bytes))
    return pdf_bytes


def save_pdf(pdf_bytes: bytes, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pdf_bytes)
    return path
