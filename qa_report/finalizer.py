"""
finalizer.py — Second pass over a laid-out document.

Only once every page exists is the total page count known. The finalizer
then stamps the running header ("Página i de N") and footer on every page
but the cover, and repaints the table of contents: PDF text cannot be
edited, so each placeholder line is covered with an opaque rectangle and the
final line is drawn on top.
"""

import logging
from datetime import datetime
from typing import Sequence

from reportlab.pdfbase.pdfmetrics import stringWidth

from qa_report.composer import TOC_FONT_SIZE, TocEntry
from qa_report.document import CHROME, FONT, FONT_BOLD, Document, Page
from qa_report.text import ReportLabMeasurer, truncate_text

logger = logging.getLogger(__name__)

HEADER_SIZE = 9
FOOTER_SIZE = 8
FOOTER_BASELINE = 30
# Gap kept between the header title and the page label.
HEADER_GAP = 12


def _stamp_header(document: Document, page: Page, title: str, label: str) -> None:
    geo = document.geometry
    band_bottom = geo.height - geo.margin - geo.header_height + 6
    page.rect(0, band_bottom, geo.width, geo.height - band_bottom,
              fill="FFFFFF", layer=CHROME, tag="header-mask")
    y = geo.height - geo.margin - 12
    room = geo.content_width - stringWidth(label, FONT, HEADER_SIZE) - HEADER_GAP
    title = truncate_text(title, room, HEADER_SIZE, ReportLabMeasurer(FONT_BOLD))
    page.text(geo.margin, y, title, HEADER_SIZE, font=FONT_BOLD,
              color=document.color("primary"), layer=CHROME, tag="header")
    page.text(geo.width - geo.margin, y, label, HEADER_SIZE, font=FONT, align="right",
              color=document.color("muted"), layer=CHROME, tag="header")
    page.line(geo.margin, band_bottom + 2, geo.width - geo.margin, band_bottom + 2,
              color=document.color("primary"), thickness=0.5, layer=CHROME)


def _stamp_footer(document: Document, page: Page, text: str) -> None:
    geo = document.geometry
    page.line(geo.margin, FOOTER_BASELINE + 12, geo.width - geo.margin, FOOTER_BASELINE + 12,
              color=document.color("rule"), thickness=0.5, layer=CHROME)
    page.text(geo.margin, FOOTER_BASELINE, text, FOOTER_SIZE, font=FONT,
              color=document.color("muted"), layer=CHROME, tag="footer")


def footer_text(document: Document, project_name: str, generated_at: datetime) -> str:
    """Footer line, with the project name shortened so the timestamp always fits."""
    suffix = f" - Gerado em {generated_at.strftime('%d/%m/%Y %H:%M')}"
    room = document.geometry.content_width - stringWidth(suffix, FONT, FOOTER_SIZE)
    return truncate_text(project_name, room, FOOTER_SIZE, ReportLabMeasurer(FONT)) + suffix


def _leader(title: str, number: str, width: float) -> str:
    free = width - stringWidth(title, FONT, TOC_FONT_SIZE) - stringWidth(number, FONT, TOC_FONT_SIZE) - 16
    dots = int(free / stringWidth(".", FONT, TOC_FONT_SIZE))
    return "." * max(dots, 0)


def _rewrite_toc(document: Document, toc_page: Page, entries: Sequence[TocEntry]) -> None:
    geo = document.geometry
    left = geo.margin
    right = geo.width - geo.margin
    for entry in entries:
        if entry.page_index is None or entry.y is None:
            logger.warning("TOC entry '%s' was never placed; left as placeholder", entry.title)
            continue
        entry.page_number = entry.page_index + 1
        number = str(entry.page_number)

        toc_page.rect(left - 2, entry.y - 5, geo.content_width + 4, TOC_FONT_SIZE + 6,
                      fill="FFFFFF", layer=CHROME, tag="toc-mask")
        toc_page.text(left, entry.y, entry.title, TOC_FONT_SIZE, font=FONT,
                      color=document.color("text"), layer=CHROME, tag="toc-entry")
        toc_page.text(left + stringWidth(entry.title, FONT, TOC_FONT_SIZE) + 8, entry.y,
                      _leader(entry.title, number, geo.content_width), TOC_FONT_SIZE,
                      font=FONT, color=document.color("muted"), layer=CHROME)
        toc_page.text(right, entry.y, number, TOC_FONT_SIZE, font=FONT_BOLD, align="right",
                      color=document.color("text"), layer=CHROME, tag="toc-number")


def finalize(
    document: Document,
    toc_entries: Sequence[TocEntry],
    toc_page: Page,
    header_title: str,
    footer_text: str,
) -> None:
    """Paint headers, footers and the final TOC numbers.

    Args:
        document: Fully laid-out document.
        toc_entries: Entries recorded by the composer.
        toc_page: Page holding the TOC placeholders.
        header_title: Left-hand header text (the project name).
        footer_text: Footer line for every non-cover page.
    """
    total = document.page_count
    for page in document.pages[1:]:
        _stamp_header(document, page, header_title, f"Página {page.number} de {total}")
        _stamp_footer(document, page, footer_text)
    _rewrite_toc(document, toc_page, toc_entries)
    logger.info("Document finalized: %d page(s), %d TOC entr(ies)", total, len(toc_entries))
