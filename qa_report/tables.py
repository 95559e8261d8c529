"""
tables.py — Multi-page tables with repeating header bands.

Each row is an atomic block: it is either drawn entirely on the current page
or moved to the next one, in which case the header band is redrawn first so
every page segment of the table starts with its column labels.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from qa_report.document import FONT, FONT_BOLD, Document
from qa_report.layout import Cursor, ensure_space, is_new_page
from qa_report.primitives import baseline
from qa_report.text import wrap_lines_limited

logger = logging.getLogger(__name__)

HEADER_HEIGHT = 20
CELL_PADDING = 4
FONT_SIZE = 9
LINE_HEIGHT = 11


@dataclass(frozen=True)
class TableColumn:
    header: str
    width: float


def _row_lines(columns: Sequence[TableColumn], row: Sequence, max_lines: int) -> list[list[str]]:
    cells = list(row) + [""] * (len(columns) - len(row))
    return [
        wrap_lines_limited(str(cell), col.width - 2 * CELL_PADDING, FONT_SIZE, max_lines) or [""]
        for col, cell in zip(columns, cells)
    ]


def row_height(lines: list[list[str]]) -> float:
    tallest = max((len(cell) for cell in lines), default=1)
    return tallest * LINE_HEIGHT + 2 * CELL_PADDING


def _draw_header(document: Document, cursor: Cursor, columns: Sequence[TableColumn], x: float) -> Cursor:
    page = cursor.page
    total_width = sum(col.width for col in columns)
    page.rect(
        x, cursor.y - HEADER_HEIGHT, total_width, HEADER_HEIGHT,
        fill=document.color("primary"), tag="table-header",
    )
    cx = x
    for col in columns:
        label = wrap_lines_limited(col.header, col.width - 2 * CELL_PADDING, FONT_SIZE, 1)
        page.text(
            cx + CELL_PADDING, cursor.y - HEADER_HEIGHT + 7,
            label[0] if label else "", FONT_SIZE,
            font=FONT_BOLD, color="FFFFFF", tag="table-header",
        )
        cx += col.width
    return cursor.down(HEADER_HEIGHT)


def draw_table(
    document: Document,
    cursor: Cursor,
    columns: Sequence[TableColumn],
    rows: Sequence[Sequence],
    x: float | None = None,
    max_cell_lines: int = 3,
) -> Cursor:
    """Draw a header band and every row, breaking pages between rows.

    Args:
        document: Target document (pages are allocated on demand).
        cursor: Position of the table's top edge.
        columns: Column headers and widths.
        rows: Cell values; missing trailing cells render empty.
        x: Left edge, the page margin by default.
        max_cell_lines: Cell text beyond this many lines is truncated.

    Returns:
        Cursor just below the last row.
    """
    x = document.geometry.margin if x is None else x
    total_width = sum(col.width for col in columns)
    laid_out = [_row_lines(columns, row, max_cell_lines) for row in rows]

    # Keep the header together with the first row.
    first_height = row_height(laid_out[0]) if laid_out else 0
    cursor = ensure_space(document, cursor, HEADER_HEIGHT + first_height)
    cursor = _draw_header(document, cursor, columns, x)
    bands = 1

    for index, lines in enumerate(laid_out):
        height = row_height(lines)
        moved = ensure_space(document, cursor, height)
        if is_new_page(cursor, moved):
            moved = _draw_header(document, moved, columns, x)
            bands += 1
        cursor = moved
        page = cursor.page

        fill = document.color("zebra") if index % 2 else "FFFFFF"
        page.rect(x, cursor.y - height, total_width, height, fill=fill, tag="table-row")

        cx = x
        for col, cell_lines in zip(columns, lines):
            top = cursor.y - CELL_PADDING
            for line in cell_lines:
                page.text(cx + CELL_PADDING, baseline(top, FONT_SIZE), line, FONT_SIZE,
                          font=FONT, color=document.color("text"))
                top -= LINE_HEIGHT
            cx += col.width
        page.line(x, cursor.y - height, x + total_width, cursor.y - height,
                  color=document.color("rule"), thickness=0.5)
        cursor = cursor.down(height)

    logger.debug("Table of %d rows drawn with %d header band(s)", len(rows), bands)
    return cursor
