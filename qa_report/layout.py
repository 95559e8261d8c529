"""
layout.py — Flow layout cursor and page-break policy.

Every drawing routine takes a ``Cursor`` and returns the next one, so laying
out a report is a fold over draw calls. ``ensure_space`` is the single place
where pages are allocated.
"""

import logging
from dataclasses import dataclass

from qa_report.document import Document, Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cursor:
    """Current page and vertical write position (points from the bottom)."""
    page: Page
    y: float

    def down(self, dy: float) -> "Cursor":
        return Cursor(self.page, self.y - dy)


def new_page_cursor(document: Document) -> Cursor:
    """Allocate a page and return a cursor at the top of its printable area."""
    page = document.add_page()
    return Cursor(page, document.geometry.top_y)


def ensure_space(document: Document, cursor: Cursor, required_height: float) -> Cursor:
    """Return a cursor with at least ``required_height`` points below it.

    Allocates a new page when the block would cross the footer boundary.
    A block taller than the whole printable area breaks at most once: on a
    page that is still untouched the overflow is accepted.

    Args:
        document: Document that owns the pages.
        cursor: Current position.
        required_height: Vertical extent of the next atomic block.

    Returns:
        ``cursor`` unchanged, or a cursor at the top of a new page.
    """
    geometry = document.geometry
    if cursor.y - required_height >= geometry.min_y:
        return cursor

    if cursor.y >= geometry.top_y:
        logger.warning(
            "Block of %.1fpt exceeds the printable area (%.1fpt) on page %d",
            required_height, geometry.printable_height, cursor.page.number,
        )
        return cursor

    logger.debug(
        "Page break on page %d at y=%.1f (need %.1fpt)",
        cursor.page.number, cursor.y, required_height,
    )
    return new_page_cursor(document)


def is_new_page(before: Cursor, after: Cursor) -> bool:
    """True when ``ensure_space`` moved the cursor onto another page."""
    return before.page is not after.page
