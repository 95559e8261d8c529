"""
primitives.py — Stateless drawing helpers.

Boxes, badges, summary cards and rules. They only append operations to the
target page and assume the caller has already reserved the vertical space
through ``layout.ensure_space``.
"""

from qa_report.document import FONT, FONT_BOLD, Page, RectOp, TextOp
from qa_report.text import DEFAULT_MEASURER, truncate_text

# Cap height of Helvetica relative to the font size.
ASCENT = 0.8

BADGE_HEIGHT = 14
BADGE_PADDING = 6
BADGE_FONT_SIZE = 8


def baseline(top: float, size: float) -> float:
    """Baseline for a line of text whose top edge sits at ``top``."""
    return top - size * ASCENT


def text_width(text: str, size: float) -> float:
    """Approximate rendered width, consistent with the default measurer."""
    return len(text) * size * DEFAULT_MEASURER.k


def box(
    page: Page,
    x: float,
    y: float,
    w: float,
    h: float,
    fill: str | None = None,
    stroke: str | None = None,
    tag: str | None = None,
) -> RectOp:
    """Rectangle whose *top-left* corner is at ``(x, y)``."""
    return page.rect(x, y - h, w, h, fill=fill, stroke=stroke, tag=tag)


def badge(page: Page, x: float, y: float, text: str, color: str) -> float:
    """Filled pill with white bold text; ``y`` is the top edge.

    Returns:
        Width of the badge, so callers can place content after it.
    """
    width = text_width(text, BADGE_FONT_SIZE) + 2 * BADGE_PADDING
    page.rect(x, y - BADGE_HEIGHT, width, BADGE_HEIGHT, fill=color, tag="badge")
    page.text(
        x + width / 2,
        y - BADGE_HEIGHT + 4,
        text,
        BADGE_FONT_SIZE,
        font=FONT_BOLD,
        color="FFFFFF",
        align="center",
        tag="badge",
    )
    return width


def summary_card(
    page: Page,
    x: float,
    y: float,
    w: float,
    h: float,
    title: str,
    value: str,
    accent: str,
    background: str = "FFFFFF",
    text_color: str = "1A1A1A",
) -> None:
    """KPI tile: accent strip on the left, small title, large value."""
    page.rect(x, y - h, w, h, fill=background, stroke=accent, tag="card")
    page.rect(x, y - h, 4, h, fill=accent)
    page.text(
        x + 12, baseline(y - 8, 9),
        truncate_text(title, w - 20, 9),
        9, color=text_color,
    )
    page.text(x + 12, y - h + 10, value, 18, font=FONT_BOLD, color=accent)


def rule(page: Page, x1: float, x2: float, y: float, color: str = "E6E6E6", thickness: float = 1.0):
    """Horizontal divider."""
    return page.line(x1, y, x2, y, color=color, thickness=thickness)


def label_value(
    page: Page,
    x: float,
    top: float,
    label: str,
    value: str,
    size: float,
    label_width: float,
    color: str = "1A1A1A",
    value_color: str | None = None,
) -> TextOp:
    """Bold ``label`` followed by a regular ``value`` on the same baseline."""
    y = baseline(top, size)
    page.text(x, y, label, size, font=FONT_BOLD, color=color)
    return page.text(x + label_width, y, value, size, font=FONT, color=value_color or color)
