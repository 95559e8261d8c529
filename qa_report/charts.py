"""
charts.py — Horizontal bar charts drawn as vector rectangles.

The whole chart is one atomic block: its height is known up front, so a
single ``ensure_space`` call decides whether it starts on a new page.
"""

from dataclasses import dataclass
from typing import Sequence

from qa_report.document import FONT, FONT_BOLD, Document
from qa_report.layout import Cursor, ensure_space
from qa_report.primitives import baseline
from qa_report.text import truncate_text

BAR_HEIGHT = 16
BAR_GAP = 8
LABEL_WIDTH = 90
VALUE_WIDTH = 40
FONT_SIZE = 10


@dataclass(frozen=True)
class BarDatum:
    label: str
    value: float
    color: str


def bar_widths(values: Sequence[float], max_value: float, chart_width: float) -> list[float]:
    """Pixel width of each bar, proportional to ``value / max_value``.

    Widths are clamped to ``[0, chart_width]``; a non-positive ``max_value``
    yields zero-width bars.
    """
    if max_value <= 0:
        return [0.0 for _ in values]
    return [
        min(chart_width, max(0.0, value / max_value * chart_width))
        for value in values
    ]


def chart_height(count: int) -> float:
    return count * (BAR_HEIGHT + BAR_GAP)


def draw_bar_chart(
    document: Document,
    cursor: Cursor,
    data: Sequence[BarDatum],
    max_value: float,
    width: float | None = None,
) -> Cursor:
    """Draw one labelled bar per datum.

    Args:
        document: Target document.
        cursor: Position of the chart's top edge.
        data: Bars in display order; zero values are filtered by the caller.
        max_value: Value that maps to a full-width bar.
        width: Total chart width including labels, the content width by default.

    Returns:
        Cursor below the chart.
    """
    geometry = document.geometry
    width = geometry.content_width if width is None else width
    chart_width = width - LABEL_WIDTH - VALUE_WIDTH
    pitch = BAR_HEIGHT + BAR_GAP

    cursor = ensure_space(document, cursor, chart_height(len(data)))
    page = cursor.page
    x0 = geometry.margin
    widths = bar_widths([d.value for d in data], max_value, chart_width)

    for i, (datum, bar_width) in enumerate(zip(data, widths)):
        top = cursor.y - i * pitch
        label_y = baseline(top - (BAR_HEIGHT - FONT_SIZE * 0.8) / 2, FONT_SIZE)
        page.text(
            x0, label_y,
            truncate_text(datum.label, LABEL_WIDTH - 6, FONT_SIZE),
            FONT_SIZE, font=FONT, color=document.color("text"),
        )
        page.rect(x0 + LABEL_WIDTH, top - BAR_HEIGHT, bar_width, BAR_HEIGHT,
                  fill=datum.color, tag="bar")
        page.text(
            x0 + LABEL_WIDTH + bar_width + 6, label_y,
            f"{datum.value:g}", FONT_SIZE, font=FONT_BOLD, color=datum.color,
        )

    return cursor.down(chart_height(len(data)))
