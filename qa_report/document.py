"""
document.py — In-memory page model.

A ``Document`` is an ordered list of fixed-size ``Page``s. Each page holds an
append-only display list of draw operations (text, rectangles, lines) that
the encoder later replays onto a ReportLab canvas. Nothing is ever edited in
place: a correction is another operation painted on top of the old one.

Coordinates follow PDF conventions: points, origin at the bottom-left.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Union

logger = logging.getLogger(__name__)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

CONTENT = "content"
CHROME = "chrome"


# ---------------------------------------------------------------------------
# Draw operations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextOp:
    """A single line of text; ``y`` is the baseline."""
    x: float
    y: float
    text: str
    size: float
    font: str = FONT
    color: str = "000000"
    align: str = "left"       # 'left', 'right' (x is the right edge), 'center'
    layer: str = CONTENT
    tag: str | None = None

    @property
    def bottom(self) -> float:
        # Descenders of Helvetica reach roughly a quarter of the size.
        return self.y - self.size * 0.25


@dataclass(frozen=True)
class RectOp:
    """Axis-aligned rectangle; ``(x, y)`` is the bottom-left corner."""
    x: float
    y: float
    width: float
    height: float
    fill: str | None = None
    stroke: str | None = None
    line_width: float = 0.5
    layer: str = CONTENT
    tag: str | None = None

    @property
    def bottom(self) -> float:
        return self.y


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = "000000"
    thickness: float = 1.0
    layer: str = CONTENT
    tag: str | None = None

    @property
    def bottom(self) -> float:
        return min(self.y1, self.y2)


DrawOp = Union[TextOp, RectOp, LineOp]


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PageGeometry:
    """Fixed page size plus the reserved header and footer bands."""
    width: float = 595
    height: float = 842
    margin: float = 50
    header_height: float = 30
    footer_height: float = 20
    safety: float = 10

    @property
    def min_y(self) -> float:
        """Lowest y any content may reach (footer exclusion boundary)."""
        return self.footer_height + self.margin + self.safety

    @property
    def top_y(self) -> float:
        """Write position at the top of a freshly allocated page."""
        return self.height - self.margin - self.header_height

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def printable_height(self) -> float:
        return self.top_y - self.min_y

    @classmethod
    def from_config(cls, layout: dict[str, Any]) -> "PageGeometry":
        return cls(
            width=layout["page_width"],
            height=layout["page_height"],
            margin=layout["margin"],
            header_height=layout["header_height"],
            footer_height=layout["footer_height"],
            safety=layout["safety"],
        )


# ---------------------------------------------------------------------------
# Pages and documents
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Page:
    """One fixed-size page and its display list."""
    index: int
    width: float
    height: float
    ops: list = field(default_factory=list)

    @property
    def number(self) -> int:
        """1-based printed page number."""
        return self.index + 1

    def add(self, op: DrawOp) -> DrawOp:
        self.ops.append(op)
        return op

    def text(self, x: float, y: float, text: str, size: float, **kwargs) -> TextOp:
        return self.add(TextOp(x, y, text, size, **kwargs))

    def rect(self, x: float, y: float, width: float, height: float, **kwargs) -> RectOp:
        return self.add(RectOp(x, y, width, height, **kwargs))

    def line(self, x1: float, y1: float, x2: float, y2: float, **kwargs) -> LineOp:
        return self.add(LineOp(x1, y1, x2, y2, **kwargs))

    def texts(self, layer: str | None = None) -> list[TextOp]:
        return [
            op for op in self.ops
            if isinstance(op, TextOp) and (layer is None or op.layer == layer)
        ]

    def tagged(self, tag: str) -> list[DrawOp]:
        return [op for op in self.ops if op.tag == tag]

    def content_ops(self) -> list[DrawOp]:
        return [op for op in self.ops if op.layer == CONTENT]


class Document:
    """Ordered page set with a shared palette and geometry.

    Args:
        geometry: Page size and reserved bands.
        brand: Hex colour palette (``report.brand`` from config).
        title: Metadata title written by the encoder.
    """

    def __init__(self, geometry: PageGeometry, brand: dict[str, str], title: str = ""):
        self.geometry = geometry
        self.brand = brand
        self.title = title
        self.pages: list[Page] = []

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def add_page(self) -> Page:
        page = Page(len(self.pages), self.geometry.width, self.geometry.height)
        self.pages.append(page)
        logger.debug("Allocated page %d", page.number)
        return page

    def color(self, name: str) -> str:
        return self.brand[name]
