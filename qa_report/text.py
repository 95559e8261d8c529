"""
text.py — Text measurement and greedy word wrapping.

Line breaking is driven by a pluggable measurer. The default
``HeuristicMeasurer`` assumes an average glyph width of ``k * font_size``
(0.6 suits Helvetica) and turns a pixel width into a character budget.
``ReportLabMeasurer`` asks ReportLab for real glyph metrics instead.
"""

import math
from typing import Protocol

from reportlab.pdfbase.pdfmetrics import stringWidth

ELLIPSIS = "..."


class TextMeasurer(Protocol):
    def fits(self, text: str, max_width: float, font_size: float) -> bool:
        ...


class HeuristicMeasurer:
    """Character-count approximation of rendered text width."""

    def __init__(self, k: float = 0.6):
        self.k = k

    def budget(self, max_width: float, font_size: float) -> int:
        """Number of characters that fit in ``max_width`` at ``font_size``."""
        if font_size <= 0:
            return 0
        return max(0, math.floor(max_width / (font_size * self.k)))

    def fits(self, text: str, max_width: float, font_size: float) -> bool:
        return len(text) <= self.budget(max_width, font_size)


class ReportLabMeasurer:
    """Exact widths for one of the standard PDF fonts."""

    def __init__(self, font_name: str = "Helvetica"):
        self.font_name = font_name

    def fits(self, text: str, max_width: float, font_size: float) -> bool:
        return stringWidth(text, self.font_name, font_size) <= max_width


DEFAULT_MEASURER = HeuristicMeasurer()


def wrap_text(
    text: str,
    max_width: float,
    font_size: float,
    measurer: TextMeasurer | None = None,
) -> list[str]:
    """Greedily pack whitespace-delimited words into lines.

    Words are never split: a word that alone exceeds the width becomes its
    own (overflowing) line.

    Args:
        text: Input text; any run of whitespace separates words.
        max_width: Available width in points.
        font_size: Font size in points.
        measurer: Width strategy, ``HeuristicMeasurer`` by default.

    Returns:
        Wrapped lines; empty for blank input.
    """
    measurer = measurer or DEFAULT_MEASURER
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and not measurer.fits(candidate, max_width, font_size):
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def truncate_text(
    text: str,
    max_width: float,
    font_size: float,
    measurer: TextMeasurer | None = None,
    force_ellipsis: bool = False,
) -> str:
    """Shorten a single line so it fits, marking the cut with an ellipsis.

    With ``force_ellipsis`` the marker is appended even when ``text`` fits,
    which is how a dropped continuation is signalled.
    """
    measurer = measurer or DEFAULT_MEASURER
    if not force_ellipsis and measurer.fits(text, max_width, font_size):
        return text
    cut = text
    while cut and not measurer.fits(cut + ELLIPSIS, max_width, font_size):
        cut = cut[:-1]
    return cut.rstrip() + ELLIPSIS


def wrap_lines_limited(
    text: str,
    max_width: float,
    font_size: float,
    max_lines: int,
    measurer: TextMeasurer | None = None,
) -> list[str]:
    """Wrap ``text`` and keep at most ``max_lines``, truncating the last one.

    Over-long single words are truncated too, so every returned line fits.
    """
    lines = [
        truncate_text(line, max_width, font_size, measurer)
        for line in wrap_text(text, max_width, font_size, measurer)
    ]
    if len(lines) <= max_lines:
        return lines
    kept = lines[:max_lines]
    kept[-1] = truncate_text(kept[-1], max_width, font_size, measurer, force_ellipsis=True)
    return kept
