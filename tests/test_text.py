"""
test_text.py — Unit tests for text measurement and wrapping.

Tests cover:
    - Greedy wrapping keeps every word, in order
    - Lines respect the character budget (except lone over-long words)
    - Truncation with ellipsis and line limits
    - ReportLab glyph-metric measurer
"""

import pytest
from reportlab.pdfbase.pdfmetrics import stringWidth

from qa_report.text import (
    ELLIPSIS,
    HeuristicMeasurer,
    ReportLabMeasurer,
    truncate_text,
    wrap_lines_limited,
    wrap_text,
)

SAMPLES = [
    "Falha ao finalizar pedido com cartão recusado no ambiente de homologação",
    "um   dois\ttrês\nquatro  cinco",
    "Supercalifragilisticexpialidocious curto",
    "a " * 200,
]


class TestHeuristicMeasurer:

    def test_budget_is_floor_of_width_over_glyph_width(self):
        # 100 / (10 * 0.6) = 16.67
        assert HeuristicMeasurer().budget(100, 10) == 16

    def test_zero_font_size_has_no_budget(self):
        assert HeuristicMeasurer().budget(100, 0) == 0

    def test_fits_at_exact_budget(self):
        measurer = HeuristicMeasurer()
        assert measurer.fits("x" * 16, 100, 10)
        assert not measurer.fits("x" * 17, 100, 10)


class TestWrapText:

    @pytest.mark.parametrize("text", SAMPLES)
    @pytest.mark.parametrize("width", [40, 120, 300])
    def test_words_preserved_in_order(self, text, width):
        lines = wrap_text(text, width, 10)
        assert " ".join(lines).split() == text.split()

    @pytest.mark.parametrize("width", [60, 150, 495])
    def test_lines_within_budget(self, width):
        budget = HeuristicMeasurer().budget(width, 10)
        for line in wrap_text(SAMPLES[0], width, 10):
            assert len(line) <= budget or " " not in line

    def test_overlong_word_gets_its_own_line(self):
        lines = wrap_text("ok Supercalifragilisticexpialidocious ok", 60, 10)
        assert lines == ["ok", "Supercalifragilisticexpialidocious", "ok"]

    def test_blank_input_yields_no_lines(self):
        assert wrap_text("   \n ", 100, 10) == []

    def test_reportlab_measurer_lines_fit(self):
        measurer = ReportLabMeasurer()
        for line in wrap_text(SAMPLES[0], 150, 11, measurer):
            assert stringWidth(line, "Helvetica", 11) <= 150


class TestTruncation:

    def test_short_text_unchanged(self):
        assert truncate_text("curto", 200, 10) == "curto"

    def test_long_text_ends_with_ellipsis_and_fits(self):
        result = truncate_text("x" * 100, 60, 10)
        assert result.endswith(ELLIPSIS)
        assert HeuristicMeasurer().fits(result, 60, 10)

    def test_wrap_lines_limited_caps_line_count(self):
        lines = wrap_lines_limited(SAMPLES[0], 60, 10, max_lines=2)
        assert len(lines) == 2
        assert lines[-1].endswith(ELLIPSIS)

    def test_wrap_lines_limited_under_limit_has_no_ellipsis(self):
        lines = wrap_lines_limited("dois termos", 200, 10, max_lines=3)
        assert lines == ["dois termos"]
