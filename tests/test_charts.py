"""
test_charts.py — Unit tests for the horizontal bar chart.
"""

import pytest

from qa_report.charts import BAR_GAP, BAR_HEIGHT, BarDatum, bar_widths, draw_bar_chart
from qa_report.layout import Cursor, new_page_cursor


class TestBarWidths:

    def test_proportional_to_max(self):
        assert bar_widths([10, 5, 0], 10, 300) == [300, 150, 0]

    def test_clamped_to_chart_width(self):
        assert bar_widths([20, -3], 10, 300) == [300, 0]

    @pytest.mark.parametrize("max_value", [0, -1])
    def test_non_positive_max_gives_zero_bars(self, max_value):
        assert bar_widths([4, 2], max_value, 300) == [0, 0]


class TestDrawBarChart:

    def test_bars_drawn_with_exact_ratio(self, document):
        data = [BarDatum("Crítico", 10, "CC1A1A"), BarDatum("Alto", 5, "E6801A")]
        draw_bar_chart(document, new_page_cursor(document), data, max_value=10)
        bars = document.pages[0].tagged("bar")
        assert len(bars) == 2
        assert bars[0].width == pytest.approx(2 * bars[1].width)

    def test_chart_is_atomic(self, document):
        first = new_page_cursor(document)
        data = [BarDatum(str(i), i + 1, "3366CC") for i in range(4)]
        end = draw_bar_chart(document, Cursor(first.page, 150), data, max_value=4)

        assert not first.page.tagged("bar")
        second = document.pages[1]
        assert len(second.tagged("bar")) == 4
        assert end.y == document.geometry.top_y - 4 * (BAR_HEIGHT + BAR_GAP)

    def test_bars_stay_above_footer(self, document):
        data = [BarDatum(str(i), 1, "3366CC") for i in range(4)]
        draw_bar_chart(document, new_page_cursor(document).down(560), data, max_value=1)
        for page in document.pages:
            assert all(op.bottom >= document.geometry.min_y for op in page.content_ops())
