"""
test_tables.py — Unit tests for multi-page tables.

Tests cover:
    - Header band repeated on every page the table spans
    - Every header band is followed by at least one row on its page
    - Rows stay above the footer boundary
    - Zebra striping by global row index
"""

from qa_report.document import RectOp
from qa_report.layout import Cursor, new_page_cursor
from qa_report.tables import TableColumn, draw_table

COLUMNS = [TableColumn("#", 40), TableColumn("Descrição", 300), TableColumn("Status", 80)]


def _rows(n):
    return [[str(i), f"linha {i}", "Reprovado"] for i in range(n)]


def _header_rects(page):
    return [op for op in page.tagged("table-header") if isinstance(op, RectOp)]


def _row_rects(page):
    return [op for op in page.tagged("table-row") if isinstance(op, RectOp)]


class TestRepeatingHeaders:

    def test_header_band_per_page(self, document):
        draw_table(document, new_page_cursor(document), COLUMNS, _rows(120))
        spanned = [page for page in document.pages if _row_rects(page)]
        breaks = len(spanned) - 1

        assert breaks >= 2
        total_bands = sum(len(_header_rects(page)) for page in document.pages)
        assert total_bands == breaks + 1
        for page in spanned:
            assert len(_header_rects(page)) == 1

    def test_header_precedes_rows_on_each_page(self, document):
        draw_table(document, new_page_cursor(document), COLUMNS, _rows(120))
        for page in document.pages:
            tagged = [op for op in page.ops if op.tag in ("table-header", "table-row")]
            if not tagged:
                continue
            assert tagged[0].tag == "table-header"
            assert any(op.tag == "table-row" for op in tagged)

    def test_header_not_orphaned_at_page_bottom(self, document):
        first = new_page_cursor(document)
        draw_table(document, Cursor(first.page, 110), COLUMNS, _rows(3))
        assert not _header_rects(first.page)
        assert len(_header_rects(document.pages[1])) == 1

    def test_rows_stay_above_footer(self, document):
        draw_table(document, new_page_cursor(document), COLUMNS, _rows(200))
        min_y = document.geometry.min_y
        for page in document.pages:
            assert all(op.bottom >= min_y for op in page.content_ops())

    def test_row_count_preserved(self, document):
        draw_table(document, new_page_cursor(document), COLUMNS, _rows(75))
        assert sum(len(_row_rects(page)) for page in document.pages) == 75


class TestRowStyling:

    def test_zebra_follows_global_index(self, document):
        draw_table(document, new_page_cursor(document), COLUMNS, _rows(80))
        rows = [op for page in document.pages for op in _row_rects(page)]
        zebra = document.color("zebra")
        assert [op.fill == zebra for op in rows] == [i % 2 == 1 for i in range(80)]

    def test_long_cell_is_capped_at_three_lines(self, document):
        cursor = new_page_cursor(document)
        end = draw_table(document, cursor, COLUMNS, [["1", "palavra " * 200, "x"]])
        # header (20) + 3 lines of 11pt + 2 * 4pt padding
        assert cursor.y - end.y == 20 + 3 * 11 + 8

    def test_empty_table_draws_header_only(self, document):
        draw_table(document, new_page_cursor(document), COLUMNS, [])
        page = document.pages[0]
        assert len(_header_rects(page)) == 1
        assert not _row_rects(page)
