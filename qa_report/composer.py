"""
composer.py — Lays the failed-tests report out onto pages.

Walks the parsed analysis and the failed-test records in a fixed order and
emits every block through the flow cursor:

    Page 1:   Cover — title, project, date, headline counts
    Page 2:   Table of contents (placeholders, corrected by the finalizer)
    Page 3+:  Executive summary (optional)
              Metrics — summary cards, severity chart, per-task and
                        per-environment tables
              Detailed bug table
              Per-bug analysis cards (parsed groups, else one per test)
              Prioritisation (optional)
              Next steps (optional)

Each section heading records the index of the page it lands on in its
``TocEntry``; those indices are already final because pages are never
reordered, only the TOC page itself needs repainting at the end.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence

from qa_report.analysis import ParsedAnalysis
from qa_report.charts import BarDatum, chart_height, draw_bar_chart
from qa_report.document import FONT, FONT_BOLD, Document, Page
from qa_report.layout import Cursor, ensure_space, new_page_cursor
from qa_report.metrics import (
    SEVERITIES,
    SeverityStats,
    determine_severity,
    normalize_severity,
    severity_color_key,
)
from qa_report.models import PLACEHOLDER, FailedTest, Project
from qa_report.primitives import (
    BADGE_HEIGHT,
    badge,
    baseline,
    box,
    label_value,
    rule,
    summary_card,
    text_width,
)
from qa_report.tables import TableColumn, draw_table
from qa_report.text import truncate_text, wrap_lines_limited, wrap_text

logger = logging.getLogger(__name__)

# Section keys in emission order, with their table-of-contents titles.
SECTION_TITLES = {
    "executive_summary": "Resumo Executivo",
    "metrics": "Métricas e Estatísticas",
    "bug_table": "Tabela Detalhada de Bugs",
    "bug_detail": "Análise Detalhada dos Bugs",
    "prioritization": "Priorização",
    "next_steps": "Próximos Passos",
}

EMPTY_TABLE_MESSAGE = "Nenhum teste reprovado encontrado para este relatório."

HEADING_SIZE = 16
SUBHEADING_SIZE = 12
CARD_TITLE_HEIGHT = 24
CARD_FONT_SIZE = 10
TOC_LINE_SPACING = 24
TOC_FONT_SIZE = 12
# Space a heading must share with its first content so it is never orphaned.
KEEP_WITH_NEXT = 60


@dataclass
class TocEntry:
    """A table-of-contents line.

    ``page_index`` is the 0-based index of the page the heading landed on;
    ``page_number`` is written by the finalizer; ``y`` is the baseline of
    the placeholder line on the TOC page.
    """
    title: str
    page_index: int | None = None
    y: float | None = None
    page_number: int | None = None


@dataclass
class ComposedReport:
    document: Document
    toc_page: Page
    toc_entries: list[TocEntry]


def planned_sections(parsed: ParsedAnalysis) -> list[str]:
    """Section keys that will be emitted for this analysis, in order."""
    sections = []
    if parsed.executive_summary is not None:
        sections.append("executive_summary")
    sections += ["metrics", "bug_table", "bug_detail"]
    if parsed.prioritization is not None:
        sections.append("prioritization")
    if parsed.next_steps is not None:
        sections.append("next_steps")
    return sections


class SectionComposer:
    """Emits the report blocks onto ``document``.

    Args:
        document: Empty document to fill.
        layout: ``report.layout`` section of the config.
        report_cfg: ``report`` section of the config (titles).
        project: Project metadata for the cover.
        parsed: Parsed analysis text.
        failed_tests: Coerced failed-test records.
        stats: Pre-computed severity statistics.
        generated_at: Report timestamp.
    """

    def __init__(
        self,
        document: Document,
        layout: dict[str, Any],
        report_cfg: dict[str, Any],
        project: Project,
        parsed: ParsedAnalysis,
        failed_tests: Sequence[FailedTest],
        stats: SeverityStats,
        generated_at: datetime,
    ):
        self.doc = document
        self.geo = document.geometry
        self.layout = layout
        self.report_cfg = report_cfg
        self.project = project
        self.parsed = parsed
        self.failed_tests = list(failed_tests)
        self.stats = stats
        self.generated_at = generated_at
        self.line_height = layout["line_height"]
        self.body_size = layout["body_size"]
        self.entries: dict[str, TocEntry] = {}

    # -----------------------------------------------------------------------
    # Small building blocks
    # -----------------------------------------------------------------------

    def _heading(self, cursor: Cursor, key: str) -> Cursor:
        cursor = ensure_space(self.doc, cursor, HEADING_SIZE + 14 + KEEP_WITH_NEXT)
        page = cursor.page
        page.text(
            self.geo.margin, baseline(cursor.y, HEADING_SIZE),
            SECTION_TITLES[key].upper(), HEADING_SIZE,
            font=FONT_BOLD, color=self.doc.color("primary"), tag="section-heading",
        )
        rule(page, self.geo.margin, self.geo.width - self.geo.margin,
             cursor.y - HEADING_SIZE - 6, color=self.doc.color("primary"))
        self.entries[key].page_index = page.index
        logger.debug("Section '%s' starts on page %d", key, page.number)
        return cursor.down(HEADING_SIZE + 14)

    def _subheading(self, cursor: Cursor, text: str, keep: float = 40) -> Cursor:
        cursor = ensure_space(self.doc, cursor, SUBHEADING_SIZE + 8 + keep)
        cursor.page.text(
            self.geo.margin, baseline(cursor.y, SUBHEADING_SIZE), text, SUBHEADING_SIZE,
            font=FONT_BOLD, color=self.doc.color("text"),
        )
        return cursor.down(SUBHEADING_SIZE + 8)

    def _paragraphs(
        self,
        cursor: Cursor,
        text: str,
        size: float | None = None,
        indent: float = 0,
        color: str | None = None,
    ) -> Cursor:
        """Wrapped prose; blank lines separate paragraphs."""
        size = size or self.body_size
        color = color or self.doc.color("text")
        width = self.geo.content_width - indent
        for block in text.split("\n\n"):
            for line in wrap_text(block, width, size):
                cursor = ensure_space(self.doc, cursor, self.line_height)
                cursor.page.text(self.geo.margin + indent, baseline(cursor.y, size),
                                 line, size, font=FONT, color=color)
                cursor = cursor.down(self.line_height)
            cursor = cursor.down(6)
        return cursor

    def _section_gap(self, cursor: Cursor) -> Cursor:
        return cursor.down(self.layout["section_spacing"])

    # -----------------------------------------------------------------------
    # Cover and table of contents
    # -----------------------------------------------------------------------

    def _cover(self) -> None:
        page = self.doc.add_page()
        geo = self.geo
        x = geo.margin
        y = geo.height - geo.margin
        text_color = self.doc.color("text")

        page.rect(0, y - 70, geo.width, 90, fill=self.doc.color("primary"))
        page.text(x, baseline(y - 14, 24), self.report_cfg["title"], 24,
                  font=FONT_BOLD, color="FFFFFF")
        page.text(x, baseline(y - 44, 16), self.report_cfg["subtitle"], 16,
                  font=FONT, color="FFFFFF")
        y -= 110

        label_value(page, x, y, "Projeto:", truncate_text(self.project.name, geo.content_width - 70, 12),
                    12, 70, color=text_color)
        y -= 25
        if self.project.description:
            for line in wrap_lines_limited(self.project.description, geo.content_width - 70, 11, 4):
                page.text(x + 70, baseline(y, 11), line, 11, color=self.doc.color("muted"))
                y -= 15
            y -= 10
        label_value(page, x, y, "Data:", self.generated_at.strftime("%d/%m/%Y %H:%M"),
                    12, 70, color=text_color)
        y -= 25
        label_value(page, x, y, "Total de Bugs:", str(self.stats.total_bugs), 12, 100,
                    color=text_color, value_color=self.doc.color("red"))
        y -= 25
        label_value(page, x, y, "Tarefas Afetadas:", str(self.stats.affected_tasks), 12, 110,
                    color=text_color)
        y -= 30
        rule(page, x, geo.width - x, y, color=self.doc.color("rule"))
        y -= 20

        card_w = (geo.content_width - 3 * 10) / 4
        for i, severity in enumerate(SEVERITIES):
            summary_card(
                page, x + i * (card_w + 10), y, card_w, 55,
                severity, str(self.stats.by_severity.get(severity, 0)),
                self.doc.color(severity_color_key(severity)),
                text_color=text_color,
            )

    def _toc(self, keys: list[str]) -> tuple[Page, Cursor]:
        cursor = new_page_cursor(self.doc)
        page = cursor.page
        page.text(self.geo.margin, baseline(cursor.y, HEADING_SIZE), "SUMÁRIO", HEADING_SIZE,
                  font=FONT_BOLD, color=self.doc.color("primary"))
        cursor = cursor.down(HEADING_SIZE + 24)

        right = self.geo.width - self.geo.margin
        for key in keys:
            entry = self.entries[key]
            entry.y = baseline(cursor.y, TOC_FONT_SIZE)
            page.text(self.geo.margin, entry.y, entry.title, TOC_FONT_SIZE,
                      color=self.doc.color("text"), tag="toc-placeholder")
            page.text(right, entry.y, "--", TOC_FONT_SIZE, align="right",
                      color=self.doc.color("muted"), tag="toc-placeholder")
            cursor = cursor.down(TOC_LINE_SPACING)
        return page, cursor

    # -----------------------------------------------------------------------
    # Sections
    # -----------------------------------------------------------------------

    def _executive_summary(self, cursor: Cursor) -> Cursor:
        cursor = self._heading(cursor, "executive_summary")
        return self._paragraphs(cursor, self.parsed.executive_summary or "")

    def _metrics(self, cursor: Cursor) -> Cursor:
        cursor = self._heading(cursor, "metrics")
        geo = self.geo
        card_h = 55
        cursor = ensure_space(self.doc, cursor, card_h)
        card_w = (geo.content_width - 3 * 10) / 4
        cards = [
            ("Total de Bugs", self.stats.total_bugs, "primary"),
            ("Críticos", self.stats.by_severity.get("Crítico", 0), "critical"),
            ("Altos", self.stats.by_severity.get("Alto", 0), "high"),
            ("Tarefas Afetadas", self.stats.affected_tasks, "primary"),
        ]
        for i, (title, value, color_key) in enumerate(cards):
            summary_card(cursor.page, geo.margin + i * (card_w + 10), cursor.y, card_w, card_h,
                         title, str(value), self.doc.color(color_key),
                         text_color=self.doc.color("text"))
        cursor = cursor.down(card_h + 20)

        bars = [
            BarDatum(severity, count, self.doc.color(severity_color_key(severity)))
            for severity, count in self.stats.by_severity.items()
            if count > 0
        ]
        cursor = self._subheading(cursor, "Distribuição por Severidade", keep=chart_height(len(bars)))
        if bars:
            cursor = draw_bar_chart(self.doc, cursor, bars, self.stats.max_severity_count)
        else:
            cursor = self._paragraphs(cursor, "Nenhuma severidade registrada.",
                                      color=self.doc.color("muted"))
        cursor = cursor.down(10)

        cursor = self._subheading(cursor, "Bugs por Tarefa")
        width = geo.content_width
        task_rows = [[task_id, title, str(count)] for task_id, title, count in self.stats.by_task]
        cursor = draw_table(
            self.doc, cursor,
            [TableColumn("Tarefa", 90), TableColumn("Título", width - 160), TableColumn("Bugs", 70)],
            task_rows or [["-", EMPTY_TABLE_MESSAGE, "0"]],
        )
        cursor = cursor.down(16)

        cursor = self._subheading(cursor, "Bugs por Ambiente")
        env_rows = [[env, str(count)] for env, count in self.stats.by_environment]
        return draw_table(
            self.doc, cursor,
            [TableColumn("Ambiente", width - 70), TableColumn("Bugs", 70)],
            env_rows or [[EMPTY_TABLE_MESSAGE, "0"]],
        )

    def _bug_table(self, cursor: Cursor) -> Cursor:
        cursor = self._heading(cursor, "bug_table")
        columns = [
            TableColumn("#", 25),
            TableColumn("ID", 60),
            TableColumn("Descrição", 170),
            TableColumn("Tarefa", 110),
            TableColumn("Prioridade", 60),
            TableColumn("Ambiente", 70),
        ]
        rows = [
            [
                str(i),
                ft.test_case.id,
                ft.test_case.description,
                f"{ft.task.id} - {ft.task.title}",
                ft.test_case.priority or PLACEHOLDER,
                ft.test_case.test_environment or PLACEHOLDER,
            ]
            for i, ft in enumerate(self.failed_tests, start=1)
        ]
        if not rows:
            rows = [["-", "-", EMPTY_TABLE_MESSAGE, "-", "-", "-"]]
        return draw_table(self.doc, cursor, columns, rows)

    def _card(
        self,
        cursor: Cursor,
        title: str,
        severity: str | None,
        fields: Sequence[tuple[str, str]],
    ) -> Cursor:
        """Titled card: header bar with severity badge, then labelled fields.

        The header bar is atomic; field lines flow individually, each with a
        slice of the accent stripe, so long cards continue on the next page.
        """
        geo = self.geo
        x = geo.margin
        width = geo.content_width
        size = CARD_FONT_SIZE
        lh = self.line_height

        cursor = ensure_space(self.doc, cursor, CARD_TITLE_HEIGHT + lh)
        page = cursor.page
        box(page, x, cursor.y, width, CARD_TITLE_HEIGHT,
            fill=self.doc.color("light"), stroke=self.doc.color("primary"), tag="card-title")

        badge_space = 0
        if severity:
            label = normalize_severity(severity)
            badge_w = text_width(label, 8) + 12
            badge(page, x + width - badge_w - 6, cursor.y - (CARD_TITLE_HEIGHT - BADGE_HEIGHT) / 2,
                  label, self.doc.color(severity_color_key(label)))
            badge_space = badge_w + 12
        page.text(
            x + 8, baseline(cursor.y - 6, 12),
            truncate_text(title, width - 16 - badge_space, 12), 12,
            font=FONT_BOLD, color=self.doc.color("text"), tag="card-title",
        )
        cursor = cursor.down(CARD_TITLE_HEIGHT + 4)

        inner_x = x + 12
        inner_w = width - 18
        for label, value in fields:
            label_text = f"{label}:"
            label_w = text_width(label_text + " ", size)
            hanging = label_w < inner_w * 0.4
            value_w = inner_w - label_w if hanging else inner_w
            lines = wrap_text(value, value_w, size)
            if not hanging or not lines:
                lines = [""] + lines

            for i, line in enumerate(lines):
                cursor = ensure_space(self.doc, cursor, lh)
                page = cursor.page
                page.rect(x, cursor.y - lh, 3, lh, fill=self.doc.color("primary"))
                y = baseline(cursor.y, size)
                if i == 0:
                    page.text(inner_x, y, label_text, size, font=FONT_BOLD,
                              color=self.doc.color("text"))
                if line:
                    page.text(inner_x + (label_w if hanging else 0), y, line, size,
                              font=FONT, color=self.doc.color("text"))
                cursor = cursor.down(lh)
        return cursor.down(12)

    def _bug_detail(self, cursor: Cursor) -> Cursor:
        cursor = self._heading(cursor, "bug_detail")
        if self.parsed.groups:
            for group in self.parsed.groups:
                fields = [(k, v) for k, v in group.fields if k.lower() != "severidade"]
                cursor = self._card(cursor, group.title, group.severity, fields)
            return cursor

        if not self.failed_tests:
            return self._paragraphs(cursor, "Nenhum bug para detalhar.",
                                    color=self.doc.color("muted"))

        for i, ft in enumerate(self.failed_tests, start=1):
            tc = ft.test_case
            description = tc.description if tc.description != PLACEHOLDER else f"Bug na tarefa {ft.task.id}"
            fields = [
                ("Tarefa", f"{ft.task.id} - {ft.task.title}"),
                ("Prioridade", tc.priority or PLACEHOLDER),
                ("Ambiente", tc.test_environment or PLACEHOLDER),
                ("Suíte", tc.test_suite or PLACEHOLDER),
            ]
            if tc.steps:
                fields.append((
                    "Passos para Reproduzir",
                    " ".join(f"{n}. {step}" for n, step in enumerate(tc.steps, start=1)),
                ))
            fields.append(("Resultado Esperado", tc.expected_result))
            fields.append(("Resultado Observado", tc.observed_result or PLACEHOLDER))
            cursor = self._card(cursor, f"{i}. {description}",
                                determine_severity(tc.priority), fields)
        return cursor

    def _prioritization(self, cursor: Cursor) -> Cursor:
        cursor = self._heading(cursor, "prioritization")
        return self._paragraphs(cursor, self.parsed.prioritization or "")

    def _next_steps(self, cursor: Cursor) -> Cursor:
        cursor = self._heading(cursor, "next_steps")
        geo = self.geo
        items = self.parsed.next_steps or []
        if not items:
            return self._paragraphs(cursor, "Nenhum próximo passo informado.",
                                    color=self.doc.color("muted"))

        for n, item in enumerate(items, start=1):
            lines = wrap_text(item, geo.content_width - 44, self.body_size)
            height = len(lines) * self.line_height + 12
            cursor = ensure_space(self.doc, cursor, height)
            page = cursor.page
            box(page, geo.margin, cursor.y, geo.content_width, height,
                fill=self.doc.color("light"), stroke=self.doc.color("rule"))
            box(page, geo.margin + 6, cursor.y - 6, 18, 18, fill=self.doc.color("primary"))
            page.text(geo.margin + 15, cursor.y - 19, str(n), 10,
                      font=FONT_BOLD, color="FFFFFF", align="center")
            top = cursor.y - 6
            for line in lines:
                page.text(geo.margin + 34, baseline(top, self.body_size), line, self.body_size,
                          font=FONT, color=self.doc.color("text"))
                top -= self.line_height
            cursor = cursor.down(height + 6)
        return cursor

    # -----------------------------------------------------------------------
    # Driver
    # -----------------------------------------------------------------------

    def compose(self) -> ComposedReport:
        """Emit every block and return the document with its TOC entries."""
        keys = planned_sections(self.parsed)
        self.entries = {key: TocEntry(SECTION_TITLES[key]) for key in keys}

        self._cover()
        toc_page, _ = self._toc(keys)

        emitters = {
            "executive_summary": self._executive_summary,
            "metrics": self._metrics,
            "bug_table": self._bug_table,
            "bug_detail": self._bug_detail,
            "prioritization": self._prioritization,
            "next_steps": self._next_steps,
        }
        cursor = new_page_cursor(self.doc)
        for i, key in enumerate(keys):
            if i:
                cursor = self._section_gap(cursor)
            cursor = emitters[key](cursor)

        logger.info("Report laid out on %d page(s)", self.doc.page_count)
        return ComposedReport(self.doc, toc_page, [self.entries[key] for key in keys])
