"""
text_report.py — Plain-text / Markdown failed-tests report.

Lighter sibling of the PDF: a single document listing the failed tests that
survive the report-screen filters, followed by counts per task, priority and
environment. The same content is emitted in two flavours:

    text      — underlined headings, suited to e-mail bodies and tickets
    markdown  — ``#`` headings and bold labels, suited to wikis and PRs
"""

import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Sequence

from qa_report.config import load_config
from qa_report.models import PLACEHOLDER, FailedTest, Project, filter_failed_tests
from qa_report.pdf_builder import report_filename

logger = logging.getLogger(__name__)

FORMATS = ("text", "markdown")

NO_RESULTS = "Nenhum teste reprovado encontrado com os filtros aplicados."


def _heading(title: str, fmt: str, level: int = 2) -> list[str]:
    if fmt == "markdown":
        return [f"{'#' * level} {title}"]
    return [f"{title}:", "=" * (len(title) + 1)]


def _field(label: str, value: str, fmt: str) -> str:
    if fmt == "markdown":
        return f"   **{label}:** {value}"
    return f"   {label}: {value}"


def _filter_lines(
    failed_tests: Sequence[FailedTest],
    task_id: str | None,
    priorities: Sequence[str] | None,
    environments: Sequence[str] | None,
    suites: Sequence[str] | None,
) -> list[str]:
    lines = [f"- Escopo: {'Tarefa' if task_id else 'Projeto'}"]
    if task_id:
        title = next((ft.task.title for ft in failed_tests if ft.task.id == task_id), PLACEHOLDER)
        lines.append(f"- Tarefa: {task_id} - {title}")
    if priorities:
        lines.append(f"- Prioridade: {', '.join(priorities)}")
    if environments:
        lines.append(f"- Ambiente: {', '.join(environments)}")
    if suites:
        lines.append(f"- Suite: {', '.join(suites)}")
    if not (task_id or priorities or environments or suites):
        lines.append("- Nenhum filtro aplicado")
    return lines


def _test_block(index: int, ft: FailedTest, fmt: str) -> list[str]:
    tc = ft.test_case
    description = tc.description if tc.description != PLACEHOLDER else f"Teste {index}"
    title = f"{index}. {description}"
    lines = [f"### {title}" if fmt == "markdown" else title, ""]

    lines.append(f"   Tarefa: {ft.task.id} - {ft.task.title}")
    lines.append("   Status: Reprovado")
    if tc.priority:
        lines.append(f"   Prioridade: {tc.priority}")
    if tc.test_environment:
        lines.append(f"   Ambiente: {tc.test_environment}")
    if tc.test_suite:
        lines.append(f"   Suite: {tc.test_suite}")
    lines.append("")

    if tc.steps:
        lines += ["   **Passos:**" if fmt == "markdown" else "   Passos:", ""]
        lines += [f"   - {step}" for step in tc.steps]
        lines.append("")
    if tc.expected_result != PLACEHOLDER:
        lines += [_field("Resultado Esperado", tc.expected_result, fmt), ""]
    if tc.observed_result:
        lines += [_field("Resultado Observado", tc.observed_result, fmt), ""]
    lines.append("")
    return lines


def _distribution(title: str, counts: Counter, fmt: str) -> list[str]:
    if not counts:
        return []
    header = f"### {title}:" if fmt == "markdown" else f"{title}:"
    return [header, "", *(f"  - {key}: {count}" for key, count in counts.items()), ""]


def generate_failed_tests_report(
    project: Project,
    failed_tests: Sequence[FailedTest],
    generated_at: datetime | None = None,
    fmt: str = "text",
    task_id: str | None = None,
    priorities: Sequence[str] | None = None,
    environments: Sequence[str] | None = None,
    suites: Sequence[str] | None = None,
    selected_ids: Sequence[str] | None = None,
) -> str:
    """Render the filtered failed tests as text or Markdown.

    Args:
        project: Project the tests belong to.
        failed_tests: Coerced failed-test records (before filtering).
        generated_at: Report timestamp (now by default).
        fmt: ``"text"`` or ``"markdown"``.
        task_id, priorities, environments, suites, selected_ids: Filters,
            see ``models.filter_failed_tests``.

    Returns:
        The report as a single string.

    Raises:
        ValueError: If ``fmt`` is not a supported format.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported report format: {fmt!r} (expected one of {FORMATS})")
    generated_at = generated_at or datetime.now()

    selected = filter_failed_tests(
        failed_tests,
        task_id=task_id,
        priorities=priorities,
        environments=environments,
        suites=suites,
        selected_ids=selected_ids,
    )

    if fmt == "markdown":
        lines = ["# RELATÓRIO DE TESTES REPROVADOS", ""]
    else:
        lines = ["RELATÓRIO DE TESTES REPROVADOS", "=" * 30, ""]
    lines += [
        f"Projeto: {project.name}",
        f"Gerado em: {generated_at.strftime('%d/%m/%Y às %H:%M:%S')}",
        "",
        *_heading("FILTROS APLICADOS", fmt),
        "",
        *_filter_lines(failed_tests, task_id, priorities, environments, suites),
        "",
        *_heading("TESTES REPROVADOS", fmt),
        "",
    ]

    if not selected:
        lines += [NO_RESULTS, ""]
    for index, ft in enumerate(selected, start=1):
        lines += _test_block(index, ft, fmt)

    lines += [*_heading("RESUMO", fmt), "", f"Total de Testes Reprovados: {len(selected)}", ""]
    lines += _distribution(
        "Por Tarefa", Counter(f"{ft.task.id} - {ft.task.title}" for ft in selected), fmt,
    )
    lines += _distribution(
        "Por Prioridade", Counter(ft.test_case.priority or "Não especificada" for ft in selected), fmt,
    )
    lines += _distribution(
        "Por Ambiente",
        Counter(ft.test_case.test_environment or "Não especificado" for ft in selected),
        fmt,
    )

    logger.info(
        "%s report generated -- %d of %d failed test(s) after filters",
        fmt, len(selected), len(failed_tests),
    )
    return "\n".join(lines)


def write_failed_tests_report(
    project: Project,
    failed_tests: Sequence[FailedTest],
    generated_at: datetime | None = None,
    fmt: str = "text",
    *,
    config_path: str | Path | None = None,
    output_dir: str | Path | None = None,
    **filters,
) -> Path:
    """Generate the report and write it next to the PDFs.

    The file name follows ``paths.text_filename`` or
    ``paths.markdown_filename`` from the config.

    Returns:
        Path of the written file.
    """
    cfg = load_config(config_path)
    generated_at = generated_at or datetime.now()
    content = generate_failed_tests_report(project, failed_tests, generated_at, fmt, **filters)

    target_dir = Path(output_dir or cfg["paths"]["output_dir"])
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / report_filename(project.name, generated_at, cfg["paths"][f"{fmt}_filename"])
    path.write_text(content, encoding="utf-8")
    logger.info("%s report saved to %s", fmt, path)
    return path
