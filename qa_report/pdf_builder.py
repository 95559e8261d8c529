"""
pdf_builder.py — Failed-Tests Bug Report PDF Generator.

Public entry point of the report engine. One call builds a fresh document
from scratch, so concurrent generations share no state:

    1. coerce inputs (missing fields become placeholders)
    2. parse the analysis text and compute severity statistics
    3. lay out cover, TOC and sections through the flow cursor
    4. finalize headers, footers and TOC page numbers
    5. encode to PDF bytes and write ``{project}_relatorio_bugs_{yyyy-MM-dd}.pdf``

Any failure in steps 1-5 surfaces as a single ``PdfGenerationError`` whose
message starts with ``Erro ao gerar PDF: ``; the file is only written after
encoding succeeded.
"""

import asyncio
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Sequence

from qa_report.analysis import parse_analysis
from qa_report.composer import ComposedReport, SectionComposer
from qa_report.config import load_config
from qa_report.document import Document, PageGeometry
from qa_report.encoder import encode_pdf, save_pdf
from qa_report.errors import PdfGenerationError
from qa_report.finalizer import finalize, footer_text
from qa_report.metrics import compute_stats
from qa_report.models import FailedTest, Project, coerce_failed_tests, coerce_project

logger = logging.getLogger(__name__)

ProjectInput = Project | Mapping[str, Any]
FailedTestsInput = Sequence[FailedTest | Mapping[str, Any]]


def report_filename(project_name: str, generated_at: datetime, pattern: str) -> str:
    """Download name for the report, with path separators neutralised."""
    safe_name = re.sub(r"[\\/]", "_", project_name)
    return pattern.format(project=safe_name, date=generated_at.strftime("%Y-%m-%d"))


def build_report_document(
    project: ProjectInput,
    analysis_text: str | None,
    failed_tests: FailedTestsInput | None,
    generated_at: datetime | None = None,
    config: dict[str, Any] | None = None,
) -> ComposedReport:
    """Lay out and finalize the report without encoding it.

    Args:
        project: Project record or ``{name, description?}`` mapping.
        analysis_text: Free-text analysis; unrecognised or missing sections
            are omitted.
        failed_tests: Failed-test records or mappings.
        generated_at: Timestamp for footer and filename (now by default).
        config: Loaded configuration, the defaults when omitted.

    Returns:
        The finalized document, its TOC page and TOC entries.
    """
    cfg = config or load_config()
    generated_at = generated_at or datetime.now()
    report_cfg = cfg["report"]

    project = coerce_project(project)
    tests = coerce_failed_tests(failed_tests)
    parsed = parse_analysis(analysis_text)
    stats = compute_stats(tests, parsed.groups)

    document = Document(
        PageGeometry.from_config(report_cfg["layout"]),
        report_cfg["brand"],
        title=f"Relatório de Bugs - {project.name}",
    )
    composed = SectionComposer(
        document, report_cfg["layout"], report_cfg, project, parsed, tests, stats, generated_at,
    ).compose()

    finalize(
        document,
        composed.toc_entries,
        composed.toc_page,
        header_title=project.name,
        footer_text=footer_text(document, project.name, generated_at),
    )
    return composed


def render_failed_tests_pdf(
    project: ProjectInput,
    analysis_text: str | None,
    failed_tests: FailedTestsInput | None,
    generated_at: datetime | None = None,
    config: dict[str, Any] | None = None,
) -> bytes:
    """Build the report and return the PDF bytes.

    Raises:
        PdfGenerationError: If layout or encoding fails.
    """
    try:
        return _render(project, analysis_text, failed_tests, generated_at, config)
    except Exception as exc:
        logger.error("PDF rendering failed: %s", exc, exc_info=True)
        raise PdfGenerationError(str(exc)) from exc


def generate_failed_tests_pdf(
    project: ProjectInput,
    analysis_text: str | None,
    failed_tests: FailedTestsInput | None,
    generated_at: datetime | None = None,
    *,
    config_path: str | Path | None = None,
    output_dir: str | Path | None = None,
) -> Path:
    """Generate the failed-tests report and write it to the output directory.

    Args:
        project: Project record or mapping.
        analysis_text: Free-text analysis.
        failed_tests: Failed-test records or mappings.
        generated_at: Report timestamp (now by default).
        config_path: Optional YAML config; built-in defaults otherwise.
        output_dir: Overrides ``paths.output_dir`` from the config.

    Returns:
        Path of the written PDF.

    Raises:
        PdfGenerationError: Wrapping any configuration, rendering or writing failure.
    """
    generated_at = generated_at or datetime.now()
    try:
        cfg = load_config(config_path)
        pdf_bytes = _render(project, analysis_text, failed_tests, generated_at, cfg)
        name = coerce_project(project).name
        target_dir = Path(output_dir or cfg["paths"]["output_dir"])
        output_path = target_dir / report_filename(name, generated_at, cfg["paths"]["pdf_filename"])
        save_pdf(pdf_bytes, output_path)
    except Exception as exc:
        logger.error("PDF generation failed: %s", exc, exc_info=True)
        raise PdfGenerationError(str(exc)) from exc

    logger.info("PDF report saved to %s (%d bytes)", output_path, len(pdf_bytes))
    return output_path


def _render(project, analysis_text, failed_tests, generated_at, cfg) -> bytes:
    composed = build_report_document(project, analysis_text, failed_tests, generated_at, cfg)
    return encode_pdf(composed.document)


async def generate_failed_tests_pdf_async(
    project: ProjectInput,
    analysis_text: str | None,
    failed_tests: FailedTestsInput | None,
    generated_at: datetime | None = None,
    *,
    config_path: str | Path | None = None,
    output_dir: str | Path | None = None,
) -> Path:
    """Awaitable variant; the synchronous render runs in a worker thread."""
    return await asyncio.to_thread(
        generate_failed_tests_pdf,
        project,
        analysis_text,
        failed_tests,
        generated_at,
        config_path=config_path,
        output_dir=output_dir,
    )
