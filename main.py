"""
main.py — Failed-Tests Bug Report — CLI Entry Point.

Renders the failed-tests PDF (or the plain-text / Markdown listing) from a
JSON export of the tracker, after applying the task, priority, environment,
suite and test-id filters. When no analysis file is given, a structured
analysis is generated from the filtered records themselves.

Usage:
    python main.py --input failed_tests.json
    python main.py --input failed_tests.json --analysis analysis.txt
    python main.py --input failed_tests.json --output-dir out --log-level DEBUG
    python main.py --input failed_tests.json --format markdown --priority Alta --priority Urgente

Input JSON:
    {"project": {"name": "...", "description": "..."},
     "failedTests": [{"testCase": {...}, "task": {...}}, ...]}
"""

import argparse
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path

import yaml


def _configure_logging(log_dir: str = "logs", level: str = "INFO") -> None:
    """Configure rotating file handler + stream handler.

    Args:
        log_dir: Directory for log files.
        level: Log level string.
    """
    effective_level = os.environ.get("LOG_LEVEL", level).upper()
    numeric = getattr(logging, effective_level, logging.INFO)

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_file = Path(log_dir) / f"qa_report_{datetime.today().strftime('%Y%m%d')}.log"

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    fh = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=10 * 1024 * 1024, backupCount=7, encoding="utf-8"
    )
    fh.setFormatter(fmt)
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(numeric)
    root.addHandler(fh)
    root.addHandler(sh)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="qa-report",
        description="Failed-tests bug report — PDF generator.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --input failed_tests.json
  python main.py --input failed_tests.json --analysis analysis.txt
  python main.py --input failed_tests.json --config custom.yaml --log-level DEBUG
  python main.py --input failed_tests.json --format text --task TASK-12
        """,
    )
    parser.add_argument("--input", required=True,
                        help="JSON file with the project and its failed tests")
    parser.add_argument("--analysis",
                        help="Analysis text file (generated from the records if omitted)")
    parser.add_argument("--config", default=None,
                        help="Path to config.yaml (built-in defaults if omitted)")
    parser.add_argument("--output-dir", default=None,
                        help="Directory for the PDF (default: paths.output_dir)")
    parser.add_argument("--date", default=None,
                        help="Report timestamp, ISO format (default: now)")
    parser.add_argument("--format", default="pdf", choices=["pdf", "text", "markdown"],
                        help="Output format (default: pdf)")
    parser.add_argument("--task", default=None,
                        help="Only failed tests of this task id")
    parser.add_argument("--priority", action="append", default=[],
                        help="Only these priorities (repeatable)")
    parser.add_argument("--environment", action="append", default=[],
                        help="Only these test environments (repeatable)")
    parser.add_argument("--suite", action="append", default=[],
                        help="Only these test suites (repeatable)")
    parser.add_argument("--test-id", action="append", default=[], dest="test_ids",
                        help="Only these test case ids (repeatable)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def run(args: argparse.Namespace, logger: logging.Logger) -> int:
    """Load the inputs and render the report.

    Args:
        args: Parsed CLI arguments.
        logger: Configured logger.

    Returns:
        0 on success, 1 on error.
    """
    from qa_report.errors import PdfGenerationError
    from qa_report.models import coerce_failed_tests, coerce_project, filter_failed_tests
    from qa_report.narrative import build_manual_analysis
    from qa_report.pdf_builder import generate_failed_tests_pdf
    from qa_report.text_report import write_failed_tests_report

    try:
        with open(args.input, "r", encoding="utf-8") as fh:
            payload = json.load(fh)
        project = coerce_project(payload.get("project") or {})
        failed_tests = coerce_failed_tests(
            payload.get("failedTests") or payload.get("failed_tests") or []
        )
        generated_at = datetime.fromisoformat(args.date) if args.date else datetime.now()
    except (OSError, ValueError) as exc:
        logger.error("Could not read input: %s", exc)
        return 1

    filters = {
        "task_id": args.task,
        "priorities": args.priority,
        "environments": args.environment,
        "suites": args.suite,
        "selected_ids": args.test_ids,
    }

    if args.format != "pdf":
        try:
            report_path = write_failed_tests_report(
                project,
                failed_tests,
                generated_at,
                args.format,
                config_path=args.config,
                output_dir=args.output_dir,
                **filters,
            )
        except (OSError, ValueError, yaml.YAMLError) as exc:
            logger.error("Could not write %s report: %s", args.format, exc, exc_info=True)
            return 1
        logger.info("%s report generated: %s", args.format.capitalize(), report_path)
        return 0

    failed_tests = filter_failed_tests(failed_tests, **filters)
    if args.analysis:
        try:
            analysis_text = Path(args.analysis).read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Could not read analysis file: %s", exc)
            return 1
    else:
        analysis_text = build_manual_analysis(project, failed_tests)

    logger.info(
        "Rendering report for '%s' -- %d failed test(s)", project.name, len(failed_tests),
    )
    try:
        pdf_path = generate_failed_tests_pdf(
            project,
            analysis_text,
            failed_tests,
            generated_at,
            config_path=args.config,
            output_dir=args.output_dir,
        )
    except PdfGenerationError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("PDF report generated: %s", pdf_path)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Parse args, configure logging, and render."""
    args = _parse_args(argv)

    from qa_report.config import load_config

    try:
        log_dir = load_config(args.config)["paths"]["log_dir"]
    except (OSError, yaml.YAMLError):
        log_dir = "logs"

    _configure_logging(log_dir=log_dir, level=args.log_level)
    logger = logging.getLogger(__name__)
    sys.exit(run(args, logger))


if __name__ == "__main__":
    main()
