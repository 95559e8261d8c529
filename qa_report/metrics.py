"""
metrics.py — Severity statistics for the failed-tests report.

Aggregates the failed-test records (and the bug groups found in the
analysis text) into a ``SeverityStats`` package that the metrics section
reads when drawing its cards, bar chart and tables.

Severity source:
    - bug groups with a ``- Severidade:`` field, weighted by ``- Quantidade:``
    - otherwise each failed test's priority (Urgente → Crítico, Alta → Alto,
      Média → Médio, anything else → Baixo)
"""

import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Sequence

import pandas as pd

from qa_report.analysis import BugGroup
from qa_report.models import FailedTest

logger = logging.getLogger(__name__)

SEVERITIES = ("Crítico", "Alto", "Médio", "Baixo")

# Severity label → brand colour key
SEVERITY_COLOR_KEYS = {
    "Crítico": "critical",
    "Alto": "high",
    "Médio": "medium",
    "Baixo": "low",
}

UNSPECIFIED = "Não especificado"


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class SeverityStats:
    """Counts derived once per report; read-only afterwards."""
    total_bugs: int
    affected_tasks: int
    by_severity: dict[str, int] = field(default_factory=dict)
    # (task id, task title, count), most affected first
    by_task: list[tuple[str, str, int]] = field(default_factory=list)
    # (environment, count), most affected first
    by_environment: list[tuple[str, int]] = field(default_factory=list)

    @property
    def max_severity_count(self) -> int:
        return max(self.by_severity.values(), default=0)


# ---------------------------------------------------------------------------
# Severity helpers
# ---------------------------------------------------------------------------

def _fold(text: str) -> str:
    """Lower-case and strip accents."""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_severity(text: str | None) -> str:
    """Map free text onto one of ``SEVERITIES`` by keyword."""
    folded = _fold(text or "")
    if "critic" in folded:
        return "Crítico"
    if "alto" in folded or "alta" in folded:
        return "Alto"
    if "medio" in folded or "media" in folded:
        return "Médio"
    return "Baixo"


def determine_severity(priority: str | None) -> str:
    """Severity implied by a test case's priority."""
    folded = _fold(priority or "")
    if folded == "urgente":
        return "Crítico"
    if folded == "alta":
        return "Alto"
    if folded == "media":
        return "Médio"
    return "Baixo"


def severity_color_key(severity: str) -> str:
    return SEVERITY_COLOR_KEYS[normalize_severity(severity)]


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def _records_frame(failed_tests: Sequence[FailedTest]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "task_id": ft.task.id,
                "task_title": ft.task.title,
                "environment": ft.test_case.test_environment or UNSPECIFIED,
                "severity": determine_severity(ft.test_case.priority),
            }
            for ft in failed_tests
        ],
        columns=["task_id", "task_title", "environment", "severity"],
    )


def compute_stats(
    failed_tests: Sequence[FailedTest],
    groups: Sequence[BugGroup] = (),
) -> SeverityStats:
    """Aggregate counts by severity, task and environment.

    Args:
        failed_tests: Coerced failed-test records.
        groups: Bug groups parsed from the analysis text.

    Returns:
        SeverityStats with every severity key present (zero when absent).
    """
    df = _records_frame(failed_tests)
    by_severity = dict.fromkeys(SEVERITIES, 0)

    rated_groups = [g for g in groups if g.severity]
    if rated_groups:
        for group in rated_groups:
            by_severity[normalize_severity(group.severity)] += group.quantity
    else:
        for severity, count in df["severity"].value_counts().items():
            by_severity[severity] = int(count)

    by_task: list[tuple[str, str, int]] = []
    by_environment: list[tuple[str, int]] = []
    if not df.empty:
        task_counts = (
            df.groupby(["task_id", "task_title"], sort=False)
            .size()
            .reset_index(name="bugs")
            .sort_values("bugs", ascending=False, kind="stable")
        )
        by_task = [
            (str(row.task_id), str(row.task_title), int(row.bugs))
            for row in task_counts.itertuples(index=False)
        ]
        env_counts = df["environment"].value_counts(sort=True)
        by_environment = [(str(env), int(count)) for env, count in env_counts.items()]

    stats = SeverityStats(
        total_bugs=len(failed_tests),
        affected_tasks=int(df["task_id"].nunique()) if not df.empty else 0,
        by_severity=by_severity,
        by_task=by_task,
        by_environment=by_environment,
    )
    logger.info(
        "Severity stats computed -- %d bug(s), %d task(s), severities=%s",
        stats.total_bugs, stats.affected_tasks, stats.by_severity,
    )
    return stats
