"""
test_metrics.py — Unit tests for the severity statistics.

Tests cover:
    - Priority → severity mapping and free-text normalisation
    - Counts by severity, task and environment
    - Severity counts taken from analysis groups when present
"""

import pytest

from qa_report.analysis import BugGroup
from qa_report.metrics import (
    SEVERITIES,
    UNSPECIFIED,
    compute_stats,
    determine_severity,
    normalize_severity,
    severity_color_key,
)
from qa_report.models import coerce_failed_tests


class TestSeverityHelpers:

    @pytest.mark.parametrize("priority, expected", [
        ("Urgente", "Crítico"),
        ("urgente", "Crítico"),
        ("Alta", "Alto"),
        ("Média", "Médio"),
        ("Media", "Médio"),
        ("Baixa", "Baixo"),
        (None, "Baixo"),
        ("Qualquer", "Baixo"),
    ])
    def test_determine_severity(self, priority, expected):
        assert determine_severity(priority) == expected

    @pytest.mark.parametrize("text, expected", [
        ("Crítico", "Crítico"),
        ("CRITICO - bloqueante", "Crítico"),
        ("Crítica", "Crítico"),
        ("critica", "Crítico"),
        ("Alta", "Alto"),
        ("médio", "Médio"),
        ("", "Baixo"),
        (None, "Baixo"),
    ])
    def test_normalize_severity(self, text, expected):
        assert normalize_severity(text) == expected

    def test_color_keys(self):
        assert severity_color_key("alto") == "high"
        assert severity_color_key("Crítico") == "critical"


class TestComputeStats:

    @pytest.fixture
    def stats(self, make_failed_tests):
        return compute_stats(coerce_failed_tests(make_failed_tests(8)))

    def test_totals(self, stats):
        assert stats.total_bugs == 8
        assert stats.affected_tasks == 3

    def test_severity_from_priorities(self, stats):
        assert stats.by_severity == {"Crítico": 2, "Alto": 2, "Médio": 2, "Baixo": 2}
        assert stats.max_severity_count == 2

    def test_by_task_most_affected_first(self, stats):
        assert stats.by_task[0] == ("TASK-1", "Checkout etapa 1", 3)
        assert stats.by_task[-1] == ("TASK-3", "Checkout etapa 3", 2)

    def test_missing_environment_counted_as_unspecified(self, stats):
        assert dict(stats.by_environment) == {"Homologação": 3, "Produção": 3, UNSPECIFIED: 2}

    def test_groups_override_priorities(self, make_failed_tests):
        groups = [
            BugGroup("Grupo 1: Pagamento", [("Quantidade", "3"), ("Severidade", "Alto")]),
            BugGroup("Grupo 2: Frete", [("Severidade", "Crítico")]),
            BugGroup("Grupo 3: Sem severidade", [("Quantidade", "9")]),
        ]
        stats = compute_stats(coerce_failed_tests(make_failed_tests(4)), groups)
        assert stats.by_severity == {"Crítico": 1, "Alto": 3, "Médio": 0, "Baixo": 0}
        assert stats.total_bugs == 4

    def test_feminine_critical_group_counted_as_critical(self, make_failed_tests):
        groups = [BugGroup("Grupo 1: Pagamento", [("Quantidade", "2"), ("Severidade", "Crítica")])]
        stats = compute_stats(coerce_failed_tests(make_failed_tests(2)), groups)
        assert stats.by_severity["Crítico"] == 2
        assert stats.by_severity["Baixo"] == 0

    def test_empty_input(self):
        stats = compute_stats([])
        assert stats.total_bugs == 0
        assert stats.affected_tasks == 0
        assert stats.by_severity == dict.fromkeys(SEVERITIES, 0)
        assert stats.by_task == []
        assert stats.max_severity_count == 0
