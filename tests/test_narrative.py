"""
test_narrative.py — Unit tests for the generated analysis text.

Tests cover:
    - Empty selection message
    - Generated text parses back into sections and one group per test
"""

import pytest

from qa_report.analysis import parse_analysis
from qa_report.models import Project, coerce_failed_tests
from qa_report.narrative import EMPTY_ANALYSIS, NEXT_STEPS, build_manual_analysis


class TestBuildManualAnalysis:

    @pytest.fixture
    def text(self, make_failed_tests):
        return build_manual_analysis(Project("Loja Online"), coerce_failed_tests(make_failed_tests(5)))

    def test_empty_selection(self):
        assert build_manual_analysis(Project("Loja Online"), []) == EMPTY_ANALYSIS

    def test_summary_mentions_project_and_counts(self, text):
        summary = parse_analysis(text).executive_summary
        assert '"Loja Online"' in summary
        assert "5 teste(s) reprovado(s)" in summary
        assert "2 tarefa(s)" in summary

    def test_one_group_per_failed_test(self, text):
        groups = parse_analysis(text).groups
        assert len(groups) == 5
        assert groups[0].title.startswith("1. Falha ao finalizar pedido no fluxo 0")

    def test_group_fields_carry_record_data(self, text):
        group = parse_analysis(text).groups[0]
        assert group.severity == "Crítico"
        assert group.get("Tarefa") == "TASK-1 - Checkout etapa 1"
        assert group.get("Passos para Reproduzir") == (
            "1. Abrir carrinho 2. Selecionar cartão 3. Confirmar pedido 0"
        )

    def test_next_steps_and_prioritization(self, text):
        parsed = parse_analysis(text)
        assert parsed.next_steps == list(NEXT_STEPS)
        assert parsed.prioritization.startswith("Recomenda-se priorizar")

    def test_missing_description_uses_task(self):
        tests = coerce_failed_tests([{"task": {"id": "T-9", "title": "Busca"}}])
        groups = parse_analysis(build_manual_analysis(Project("P"), tests)).groups
        assert groups[0].title == "1. Bug na tarefa T-9"
