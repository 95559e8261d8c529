"""
narrative.py — Structured analysis text for failed tests.

Builds the Portuguese "senior QA" analysis that the PDF renders when no
hand-written or AI-written analysis is available. The output uses the same
section markers that ``analysis.parse_analysis`` recognises, so it can be
fed straight into the report:

    RESUMO EXECUTIVO / BUGS IDENTIFICADOS / PRIORIZAÇÃO / PRÓXIMOS PASSOS
"""

import logging
from typing import Sequence

from qa_report.metrics import determine_severity
from qa_report.models import FailedTest, Project

logger = logging.getLogger(__name__)

EMPTY_ANALYSIS = "Nenhum teste reprovado selecionado para análise."

NEXT_STEPS = (
    "Revisar e validar cada bug identificado",
    "Priorizar bugs de acordo com impacto no negócio",
    "Atribuir bugs ao time de desenvolvimento",
    "Acompanhar correção e validação dos bugs",
)


def _heading(title: str) -> list[str]:
    return [title, "-" * len(title)]


def _bug_block(index: int, ft: FailedTest) -> list[str]:
    tc = ft.test_case
    description = tc.description if tc.description != "N/A" else f"Bug na tarefa {ft.task.id}"
    lines = [
        f"{index}. {description}",
        f"   - Severidade: {determine_severity(tc.priority)}",
        f"   - Prioridade: {tc.priority or 'Média'}",
        f"   - Tarefa: {ft.task.id} - {ft.task.title}",
        f"   - Ambiente: {tc.test_environment or 'Não especificado'}",
    ]
    if tc.steps:
        lines.append("   - Passos para Reproduzir:")
        lines.extend(f"     {n}. {step}" for n, step in enumerate(tc.steps, start=1))
    if tc.expected_result and tc.expected_result != "N/A":
        lines.append(f"   - Resultado Esperado: {tc.expected_result}")
    if tc.observed_result:
        lines.append(f"   - Resultado Observado: {tc.observed_result}")
    lines.append("")
    return lines


def build_manual_analysis(project: Project, failed_tests: Sequence[FailedTest]) -> str:
    """Generate the analysis text from the failed-test records alone.

    Args:
        project: Project the tests belong to.
        failed_tests: Coerced failed-test records.

    Returns:
        Multi-section analysis text, or ``EMPTY_ANALYSIS`` when there is
        nothing to analyse.
    """
    if not failed_tests:
        return EMPTY_ANALYSIS

    affected = len({ft.task.id for ft in failed_tests})
    lines = [
        "RELATÓRIO DE BUGS ENCONTRADOS - ANÁLISE QA SÊNIOR",
        "=" * 50,
        "",
        *_heading("RESUMO EXECUTIVO"),
        f'Durante a execução dos testes do projeto "{project.name}", foram '
        f"identificados {len(failed_tests)} teste(s) reprovado(s).",
        f"Estes testes afetam {affected} tarefa(s) do projeto.",
        "",
        "Recomenda-se uma análise detalhada de cada bug identificado para determinar "
        "a prioridade de correção e o impacto no negócio.",
        "",
        *_heading("BUGS IDENTIFICADOS"),
        "",
    ]
    for index, ft in enumerate(failed_tests, start=1):
        lines.extend(_bug_block(index, ft))

    lines += [
        *_heading("PRIORIZAÇÃO"),
        "Recomenda-se priorizar a correção dos bugs de acordo com a severidade e "
        "impacto no negócio.",
        "Bugs críticos e de alta prioridade devem ser corrigidos antes do próximo release.",
        "",
        *_heading("PRÓXIMOS PASSOS"),
        *(f"{n}. {step}" for n, step in enumerate(NEXT_STEPS, start=1)),
        "",
    ]
    logger.info("Manual analysis generated for %d failed test(s)", len(failed_tests))
    return "\n".join(lines)
