"""Shared fixtures for the report engine tests."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from qa_report.config import load_config
from qa_report.document import Document, PageGeometry

PRIORITIES = ["Urgente", "Alta", "Média", "Baixa"]
ENVIRONMENTS = ["Homologação", "Produção", None]


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def document(config):
    report = config["report"]
    return Document(PageGeometry.from_config(report["layout"]), report["brand"], title="Test")


@pytest.fixture
def generated_at():
    return datetime(2024, 3, 15, 14, 30)


@pytest.fixture
def make_failed_tests():
    """Factory for ``n`` failed-test mappings in the UI's camelCase shape."""

    def _make(n: int) -> list[dict]:
        return [
            {
                "testCase": {
                    "id": f"TC-{i:03d}",
                    "description": f"Falha ao finalizar pedido no fluxo {i} com cartão recusado",
                    "steps": ["Abrir carrinho", "Selecionar cartão", f"Confirmar pedido {i}"],
                    "expectedResult": "Pedido confirmado e e-mail enviado",
                    "observedResult": "Erro 500 exibido na tela de pagamento",
                    "priority": PRIORITIES[i % len(PRIORITIES)],
                    "testEnvironment": ENVIRONMENTS[i % len(ENVIRONMENTS)],
                    "testSuite": "Regressão",
                },
                "task": {"id": f"TASK-{i // 3 + 1}", "title": f"Checkout etapa {i // 3 + 1}"},
            }
            for i in range(n)
        ]

    return _make
