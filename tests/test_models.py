"""
test_models.py — Unit tests for input coercion, filtering and configuration.
"""

import pytest

from qa_report.config import DEFAULT_CONFIG, load_config
from qa_report.models import (
    PLACEHOLDER,
    FailedTest,
    Project,
    coerce_failed_test,
    coerce_failed_tests,
    coerce_project,
    filter_failed_tests,
)


class TestCoercion:

    def test_camel_case_mapping(self, make_failed_tests):
        ft = coerce_failed_test(make_failed_tests(1)[0], 0)
        assert isinstance(ft, FailedTest)
        assert ft.test_case.expected_result == "Pedido confirmado e e-mail enviado"
        assert ft.test_case.test_environment == "Homologação"
        assert ft.task.id == "TASK-1"

    def test_snake_case_mapping(self):
        ft = coerce_failed_test(
            {"test_case": {"id": "X", "test_environment": "Dev", "expected_result": "ok"}}, 0
        )
        assert ft.test_case.test_environment == "Dev"
        assert ft.test_case.expected_result == "ok"

    def test_missing_fields_become_placeholders(self):
        ft = coerce_failed_test({}, 4)
        assert ft.test_case.id == "TC-5"
        assert ft.test_case.description == PLACEHOLDER
        assert ft.test_case.expected_result == PLACEHOLDER
        assert ft.test_case.steps == []
        assert ft.task.id == "TASK-5"

    def test_string_steps_wrapped(self):
        ft = coerce_failed_test({"testCase": {"steps": "Abrir app"}}, 0)
        assert ft.test_case.steps == ["Abrir app"]

    def test_non_string_fields_become_text(self):
        ft = coerce_failed_test(
            {
                "testCase": {"id": 1, "priority": 2, "observedResult": 5,
                             "testEnvironment": 3, "testSuite": 4, "steps": 7},
                "task": {"id": 3},
            },
            0,
        )
        tc = ft.test_case
        assert (tc.id, tc.priority, tc.observed_result) == ("1", "2", "5")
        assert (tc.test_environment, tc.test_suite) == ("3", "4")
        assert tc.steps == ["7"]
        assert ft.task.id == "3"

    def test_blank_optional_fields_become_none(self):
        ft = coerce_failed_test({"testCase": {"priority": "  ", "testSuite": ""}}, 0)
        assert ft.test_case.priority is None
        assert ft.test_case.test_suite is None

    def test_none_list_is_empty(self):
        assert coerce_failed_tests(None) == []

    def test_project_mapping(self):
        assert coerce_project({"name": " Checkout "}) == Project("Checkout", "")
        assert coerce_project({}).name == "Projeto"


class TestFilterFailedTests:

    @pytest.fixture
    def tests(self, make_failed_tests):
        return coerce_failed_tests(make_failed_tests(12))

    def test_no_filters_returns_all(self, tests):
        assert len(filter_failed_tests(tests)) == 12

    def test_task_filter(self, tests):
        result = filter_failed_tests(tests, task_id="TASK-2")
        assert [ft.test_case.id for ft in result] == ["TC-003", "TC-004", "TC-005"]

    def test_combined_filters(self, tests):
        result = filter_failed_tests(tests, priorities=["Urgente"], environments=["Homologação"])
        assert [ft.test_case.id for ft in result] == ["TC-000"]

    def test_missing_attribute_excluded(self, tests):
        result = filter_failed_tests(tests, environments=["Produção"])
        assert all(ft.test_case.test_environment == "Produção" for ft in result)
        assert len(result) == 4

    def test_selected_ids(self, tests):
        result = filter_failed_tests(tests, selected_ids=["TC-001", "TC-011"])
        assert len(result) == 2


class TestLoadConfig:

    def test_defaults_without_path(self):
        cfg = load_config()
        assert cfg == DEFAULT_CONFIG
        assert cfg is not DEFAULT_CONFIG

    def test_repository_config_file(self):
        from pathlib import Path
        cfg = load_config(Path(__file__).parent.parent / "config.yaml")
        assert cfg["report"]["layout"]["margin"] == 50
        assert cfg["paths"]["pdf_filename"] == "{project}_relatorio_bugs_{date}.pdf"

    def test_partial_override_merged(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("report:\n  brand:\n    primary: '000000'\n", encoding="utf-8")
        cfg = load_config(path)
        assert cfg["report"]["brand"]["primary"] == "000000"
        assert cfg["report"]["brand"]["zebra"] == DEFAULT_CONFIG["report"]["brand"]["zebra"]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")
