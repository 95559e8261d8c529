"""
models.py — Input records consumed by the report engine.

The UI hands over plain mappings with camelCase keys; ``coerce_*`` turns
them into dataclasses, substituting placeholders for anything missing
instead of failing.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

PLACEHOLDER = "N/A"


@dataclass
class Project:
    name: str
    description: str = ""


@dataclass
class TestCase:
    id: str
    description: str
    steps: list[str] = field(default_factory=list)
    expected_result: str = PLACEHOLDER
    observed_result: str | None = None
    priority: str | None = None
    test_environment: str | None = None
    test_suite: str | None = None

    __test__ = False  # not a pytest class


@dataclass
class Task:
    id: str
    title: str


@dataclass
class FailedTest:
    test_case: TestCase
    task: Task


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


def _text(value: Any, default: str | None) -> str | None:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def coerce_project(project: Project | Mapping[str, Any]) -> Project:
    if isinstance(project, Project):
        return project
    return Project(
        name=_text(project.get("name"), "Projeto"),
        description=_text(project.get("description"), ""),
    )


def coerce_failed_test(entry: FailedTest | Mapping[str, Any], index: int) -> FailedTest:
    """Build a ``FailedTest`` from a mapping, tolerating missing fields.

    Args:
        entry: ``{testCase: {...}, task: {...}}`` (snake_case also accepted).
        index: 0-based position, used for placeholder ids.
    """
    if isinstance(entry, FailedTest):
        return entry

    tc = _pick(entry, "testCase", "test_case") or {}
    task = entry.get("task") or {}
    steps = tc.get("steps") or []
    if not isinstance(steps, (list, tuple)):
        steps = [steps]

    test_case = TestCase(
        id=_text(tc.get("id"), f"TC-{index + 1}"),
        description=_text(tc.get("description"), PLACEHOLDER),
        steps=[str(s) for s in steps if str(s).strip()],
        expected_result=_text(_pick(tc, "expectedResult", "expected_result"), PLACEHOLDER),
        observed_result=_text(_pick(tc, "observedResult", "observed_result"), None),
        priority=_text(_pick(tc, "priority"), None),
        test_environment=_text(_pick(tc, "testEnvironment", "test_environment"), None),
        test_suite=_text(_pick(tc, "testSuite", "test_suite"), None),
    )
    return FailedTest(
        test_case=test_case,
        task=Task(
            id=_text(task.get("id"), f"TASK-{index + 1}"),
            title=_text(task.get("title"), PLACEHOLDER),
        ),
    )


def coerce_failed_tests(entries: Sequence[FailedTest | Mapping[str, Any]] | None) -> list[FailedTest]:
    return [coerce_failed_test(entry, i) for i, entry in enumerate(entries or [])]


def filter_failed_tests(
    failed_tests: Sequence[FailedTest],
    task_id: str | None = None,
    priorities: Sequence[str] | None = None,
    environments: Sequence[str] | None = None,
    suites: Sequence[str] | None = None,
    selected_ids: Sequence[str] | None = None,
) -> list[FailedTest]:
    """Narrow the failed tests the same way the report screen filters do.

    Empty filter lists are ignored; records lacking a filtered attribute are
    excluded by that filter.
    """
    result = list(failed_tests)
    if task_id:
        result = [ft for ft in result if ft.task.id == task_id]
    if priorities:
        result = [ft for ft in result if ft.test_case.priority in priorities]
    if environments:
        result = [ft for ft in result if ft.test_case.test_environment in environments]
    if suites:
        result = [ft for ft in result if ft.test_case.test_suite in suites]
    if selected_ids:
        result = [ft for ft in result if ft.test_case.id in selected_ids]
    return result
