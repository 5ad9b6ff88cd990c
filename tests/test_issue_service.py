from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional

import pytest

from core.config import AnalysisConfig
from core.issues import IssueService
from core.models import Issue, ParsedErrorLog, Project


class FakeStore:
    def __init__(self) -> None:
        self.projects: dict[str, Project] = {}
        self.issues: dict[str, Issue] = {}

    def add_project(self, project_id: str, user_id: str = "u1") -> None:
        self.projects[project_id] = Project(id=project_id, user_id=user_id, client_id="c1", name="P")

    def get_project(self, user_id: str, project_id: str) -> Optional[Project]:
        project = self.projects.get(project_id)
        return project if project and project.user_id == user_id else None

    def insert_issue(self, issue: Issue) -> Issue:
        self.issues[issue.id] = issue
        return issue

    def get_issue(self, user_id: str, issue_id: str) -> Optional[Issue]:
        issue = self.issues.get(issue_id)
        return issue if issue and issue.user_id == user_id else None

    def list_issues(self, user_id: str, project_id: Optional[str] = None) -> list[Issue]:
        return [
            issue
            for issue in self.issues.values()
            if issue.user_id == user_id and project_id in (None, issue.project_id)
        ]

    def update_issue(
        self, user_id: str, issue_id: str, changes: Mapping[str, Any]
    ) -> Optional[Issue]:
        issue = self.get_issue(user_id, issue_id)
        if issue is None:
            return None
        self.issues[issue_id] = replace(issue, **changes)
        return self.issues[issue_id]

    def delete_issue(self, user_id: str, issue_id: str) -> bool:
        if self.get_issue(user_id, issue_id) is None:
            return False
        del self.issues[issue_id]
        return True

    def list_parsed_error_logs(self, user_id: str, limit: int) -> list[ParsedErrorLog]:
        logs = [
            ParsedErrorLog(
                id=issue.id,
                title=issue.title,
                error_pattern=issue.error_pattern,
                error_trace=issue.error_trace,
                created_at=issue.created_at,
            )
            for issue in self.issues.values()
            if issue.user_id == user_id and issue.error_pattern is not None
        ]
        return logs[:limit]


TRACE = "Error: Cannot read property 'foo' of undefined at src/app.js:42:7\n    at main (src/index.js:3:1)"


def _service(config: AnalysisConfig = AnalysisConfig()) -> tuple[IssueService, FakeStore]:
    store = FakeStore()
    store.add_project("p1")
    return IssueService(store, config), store


def test_create_issue_persists_summary_and_verbatim_trace() -> None:
    service, store = _service()

    issue = service.create_issue("u1", "p1", "  Crash on load ", error_trace=TRACE)

    stored = store.issues[issue.id]
    assert stored.title == "Crash on load"
    assert stored.error_trace == TRACE
    assert stored.error_pattern == (
        "Error in src/app.js at line 42, column 7: Cannot read property 'foo' of undefined\n"
        "Stack: main in src/index.js at line 3"
    )
    assert stored.assigned_to == "u1"
    assert stored.created_at and stored.created_at == stored.updated_at


def test_create_issue_without_trace_has_no_pattern() -> None:
    service, store = _service()
    issue = service.create_issue("u1", "p1", "Add export", type="feature", assigned_to="u2")

    assert store.issues[issue.id].error_pattern is None
    assert store.issues[issue.id].assigned_to == "u2"


def test_create_issue_requires_title_project_and_user() -> None:
    service, _ = _service()

    with pytest.raises(ValueError):
        service.create_issue("u1", "p1", "   ")
    with pytest.raises(ValueError):
        service.create_issue("u1", "", "Title")
    with pytest.raises(PermissionError):
        service.create_issue(None, "p1", "Title")
    with pytest.raises(LookupError):
        service.create_issue("u1", "missing", "Title")
    with pytest.raises(LookupError):
        service.create_issue("someone-else", "p1", "Title")


def test_create_issue_rejects_invalid_choices_and_fields() -> None:
    service, _ = _service()

    with pytest.raises(ValueError):
        service.create_issue("u1", "p1", "Title", severity="urgent")
    with pytest.raises(ValueError):
        service.create_issue("u1", "p1", "Title", error_pattern="forged")


def test_update_trace_rederives_pattern_and_clearing_removes_it() -> None:
    service, store = _service()
    issue = service.create_issue("u1", "p1", "Build", error_trace="plain first line\nmore")
    assert store.issues[issue.id].error_pattern == "plain first line"

    service.update_issue("u1", issue.id, error_trace="Cannot find module 'react-dom'")
    assert store.issues[issue.id].error_pattern == "Missing module: react-dom"

    service.update_issue("u1", issue.id, error_trace="")
    assert store.issues[issue.id].error_pattern is None


def test_update_without_trace_keeps_pattern() -> None:
    service, store = _service()
    issue = service.create_issue("u1", "p1", "Build", error_trace=TRACE)
    pattern = store.issues[issue.id].error_pattern

    updated = service.update_status("u1", issue.id, "in_progress")

    assert updated.status == "in_progress"
    assert updated.error_pattern == pattern


def test_update_sharing_stores_empty_note_as_none() -> None:
    service, store = _service()
    issue = service.create_issue("u1", "p1", "Share me")

    shared = service.update_sharing("u1", issue.id, True, client_note="We are on it")
    assert shared.is_shared is True
    assert shared.client_note == "We are on it"

    unshared = service.update_sharing("u1", issue.id, False, client_note="")
    assert unshared.is_shared is False
    assert unshared.client_note is None


def test_missing_issue_raises_lookup_error() -> None:
    service, _ = _service()

    with pytest.raises(LookupError):
        service.get_issue("u1", "nope")
    with pytest.raises(LookupError):
        service.update_status("u1", "nope", "closed")
    with pytest.raises(LookupError):
        service.delete_issue("u1", "nope")


def test_analyze_trace_clips_to_configured_length() -> None:
    service, store = _service(AnalysisConfig(trace_max_chars=20))
    long_trace = "x" * 30 + "\nCannot find module 'lodash'"

    issue = service.create_issue("u1", "p1", "Long", error_trace=long_trace)

    assert service.analyze_trace(long_trace).summary == "x" * 20
    assert store.issues[issue.id].error_pattern == "x" * 20
    assert store.issues[issue.id].error_trace == long_trace


def test_recent_error_logs_uses_configured_limit() -> None:
    service, _ = _service(AnalysisConfig(recent_logs_limit=2))
    for index in range(3):
        service.create_issue("u1", "p1", f"Issue {index}", error_trace=f"boom {index}")
    service.create_issue("u1", "p1", "No trace")

    logs = service.recent_error_logs("u1")
    assert len(logs) == 2
    assert all(log.error_pattern for log in logs)
