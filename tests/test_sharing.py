from __future__ import annotations

from pathlib import Path

import pytest

from adapters.record_formatting import format_shared_issue, format_shared_project
from adapters.sqlite_storage import SQLiteRecordStore
from core.clients import ClientService, ProjectService
from core.issues import IssueService
from core.sharing import (
    SharedViewService,
    issue_share_link,
    parse_share_link,
    project_share_link,
)


def test_share_links_ignore_trailing_slash() -> None:
    assert issue_share_link("https://app.example.com/", "abc") == "https://app.example.com/share/issue/abc"
    assert project_share_link("https://app.example.com", "xyz") == (
        "https://app.example.com/shared-project/xyz"
    )


def test_parse_share_link() -> None:
    assert parse_share_link("https://app.example.com/share/issue/abc") == ("issue", "abc")
    assert parse_share_link("http://localhost:5173/shared-project/xyz/") == ("project", "xyz")
    assert parse_share_link("https://app.example.com/issues/abc") is None
    assert parse_share_link("https://app.example.com/share/issue/") is None


@pytest.fixture()
def services(tmp_path: Path):
    store = SQLiteRecordStore(str(tmp_path / "shared.db"))
    store.init_db()
    client = ClientService(store).create_client("u1", "Acme")
    projects = ProjectService(store)
    project = projects.create_project("u1", client.id, "Website", progress_percentage="40")
    return store, projects, IssueService(store), project


def test_shared_issue_requires_sharing_enabled(services) -> None:
    store, _, issues, project = services
    issue = issues.create_issue(
        "u1", project.id, "Crash", error_trace="Cannot find module 'lodash'"
    )
    view = SharedViewService(store)

    with pytest.raises(LookupError):
        view.shared_issue(issue.id)

    issues.update_sharing("u1", issue.id, True, client_note="Fix ships Friday\nThanks")
    shared = view.shared_issue(issue.id)

    assert shared.project_name == "Website"
    assert shared.error_pattern == "Missing module: lodash"
    rendered = format_shared_issue(shared)
    assert "Fix ships Friday" in rendered.split("\n")
    assert "Thanks" in rendered.split("\n")
    assert "Missing module: lodash" in rendered


def test_shared_project_lists_issues_and_counts(services) -> None:
    store, projects, issues, project = services
    issues.create_issue("u1", project.id, "Open one")
    done = issues.create_issue("u1", project.id, "Done one")
    issues.update_status("u1", done.id, "resolved")
    view = SharedViewService(store)

    with pytest.raises(LookupError):
        view.shared_project(project.id)

    projects.set_project_sharing("u1", project.id, True)
    shared = view.shared_project(project.id)

    assert shared.client_name == "Acme"
    assert {issue.title for issue in shared.issues} == {"Open one", "Done one"}
    assert shared.status_counts == {"open": 1, "in_progress": 0, "resolved": 1, "closed": 0}
    rendered = format_shared_project(shared)
    assert "Progress: 40%" in rendered
    assert "Issues (2)" in rendered
