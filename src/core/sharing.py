"""Shareable links and public read-only views.

Links are plain templates over the record id. Public views only expose records
whose `is_shared` flag is set and only carry fields meant for a client.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional, Tuple
from urllib.parse import urlparse

from core.models import ISSUE_STATUSES, Issue
from core.ports import RecordStorePort

ISSUE_SHARE_PREFIX = "/share/issue/"
PROJECT_SHARE_PREFIX = "/shared-project/"


def issue_share_link(base_url: str, issue_id: str) -> str:
    return f"{base_url.rstrip('/')}{ISSUE_SHARE_PREFIX}{issue_id}"


def project_share_link(base_url: str, project_id: str) -> str:
    return f"{base_url.rstrip('/')}{PROJECT_SHARE_PREFIX}{project_id}"


def parse_share_link(url: str) -> Optional[Tuple[str, str]]:
    """Split a share link into ("issue" | "project", record_id)."""

    path = urlparse(url.strip()).path
    for kind, prefix in (("issue", ISSUE_SHARE_PREFIX), ("project", PROJECT_SHARE_PREFIX)):
        if path.startswith(prefix):
            record_id = path[len(prefix) :].strip("/")
            if record_id and "/" not in record_id:
                return kind, record_id
    return None


@dataclass(frozen=True)
class SharedIssue:
    """Client-facing subset of an issue."""

    id: str
    title: str
    description: Optional[str]
    type: str
    severity: str
    status: str
    project_name: Optional[str]
    client_note: Optional[str]
    error_pattern: Optional[str]
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class SharedProject:
    id: str
    name: str
    description: Optional[str]
    status: str
    progress_percentage: Optional[str]
    start_date: Optional[str]
    end_date: Optional[str]
    client_name: Optional[str]
    issues: list[SharedIssue] = field(default_factory=list)
    status_counts: dict[str, int] = field(default_factory=dict)


def _shared_issue(issue: Issue, project_name: Optional[str]) -> SharedIssue:
    return SharedIssue(
        id=issue.id,
        title=issue.title,
        description=issue.description,
        type=issue.type,
        severity=issue.severity,
        status=issue.status,
        project_name=project_name,
        client_note=issue.client_note,
        error_pattern=issue.error_pattern,
        created_at=issue.created_at,
        updated_at=issue.updated_at,
    )


class SharedViewService:
    """Unauthenticated reads backing the shared issue and project pages."""

    def __init__(self, store: RecordStorePort) -> None:
        self._store = store

    def shared_issue(self, issue_id: str) -> SharedIssue:
        issue = self._store.get_shared_issue(issue_id)
        if issue is None:
            raise LookupError(f"Shared issue not found: {issue_id}")
        return _shared_issue(issue, self._store.get_project_name(issue.project_id))

    def shared_project(self, project_id: str) -> SharedProject:
        project = self._store.get_shared_project(project_id)
        if project is None:
            raise LookupError(f"Shared project not found: {project_id}")

        issues = [
            _shared_issue(issue, project.name)
            for issue in self._store.list_project_issues_public(project_id)
        ]
        counts = Counter(issue.status for issue in issues)
        return SharedProject(
            id=project.id,
            name=project.name,
            description=project.description,
            status=project.status,
            progress_percentage=project.progress_percentage,
            start_date=project.start_date,
            end_date=project.end_date,
            client_name=self._store.get_client_name(project.client_id),
            issues=issues,
            status_counts={status: counts.get(status, 0) for status in ISSUE_STATUSES},
        )
