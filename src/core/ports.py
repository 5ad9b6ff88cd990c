"""Ports (interfaces) used by the core services.

The record store stands in for the hosted backend: every owner-scoped call
filters on `user_id`, and the public reads only return shared records.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from core.models import Client, Issue, ParsedErrorLog, Project


class RecordStorePort(Protocol):
    """Record operations required by the core services."""

    def insert_client(self, client: Client) -> Client:
        ...

    def get_client(self, user_id: str, client_id: str) -> Optional[Client]:
        ...

    def list_clients(self, user_id: str) -> list[Client]:
        ...

    def update_client(
        self, user_id: str, client_id: str, changes: Mapping[str, Any]
    ) -> Optional[Client]:
        ...

    def delete_client(self, user_id: str, client_id: str) -> bool:
        ...

    def insert_project(self, project: Project) -> Project:
        ...

    def get_project(self, user_id: str, project_id: str) -> Optional[Project]:
        ...

    def list_projects(self, user_id: str, client_id: Optional[str] = None) -> list[Project]:
        ...

    def update_project(
        self, user_id: str, project_id: str, changes: Mapping[str, Any]
    ) -> Optional[Project]:
        ...

    def delete_project(self, user_id: str, project_id: str) -> bool:
        ...

    def insert_issue(self, issue: Issue) -> Issue:
        ...

    def get_issue(self, user_id: str, issue_id: str) -> Optional[Issue]:
        ...

    def list_issues(self, user_id: str, project_id: Optional[str] = None) -> list[Issue]:
        ...

    def update_issue(
        self, user_id: str, issue_id: str, changes: Mapping[str, Any]
    ) -> Optional[Issue]:
        ...

    def delete_issue(self, user_id: str, issue_id: str) -> bool:
        ...

    def list_parsed_error_logs(self, user_id: str, limit: int) -> list[ParsedErrorLog]:
        ...

    def get_shared_issue(self, issue_id: str) -> Optional[Issue]:
        ...

    def get_shared_project(self, project_id: str) -> Optional[Project]:
        ...

    def get_client_name(self, client_id: str) -> Optional[str]:
        ...

    def get_project_name(self, project_id: str) -> Optional[str]:
        ...

    def list_project_issues_public(self, project_id: str) -> list[Issue]:
        ...
