"""Issue service.

This is the only caller of the trace analyzer. It persists the analyzer's
summary as `error_pattern` next to the verbatim `error_trace`; match results
are handed back for display and never stored.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from core.clients import check_choice, check_fields, require_user
from core.config import AnalysisConfig
from core.models import (
    ISSUE_SEVERITIES,
    ISSUE_STATUSES,
    ISSUE_TYPES,
    Issue,
    ParsedErrorLog,
    new_id,
    utc_now,
)
from core.ports import RecordStorePort
from core.trace_analyzer import TraceAnalysis, analyze

LOGGER = logging.getLogger(__name__)

ISSUE_FIELDS = {
    "title",
    "description",
    "type",
    "severity",
    "status",
    "assigned_to",
    "due_date",
    "error_trace",
}


class IssueService:
    """Issue CRUD plus trace analysis and sharing settings."""

    def __init__(self, store: RecordStorePort, config: AnalysisConfig = AnalysisConfig()) -> None:
        self._store = store
        self._config = config

    def analyze_trace(self, error_trace: Optional[str]) -> TraceAnalysis:
        """Analyze a pasted trace, clipped to the configured maximum length."""

        return analyze((error_trace or "")[: self._config.trace_max_chars])

    def _error_pattern(self, error_trace: Optional[str]) -> Optional[str]:
        if not error_trace:
            return None
        return self.analyze_trace(error_trace).summary

    @staticmethod
    def _check_choices(fields: dict[str, Any]) -> None:
        if "type" in fields:
            check_choice("type", fields["type"], ISSUE_TYPES)
        if "severity" in fields:
            check_choice("severity", fields["severity"], ISSUE_SEVERITIES)
        if "status" in fields:
            check_choice("status", fields["status"], ISSUE_STATUSES)

    def create_issue(
        self, user_id: Optional[str], project_id: str, title: str, **fields: Any
    ) -> Issue:
        if not title or not title.strip() or not project_id:
            raise ValueError("Please fill in all required fields")
        user_id = require_user(user_id)
        extra = check_fields(fields, ISSUE_FIELDS - {"title"})
        self._check_choices(extra)
        if self._store.get_project(user_id, project_id) is None:
            raise LookupError(f"Project not found: {project_id}")

        # Assignee defaults to the creating user.
        if not extra.get("assigned_to"):
            extra["assigned_to"] = user_id
        extra["error_pattern"] = self._error_pattern(extra.get("error_trace"))

        now = utc_now()
        issue = self._store.insert_issue(
            Issue(
                id=new_id(),
                user_id=user_id,
                project_id=project_id,
                title=title.strip(),
                created_at=now,
                updated_at=now,
                **extra,
            )
        )
        LOGGER.info("Issue created: %s (%s)", issue.title, issue.id)
        return issue

    def get_issue(self, user_id: Optional[str], issue_id: str) -> Issue:
        issue = self._store.get_issue(require_user(user_id), issue_id)
        if issue is None:
            raise LookupError(f"Issue not found: {issue_id}")
        return issue

    def list_issues(self, user_id: Optional[str], project_id: Optional[str] = None) -> list[Issue]:
        return self._store.list_issues(require_user(user_id), project_id)

    def update_issue(self, user_id: Optional[str], issue_id: str, **changes: Any) -> Issue:
        """Update issue fields, re-deriving `error_pattern` when the trace changes."""

        changes = check_fields(changes, ISSUE_FIELDS)
        if "title" in changes and not (changes["title"] or "").strip():
            raise ValueError("Please fill in all required fields")
        self._check_choices(changes)
        if "error_trace" in changes:
            changes["error_pattern"] = self._error_pattern(changes["error_trace"])

        issue = self._store.update_issue(require_user(user_id), issue_id, changes)
        if issue is None:
            raise LookupError(f"Issue not found: {issue_id}")
        LOGGER.info("Issue updated: %s", issue_id)
        return issue

    def update_status(self, user_id: Optional[str], issue_id: str, status: str) -> Issue:
        issue = self.update_issue(user_id, issue_id, status=status)
        LOGGER.info("Issue status updated to %s: %s", status.replace("_", " "), issue_id)
        return issue

    def update_sharing(
        self,
        user_id: Optional[str],
        issue_id: str,
        is_shared: bool,
        client_note: Optional[str] = None,
    ) -> Issue:
        """Toggle the public view of an issue and set the note shown on it."""

        issue = self._store.update_issue(
            require_user(user_id),
            issue_id,
            {"is_shared": bool(is_shared), "client_note": client_note or None},
        )
        if issue is None:
            raise LookupError(f"Issue not found: {issue_id}")
        LOGGER.info("Issue sharing %s: %s", "enabled" if is_shared else "disabled", issue_id)
        return issue

    def delete_issue(self, user_id: Optional[str], issue_id: str) -> None:
        if not self._store.delete_issue(require_user(user_id), issue_id):
            raise LookupError(f"Issue not found: {issue_id}")
        LOGGER.info("Issue deleted: %s", issue_id)

    def recent_error_logs(self, user_id: Optional[str]) -> list[ParsedErrorLog]:
        return self._store.list_parsed_error_logs(
            require_user(user_id), self._config.recent_logs_limit
        )
