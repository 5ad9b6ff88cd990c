"""Issues tab for browsing issues, their analyzed traces, and sharing."""

from __future__ import annotations

from typing import Any, Optional

from rich.text import Text
from textual import on
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, DataTable, Static

from adapters.record_formatting import format_error_log
from adapters.trace_formatting import to_rich_text
from core.models import Issue
from core.sharing import issue_share_link
from core.trace_analyzer import render_highlighted
from ..modals import DeleteIssueScreen, ShareIssueScreen


class IssuesTab(Container):
    """Issue table with a detail pane for the selected issue."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._issues: dict[str, Issue] = {}
        self._table_ready = False

    def compose(self):
        with Horizontal(id="issues-body"):
            with Vertical(id="issues-left"):
                yield DataTable(id="issues-table", cursor_type="row")
                yield Static("Recent error logs", id="recent-title")
                yield Static("", id="recent-logs", classes="subtle")
            with VerticalScroll(id="issues-right"):
                yield Static("Select an issue", id="issue-title")
                yield Static("", id="issue-meta", classes="subtle")
                yield Static("", id="issue-pattern")
                yield Static("", id="issue-trace")
                yield Static("", id="issue-share")
        with Horizontal(id="issues-actions"):
            yield Button("Refresh", id="issues-refresh")
            yield Button("Share", id="issue-share-btn", variant="primary")
            yield Button("Delete", id="issue-delete-btn", variant="error")

    def on_mount(self) -> None:
        table = self.query_one("#issues-table", DataTable)
        table.add_column("status", key="status", width=12)
        table.add_column("severity", key="severity", width=9)
        table.add_column("title", key="title", width=36)
        table.add_column("shared", key="shared", width=7)
        table.zebra_stripes = True
        self.query_one("#issues-actions").styles.height = 3
        self._table_ready = True
        self.reload()

    @property
    def _state(self):
        return self.app.panel_state

    def reload(self) -> None:
        if not self._table_ready:
            return
        services = self.app.services
        table = self.query_one("#issues-table", DataTable)
        table.clear()
        issues = services.issues.list_issues(self._state.user_id)
        self._issues = {issue.id: issue for issue in issues}
        for issue in issues:
            table.add_row(
                issue.status.replace("_", " "),
                issue.severity,
                issue.title,
                "yes" if issue.is_shared else "",
                key=issue.id,
            )
        logs = services.issues.recent_error_logs(self._state.user_id)
        self.query_one("#recent-logs", Static).update(
            Text("\n\n".join(format_error_log(log) for log in logs) or "No analyzed error traces yet.")
        )
        if self._state.selected_issue_id not in self._issues:
            self._state.selected_issue_id = None
        self._show_issue(self._selected_issue())

    def _selected_issue(self) -> Optional[Issue]:
        if self._state.selected_issue_id is None:
            return None
        return self._issues.get(self._state.selected_issue_id)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self._state.selected_issue_id = str(event.row_key.value)
        self._show_issue(self._selected_issue())

    def _show_issue(self, issue: Optional[Issue]) -> None:
        share_btn = self.query_one("#issue-share-btn", Button)
        delete_btn = self.query_one("#issue-delete-btn", Button)
        share_btn.disabled = delete_btn.disabled = issue is None
        if issue is None:
            self.query_one("#issue-title", Static).update("Select an issue")
            for widget_id in ("#issue-meta", "#issue-pattern", "#issue-trace", "#issue-share"):
                self.query_one(widget_id, Static).update("")
            return

        self.query_one("#issue-title", Static).update(Text(issue.title, style="bold"))
        self.query_one("#issue-meta", Static).update(
            f"{issue.type} | {issue.severity} | {issue.status.replace('_', ' ')}"
        )
        self.query_one("#issue-pattern", Static).update(Text(issue.error_pattern or ""))
        trace = issue.error_trace or ""
        analysis = self.app.services.issues.analyze_trace(trace)
        self.query_one("#issue-trace", Static).update(
            to_rich_text(render_highlighted(trace, analysis.results))
        )
        if issue.is_shared:
            link = issue_share_link(self.app.services.sharing.base_url, issue.id)
            share_text = f"shared: {link}"
        else:
            share_text = "Sharing is disabled for this issue"
        self.query_one("#issue-share", Static).update(share_text)

    @on(Button.Pressed, "#issues-refresh")
    def _on_refresh(self) -> None:
        self.reload()

    @on(Button.Pressed, "#issue-share-btn")
    def _on_share(self) -> None:
        issue = self._selected_issue()
        if issue is not None:
            self.app.push_screen(ShareIssueScreen(issue), self._handle_share)

    def _handle_share(self, result: dict[str, Any] | None) -> None:
        issue = self._selected_issue()
        if result is None or issue is None:
            return
        try:
            self.app.services.issues.update_sharing(
                self._state.user_id, issue.id, result["is_shared"], result["client_note"]
            )
        except LookupError as exc:
            self._report_missing(exc)
            return
        self._state.error = None
        self.reload()

    @on(Button.Pressed, "#issue-delete-btn")
    def _on_delete(self) -> None:
        issue = self._selected_issue()
        if issue is not None:
            self.app.push_screen(DeleteIssueScreen(issue.title), self._handle_delete)

    def _handle_delete(self, confirmed: bool | None) -> None:
        issue = self._selected_issue()
        if not confirmed or issue is None:
            return
        try:
            self.app.services.issues.delete_issue(self._state.user_id, issue.id)
        except LookupError as exc:
            self._report_missing(exc)
            return
        self._state.error = None
        self._state.selected_issue_id = None
        self.reload()

    def _report_missing(self, exc: LookupError) -> None:
        # reload() clears #issue-share, so the message is written after it.
        self._state.selected_issue_id = None
        self._state.error = str(exc)
        self.reload()
        self.query_one("#issue-share", Static).update(f"error: {self._state.error}")
