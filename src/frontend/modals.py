"""Modal dialogs for the Textual tracker panel."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static, Switch

from core.models import Issue


class ShareIssueScreen(ModalScreen[dict[str, Any] | None]):
    """Toggle the shared view of an issue and edit the client note."""

    def __init__(self, issue: Issue) -> None:
        super().__init__()
        self._issue = issue

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Share with client", classes="modal-title"),
            Static(self._issue.title, classes="modal-body"),
            Static("enable sharing for this issue", classes="form-label"),
            Switch(value=self._issue.is_shared, id="share-enabled"),
            Static("note for client (visible on shared page)", classes="form-label"),
            Input(
                value=self._issue.client_note or "",
                placeholder="Optional note",
                id="share-note",
                disabled=not self._issue.is_shared,
            ),
            Horizontal(
                Button("Save", id="share-save", variant="success"),
                Button("Cancel", id="share-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--form",
        )

    def on_switch_changed(self, event: Switch.Changed) -> None:
        self.query_one("#share-note", Input).disabled = not event.value

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "share-save":
            self.dismiss(None)
            return
        self.dismiss(
            {
                "is_shared": self.query_one("#share-enabled", Switch).value,
                "client_note": self.query_one("#share-note", Input).value.strip(),
            }
        )


class DeleteIssueScreen(ModalScreen[bool]):
    """Confirm deletion of an issue."""

    def __init__(self, title: str) -> None:
        super().__init__()
        self._title = title or "(untitled issue)"

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Delete issue?", classes="modal-title"),
            Static(self._title, classes="modal-body"),
            Horizontal(
                Button("Delete", id="delete-issue-confirm", variant="error"),
                Button("Cancel", id="delete-issue-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "delete-issue-confirm")
