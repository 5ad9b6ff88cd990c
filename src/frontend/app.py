"""Main Textual app for the tracescope panel."""

from __future__ import annotations

from typing import Any, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import ContentSwitcher, Footer, Static, Tab, Tabs

import settings
from wiring import TrackerServices, build_services

from .constants import ACCENT
from .state import PanelState
from .tabs.analyze import AnalyzeTab
from .tabs.issues import IssuesTab


class TrackerPanelApp(App):
    """Tracker panel with explicit user state and tabs."""

    def __init__(self, services: Optional[TrackerServices] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.services = services or build_services()
        self.panel_state = PanelState(user_id=settings.current_user_id())

    BINDINGS = [
        ("ctrl+r", "refresh", "Refresh"),
        ("q", "quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("error trace analyzer", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static(f"user: {self.panel_state.user_id}", classes="subtle")
                    yield Static(f"db: {settings.DB_PATH}", classes="subtle")

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(
                    Tab("Analyze", id="analyze"),
                    Tab("Issues", id="issues"),
                    id="tabs",
                )

        with ContentSwitcher(id="content"):
            yield AnalyzeTab(id="analyze")
            yield IssuesTab(id="issues")
        yield Footer()

    def on_mount(self) -> None:
        self._set_active_tab("analyze")

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        tab_id = event.tab.id or ""
        if not tab_id:
            label = event.tab.label
            if hasattr(label, "plain"):
                label = label.plain
            tab_id = str(label).strip().lower()
        self._set_active_tab(tab_id)

    def _set_active_tab(self, tab_id: str) -> None:
        switcher = self.query_one("#content", ContentSwitcher)
        switcher.current = tab_id

    def action_refresh(self) -> None:
        self.query_one(IssuesTab).reload()

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("TRACE", ACCENT),
            ("SCOPE > Tracker Panel", "bold"),
        )
