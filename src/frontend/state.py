"""Panel state passed explicitly between tabs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PanelState:
    user_id: str
    selected_issue_id: str | None = None
    error: str | None = None
