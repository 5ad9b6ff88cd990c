from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from frontend.app import TrackerPanelApp
from frontend.tabs.issues import IssuesTab
from wiring import TrackerServices, build_services


@pytest.fixture()
def services(tmp_path: Path, monkeypatch) -> TrackerServices:
    monkeypatch.setenv("TRACESCOPE_USER_ID", "tester")
    return build_services(str(tmp_path / "panel.db"))


def _seed_issue(services: TrackerServices) -> str:
    client = services.clients.create_client("tester", "Acme")
    project = services.projects.create_project("tester", client.id, "Website")
    return services.issues.create_issue("tester", project.id, "Crash").id


def _run_with_vanished_issue(services: TrackerServices, action) -> TrackerPanelApp:
    issue_id = _seed_issue(services)
    app = TrackerPanelApp(services=services)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            tab = app.query_one(IssuesTab)
            app.panel_state.selected_issue_id = issue_id
            tab.reload()
            # Removed by another session while the dialog was open.
            services.issues.delete_issue("tester", issue_id)
            action(tab)
            await pilot.pause()

    asyncio.run(scenario())
    return app


def test_sharing_a_vanished_issue_reports_instead_of_crashing(services) -> None:
    app = _run_with_vanished_issue(
        services, lambda tab: tab._handle_share({"is_shared": True, "client_note": None})
    )

    assert app.panel_state.error is not None
    assert app.panel_state.error.startswith("Issue not found")
    assert app.panel_state.selected_issue_id is None


def test_deleting_a_vanished_issue_reports_instead_of_crashing(services) -> None:
    app = _run_with_vanished_issue(services, lambda tab: tab._handle_delete(True))

    assert app.panel_state.error is not None
    assert app.panel_state.error.startswith("Issue not found")
    assert app.panel_state.selected_issue_id is None
