from __future__ import annotations

from adapters.record_formatting import format_error_log, format_issue_line
from core.models import Issue, ParsedErrorLog


def test_issue_line_shows_first_summary_line_and_shared_flag() -> None:
    issue = Issue(
        id="abc",
        user_id="u1",
        project_id="p1",
        title="Crash",
        status="in_progress",
        is_shared=True,
        error_pattern="Missing module: lodash\nType 'a' is not assignable to type 'b'",
    )

    line = format_issue_line(issue)

    assert line.splitlines()[0].startswith("abc  in progress")
    assert line.splitlines()[0].endswith("Crash [shared]")
    assert line.splitlines()[1] == "    Missing module: lodash"


def test_error_log_header_includes_client_and_project() -> None:
    log = ParsedErrorLog(
        id="abc",
        title="Crash",
        error_pattern="Missing module: lodash",
        error_trace="Cannot find module 'lodash'",
        created_at="2024-05-01T10:20:30.123456+00:00",
        project_name="Website",
        client_name="Acme",
    )

    assert format_error_log(log) == (
        "[2024-05-01 10:20:30] Crash (Acme / Website)\nMissing module: lodash"
    )
