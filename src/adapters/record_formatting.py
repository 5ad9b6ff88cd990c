"""Text formatting for issue listings and the shared views."""

from __future__ import annotations

from core.models import Issue, ParsedErrorLog
from core.sharing import SharedIssue, SharedProject

DIVIDER = "──────────────"


def _humanize(value: str) -> str:
    return value.replace("_", " ")


def format_issue_line(issue: Issue) -> str:
    """One-line listing entry: id, status, severity, title and first summary line."""

    shared = " [shared]" if issue.is_shared else ""
    line = f"{issue.id}  {_humanize(issue.status):<11} {issue.severity:<8} {issue.title}{shared}"
    if issue.error_pattern:
        line += f"\n    {issue.error_pattern.splitlines()[0]}"
    return line


def format_error_log(log: ParsedErrorLog) -> str:
    origin = " / ".join(part for part in (log.client_name, log.project_name) if part)
    header = f"[{log.created_at[:19].replace('T', ' ')}] {log.title}"
    if origin:
        header += f" ({origin})"
    return "\n".join([header, log.error_pattern or ""])


def format_shared_issue(issue: SharedIssue) -> str:
    lines = [
        issue.title,
        f"Project:  {issue.project_name or '-'}",
        f"Status:   {_humanize(issue.status)}",
        f"Severity: {issue.severity}",
        f"Type:     {issue.type}",
        DIVIDER,
    ]
    if issue.description:
        lines.extend(["", issue.description])
    if issue.client_note:
        lines.extend(["", "Note:", *issue.client_note.split("\n")])
    if issue.error_pattern:
        lines.extend(["", "Error:", *issue.error_pattern.split("\n")])
    lines.extend(["", f"Last updated: {issue.updated_at[:19].replace('T', ' ')}"])
    return "\n".join(lines)


def format_shared_project(project: SharedProject) -> str:
    lines = [project.name]
    if project.client_name:
        lines.append(f"Client:   {project.client_name}")
    lines.append(f"Status:   {_humanize(project.status)}")
    if project.progress_percentage:
        lines.append(f"Progress: {project.progress_percentage}%")
    if project.start_date or project.end_date:
        lines.append(f"Timeline: {project.start_date or '?'} -> {project.end_date or '?'}")
    if project.description:
        lines.extend(["", project.description])

    counts = ", ".join(
        f"{_humanize(status)}: {count}" for status, count in project.status_counts.items()
    )
    lines.extend([DIVIDER, f"Issues ({len(project.issues)}) - {counts}"])
    for issue in project.issues:
        lines.append(f"- [{_humanize(issue.status)}] {issue.title} ({issue.severity})")
    return "\n".join(lines)
