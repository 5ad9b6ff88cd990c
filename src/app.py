"""Application entry point for the tracescope tracker."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

import qrcode
from art import tprint
from dotenv import load_dotenv
from rich.console import Console

import settings
from adapters.record_formatting import (
    format_error_log,
    format_issue_line,
    format_shared_issue,
    format_shared_project,
)
from adapters.trace_formatting import format_highlighted
from core.models import ISSUE_SEVERITIES, ISSUE_STATUSES, ISSUE_TYPES, PROJECT_STATUSES
from core.sharing import issue_share_link, parse_share_link, project_share_link
from core.trace_analyzer import TraceAnalysis, render_highlighted
from wiring import TrackerServices, build_services

NAME = "TRACESCOPE"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        # stderr keeps command output on stdout clean for piping.
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/tracescope.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _print_qr(url: str) -> None:
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _read_text(path: Optional[str]) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as handle:
        return handle.read()


def _print_analysis(text: str, analysis: TraceAnalysis, fmt: str) -> None:
    """Print the summary, a per-matcher legend, and the highlighted trace."""

    rendered = format_highlighted(render_highlighted(text, analysis.results), fmt)
    if fmt == "html":
        print(rendered)
        return

    legend = [
        f"  {result.label} ({result.color}): {len(result.matches)} "
        f"match{'es' if len(result.matches) != 1 else ''}"
        for result in analysis.results
    ]
    if fmt == "plain":
        print("\n".join(["Summary:", analysis.summary, *legend, "-" * 40, rendered]))
        return

    console = Console(highlight=False)
    console.print("Summary:", style="bold")
    console.print(analysis.summary, markup=False, soft_wrap=True)
    for line in legend:
        console.print(line, markup=False)
    console.rule()
    console.print(rendered, soft_wrap=True)


def _cmd_analyze(args: argparse.Namespace, services: TrackerServices) -> None:
    text = _read_text(args.path)
    _print_analysis(text, services.issues.analyze_trace(text), args.format)


def _cmd_client(args: argparse.Namespace, services: TrackerServices, user_id: str) -> None:
    if args.action == "add":
        client = services.clients.create_client(
            user_id,
            args.name,
            email=args.email,
            phone=args.phone,
            company=args.company,
            notes=args.notes,
        )
        print(client.id)
    elif args.action == "list":
        for client in services.clients.list_clients(user_id):
            company = f" ({client.company})" if client.company else ""
            print(f"{client.id}  {client.name}{company}")
    elif args.action == "delete":
        services.clients.delete_client(user_id, args.client_id)
        print(f"deleted client {args.client_id}")


def _cmd_project(args: argparse.Namespace, services: TrackerServices, user_id: str) -> None:
    if args.action == "add":
        project = services.projects.create_project(
            user_id,
            args.client_id,
            args.name,
            description=args.description,
            status=args.status,
        )
        print(project.id)
    elif args.action == "list":
        labels = dict(services.projects.status_options())
        for project in services.projects.list_projects(user_id, args.client):
            shared = " [shared]" if project.is_shared else ""
            status = labels.get(project.status, project.status)
            print(f"{project.id}  {status:<11} {project.name}{shared}")
    elif args.action == "share":
        project = services.projects.set_project_sharing(user_id, args.project_id, not args.disable)
        if not project.is_shared:
            print("Sharing is disabled for this project")
            return
        link = project_share_link(services.sharing.base_url, project.id)
        print(link)
        if args.qr:
            _print_qr(link)


def _cmd_issue(args: argparse.Namespace, services: TrackerServices, user_id: str) -> None:
    if args.action == "add":
        fields = {
            "description": args.description,
            "type": args.type,
            "severity": args.severity,
            "status": args.status,
            "due_date": args.due_date,
        }
        if args.trace_file:
            fields["error_trace"] = _read_text(args.trace_file)
        issue = services.issues.create_issue(user_id, args.project_id, args.title, **fields)
        print(issue.id)
        if issue.error_pattern:
            print(issue.error_pattern)
    elif args.action == "list":
        for issue in services.issues.list_issues(user_id, args.project):
            print(format_issue_line(issue))
    elif args.action == "show":
        issue = services.issues.get_issue(user_id, args.issue_id)
        print(format_issue_line(issue))
        if issue.description:
            print(issue.description)
        if issue.error_trace:
            _print_analysis(
                issue.error_trace, services.issues.analyze_trace(issue.error_trace), args.format
            )
    elif args.action == "status":
        issue = services.issues.update_status(user_id, args.issue_id, args.status)
        print(f"Issue status updated to {issue.status.replace('_', ' ')}")
    elif args.action == "delete":
        services.issues.delete_issue(user_id, args.issue_id)
        print(f"deleted issue {args.issue_id}")


def _cmd_share(args: argparse.Namespace, services: TrackerServices, user_id: str) -> None:
    note = args.note
    if note is None:
        # Leaving --note off keeps the current note.
        note = services.issues.get_issue(user_id, args.issue_id).client_note
    issue = services.issues.update_sharing(
        user_id, args.issue_id, not args.disable, client_note=note
    )
    if not issue.is_shared:
        print("Sharing is disabled for this issue")
        return
    link = issue_share_link(services.sharing.base_url, issue.id)
    print(link)
    if args.qr:
        _print_qr(link)


def _cmd_shared(args: argparse.Namespace, services: TrackerServices) -> None:
    kind, record_id = args.kind, args.record_id
    if kind == "link":
        parsed = parse_share_link(record_id)
        if parsed is None:
            raise ValueError(f"Not a share link: {record_id}")
        kind, record_id = parsed
    if kind == "issue":
        print(format_shared_issue(services.shared.shared_issue(record_id)))
    else:
        print(format_shared_project(services.shared.shared_project(record_id)))


def _cmd_recent(services: TrackerServices, user_id: str) -> None:
    logs = services.issues.recent_error_logs(user_id)
    if not logs:
        print("No analyzed error traces yet.")
        return
    print("\n\n".join(format_error_log(log) for log in logs))


def _panel() -> None:
    _print_banner()
    from frontend.app import TrackerPanelApp

    TrackerPanelApp().run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tracescope")
    parser.add_argument("--db", help="SQLite database path (defaults to config.json)")
    subparsers = parser.add_subparsers(dest="command")

    analyze = subparsers.add_parser("analyze", help="Analyze an error trace (file or stdin)")
    analyze.add_argument("path", nargs="?", help="Trace file; reads stdin when omitted or '-'")
    analyze.add_argument("--format", choices=["rich", "plain", "html"], default="rich")

    client = subparsers.add_parser("client", help="Manage clients")
    client_actions = client.add_subparsers(dest="action", required=True)
    client_add = client_actions.add_parser("add")
    client_add.add_argument("name")
    client_add.add_argument("--email")
    client_add.add_argument("--phone")
    client_add.add_argument("--company")
    client_add.add_argument("--notes")
    client_actions.add_parser("list")
    client_delete = client_actions.add_parser("delete")
    client_delete.add_argument("client_id")

    project = subparsers.add_parser("project", help="Manage projects")
    project_actions = project.add_subparsers(dest="action", required=True)
    project_add = project_actions.add_parser("add")
    project_add.add_argument("client_id")
    project_add.add_argument("name")
    project_add.add_argument("--description")
    project_add.add_argument("--status", choices=PROJECT_STATUSES, default="planned")
    project_list = project_actions.add_parser("list")
    project_list.add_argument("--client")
    project_share = project_actions.add_parser("share")
    project_share.add_argument("project_id")
    project_share.add_argument("--disable", action="store_true")
    project_share.add_argument("--qr", action="store_true", help="Print the link as a QR code")

    issue = subparsers.add_parser("issue", help="Manage issues")
    issue_actions = issue.add_subparsers(dest="action", required=True)
    issue_add = issue_actions.add_parser("add")
    issue_add.add_argument("project_id")
    issue_add.add_argument("title")
    issue_add.add_argument("--description")
    issue_add.add_argument("--type", choices=ISSUE_TYPES, default="bug")
    issue_add.add_argument("--severity", choices=ISSUE_SEVERITIES, default="medium")
    issue_add.add_argument("--status", choices=ISSUE_STATUSES, default="open")
    issue_add.add_argument("--due-date")
    issue_add.add_argument("--trace-file", help="Error trace file ('-' for stdin)")
    issue_list = issue_actions.add_parser("list")
    issue_list.add_argument("--project")
    issue_show = issue_actions.add_parser("show")
    issue_show.add_argument("issue_id")
    issue_show.add_argument("--format", choices=["rich", "plain", "html"], default="rich")
    issue_status = issue_actions.add_parser("status")
    issue_status.add_argument("issue_id")
    issue_status.add_argument("status", choices=ISSUE_STATUSES)
    issue_delete = issue_actions.add_parser("delete")
    issue_delete.add_argument("issue_id")

    share = subparsers.add_parser("share", help="Enable or disable the shared view of an issue")
    share.add_argument("issue_id")
    share.add_argument(
        "--note", help="Note shown to the client on the shared page; kept when omitted"
    )
    share.add_argument("--disable", action="store_true")
    share.add_argument("--qr", action="store_true", help="Print the link as a QR code")

    shared = subparsers.add_parser("shared", help="Show a shared issue or project as a visitor")
    shared.add_argument("kind", choices=["issue", "project", "link"])
    shared.add_argument("record_id", help="Record id, or a pasted share link for 'link'")

    subparsers.add_parser("recent", help="Show recently analyzed error traces")
    subparsers.add_parser("panel", help="Launch the tracker TUI")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging()

    if args.command in {None, "panel"}:
        _panel()
        return

    services = build_services(args.db)
    user_id = settings.current_user_id()
    try:
        if args.command == "analyze":
            _cmd_analyze(args, services)
        elif args.command == "client":
            _cmd_client(args, services, user_id)
        elif args.command == "project":
            _cmd_project(args, services, user_id)
        elif args.command == "issue":
            _cmd_issue(args, services, user_id)
        elif args.command == "share":
            _cmd_share(args, services, user_id)
        elif args.command == "shared":
            _cmd_shared(args, services)
        elif args.command == "recent":
            _cmd_recent(services, user_id)
    except (ValueError, LookupError, PermissionError, OSError) as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
