"""Core domain models.

These dataclasses mirror the records held by the record store and are shared
across the core and adapters without tying either to a storage backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import uuid

ISSUE_TYPES = ("bug", "feature", "task")
ISSUE_SEVERITIES = ("low", "medium", "high", "critical")
ISSUE_STATUSES = ("open", "in_progress", "resolved", "closed")

PROJECT_STATUS_OPTIONS = (
    ("planned", "Planned"),
    ("active", "Active"),
    ("in_progress", "In Progress"),
    ("on_hold", "On Hold"),
    ("completed", "Completed"),
    ("cancelled", "Cancelled"),
)
PROJECT_STATUSES = tuple(value for value, _ in PROJECT_STATUS_OPTIONS)


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Client:
    id: str
    user_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class Project:
    id: str
    user_id: str
    client_id: str
    name: str
    description: Optional[str] = None
    status: str = "planned"
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    progress_percentage: Optional[str] = None
    estimated_hours: Optional[str] = None
    is_shared: bool = False
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class Issue:
    """Issue record; `error_pattern` holds the analyzer summary of `error_trace`."""

    id: str
    user_id: str
    project_id: str
    title: str
    description: Optional[str] = None
    type: str = "bug"
    severity: str = "medium"
    status: str = "open"
    assigned_to: Optional[str] = None
    due_date: Optional[str] = None
    error_trace: Optional[str] = None
    error_pattern: Optional[str] = None
    client_note: Optional[str] = None
    is_shared: bool = False
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class ParsedErrorLog:
    """Recent issue with an analyzed trace, joined with its project and client names."""

    id: str
    title: str
    error_pattern: Optional[str]
    error_trace: Optional[str]
    created_at: str
    project_name: Optional[str] = None
    client_name: Optional[str] = None
