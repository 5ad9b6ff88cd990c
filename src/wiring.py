"""Service wiring shared by the CLI and the Textual panel."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import settings
from adapters.sqlite_storage import SQLiteRecordStore
from core.clients import ClientService, ProjectService
from core.config import AnalysisConfig, SharingConfig
from core.issues import IssueService
from core.sharing import SharedViewService


@dataclass(frozen=True)
class TrackerServices:
    clients: ClientService
    projects: ProjectService
    issues: IssueService
    shared: SharedViewService
    sharing: SharingConfig


def build_services(db_path: Optional[str] = None) -> TrackerServices:
    """Open the SQLite store and build every service on top of it."""

    store = SQLiteRecordStore(db_path or settings.DB_PATH)
    store.init_db()
    logging.getLogger(__name__).debug("Record store ready at %s", db_path or settings.DB_PATH)

    analysis = AnalysisConfig(
        trace_max_chars=settings.TRACE_MAX_CHARS,
        recent_logs_limit=settings.RECENT_LOGS_LIMIT,
    )
    return TrackerServices(
        clients=ClientService(store),
        projects=ProjectService(store),
        issues=IssueService(store, analysis),
        shared=SharedViewService(store),
        sharing=SharingConfig(base_url=settings.SHARE_BASE_URL),
    )
