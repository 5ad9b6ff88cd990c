"""Client and project services.

Both services only talk to the record store port. The caller passes the
current user explicitly on every call.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from core.models import PROJECT_STATUS_OPTIONS, PROJECT_STATUSES, Client, Project, new_id, utc_now
from core.ports import RecordStorePort

LOGGER = logging.getLogger(__name__)

CLIENT_FIELDS = {"name", "email", "phone", "company", "notes"}
PROJECT_FIELDS = {
    "name",
    "description",
    "status",
    "start_date",
    "end_date",
    "progress_percentage",
    "estimated_hours",
}


def require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise PermissionError("User not authenticated")
    return user_id


def check_fields(changes: Mapping[str, Any], allowed: set[str]) -> dict[str, Any]:
    """Reject unknown fields so typos never reach the store."""

    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise ValueError(f"Unsupported field(s): {', '.join(unknown)}")
    return dict(changes)


def check_choice(field: str, value: Any, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise ValueError(f"Invalid {field}: {value!r} (expected one of {', '.join(choices)})")


class ClientService:
    def __init__(self, store: RecordStorePort) -> None:
        self._store = store

    def create_client(self, user_id: Optional[str], name: str, **fields: Any) -> Client:
        user_id = require_user(user_id)
        if not name or not name.strip():
            raise ValueError("Client name is required")
        extra = check_fields(fields, CLIENT_FIELDS - {"name"})
        now = utc_now()
        client = self._store.insert_client(
            Client(
                id=new_id(),
                user_id=user_id,
                name=name.strip(),
                created_at=now,
                updated_at=now,
                **extra,
            )
        )
        LOGGER.info("Client created: %s (%s)", client.name, client.id)
        return client

    def get_client(self, user_id: Optional[str], client_id: str) -> Client:
        client = self._store.get_client(require_user(user_id), client_id)
        if client is None:
            raise LookupError(f"Client not found: {client_id}")
        return client

    def list_clients(self, user_id: Optional[str]) -> list[Client]:
        return self._store.list_clients(require_user(user_id))

    def update_client(self, user_id: Optional[str], client_id: str, **changes: Any) -> Client:
        changes = check_fields(changes, CLIENT_FIELDS)
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValueError("Client name is required")
        client = self._store.update_client(require_user(user_id), client_id, changes)
        if client is None:
            raise LookupError(f"Client not found: {client_id}")
        LOGGER.info("Client updated: %s", client_id)
        return client

    def delete_client(self, user_id: Optional[str], client_id: str) -> None:
        """Delete a client together with its projects and their issues."""

        if not self._store.delete_client(require_user(user_id), client_id):
            raise LookupError(f"Client not found: {client_id}")
        LOGGER.info("Client deleted: %s", client_id)


class ProjectService:
    def __init__(self, store: RecordStorePort) -> None:
        self._store = store

    @staticmethod
    def status_options() -> list[tuple[str, str]]:
        return list(PROJECT_STATUS_OPTIONS)

    def create_project(
        self, user_id: Optional[str], client_id: str, name: str, **fields: Any
    ) -> Project:
        user_id = require_user(user_id)
        if not name or not name.strip() or not client_id:
            raise ValueError("Project name and client are required")
        extra = check_fields(fields, PROJECT_FIELDS - {"name"})
        check_choice("status", extra.get("status", "planned"), PROJECT_STATUSES)
        if self._store.get_client(user_id, client_id) is None:
            raise LookupError(f"Client not found: {client_id}")

        now = utc_now()
        project = self._store.insert_project(
            Project(
                id=new_id(),
                user_id=user_id,
                client_id=client_id,
                name=name.strip(),
                created_at=now,
                updated_at=now,
                **extra,
            )
        )
        LOGGER.info("Project created: %s (%s)", project.name, project.id)
        return project

    def get_project(self, user_id: Optional[str], project_id: str) -> Project:
        project = self._store.get_project(require_user(user_id), project_id)
        if project is None:
            raise LookupError(f"Project not found: {project_id}")
        return project

    def list_projects(self, user_id: Optional[str], client_id: Optional[str] = None) -> list[Project]:
        return self._store.list_projects(require_user(user_id), client_id)

    def update_project(self, user_id: Optional[str], project_id: str, **changes: Any) -> Project:
        changes = check_fields(changes, PROJECT_FIELDS)
        if "status" in changes:
            check_choice("status", changes["status"], PROJECT_STATUSES)
        project = self._store.update_project(require_user(user_id), project_id, changes)
        if project is None:
            raise LookupError(f"Project not found: {project_id}")
        LOGGER.info("Project updated: %s", project_id)
        return project

    def set_project_sharing(self, user_id: Optional[str], project_id: str, enabled: bool) -> Project:
        project = self._store.update_project(
            require_user(user_id), project_id, {"is_shared": bool(enabled)}
        )
        if project is None:
            raise LookupError(f"Project not found: {project_id}")
        LOGGER.info("Project sharing %s: %s", "enabled" if enabled else "disabled", project_id)
        return project

    def delete_project(self, user_id: Optional[str], project_id: str) -> None:
        if not self._store.delete_project(require_user(user_id), project_id):
            raise LookupError(f"Project not found: {project_id}")
        LOGGER.info("Project deleted: %s", project_id)
