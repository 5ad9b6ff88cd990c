"""SQLite storage adapter.

Implements the core RecordStorePort using a simple SQLite database. Ownership
is enforced in every owner-scoped query through the `user_id` column.
"""

from __future__ import annotations

import sqlite3
from dataclasses import asdict, fields
from typing import Any, Mapping, Optional

from core.models import Client, Issue, ParsedErrorLog, Project, utc_now

_CLIENT_COLUMNS = [f.name for f in fields(Client)]
_PROJECT_COLUMNS = [f.name for f in fields(Project)]
_ISSUE_COLUMNS = [f.name for f in fields(Issue)]
_BOOL_COLUMNS = {"is_shared"}


class SQLiteRecordStore:
    """Thin SQLite wrapper that satisfies the RecordStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - clients: top-level records owned by a user
        - projects: belong to a client, cascade on client delete
        - issues: belong to a project, cascade on project delete
        """

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS clients (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    email TEXT,
                    phone TEXT,
                    company TEXT,
                    notes TEXT,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
                """
            )
            # is_shared gates the unauthenticated shared-project view.
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS projects (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    client_id TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
                    name TEXT NOT NULL,
                    description TEXT,
                    status TEXT NOT NULL,
                    start_date TEXT,
                    end_date TEXT,
                    progress_percentage TEXT,
                    estimated_hours TEXT,
                    is_shared INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
                """
            )
            # Fields worth noting:
            # - error_trace: verbatim pasted trace
            # - error_pattern: analyzer summary of error_trace (NULL when no trace)
            # - client_note / is_shared: content and gate of the shared-issue view
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS issues (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    project_id TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
                    title TEXT NOT NULL,
                    description TEXT,
                    type TEXT NOT NULL,
                    severity TEXT NOT NULL,
                    status TEXT NOT NULL,
                    assigned_to TEXT,
                    due_date TEXT,
                    error_trace TEXT,
                    error_pattern TEXT,
                    client_note TEXT,
                    is_shared INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
                """
            )

    # -- generic helpers -------------------------------------------------

    @staticmethod
    def _to_record(record_type, row: Optional[sqlite3.Row]):
        if row is None:
            return None
        values = dict(row)
        for column in _BOOL_COLUMNS & values.keys():
            values[column] = bool(values[column])
        return record_type(**values)

    def _insert(self, table: str, record) -> None:
        values = asdict(record)
        columns = list(values)
        placeholders = ", ".join("?" for _ in columns)
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                [values[column] for column in columns],
            )

    def _get(self, table: str, record_type, user_id: str, record_id: str):
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT * FROM {table} WHERE id = ? AND user_id = ?",
                (record_id, user_id),
            ).fetchone()
        return self._to_record(record_type, row)

    def _update(
        self,
        table: str,
        record_type,
        columns: list[str],
        user_id: str,
        record_id: str,
        changes: Mapping[str, Any],
    ):
        """Apply `changes` and bump updated_at; None when the row is not owned."""

        unknown = set(changes) - set(columns) | ({"id", "user_id"} & set(changes))
        if unknown:
            raise ValueError(f"Cannot update column(s): {', '.join(sorted(unknown))}")
        values = dict(changes)
        values["updated_at"] = utc_now()
        assignments = ", ".join(f"{column} = ?" for column in values)
        with self._connect() as conn:
            cur = conn.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ? AND user_id = ?",
                [*values.values(), record_id, user_id],
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,)).fetchone()
        return self._to_record(record_type, row)

    def _delete(self, table: str, user_id: str, record_id: str) -> bool:
        with self._connect() as conn:
            cur = conn.execute(
                f"DELETE FROM {table} WHERE id = ? AND user_id = ?",
                (record_id, user_id),
            )
            return cur.rowcount > 0

    # -- clients ---------------------------------------------------------

    def insert_client(self, client: Client) -> Client:
        self._insert("clients", client)
        return client

    def get_client(self, user_id: str, client_id: str) -> Optional[Client]:
        return self._get("clients", Client, user_id, client_id)

    def list_clients(self, user_id: str) -> list[Client]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM clients WHERE user_id = ? ORDER BY name",
                (user_id,),
            ).fetchall()
        return [self._to_record(Client, row) for row in rows]

    def update_client(
        self, user_id: str, client_id: str, changes: Mapping[str, Any]
    ) -> Optional[Client]:
        return self._update("clients", Client, _CLIENT_COLUMNS, user_id, client_id, changes)

    def delete_client(self, user_id: str, client_id: str) -> bool:
        return self._delete("clients", user_id, client_id)

    def get_client_name(self, client_id: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute("SELECT name FROM clients WHERE id = ?", (client_id,)).fetchone()
        return row["name"] if row else None

    # -- projects --------------------------------------------------------

    def insert_project(self, project: Project) -> Project:
        self._insert("projects", project)
        return project

    def get_project(self, user_id: str, project_id: str) -> Optional[Project]:
        return self._get("projects", Project, user_id, project_id)

    def list_projects(self, user_id: str, client_id: Optional[str] = None) -> list[Project]:
        query = "SELECT * FROM projects WHERE user_id = ?"
        params: list[Any] = [user_id]
        if client_id is not None:
            query += " AND client_id = ? ORDER BY created_at DESC"
            params.append(client_id)
        else:
            query += " ORDER BY name"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._to_record(Project, row) for row in rows]

    def update_project(
        self, user_id: str, project_id: str, changes: Mapping[str, Any]
    ) -> Optional[Project]:
        return self._update("projects", Project, _PROJECT_COLUMNS, user_id, project_id, changes)

    def delete_project(self, user_id: str, project_id: str) -> bool:
        return self._delete("projects", user_id, project_id)

    def get_project_name(self, project_id: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute("SELECT name FROM projects WHERE id = ?", (project_id,)).fetchone()
        return row["name"] if row else None

    def get_shared_project(self, project_id: str) -> Optional[Project]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM projects WHERE id = ? AND is_shared = 1",
                (project_id,),
            ).fetchone()
        return self._to_record(Project, row)

    # -- issues ----------------------------------------------------------

    def insert_issue(self, issue: Issue) -> Issue:
        self._insert("issues", issue)
        return issue

    def get_issue(self, user_id: str, issue_id: str) -> Optional[Issue]:
        return self._get("issues", Issue, user_id, issue_id)

    def list_issues(self, user_id: str, project_id: Optional[str] = None) -> list[Issue]:
        query = "SELECT * FROM issues WHERE user_id = ?"
        params: list[Any] = [user_id]
        if project_id is not None:
            query += " AND project_id = ?"
            params.append(project_id)
        query += " ORDER BY created_at DESC"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._to_record(Issue, row) for row in rows]

    def update_issue(
        self, user_id: str, issue_id: str, changes: Mapping[str, Any]
    ) -> Optional[Issue]:
        return self._update("issues", Issue, _ISSUE_COLUMNS, user_id, issue_id, changes)

    def delete_issue(self, user_id: str, issue_id: str) -> bool:
        return self._delete("issues", user_id, issue_id)

    def list_parsed_error_logs(self, user_id: str, limit: int) -> list[ParsedErrorLog]:
        """Return the newest issues that carry an analyzed trace."""

        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT issues.id, issues.title, issues.error_pattern, issues.error_trace,
                       issues.created_at, projects.name AS project_name,
                       clients.name AS client_name
                FROM issues
                LEFT JOIN projects ON projects.id = issues.project_id
                LEFT JOIN clients ON clients.id = projects.client_id
                WHERE issues.user_id = ? AND issues.error_pattern IS NOT NULL
                ORDER BY issues.created_at DESC
                LIMIT ?
                """,
                (user_id, limit),
            ).fetchall()
        return [ParsedErrorLog(**dict(row)) for row in rows]

    def get_shared_issue(self, issue_id: str) -> Optional[Issue]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM issues WHERE id = ? AND is_shared = 1",
                (issue_id,),
            ).fetchone()
        return self._to_record(Issue, row)

    def list_project_issues_public(self, project_id: str) -> list[Issue]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM issues WHERE project_id = ? ORDER BY created_at DESC",
                (project_id,),
            ).fetchall()
        return [self._to_record(Issue, row) for row in rows]
