"""
SQLite process store.

Schema mirrors the application's tables closely enough for the CLI to run
against a local copy:

- processes: one row per process; ``charter`` and ``documentation`` are JSON
- process_improvements: the improvement journal
- process_history: append-only audit lines
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from procsync.adapters.formatters import charter_text, render_field
from procsync.core.domain.entities import (
    ImprovementJournalEntry,
    ProcessRecord,
    RemoteTaskIds,
)
from procsync.core.domain.enums import Dimension
from procsync.core.exceptions import ProcessNotFoundError, StoreError
from procsync.core.ports.process_store import ProcessStorePort


logger = logging.getLogger("SQLiteProcessStore")

SCHEMA = """
CREATE TABLE IF NOT EXISTS processes (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT DEFAULT '',
    charter TEXT,
    documentation TEXT DEFAULT '{}',
    remote_project_id TEXT,
    remote_project_url TEXT,
    remote_task_ids TEXT DEFAULT '{}',
    workspace_id TEXT
);

CREATE TABLE IF NOT EXISTS process_improvements (
    id INTEGER PRIMARY KEY,
    process_id INTEGER NOT NULL REFERENCES processes(id) ON DELETE CASCADE,
    section_affected TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    remote_task_url TEXT
);

CREATE TABLE IF NOT EXISTS process_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    process_id INTEGER NOT NULL REFERENCES processes(id) ON DELETE CASCADE,
    change_description TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_processes_remote_project ON processes(remote_project_id);
CREATE INDEX IF NOT EXISTS idx_improvements_process ON process_improvements(process_id);
"""


def _loads(raw: str | None) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        # Plain text stored in a JSON column
        return raw


class SQLiteProcessStore(ProcessStorePort):
    """ProcessStorePort backed by a SQLite file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreError(f"SQLite error in {self.path}", cause=exc) from exc
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Row mapping
    # -------------------------------------------------------------------------

    def _row_to_process(self, row: sqlite3.Row) -> ProcessRecord:
        documentation_raw = _loads(row["documentation"]) or {}
        documentation = {}
        if isinstance(documentation_raw, dict):
            for key, value in documentation_raw.items():
                dimension = Dimension.from_string(key)
                if dimension is not None:
                    documentation[dimension] = render_field(value)

        task_ids = _loads(row["remote_task_ids"])
        return ProcessRecord(
            id=row["id"],
            name=row["name"],
            description_source=charter_text(_loads(row["charter"]), row["description"] or ""),
            documentation=documentation,
            remote_project_id=row["remote_project_id"],
            remote_project_url=row["remote_project_url"],
            remote_task_ids=RemoteTaskIds.from_dict(task_ids if isinstance(task_ids, dict) else {}),
            workspace_id=row["workspace_id"],
        )

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> ImprovementJournalEntry:
        return ImprovementJournalEntry(
            id=row["id"],
            process_id=row["process_id"],
            section_affected=row["section_affected"],
            title=row["title"],
            description=row["description"] or "",
            remote_task_url=row["remote_task_url"],
        )

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    def insert_process(
        self,
        process_id: int,
        name: str,
        *,
        description: str = "",
        charter: Any = None,
        documentation: dict[str, Any] | None = None,
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO processes (id, name, description, charter, documentation) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    process_id,
                    name,
                    description,
                    json.dumps(charter) if charter is not None else None,
                    json.dumps(documentation or {}),
                ),
            )

    def insert_journal_entry(
        self,
        entry_id: int,
        process_id: int,
        section_affected: str,
        title: str,
        description: str = "",
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO process_improvements "
                "(id, process_id, section_affected, title, description) VALUES (?, ?, ?, ?, ?)",
                (entry_id, process_id, section_affected, title, description),
            )

    def audit_records(self, process_id: int) -> list[str]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT change_description FROM process_history WHERE process_id = ? ORDER BY id",
                (process_id,),
            ).fetchall()
        return [row["change_description"] for row in rows]

    # -------------------------------------------------------------------------
    # ProcessStorePort
    # -------------------------------------------------------------------------

    def get_process(self, process_id: int) -> ProcessRecord:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM processes WHERE id = ?", (process_id,)).fetchone()
        if row is None:
            raise ProcessNotFoundError(process_id)
        return self._row_to_process(row)

    def update_process_sync_fields(
        self,
        process_id: int,
        *,
        remote_project_id: str | None,
        remote_project_url: str | None,
        workspace_id: str | None,
        remote_task_ids: RemoteTaskIds,
    ) -> None:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE processes SET remote_project_id = ?, remote_project_url = ?, "
                "workspace_id = ?, remote_task_ids = ? WHERE id = ?",
                (
                    remote_project_id,
                    remote_project_url,
                    workspace_id,
                    json.dumps(remote_task_ids.to_dict()),
                    process_id,
                ),
            )
            if cursor.rowcount == 0:
                raise ProcessNotFoundError(process_id)
        logger.debug(f"Saved sync fields for process {process_id}")

    def list_process_ids(self, linked_only: bool = False) -> list[int]:
        query = "SELECT id FROM processes"
        if linked_only:
            query += " WHERE remote_project_id IS NOT NULL AND remote_project_id != ''"
        with self._connect() as conn:
            rows = conn.execute(query + " ORDER BY id").fetchall()
        return [row["id"] for row in rows]

    def list_unlinked_journal_entries(self, process_id: int) -> list[ImprovementJournalEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM process_improvements "
                "WHERE process_id = ? AND (remote_task_url IS NULL OR remote_task_url = '') "
                "ORDER BY id",
                (process_id,),
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def get_journal_entry(self, entry_id: int) -> ImprovementJournalEntry | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM process_improvements WHERE id = ?", (entry_id,)
            ).fetchone()
        return self._row_to_entry(row) if row else None

    def set_journal_entry_remote_link(self, entry_id: int, url: str) -> None:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE process_improvements SET remote_task_url = ? WHERE id = ?",
                (url, entry_id),
            )
            if cursor.rowcount == 0:
                raise StoreError(f"Journal entry not found: {entry_id}")

    def append_audit_record(self, process_id: int, text: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO process_history (process_id, change_description) VALUES (?, ?)",
                (process_id, text),
            )
