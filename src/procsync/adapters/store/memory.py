"""
In-memory process store.

Keeps deep copies so callers cannot mutate stored state by accident.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import replace

from procsync.core.domain.entities import (
    ImprovementJournalEntry,
    ProcessRecord,
    RemoteTaskIds,
)
from procsync.core.exceptions import ProcessNotFoundError, StoreError
from procsync.core.ports.process_store import ProcessStorePort


class InMemoryProcessStore(ProcessStorePort):
    """Dict-backed ProcessStorePort."""

    def __init__(self) -> None:
        self._processes: dict[int, ProcessRecord] = {}
        self._entries: dict[int, ImprovementJournalEntry] = {}
        self._audit: dict[int, list[str]] = {}
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Seeding (used by the surrounding application and tests)
    # -------------------------------------------------------------------------

    def add_process(self, process: ProcessRecord) -> ProcessRecord:
        with self._lock:
            self._processes[process.id] = copy.deepcopy(process)
        return process

    def add_journal_entry(self, entry: ImprovementJournalEntry) -> ImprovementJournalEntry:
        with self._lock:
            self._entries[entry.id] = replace(entry)
        return entry

    def audit_records(self, process_id: int) -> list[str]:
        return list(self._audit.get(process_id, []))

    # -------------------------------------------------------------------------
    # ProcessStorePort
    # -------------------------------------------------------------------------

    def get_process(self, process_id: int) -> ProcessRecord:
        with self._lock:
            process = self._processes.get(process_id)
            if process is None:
                raise ProcessNotFoundError(process_id)
            return copy.deepcopy(process)

    def update_process_sync_fields(
        self,
        process_id: int,
        *,
        remote_project_id: str | None,
        remote_project_url: str | None,
        workspace_id: str | None,
        remote_task_ids: RemoteTaskIds,
    ) -> None:
        with self._lock:
            process = self._processes.get(process_id)
            if process is None:
                raise ProcessNotFoundError(process_id)
            process.remote_project_id = remote_project_id
            process.remote_project_url = remote_project_url
            process.workspace_id = workspace_id
            process.remote_task_ids = remote_task_ids.copy()

    def list_process_ids(self, linked_only: bool = False) -> list[int]:
        with self._lock:
            return sorted(
                pid for pid, p in self._processes.items() if not linked_only or p.is_linked
            )

    def list_unlinked_journal_entries(self, process_id: int) -> list[ImprovementJournalEntry]:
        with self._lock:
            return [
                replace(entry)
                for entry in sorted(self._entries.values(), key=lambda e: e.id)
                if entry.process_id == process_id and not entry.is_backfilled
            ]

    def get_journal_entry(self, entry_id: int) -> ImprovementJournalEntry | None:
        with self._lock:
            entry = self._entries.get(entry_id)
            return replace(entry) if entry else None

    def set_journal_entry_remote_link(self, entry_id: int, url: str) -> None:
        with self._lock:
            entry = self._entries.get(entry_id)
            if entry is None:
                raise StoreError(f"Journal entry not found: {entry_id}")
            entry.remote_task_url = url

    def append_audit_record(self, process_id: int, text: str) -> None:
        with self._lock:
            self._audit.setdefault(process_id, []).append(text)
