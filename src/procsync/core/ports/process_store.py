"""
Process Store Port - Abstract interface for the local record store.

The surrounding application owns process records and improvement journal
entries. The sync engine reads their content and writes back only the remote
identifiers it learns.

Implementations:
- InMemoryProcessStore: dict-backed, for tests and embedding
- SQLiteProcessStore: single-file SQLite database
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from procsync.core.domain.entities import (
    ImprovementJournalEntry,
    ProcessRecord,
    RemoteTaskIds,
)


class ProcessStorePort(ABC):
    """Abstract interface for process record storage."""

    @abstractmethod
    def get_process(self, process_id: int) -> ProcessRecord:
        """Load a process; raises ProcessNotFoundError if it does not exist."""
        ...

    @abstractmethod
    def update_process_sync_fields(
        self,
        process_id: int,
        *,
        remote_project_id: str | None,
        remote_project_url: str | None,
        workspace_id: str | None,
        remote_task_ids: RemoteTaskIds,
    ) -> None:
        """Persist the sync-owned fields of a process."""
        ...

    @abstractmethod
    def list_process_ids(self, linked_only: bool = False) -> list[int]:
        """List process ids, optionally only those linked to a remote project."""
        ...

    @abstractmethod
    def list_unlinked_journal_entries(self, process_id: int) -> list[ImprovementJournalEntry]:
        """Journal entries of a process that have no remote task yet."""
        ...

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> ImprovementJournalEntry | None:
        """Fetch a single journal entry, or None."""
        ...

    @abstractmethod
    def set_journal_entry_remote_link(self, entry_id: int, url: str) -> None:
        """Record the remote task that now represents a journal entry."""
        ...

    @abstractmethod
    def append_audit_record(self, process_id: int, text: str) -> None:
        """Append a line to the process history."""
        ...

    def save_sync_fields(self, process: ProcessRecord) -> None:
        """Persist every sync-owned field of ``process``."""
        self.update_process_sync_fields(
            process.id,
            remote_project_id=process.remote_project_id,
            remote_project_url=process.remote_project_url,
            workspace_id=process.workspace_id,
            remote_task_ids=process.remote_task_ids.copy(),
        )
