"""
Improvement backfill - At most one remote task per improvement journal entry.

An entry's ``remote_task_url`` is the only record that it was backfilled. It
is written right after each task is created, so a crash part-way through a
batch leaves the finished entries marked and a retry skips them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from procsync.core.domain.entities import ImprovementJournalEntry, ProcessRecord
from procsync.core.exceptions import StoreError
from procsync.core.ports.process_store import ProcessStorePort
from procsync.core.ports.tracker import TrackerPort

from .content import ContentFitter
from .outcome import attempt, deferred_interrupt


@dataclass
class BackfillResult:
    """Outcome of a backfill pass."""

    created: list[int] = field(default_factory=list)  # journal entry ids
    skipped: list[int] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.created)


class ImprovementBackfiller:
    """Creates remote tasks for journal entries that have none."""

    def __init__(
        self,
        tracker: TrackerPort,
        store: ProcessStorePort,
        fitter: ContentFitter,
        app_url: str,
        on_backfilled: Callable[[ImprovementJournalEntry, str], None] | None = None,
    ) -> None:
        self.tracker = tracker
        self.store = store
        self.fitter = fitter
        self.app_url = app_url.rstrip("/")
        self.on_backfilled = on_backfilled
        self.logger = logging.getLogger("ImprovementBackfiller")

    def process_link(self, process_id: int) -> str:
        return f"{self.app_url}/processes/{process_id}"

    def task_name(self, entry: ImprovementJournalEntry) -> str:
        return f"[{entry.section_label}] {entry.title}"

    def task_body(self, entry: ImprovementJournalEntry) -> str:
        description = entry.description.strip() or f"Improvement to {entry.section_label} section."
        return f"{description}\n\nView process: {self.process_link(entry.process_id)}"

    def backfill(
        self,
        process: ProcessRecord,
        project_id: str,
        final_section_id: str,
    ) -> BackfillResult:
        """Create a task in the final-stage section for each eligible entry."""
        result = BackfillResult()

        entries = self.store.list_unlinked_journal_entries(process.id)
        for entry in entries:
            if entry.is_local_only:
                result.skipped.append(entry.id)
                continue

            # Another sync may have linked it since the list was read
            current = self.store.get_journal_entry(entry.id)
            if current is None or current.is_backfilled:
                result.skipped.append(entry.id)
                continue

            self._backfill_entry(current, project_id, final_section_id, result)

        if result.count:
            self.logger.info(f"Backfilled {result.count} improvement(s) for process {process.id}")
        return result

    def _backfill_entry(
        self,
        entry: ImprovementJournalEntry,
        project_id: str,
        section_id: str,
        result: BackfillResult,
    ) -> None:
        body = self.task_body(entry)
        fitted = self.fitter.fit(body)

        # The link must be recorded before an interrupt can surface
        with deferred_interrupt():
            made = attempt(
                self.tracker.create_task,
                self.task_name(entry),
                fitted.text,
                project_id,
                section_id,
            )
            if made.is_err():
                result.warnings.append(f"Improvement '{entry.title}': task creation failed: {made.err()}")
                return

            task = made.unwrap()
            url = task.permalink_url or f"{self.tracker.project_url(project_id)}/{task.gid}"
            try:
                self.store.set_journal_entry_remote_link(entry.id, url)
            except StoreError as e:
                # The remote task exists; without the link a retry would duplicate it
                self.logger.error(f"Created task {task.gid} but could not record it on entry {entry.id}: {e}")
                result.warnings.append(
                    f"Improvement '{entry.title}': task {url} created but not recorded locally"
                )
                return

        result.created.append(entry.id)
        if self.on_backfilled:
            self.on_backfilled(entry, url)
