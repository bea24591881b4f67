"""
Sync Orchestrator - Coordinates one sync of a process to the tracker.

Phases:
1. LINKING: resolve the remote project, clearing a stale link
2. Create the project (unlinked) or refresh its description (linked)
3. PROVISIONING: ensure the stage sections exist
4. SYNCING_DOCS: upsert one task per documentation dimension
5. BACKFILLING: create tasks for un-synced improvement journal entries
6. DONE: persist task ids and append an audit record

Only fatal errors (authentication, missing process, no workspace, a failed
probe or project creation) are raised. Everything else becomes a warning on
the returned result. Each partial success is persisted as soon as it is known,
so a sync that dies half-way is resumed by simply running it again.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any

from procsync.core.domain.entities import ImprovementJournalEntry, ProcessRecord, RemoteTask
from procsync.core.domain.enums import Dimension, SyncAction, SyncPhase
from procsync.core.domain.events import (
    DocumentationTaskSynced,
    EventBus,
    ImprovementBackfilled,
    ProjectCreated,
    ProjectUnlinked,
    SyncCompleted,
    SyncStarted,
)
from procsync.core.exceptions import AuthenticationError, ProcsyncError, StoreError, TrackerErrorKind
from procsync.core.ports.config_provider import SyncConfig
from procsync.core.ports.process_store import ProcessStorePort
from procsync.core.ports.tracker import TrackerPort

from .backfill import ImprovementBackfiller
from .content import ContentFitter, FittedContent
from .documentation import DocumentationTaskSynchronizer
from .link import LinkResolution, LinkResolver
from .outcome import attempt, deferred_interrupt
from .sections import SectionProvisioner


@dataclass
class SyncOptions:
    """Caller choices for one sync."""

    target_workspace_id: str | None = None
    force_new: bool = False


@dataclass
class SyncResult:
    """
    Summary of a completed sync.

    A returned result always means the sync succeeded, possibly with caveats
    listed in ``warnings``; fatal failures are raised instead.

    Attributes:
        process_id: The synced process.
        action: Whether a project was created or an existing one updated.
        remote_project_url: Link to the remote project.
        docs_created: Documentation tasks created.
        docs_updated: Documentation tasks updated in place.
        backfill_count: Improvement journal entries given a remote task.
        warnings: Non-fatal problems, one line each.
        description_condensed: The project description was condensed to fit.
        phase: Last phase reached.
        phases: Every phase entered, in order.
    """

    process_id: int
    action: SyncAction | None = None
    remote_project_url: str | None = None
    project_id: str | None = None
    docs_created: int = 0
    docs_updated: int = 0
    backfill_count: int = 0
    warnings: list[str] = field(default_factory=list)
    description_condensed: bool = False
    phase: SyncPhase = SyncPhase.UNLINKED
    phases: list[SyncPhase] = field(default_factory=list)

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def summary(self) -> str:
        """
        Generate a human-readable summary of the sync result.

        Returns:
            Multi-line summary string.
        """
        verb = "Created" if self.action is SyncAction.CREATED else "Updated"
        lines = []
        if self.warnings:
            lines.append(f"⚠ {verb} remote project with {len(self.warnings)} warning(s)")
        else:
            lines.append(f"✓ {verb} remote project")

        if self.remote_project_url:
            lines.append(f"  Project: {self.remote_project_url}")
        lines.append(f"  Documentation tasks created: {self.docs_created}")
        lines.append(f"  Documentation tasks updated: {self.docs_updated}")
        lines.append(f"  Improvements backfilled: {self.backfill_count}")
        if self.description_condensed:
            lines.append("  Description condensed to fit the tracker")

        if self.warnings:
            lines.append("")
            lines.append("Warnings:")
            for warning in self.warnings[:10]:
                lines.append(f"  • {warning}")
            if len(self.warnings) > 10:
                lines.append(f"  ... and {len(self.warnings) - 10} more")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "processId": self.process_id,
            "action": self.action.value if self.action else None,
            "remoteProjectUrl": self.remote_project_url,
            "projectId": self.project_id,
            "docsCreated": self.docs_created,
            "docsUpdated": self.docs_updated,
            "backfillCount": self.backfill_count,
            "warnings": list(self.warnings),
            "descriptionCondensed": self.description_condensed,
        }


@dataclass
class BatchSyncResult:
    """Results of syncing several processes."""

    results: dict[int, SyncResult] = field(default_factory=dict)
    failures: dict[int, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        lines = [f"Synced {len(self.results)} process(es), {len(self.failures)} failed"]
        for process_id, error in self.failures.items():
            lines.append(f"  ✗ {process_id}: {error}")
        return "\n".join(lines)


class SyncOrchestrator:
    """
    Keeps a process and its remote project consistent.

    Syncs of the same process are serialised within this orchestrator; runs
    in separate OS processes are not coordinated.
    """

    def __init__(
        self,
        tracker: TrackerPort,
        store: ProcessStorePort,
        fitter: ContentFitter | None = None,
        config: SyncConfig | None = None,
        default_workspace_id: str | None = None,
        event_bus: EventBus | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            tracker: Remote tracker port.
            store: Local process store.
            fitter: Length fitter (defaults to truncation-only at the config limit).
            config: Sync configuration.
            default_workspace_id: Workspace for new projects when none is given.
            event_bus: Optional event bus.
        """
        self.tracker = tracker
        self.store = store
        self.config = config or SyncConfig()
        self.fitter = fitter or ContentFitter(limit=self.config.notes_limit)
        self.event_bus = event_bus or EventBus()
        self.logger = logging.getLogger("SyncOrchestrator")

        self.link_resolver = LinkResolver(tracker, store, default_workspace_id)
        self.provisioner = SectionProvisioner(tracker)

        self._locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # -------------------------------------------------------------------------
    # Main Entry Points
    # -------------------------------------------------------------------------

    def sync(self, process_id: int, options: SyncOptions | None = None) -> SyncResult:
        """
        Sync one process to the tracker.

        Args:
            process_id: Local process id.
            options: Target workspace and force-new flag.

        Returns:
            SyncResult with counts and warnings.

        Raises:
            ProcsyncError: On fatal failures only.
        """
        options = options or SyncOptions()
        with self._lock_for(process_id):
            result = SyncResult(process_id=process_id)
            try:
                self._run(process_id, options, result)
            except ProcsyncError as e:
                self._enter(result, SyncPhase.FATAL)
                self.logger.error(f"Sync of process {process_id} failed: {e}")
                raise
            return result

    def sync_many(
        self,
        process_ids: list[int],
        options: SyncOptions | None = None,
    ) -> BatchSyncResult:
        """
        Sync several processes one after another.

        A fatal error stops only its own process, except an authentication
        failure: the token is bad for every process, so the rest of the batch
        is marked failed without contacting the tracker. Consecutive syncs are
        spaced by ``config.batch_delay`` seconds to stay under the tracker's
        rate limits.
        """
        batch = BatchSyncResult()
        for index, process_id in enumerate(process_ids):
            if index and self.config.batch_delay > 0:
                time.sleep(self.config.batch_delay)
            try:
                batch.results[process_id] = self.sync(process_id, options)
            except AuthenticationError as e:
                remaining = process_ids[index:]
                for skipped in remaining:
                    batch.failures[skipped] = str(e)
                self.logger.error(f"Stopping batch, {len(remaining)} process(es) not synced: {e}")
                break
            except ProcsyncError as e:
                batch.failures[process_id] = str(e)
        return batch

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    def _run(self, process_id: int, options: SyncOptions, result: SyncResult) -> None:
        self._enter(result, SyncPhase.LINKING)
        process = self.store.get_process(process_id)
        self.event_bus.publish(SyncStarted(process_id=process_id, force_new=options.force_new))

        resolution = self.link_resolver.resolve(
            process,
            force_new=options.force_new,
            target_workspace_id=options.target_workspace_id,
        )
        if resolution.unlinked_stale:
            self._enter(result, SyncPhase.UNLINKED)
            self.event_bus.publish(
                ProjectUnlinked(process_id=process_id, stale_project_id=resolution.unlinked_stale)
            )
            self._enter(result, SyncPhase.LINKING)

        description = self.fitter.fit(process.description_source)
        result.description_condensed = description.condensed
        if description.truncated:
            result.add_warning(
                f"Project description truncated to fit the tracker "
                f"({description.original_length} characters)"
            )

        if resolution.linked:
            project_id = self._refresh_project(process, resolution, description, result)
        else:
            project_id = self._create_project(process, resolution, description, result)

        self._enter(result, SyncPhase.PROVISIONING)
        provision = self.provisioner.provision(project_id)
        for warning in provision.errors:
            result.add_warning(warning)

        self._enter(result, SyncPhase.SYNCING_DOCS)
        doc_sync = DocumentationTaskSynchronizer(
            self.tracker,
            self.fitter,
            on_synced=lambda dimension, task, created: self._on_doc_synced(
                process, dimension, task, created
            ),
        )
        docs = doc_sync.sync(process, project_id, resolution.workspace_id, provision)
        process.remote_task_ids = docs.remote_task_ids
        self.store.save_sync_fields(process)
        result.docs_created = docs.created_count
        result.docs_updated = docs.updated_count
        for warning in docs.errors + docs.warnings:
            result.add_warning(warning)

        self._enter(result, SyncPhase.BACKFILLING)
        final_section_id = provision.sections.final_stage_id
        if not self.config.backfill_improvements:
            self.logger.debug("Improvement backfill disabled")
        elif final_section_id:
            backfiller = ImprovementBackfiller(
                self.tracker,
                self.store,
                self.fitter,
                self.config.app_url,
                on_backfilled=lambda entry, url: self._on_backfilled(process, entry, url),
            )
            backfill = backfiller.backfill(process, project_id, final_section_id)
            result.backfill_count = backfill.count
            for warning in backfill.warnings:
                result.add_warning(warning)
        elif any(not e.is_local_only for e in self.store.list_unlinked_journal_entries(process.id)):
            result.add_warning("Improvements not backfilled: the project has no final-stage section")

        self._record_audit(process, result)
        self._enter(result, SyncPhase.DONE)
        self.event_bus.publish(
            SyncCompleted(
                process_id=process.id,
                action=result.action.value if result.action else "",
                docs_created=result.docs_created,
                docs_updated=result.docs_updated,
                backfill_count=result.backfill_count,
                warnings=tuple(result.warnings),
            )
        )

    def _create_project(
        self,
        process: ProcessRecord,
        resolution: LinkResolution,
        description: FittedContent,
        result: SyncResult,
    ) -> str:
        workspace_id = resolution.workspace_id or ""
        with deferred_interrupt():
            project = self.tracker.create_project(process.name, description.text, workspace_id)

            # Task ids of any previous project are meaningless in the new one
            process.remote_task_ids.clear()
            process.remote_project_id = project.gid
            process.remote_project_url = self.tracker.project_url(project.gid)
            process.workspace_id = project.workspace_id or workspace_id
            self.store.save_sync_fields(process)

        self.logger.info(f"Linked process {process.id} to new project {project.gid}")
        self.event_bus.publish(
            ProjectCreated(
                process_id=process.id,
                project_id=project.gid,
                workspace_id=process.workspace_id or "",
            )
        )

        stored_warning = self.fitter.verify_stored(description.text, project.notes, "Project description")
        if stored_warning:
            result.add_warning(stored_warning)

        result.action = SyncAction.CREATED
        result.project_id = project.gid
        result.remote_project_url = process.remote_project_url
        return project.gid

    def _refresh_project(
        self,
        process: ProcessRecord,
        resolution: LinkResolution,
        description: FittedContent,
        result: SyncResult,
    ) -> str:
        project_id = resolution.project_id or ""

        updated = attempt(self.tracker.update_project, project_id, description.text)
        if updated.is_err():
            error = updated.err()
            if error.kind is TrackerErrorKind.PERMISSION_DENIED:
                result.add_warning("No permission to update the project description; left unchanged")
            else:
                result.add_warning(f"Could not update the project description: {error}")
        else:
            stored_warning = self.fitter.verify_stored(
                description.text, updated.unwrap().notes, "Project description"
            )
            if stored_warning:
                result.add_warning(stored_warning)

        url = self.tracker.project_url(project_id)
        if process.remote_project_url != url or process.workspace_id != resolution.workspace_id:
            process.remote_project_url = url
            process.workspace_id = resolution.workspace_id or process.workspace_id
            self.store.save_sync_fields(process)

        result.action = SyncAction.UPDATED
        result.project_id = project_id
        result.remote_project_url = url
        return project_id

    # -------------------------------------------------------------------------
    # Callbacks & helpers
    # -------------------------------------------------------------------------

    def _on_doc_synced(
        self,
        process: ProcessRecord,
        dimension: Dimension,
        task: RemoteTask,
        created: bool,
    ) -> None:
        if created:
            # Persist each new id at once so a crash cannot orphan the task
            process.remote_task_ids.set(dimension, task.gid)
            self.store.save_sync_fields(process)
        self.event_bus.publish(
            DocumentationTaskSynced(
                process_id=process.id,
                dimension=dimension.value,
                task_id=task.gid,
                created=created,
            )
        )

    def _on_backfilled(self, process: ProcessRecord, entry: ImprovementJournalEntry, url: str) -> None:
        self.event_bus.publish(
            ImprovementBackfilled(process_id=process.id, entry_id=entry.id, task_url=url)
        )

    def _record_audit(self, process: ProcessRecord, result: SyncResult) -> None:
        if result.action is SyncAction.CREATED:
            text = f"Exported to new {self.tracker.name} project"
        else:
            text = f"Synced to {self.tracker.name} project"
        text += (
            f" ({result.docs_created} documentation task(s) created, "
            f"{result.docs_updated} updated, {result.backfill_count} improvement task(s) created)"
        )
        if result.description_condensed:
            text += " (description condensed)"
        if result.warnings:
            text += f"; {len(result.warnings)} warning(s)"

        try:
            self.store.append_audit_record(process.id, text)
        except StoreError as e:
            result.add_warning(f"Could not record sync history: {e}")

    def _enter(self, result: SyncResult, phase: SyncPhase) -> None:
        self.logger.debug(f"Process {result.process_id}: {result.phase.value} -> {phase.value}")
        result.phase = phase
        result.phases.append(phase)

    def _lock_for(self, process_id: int) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(process_id, threading.Lock())
