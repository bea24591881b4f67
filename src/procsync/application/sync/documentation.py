"""
Documentation task sync - One remote task per documentation dimension.

Tasks are keyed by the remote id stored on the process, so repeat syncs
update in place. A stored id whose task was deleted remotely falls back to
creating a fresh task. Every dimension is independent: one failing never
stops the others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from procsync.core.domain.entities import ProcessRecord, RemoteTask, RemoteTaskIds
from procsync.core.domain.enums import Dimension
from procsync.core.exceptions import TrackerErrorKind
from procsync.core.ports.tracker import TrackerPort

from .content import ContentFitter
from .outcome import attempt, deferred_interrupt
from .sections import ProvisionResult


PLACEHOLDER_BODY = (
    "No {label} documentation yet. Edit this process to add content; "
    "the next sync will fill in this task."
)


def render_task_body(process: ProcessRecord, dimension: Dimension) -> str:
    """Task description for a dimension; empty content renders a placeholder."""
    content = process.documentation_for(dimension)
    if not content:
        return PLACEHOLDER_BODY.format(label=dimension.label.lower())
    return f"## {dimension.label}\n\n{content}"


@dataclass
class DocumentationSyncResult:
    """Outcome of syncing all documentation dimensions."""

    remote_task_ids: RemoteTaskIds = field(default_factory=RemoteTaskIds)
    created: list[Dimension] = field(default_factory=list)
    updated: list[Dimension] = field(default_factory=list)
    condensed: list[Dimension] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def updated_count(self) -> int:
        return len(self.updated)


class DocumentationTaskSynchronizer:
    """Upserts the documentation tasks of a process."""

    def __init__(
        self,
        tracker: TrackerPort,
        fitter: ContentFitter,
        on_synced: Callable[[Dimension, RemoteTask, bool], None] | None = None,
    ) -> None:
        """
        Args:
            tracker: Remote tracker.
            fitter: Length fitter for task bodies.
            on_synced: Called with (dimension, task, created) after each success.
        """
        self.tracker = tracker
        self.fitter = fitter
        self.on_synced = on_synced
        self.logger = logging.getLogger("DocumentationTaskSynchronizer")

    def sync(
        self,
        process: ProcessRecord,
        project_id: str,
        workspace_id: str | None,
        provision: ProvisionResult,
    ) -> DocumentationSyncResult:
        """
        Create or update the task for every dimension, in fixed order.

        The returned ``remote_task_ids`` is a copy of the process's map with
        every successful create applied; persist it even when some
        dimensions failed.
        """
        result = DocumentationSyncResult(remote_task_ids=process.remote_task_ids.copy())

        for dimension in Dimension.ordered():
            self._sync_dimension(process, dimension, project_id, workspace_id, provision, result)

        self.logger.info(
            f"Documentation tasks for process {process.id}: "
            f"{result.created_count} created, {result.updated_count} updated, "
            f"{len(result.errors)} failed"
        )
        return result

    def _sync_dimension(
        self,
        process: ProcessRecord,
        dimension: Dimension,
        project_id: str,
        workspace_id: str | None,
        provision: ProvisionResult,
        result: DocumentationSyncResult,
    ) -> None:
        label = dimension.label
        stage = dimension.stage

        section_id = provision.sections.get(stage)
        if section_id is None:
            reason = provision.failures.get(stage)
            message = f"{label}: skipped, no target section '{stage.section_name}'"
            result.errors.append(f"{message} ({reason})" if reason else message)
            return

        fitted = self.fitter.fit(render_task_body(process, dimension))
        if fitted.condensed:
            result.condensed.append(dimension)
        elif fitted.truncated:
            result.warnings.append(
                f"{label}: documentation truncated to fit the tracker "
                f"({fitted.original_length} characters)"
            )

        task: RemoteTask | None = None
        created = False

        existing_id = result.remote_task_ids.get(dimension)
        if existing_id:
            updated = attempt(self.tracker.update_task, existing_id, dimension.task_name, fitted.text)
            if updated.is_ok():
                task = updated.unwrap()
            elif updated.err().kind is TrackerErrorKind.NOT_FOUND:
                self.logger.info(f"{label} task {existing_id} was deleted remotely; recreating")
                result.remote_task_ids.discard(dimension)
            else:
                result.errors.append(f"{label}: update of task {existing_id} failed: {updated.err()}")
                return

        # The new id must reach on_synced before an interrupt can surface
        with deferred_interrupt():
            if task is None:
                made = attempt(
                    self.tracker.create_task,
                    dimension.task_name,
                    fitted.text,
                    project_id,
                    section_id,
                    workspace_id,
                )
                if made.is_err():
                    result.errors.append(f"{label}: task creation failed: {made.err()}")
                    return
                task = made.unwrap()
                result.remote_task_ids.set(dimension, task.gid)
                created = True

            # Membership at creation time is not always honoured
            moved = attempt(self.tracker.add_task_to_section, section_id, task.gid)
            if moved.is_err():
                result.warnings.append(
                    f"{label}: could not move task {task.gid} to '{stage.section_name}': {moved.err()}"
                )

            stored_warning = self.fitter.verify_stored(fitted.text, task.notes, f"{label} task")
            if stored_warning:
                result.warnings.append(stored_warning)

            if created:
                result.created.append(dimension)
            else:
                result.updated.append(dimension)

            if self.on_synced:
                self.on_synced(dimension, task, created)
