"""
Link resolution - Validate or repair a process's link to its remote project.

A remote project deleted by hand must never block later syncs: the stale
link is cleared and the process is treated as never synced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from procsync.core.domain.entities import ProcessRecord
from procsync.core.exceptions import ResourceNotFoundError, WorkspaceNotResolvedError
from procsync.core.ports.process_store import ProcessStorePort
from procsync.core.ports.tracker import TrackerPort


@dataclass(frozen=True)
class LinkResolution:
    """Where the sync should write."""

    linked: bool
    project_id: str | None
    workspace_id: str | None
    unlinked_stale: str | None = None  # id of a deleted project whose link was cleared


class LinkResolver:
    """Decides whether a process has a live remote project."""

    def __init__(
        self,
        tracker: TrackerPort,
        store: ProcessStorePort,
        default_workspace_id: str | None = None,
    ) -> None:
        self.tracker = tracker
        self.store = store
        self.default_workspace_id = default_workspace_id
        self.logger = logging.getLogger("LinkResolver")

    def resolve(
        self,
        process: ProcessRecord,
        force_new: bool = False,
        target_workspace_id: str | None = None,
    ) -> LinkResolution:
        """
        Resolve the link for ``process``, clearing it if the project is gone.

        Args:
            process: The process; its link fields are cleared in place when stale.
            force_new: Ignore any existing link and behave as unlinked.
            target_workspace_id: Workspace for a new project, if one is created.

        Raises:
            TrackerError: Probe failed for any reason other than not-found.
            WorkspaceNotResolvedError: Unlinked and no workspace is known.
        """
        stale: str | None = None

        if process.remote_project_id and not force_new:
            project_id = process.remote_project_id
            try:
                project = self.tracker.get_project(project_id)
            except ResourceNotFoundError:
                self.logger.warning(
                    f"Remote project {project_id} for process {process.id} no longer exists; "
                    "clearing the link"
                )
                process.unlink()
                self.store.save_sync_fields(process)
                stale = project_id
            else:
                workspace_id = project.workspace_id or process.workspace_id
                return LinkResolution(linked=True, project_id=project.gid, workspace_id=workspace_id)

        workspace_id = target_workspace_id or process.workspace_id or self.default_workspace_id
        if not workspace_id:
            raise WorkspaceNotResolvedError()

        return LinkResolution(
            linked=False,
            project_id=None,
            workspace_id=workspace_id,
            unlinked_stale=stale,
        )
