"""
Tracker Port - Abstract interface for the external project tracker.

Implementations:
- AsanaAdapter: Asana REST API

Every method raises a ``TrackerError`` subclass on failure; callers branch on
``error.kind``. Implementations never retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from procsync.core.domain.entities import RemoteProject, RemoteSection, RemoteTask


class TrackerPort(ABC):
    """
    Abstract interface for project trackers.

    Covers the minimal object set the sync engine needs: projects, sections
    within a project, and tasks within a section.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the tracker name."""
        ...

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_project(self, project_id: str) -> RemoteProject:
        """Fetch a project; raises ResourceNotFoundError if it was deleted."""
        ...

    @abstractmethod
    def update_project(self, project_id: str, notes: str) -> RemoteProject:
        """Replace the project description and return the stored project."""
        ...

    @abstractmethod
    def create_project(self, name: str, notes: str, workspace_id: str) -> RemoteProject:
        """Create a project in a workspace."""
        ...

    @abstractmethod
    def project_url(self, project_id: str) -> str:
        """Human-facing link to a project."""
        ...

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_sections(self, project_id: str) -> list[RemoteSection]:
        """List every section of a project."""
        ...

    @abstractmethod
    def create_section(self, project_id: str, name: str) -> RemoteSection:
        """Create a section at the end of a project."""
        ...

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    @abstractmethod
    def create_task(
        self,
        name: str,
        notes: str,
        project_id: str,
        section_id: str | None = None,
        workspace_id: str | None = None,
    ) -> RemoteTask:
        """Create a task in a project, optionally placed in a section."""
        ...

    @abstractmethod
    def update_task(self, task_id: str, name: str, notes: str) -> RemoteTask:
        """Rename a task and replace its description."""
        ...

    @abstractmethod
    def add_task_to_section(self, section_id: str, task_id: str) -> None:
        """Move a task into a section."""
        ...
