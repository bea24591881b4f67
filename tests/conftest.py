"""
Shared pytest fixtures for the procsync test suite.

Fixture Categories:
- Tracker: a stateful in-memory FakeTracker with failure injection
- Store: an InMemoryProcessStore seeded with a sample process
- Engine: ContentFitter, SyncConfig and a wired SyncOrchestrator
- HTTP: FakeResponse for mocking requests.Session
"""

from __future__ import annotations

import itertools
import json
from collections.abc import Callable
from dataclasses import replace
from typing import Any

import pytest

from procsync.adapters.store import InMemoryProcessStore
from procsync.application.sync import ContentFitter, SyncOrchestrator
from procsync.core.domain.entities import (
    ImprovementJournalEntry,
    ProcessRecord,
    RemoteProject,
    RemoteSection,
    RemoteTask,
)
from procsync.core.domain.enums import Dimension
from procsync.core.domain.events import EventBus
from procsync.core.exceptions import ResourceNotFoundError
from procsync.core.ports.config_provider import SyncConfig
from procsync.core.ports.tracker import TrackerPort


WORKSPACE_ID = "ws-1"
APP_URL = "https://processes.example.com"


# =============================================================================
# Fake Tracker
# =============================================================================


class FakeTracker(TrackerPort):
    """
    In-memory tracker that behaves like the real one for the engine's purposes.

    Failures are injected per method with ``fail_on``; every call is recorded
    in ``calls`` as ``(method, args)``.
    """

    URL = "https://tracker.test/0"

    def __init__(self) -> None:
        self.projects: dict[str, RemoteProject] = {}
        self.sections: dict[str, list[RemoteSection]] = {}
        self.tasks: dict[str, RemoteTask] = {}
        self.task_projects: dict[str, str] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.stored_limit: int | None = None  # silently cut notes to this length
        self._failures: dict[str, Callable[..., Exception | None]] = {}
        self._ids = itertools.count(1000)

    # -- test helpers ---------------------------------------------------------

    def fail_on(
        self,
        method: str,
        error: Exception,
        when: Callable[..., bool] | None = None,
    ) -> None:
        """Raise ``error`` from ``method`` whenever ``when(*args)`` is true."""
        self._failures[method] = lambda *args: error if when is None or when(*args) else None

    def clear_failures(self) -> None:
        self._failures.clear()

    def delete_project(self, project_id: str) -> None:
        """Simulate someone deleting the project by hand."""
        self.projects.pop(project_id)
        self.sections.pop(project_id, None)
        for task_id in [t for t, p in self.task_projects.items() if p == project_id]:
            self.tasks.pop(task_id)
            self.task_projects.pop(task_id)

    def tasks_in(self, project_id: str) -> list[RemoteTask]:
        return [self.tasks[t] for t, p in self.task_projects.items() if p == project_id]

    def section_names(self, project_id: str) -> list[str]:
        return [s.name for s in self.sections.get(project_id, [])]

    def call_count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def _enter(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        check = self._failures.get(method)
        if check is not None:
            error = check(*args)
            if error is not None:
                raise error

    def _next_id(self) -> str:
        return str(next(self._ids))

    def _store(self, notes: str) -> str:
        return notes[: self.stored_limit] if self.stored_limit is not None else notes

    def _project(self, project_id: str) -> RemoteProject:
        if project_id not in self.projects:
            raise ResourceNotFoundError(f"Unknown object: {project_id}", resource_id=project_id)
        return self.projects[project_id]

    def _task(self, task_id: str) -> RemoteTask:
        if task_id not in self.tasks:
            raise ResourceNotFoundError(f"Unknown object: {task_id}", resource_id=task_id)
        return self.tasks[task_id]

    # -- TrackerPort ----------------------------------------------------------

    @property
    def name(self) -> str:
        return "Asana"

    def get_project(self, project_id: str) -> RemoteProject:
        self._enter("get_project", project_id)
        return replace(self._project(project_id))

    def update_project(self, project_id: str, notes: str) -> RemoteProject:
        self._enter("update_project", project_id, notes)
        project = self._project(project_id)
        project.notes = self._store(notes)
        return replace(project)

    def create_project(self, name: str, notes: str, workspace_id: str) -> RemoteProject:
        self._enter("create_project", name, notes, workspace_id)
        gid = self._next_id()
        project = RemoteProject(
            gid=gid,
            name=name,
            notes=self._store(notes),
            workspace_id=workspace_id,
            permalink_url=self.project_url(gid),
        )
        self.projects[gid] = project
        self.sections[gid] = []
        return replace(project)

    def project_url(self, project_id: str) -> str:
        return f"{self.URL}/{project_id}"

    def list_sections(self, project_id: str) -> list[RemoteSection]:
        self._enter("list_sections", project_id)
        self._project(project_id)
        return [replace(s) for s in self.sections[project_id]]

    def create_section(self, project_id: str, name: str) -> RemoteSection:
        self._enter("create_section", project_id, name)
        self._project(project_id)
        section = RemoteSection(gid=self._next_id(), name=name, project_id=project_id)
        self.sections[project_id].append(section)
        return replace(section)

    def create_task(
        self,
        name: str,
        notes: str,
        project_id: str,
        section_id: str | None = None,
        workspace_id: str | None = None,
    ) -> RemoteTask:
        self._enter("create_task", name, notes, project_id, section_id, workspace_id)
        self._project(project_id)
        gid = self._next_id()
        task = RemoteTask(
            gid=gid,
            name=name,
            notes=self._store(notes),
            permalink_url=f"{self.project_url(project_id)}/{gid}",
            section_ids=[section_id] if section_id else [],
        )
        self.tasks[gid] = task
        self.task_projects[gid] = project_id
        return replace(task)

    def update_task(self, task_id: str, name: str, notes: str) -> RemoteTask:
        self._enter("update_task", task_id, name, notes)
        task = self._task(task_id)
        task.name = name
        task.notes = self._store(notes)
        return replace(task)

    def add_task_to_section(self, section_id: str, task_id: str) -> None:
        self._enter("add_task_to_section", section_id, task_id)
        self._task(task_id).section_ids = [section_id]


# =============================================================================
# HTTP
# =============================================================================


class FakeResponse:
    """Simple fake response object for mocking requests.Session."""

    def __init__(
        self,
        status_code: int,
        data: Any = None,
        headers: dict[str, str] | None = None,
    ):
        self.status_code = status_code
        self._data = data
        self.headers = headers or {}
        self.text = "" if data is None else json.dumps(data)
        self.content = self.text.encode()

    def json(self) -> Any:
        if self._data is None:
            raise ValueError("No JSON body")
        return self._data


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def tracker() -> FakeTracker:
    return FakeTracker()


@pytest.fixture
def fake_response() -> type[FakeResponse]:
    """The FakeResponse class, for building canned requests.Session replies."""
    return FakeResponse


@pytest.fixture
def sample_process() -> ProcessRecord:
    """A process with content in three of the four dimensions."""
    return ProcessRecord(
        id=1,
        name="Customer Onboarding",
        description_source="Bring new customers from signed contract to first value.",
        documentation={
            Dimension.APPROACH: "Kickoff call within 48 hours of signature.",
            Dimension.DEPLOYMENT: "Owned by the onboarding team; tracked weekly.",
            Dimension.LEARNING: "Monthly review of time-to-first-value.",
        },
    )


@pytest.fixture
def store(sample_process: ProcessRecord) -> InMemoryProcessStore:
    store = InMemoryProcessStore()
    store.add_process(sample_process)
    return store


@pytest.fixture
def journal_entries(store: InMemoryProcessStore) -> list[ImprovementJournalEntry]:
    entries = [
        ImprovementJournalEntry(
            id=10,
            process_id=1,
            section_affected="deployment",
            title="Added weekly check-in",
            description="Weekly check-in with each new customer.",
        ),
        ImprovementJournalEntry(
            id=11,
            process_id=1,
            section_affected="charter",
            title="Clarified scope",
        ),
        ImprovementJournalEntry(
            id=12,
            process_id=1,
            section_affected="visual_map",
            title="Redrew the flowchart",
        ),
    ]
    for entry in entries:
        store.add_journal_entry(entry)
    return entries


@pytest.fixture
def sync_config() -> SyncConfig:
    return SyncConfig(app_url=APP_URL, batch_delay=0.0)


@pytest.fixture
def fitter() -> ContentFitter:
    return ContentFitter()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def orchestrator(
    tracker: FakeTracker,
    store: InMemoryProcessStore,
    fitter: ContentFitter,
    sync_config: SyncConfig,
    event_bus: EventBus,
) -> SyncOrchestrator:
    return SyncOrchestrator(
        tracker,
        store,
        fitter=fitter,
        config=sync_config,
        default_workspace_id=WORKSPACE_ID,
        event_bus=event_bus,
    )
