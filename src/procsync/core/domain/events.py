"""
Domain Events - Things that happened during a sync.

Events are immutable records of something that occurred.
They let the CLI and audit observers follow a sync without coupling to it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        """Get the event type name."""
        return self.__class__.__name__


@dataclass(frozen=True)
class SyncStarted(DomainEvent):
    """Event: A sync operation started."""

    process_id: int = 0
    force_new: bool = False


@dataclass(frozen=True)
class ProjectUnlinked(DomainEvent):
    """Event: The linked remote project was gone and the stale link was cleared."""

    process_id: int = 0
    stale_project_id: str = ""


@dataclass(frozen=True)
class ProjectCreated(DomainEvent):
    """Event: A new remote project was created and linked."""

    process_id: int = 0
    project_id: str = ""
    workspace_id: str = ""


@dataclass(frozen=True)
class DocumentationTaskSynced(DomainEvent):
    """Event: A documentation dimension's task was created or updated."""

    process_id: int = 0
    dimension: str = ""
    task_id: str = ""
    created: bool = False


@dataclass(frozen=True)
class ImprovementBackfilled(DomainEvent):
    """Event: A journal entry got its remote task."""

    process_id: int = 0
    entry_id: int = 0
    task_url: str = ""


@dataclass(frozen=True)
class SyncCompleted(DomainEvent):
    """Event: A sync operation completed."""

    process_id: int = 0
    action: str = ""
    docs_created: int = 0
    docs_updated: int = 0
    backfill_count: int = 0
    warnings: tuple[str, ...] = ()


class EventBus:
    """
    Simple event bus for publishing and subscribing to domain events.

    Handlers subscribed to ``DomainEvent`` receive every event.
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[DomainEvent], None]]] = {}
        self._history: list[DomainEvent] = []

    def subscribe(self, event_type: type, handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        self._handlers.setdefault(event_type, []).append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        self._history.append(event)

        for handler in self._handlers.get(type(event), []):
            handler(event)

        if type(event) is not DomainEvent:
            for handler in self._handlers.get(DomainEvent, []):
                handler(event)

    def get_history(self) -> list[DomainEvent]:
        """Get all published events."""
        return self._history.copy()

    def clear_history(self) -> None:
        """Clear event history."""
        self._history.clear()
