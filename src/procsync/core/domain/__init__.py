"""
Domain layer - process records, remote objects, enums and events.
"""

from .entities import (
    CHARTER_SECTION,
    LOCAL_ONLY_SECTIONS,
    ImprovementJournalEntry,
    ProcessRecord,
    RemoteProject,
    RemoteSection,
    RemoteTask,
    RemoteTaskIds,
)
from .enums import Dimension, Stage, SyncAction, SyncPhase
from .events import (
    DocumentationTaskSynced,
    DomainEvent,
    EventBus,
    ImprovementBackfilled,
    ProjectCreated,
    ProjectUnlinked,
    SyncCompleted,
    SyncStarted,
)


__all__ = [
    "CHARTER_SECTION",
    "LOCAL_ONLY_SECTIONS",
    "Dimension",
    "DocumentationTaskSynced",
    "DomainEvent",
    "EventBus",
    "ImprovementBackfilled",
    "ImprovementJournalEntry",
    "ProcessRecord",
    "ProjectCreated",
    "ProjectUnlinked",
    "RemoteProject",
    "RemoteSection",
    "RemoteTask",
    "RemoteTaskIds",
    "Stage",
    "SyncAction",
    "SyncCompleted",
    "SyncPhase",
    "SyncStarted",
]
