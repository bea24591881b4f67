"""
Domain Entities - Local records the engine reads, and remote objects it sees.

ProcessRecord and ImprovementJournalEntry are owned by the surrounding
application; the engine only writes back remote identifiers. Remote objects
are owned by the tracker and never persisted locally beyond their ids.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .enums import Dimension


# Journal entry kinds that exist only locally and never become remote tasks
LOCAL_ONLY_SECTIONS = frozenset({"visual_map"})

# Label used for journal entries that target the charter rather than a dimension
CHARTER_SECTION = "charter"


class RemoteTaskIds:
    """
    Remote task id per documentation dimension.

    One optional slot per dimension. An empty slot means the dimension has
    never been created remotely; it does not mean the task was deleted.
    """

    __slots__ = ("_slots",)

    def __init__(self, ids: dict[Dimension, str] | None = None) -> None:
        self._slots: dict[Dimension, str | None] = dict.fromkeys(Dimension.ordered())
        for dimension, gid in (ids or {}).items():
            self.set(dimension, gid)

    def get(self, dimension: Dimension) -> str | None:
        return self._slots[dimension]

    def set(self, dimension: Dimension, gid: str) -> None:
        if not gid:
            raise ValueError(f"Empty remote id for {dimension.value}")
        self._slots[dimension] = str(gid)

    def discard(self, dimension: Dimension) -> None:
        self._slots[dimension] = None

    def clear(self) -> None:
        for dimension in self._slots:
            self._slots[dimension] = None

    def items(self) -> Iterator[tuple[Dimension, str]]:
        """Yield (dimension, gid) for populated slots, in dimension order."""
        for dimension in Dimension.ordered():
            gid = self._slots[dimension]
            if gid is not None:
                yield dimension, gid

    def copy(self) -> RemoteTaskIds:
        return RemoteTaskIds(dict(self.items()))

    def to_dict(self) -> dict[str, str]:
        return {dimension.value: gid for dimension, gid in self.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> RemoteTaskIds:
        """Build from a stored mapping, ignoring unknown keys and empty ids."""
        ids: dict[Dimension, str] = {}
        for key, gid in (data or {}).items():
            dimension = Dimension.from_string(str(key))
            if dimension is not None and gid:
                ids[dimension] = str(gid)
        return cls(ids)

    def __len__(self) -> int:
        return sum(1 for _ in self.items())

    def __contains__(self, dimension: object) -> bool:
        return isinstance(dimension, Dimension) and self._slots[dimension] is not None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RemoteTaskIds) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"RemoteTaskIds({self.to_dict()!r})"


@dataclass
class ProcessRecord:
    """
    A documented process, as stored by the surrounding application.

    Only the ``remote_*`` fields and ``workspace_id`` are written by the engine.
    """

    id: int
    name: str
    description_source: str = ""
    documentation: dict[Dimension, str] = field(default_factory=dict)

    # Sync fields
    remote_project_id: str | None = None
    remote_project_url: str | None = None
    remote_task_ids: RemoteTaskIds = field(default_factory=RemoteTaskIds)
    workspace_id: str | None = None

    @property
    def is_linked(self) -> bool:
        return bool(self.remote_project_id)

    def documentation_for(self, dimension: Dimension) -> str:
        return (self.documentation.get(dimension) or "").strip()

    def unlink(self) -> None:
        """Forget the remote project and every task id that belonged to it."""
        self.remote_project_id = None
        self.remote_project_url = None
        self.remote_task_ids.clear()


@dataclass
class ImprovementJournalEntry:
    """A recorded improvement to one section of a process."""

    id: int
    process_id: int
    section_affected: str
    title: str
    description: str = ""
    remote_task_url: str | None = None

    @property
    def is_backfilled(self) -> bool:
        return bool(self.remote_task_url)

    @property
    def is_local_only(self) -> bool:
        return self.section_affected in LOCAL_ONLY_SECTIONS

    @property
    def section_label(self) -> str:
        dimension = Dimension.from_string(self.section_affected)
        if dimension is not None:
            return dimension.label
        if self.section_affected == CHARTER_SECTION:
            return "Charter"
        return self.section_affected


@dataclass
class RemoteProject:
    """A project in the tracker."""

    gid: str
    name: str = ""
    notes: str = ""
    workspace_id: str | None = None
    permalink_url: str | None = None


@dataclass
class RemoteSection:
    """A section (column) inside a remote project."""

    gid: str
    name: str
    project_id: str | None = None


@dataclass
class RemoteTask:
    """A task inside a remote project."""

    gid: str
    name: str = ""
    notes: str = ""
    permalink_url: str | None = None
    section_ids: list[str] = field(default_factory=list)
