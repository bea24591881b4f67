"""
Domain enums - Documentation dimensions, pipeline stages, sync states.
"""

from __future__ import annotations

from enum import Enum


class Stage(Enum):
    """A pipeline section in the remote project that tasks are filed under."""

    PLAN = "plan"
    EXECUTE = "execute"
    EVALUATE = "evaluate"
    IMPROVE = "improve"

    @property
    def section_name(self) -> str:
        """Canonical remote section name."""
        return self.value.capitalize()

    @classmethod
    def ordered(cls) -> tuple[Stage, ...]:
        return (cls.PLAN, cls.EXECUTE, cls.EVALUATE, cls.IMPROVE)

    @classmethod
    def final(cls) -> Stage:
        """The stage improvement-journal tasks are backfilled into."""
        return cls.IMPROVE


class Dimension(Enum):
    """One of the four documentation categories tracked per process."""

    APPROACH = "approach"
    DEPLOYMENT = "deployment"
    LEARNING = "learning"
    INTEGRATION = "integration"

    @classmethod
    def ordered(cls) -> tuple[Dimension, ...]:
        return (cls.APPROACH, cls.DEPLOYMENT, cls.LEARNING, cls.INTEGRATION)

    @classmethod
    def from_string(cls, value: str) -> Dimension | None:
        """Parse a dimension name; returns None for anything else (e.g. "charter")."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def task_name(self) -> str:
        """Name of the remote task that mirrors this dimension."""
        return {
            Dimension.APPROACH: "[ADLI: Approach] How We Do It",
            Dimension.DEPLOYMENT: "[ADLI: Deployment] How We Roll It Out",
            Dimension.LEARNING: "[ADLI: Learning] How We Improve",
            Dimension.INTEGRATION: "[ADLI: Integration] How It Connects",
        }[self]

    @property
    def stage(self) -> Stage:
        """Section the dimension's task lives in."""
        return {
            Dimension.APPROACH: Stage.PLAN,
            Dimension.DEPLOYMENT: Stage.EXECUTE,
            Dimension.LEARNING: Stage.EVALUATE,
            Dimension.INTEGRATION: Stage.IMPROVE,
        }[self]


class SyncAction(Enum):
    """What the orchestrator did to the remote project."""

    CREATED = "created"
    UPDATED = "updated"


class SyncPhase(Enum):
    """States of a single sync pass."""

    UNLINKED = "unlinked"
    LINKING = "linking"
    PROVISIONING = "provisioning"
    SYNCING_DOCS = "syncing_docs"
    BACKFILLING = "backfilling"
    DONE = "done"
    FATAL = "fatal"
