"""
Section provisioning - Make sure the remote project has its stage sections.

Sections are matched by case-insensitive name. The final stage also matches
the names earlier conventions used for it ("Act", "Improvements", ...), so
older projects are not given a duplicate section.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from procsync.core.domain.enums import Stage
from procsync.core.exceptions import TrackerErrorKind
from procsync.core.ports.tracker import TrackerPort

from .outcome import attempt


# Historical names of the final stage, matched after lowercasing
IMPROVE_SECTION_ALIASES = ("improve", "act", "improvement", "improvements", "act (improve)")

STAGE_ALIASES: dict[Stage, tuple[str, ...]] = {
    Stage.IMPROVE: IMPROVE_SECTION_ALIASES,
}


def normalize_section_name(name: str) -> str:
    """Lowercase, collapse whitespace, and fold known synonyms onto the stage key."""
    normalized = " ".join(name.lower().split())
    for stage, aliases in STAGE_ALIASES.items():
        if normalized in aliases:
            return stage.value
    return normalized


@dataclass
class SectionMap:
    """Stage -> remote section id, for the stages that exist remotely."""

    ids: dict[Stage, str] = field(default_factory=dict)

    def get(self, stage: Stage) -> str | None:
        return self.ids.get(stage)

    @property
    def final_stage_id(self) -> str | None:
        return self.ids.get(Stage.final())

    def __len__(self) -> int:
        return len(self.ids)


@dataclass
class ProvisionResult:
    """Sections found or created, and what went wrong along the way."""

    sections: SectionMap = field(default_factory=SectionMap)
    created: list[Stage] = field(default_factory=list)
    failures: dict[Stage, str] = field(default_factory=dict)  # stage -> why it is missing
    errors: list[str] = field(default_factory=list)  # failures not tied to one stage

    @property
    def warnings(self) -> list[str]:
        return self.errors + list(self.failures.values())


class SectionProvisioner:
    """Ensures the canonical stage sections exist in a remote project."""

    def __init__(self, tracker: TrackerPort) -> None:
        self.tracker = tracker
        self.logger = logging.getLogger("SectionProvisioner")

    def provision(
        self,
        project_id: str,
        required: Iterable[Stage] = Stage.ordered(),
    ) -> ProvisionResult:
        """
        Index existing sections and create the missing required ones.

        A section that cannot be created (typically for lack of permission)
        is reported as a warning; steps that need it skip their work.
        """
        result = ProvisionResult()

        listed = attempt(self.tracker.list_sections, project_id)
        if listed.is_err():
            result.errors.append(f"Could not list sections of project {project_id}: {listed.err()}")
            return result

        by_name: dict[str, str] = {}
        for section in listed.unwrap():
            # First match wins when a project has duplicate names
            by_name.setdefault(normalize_section_name(section.name), section.gid)

        for stage in required:
            gid = by_name.get(stage.value)
            if gid:
                result.sections.ids[stage] = gid
                continue

            created = attempt(self.tracker.create_section, project_id, stage.section_name)
            if created.is_ok():
                section = created.unwrap()
                result.sections.ids[stage] = section.gid
                result.created.append(stage)
                self.logger.info(f"Created section '{stage.section_name}' ({section.gid})")
                continue

            error = created.err()
            if error.kind is TrackerErrorKind.PERMISSION_DENIED:
                message = f"No permission to create section '{stage.section_name}'"
            else:
                message = f"Could not create section '{stage.section_name}': {error}"
            self.logger.warning(message)
            result.failures[stage] = message

        return result
