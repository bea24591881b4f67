"""
Sync Module - Reconciliation of a process with its remote tracker project.
"""

from .backfill import BackfillResult, ImprovementBackfiller
from .content import ContentFitter, FittedContent, truncate
from .documentation import (
    DocumentationSyncResult,
    DocumentationTaskSynchronizer,
    render_task_body,
)
from .link import LinkResolution, LinkResolver
from .orchestrator import BatchSyncResult, SyncOptions, SyncOrchestrator, SyncResult
from .outcome import attempt, deferred_interrupt
from .sections import (
    ProvisionResult,
    SectionMap,
    SectionProvisioner,
    normalize_section_name,
)


__all__ = [
    "BackfillResult",
    "BatchSyncResult",
    "ContentFitter",
    "DocumentationSyncResult",
    "DocumentationTaskSynchronizer",
    "FittedContent",
    "ImprovementBackfiller",
    "LinkResolution",
    "LinkResolver",
    "ProvisionResult",
    "SectionMap",
    "SectionProvisioner",
    "SyncOptions",
    "SyncOrchestrator",
    "SyncResult",
    "attempt",
    "deferred_interrupt",
    "normalize_section_name",
    "render_task_body",
    "truncate",
]
