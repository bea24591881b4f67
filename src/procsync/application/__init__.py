"""
Application Layer - Use cases and orchestration.

This layer contains:
- sync/: link resolution, content fitting, section provisioning,
  documentation tasks, improvement backfill and the orchestrator
"""

from .sync import (
    BatchSyncResult,
    ContentFitter,
    SyncOptions,
    SyncOrchestrator,
    SyncResult,
)


__all__ = [
    "BatchSyncResult",
    "ContentFitter",
    "SyncOptions",
    "SyncOrchestrator",
    "SyncResult",
]
