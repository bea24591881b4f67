"""
Exceptions - Centralized exception hierarchy for procsync.

Hierarchy:

    ProcsyncError
    ├── TrackerError                (kind: TrackerErrorKind)
    │   ├── AuthenticationError
    │   ├── AccessDeniedError
    │   ├── ResourceNotFoundError
    │   ├── RateLimitError
    │   └── TransientError
    ├── ConfigError
    ├── StoreError
    │   └── ProcessNotFoundError
    ├── SyncError
    │   └── WorkspaceNotResolvedError
    └── CondensationError

Tracker errors carry a ``kind`` so callers can branch on the failure class
without ``isinstance`` chains.
"""

from __future__ import annotations

from enum import Enum


class TrackerErrorKind(Enum):
    """Failure classes surfaced by the tracker client."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    RATE_LIMITED = "rate_limited"
    AUTHENTICATION = "authentication"
    OTHER = "other"


class ProcsyncError(Exception):
    """Base class for all procsync errors."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


# =============================================================================
# Tracker Errors
# =============================================================================


class TrackerError(ProcsyncError):
    """A call to the external tracker failed."""

    kind: TrackerErrorKind = TrackerErrorKind.OTHER

    def __init__(
        self,
        message: str,
        *,
        resource_id: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.resource_id = resource_id


class AuthenticationError(TrackerError):
    """The access token was rejected."""

    kind = TrackerErrorKind.AUTHENTICATION


class AccessDeniedError(TrackerError):
    """The authenticated user may not perform this operation."""

    kind = TrackerErrorKind.PERMISSION_DENIED


class ResourceNotFoundError(TrackerError):
    """The remote object does not exist (or was deleted)."""

    kind = TrackerErrorKind.NOT_FOUND


class RateLimitError(TrackerError):
    """The tracker is throttling requests."""

    kind = TrackerErrorKind.RATE_LIMITED

    def __init__(
        self,
        message: str,
        *,
        retry_after: float | None = None,
        resource_id: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, resource_id=resource_id, cause=cause)
        self.retry_after = retry_after


class TransientError(TrackerError):
    """Server-side or transport failure that may succeed later."""


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(ProcsyncError):
    """Invalid or incomplete configuration."""


# =============================================================================
# Local Store Errors
# =============================================================================


class StoreError(ProcsyncError):
    """The local process store failed."""


class ProcessNotFoundError(StoreError):
    """No process with the given id exists locally."""

    def __init__(self, process_id: int | str) -> None:
        super().__init__(f"Process not found: {process_id}")
        self.process_id = process_id


# =============================================================================
# Sync Errors
# =============================================================================


class SyncError(ProcsyncError):
    """Fatal sync failure; the orchestrator stops and surfaces it."""


class WorkspaceNotResolvedError(SyncError):
    """No workspace could be determined for creating a remote project."""

    def __init__(self) -> None:
        super().__init__(
            "No workspace found: pass a target workspace or set ASANA_WORKSPACE_ID"
        )


class CondensationError(ProcsyncError):
    """The condensation service failed or returned nothing usable."""


__all__ = [
    "AccessDeniedError",
    "AuthenticationError",
    "CondensationError",
    "ConfigError",
    "ProcessNotFoundError",
    "ProcsyncError",
    "RateLimitError",
    "ResourceNotFoundError",
    "StoreError",
    "SyncError",
    "TrackerError",
    "TrackerErrorKind",
    "TransientError",
    "WorkspaceNotResolvedError",
]
