"""
Core layer - domain model, ports, exceptions and result types.

Nothing in here performs I/O.
"""

from .exceptions import ProcsyncError, SyncError, TrackerError, TrackerErrorKind
from .result import Err, Ok, Result


__all__ = [
    "Err",
    "Ok",
    "ProcsyncError",
    "Result",
    "SyncError",
    "TrackerError",
    "TrackerErrorKind",
]
