"""
Process stores - Local record storage implementations.
"""

from .memory import InMemoryProcessStore
from .sqlite import SQLiteProcessStore


__all__ = ["InMemoryProcessStore", "SQLiteProcessStore"]
