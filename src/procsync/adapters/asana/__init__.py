"""
Asana Adapter - Tracker implementation for Asana.
"""

from .adapter import AsanaAdapter
from .client import AsanaClient


__all__ = ["AsanaAdapter", "AsanaClient"]
