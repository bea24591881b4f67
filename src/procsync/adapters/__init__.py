"""
Adapters - Concrete implementations of ports.

- asana: TrackerPort for Asana
- store: ProcessStorePort (in-memory, SQLite)
- llm: CondenserPort (Anthropic)
- config: ConfigProviderPort (environment / .env)
- formatters: stored-field to markdown rendering
"""

from .asana import AsanaAdapter, AsanaClient
from .config import EnvironmentConfigProvider
from .llm import AnthropicCondenser
from .store import InMemoryProcessStore, SQLiteProcessStore


__all__ = [
    "AnthropicCondenser",
    "AsanaAdapter",
    "AsanaClient",
    "EnvironmentConfigProvider",
    "InMemoryProcessStore",
    "SQLiteProcessStore",
]
