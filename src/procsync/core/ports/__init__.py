"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .condenser import CondenserPort
from .config_provider import (
    AppConfig,
    CondenserConfig,
    ConfigProviderPort,
    SyncConfig,
    TrackerConfig,
)
from .process_store import ProcessStorePort
from .tracker import TrackerPort


__all__ = [
    "AppConfig",
    "CondenserConfig",
    "CondenserPort",
    "ConfigProviderPort",
    "ProcessStorePort",
    "SyncConfig",
    "TrackerConfig",
    "TrackerPort",
]
