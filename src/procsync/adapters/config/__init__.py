"""
Configuration adapters.
"""

from .environment import EnvironmentConfigProvider


__all__ = ["EnvironmentConfigProvider"]
