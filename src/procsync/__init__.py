"""
procsync - Keep documented processes in sync with Asana projects.

Architecture:
- core/: Domain entities, ports and exceptions
- adapters/: Asana, local stores, condensation and configuration
- application/: The sync engine
- cli/: Command line interface
"""

__version__ = "1.0.0"
