"""
Condenser Port - Abstract interface for the text-condensation service.

Implementations:
- AnthropicCondenser: Claude via the Anthropic Messages API

The result is advisory: it may exceed the target, be empty, or the call may
raise. Callers must not trust it without checking the length.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CondenserPort(ABC):
    """Shortens text while keeping its facts."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def condense(self, text: str, target_length: int, instructions: str) -> str:
        """
        Rewrite ``text`` to roughly ``target_length`` characters.

        Args:
            text: Source text.
            target_length: Desired maximum length in characters.
            instructions: What must be preserved and how to compress.

        Returns:
            The condensed text.

        Raises:
            CondensationError: If the service failed.
        """
        ...
