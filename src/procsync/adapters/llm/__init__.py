"""
LLM adapters - Text condensation providers.
"""

from .claude import AnthropicCondenser


__all__ = ["AnthropicCondenser"]
