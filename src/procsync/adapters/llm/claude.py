"""
Anthropic Condenser - CondenserPort backed by Claude.

Used only when outbound text is over the tracker's length budget.
"""

from __future__ import annotations

import logging
from typing import Any

import anthropic

from procsync.core.exceptions import CondensationError
from procsync.core.ports.condenser import CondenserPort
from procsync.core.ports.config_provider import CondenserConfig


SYSTEM_PROMPT = (
    "You condense process documentation so it fits inside a project tracker. "
    "Return only the condensed document, with no preamble."
)


class AnthropicCondenser(CondenserPort):
    """Condenses text with the Anthropic Messages API."""

    def __init__(
        self,
        config: CondenserConfig,
        *,
        client: Any | None = None,
    ) -> None:
        """
        Initialize the condenser.

        Args:
            config: Condenser configuration (api_key, model, max_tokens, timeout).
            client: Optional prebuilt ``anthropic.Anthropic`` client for testing.
        """
        self.config = config
        self._client = client or anthropic.Anthropic(
            api_key=config.api_key,
            timeout=config.timeout,
        )
        self.logger = logging.getLogger("AnthropicCondenser")

    @property
    def name(self) -> str:
        return "Anthropic"

    def build_prompt(self, text: str, target_length: int, instructions: str) -> str:
        return (
            f"{instructions}\n\n"
            f"The result must be at most {target_length} characters long.\n\n"
            f"<document>\n{text}\n</document>"
        )

    def condense(self, text: str, target_length: int, instructions: str) -> str:
        self.logger.info(f"Condensing {len(text)} chars to ~{target_length} with {self.config.model}")
        try:
            response = self._client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                system=SYSTEM_PROMPT,
                messages=[
                    {"role": "user", "content": self.build_prompt(text, target_length, instructions)}
                ],
            )
        except anthropic.APIError as exc:
            raise CondensationError("Anthropic condensation request failed", cause=exc) from exc

        parts = [
            block.text for block in response.content if getattr(block, "type", None) == "text"
        ]
        condensed = "".join(parts).strip()
        if not condensed:
            raise CondensationError("Anthropic returned an empty condensation")
        return condensed
