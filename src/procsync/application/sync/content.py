"""
Content fitting - Make outbound text fit the tracker's length limit.

Policy, each step a fallback of the previous one:

1. Text within the limit is sent unchanged.
2. Otherwise the condensation service is asked for ~90% of the limit.
3. A condensation that fits is used.
4. Anything else is truncated deterministically with a marker.

Step 4 cannot fail, so ``fit`` always returns text within the limit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from procsync.core.ports.condenser import CondenserPort
from procsync.core.ports.config_provider import DEFAULT_NOTES_LIMIT


CONDENSE_RATIO = 0.9
SAFETY_MARGIN = 200
TRUNCATION_MARKER = "\n\n[Truncated - see source for full text]"

CONDENSE_INSTRUCTIONS = (
    "Condense the document below. Preserve every distinct fact, name, date and "
    "number. Compress prose into short bullet lists, drop filler and repetition, "
    "and keep the existing markdown headings."
)


@dataclass(frozen=True)
class FittedContent:
    """Text ready to send, and how it was produced."""

    text: str
    condensed: bool = False
    truncated: bool = False
    original_length: int = 0


def truncate(text: str, limit: int) -> str:
    """
    Cut ``text`` to at most ``limit`` characters and append the marker.

    Keeps a safety margin below the limit, shrinking it for very small limits
    so the result is never longer than ``limit``.
    """
    if len(text) <= limit:
        return text
    budget = limit - len(TRUNCATION_MARKER)
    if budget <= 0:
        return text[:limit]
    keep = budget - min(SAFETY_MARGIN, budget // 2)
    return text[:keep].rstrip() + TRUNCATION_MARKER


class ContentFitter:
    """Fits text into the tracker's length budget."""

    def __init__(
        self,
        condenser: CondenserPort | None = None,
        limit: int = DEFAULT_NOTES_LIMIT,
    ) -> None:
        """
        Args:
            condenser: Optional condensation service. Without one, long text
                is truncated directly.
            limit: Default maximum length in characters.
        """
        if limit < 1:
            raise ValueError(f"Length limit must be positive, got {limit}")
        self.condenser = condenser
        self.limit = limit
        self.logger = logging.getLogger("ContentFitter")

    def fit(self, text: str | None, limit: int | None = None) -> FittedContent:
        """Return ``text`` shortened as needed to fit ``limit`` (default: the fitter's)."""
        limit = self.limit if limit is None else limit
        if limit < 1:
            raise ValueError(f"Length limit must be positive, got {limit}")

        text = text or ""
        if len(text) <= limit:
            return FittedContent(text=text, original_length=len(text))

        condensed = self._condense(text, limit)
        if condensed is not None:
            return FittedContent(text=condensed, condensed=True, original_length=len(text))

        self.logger.warning(f"Truncating text from {len(text)} to {limit} characters")
        return FittedContent(
            text=truncate(text, limit),
            truncated=True,
            original_length=len(text),
        )

    def _condense(self, text: str, limit: int) -> str | None:
        if self.condenser is None:
            return None

        target = max(1, int(limit * CONDENSE_RATIO))
        try:
            condensed = self.condenser.condense(text, target, CONDENSE_INSTRUCTIONS)
        except Exception as e:
            # The service is advisory; truncation takes over on any failure
            self.logger.warning(f"Condensation via {self.condenser.name} failed: {e}")
            return None

        if not condensed or not condensed.strip():
            self.logger.warning("Condensation returned no text")
            return None
        if len(condensed) > limit:
            self.logger.warning(
                f"Condensed text still too long ({len(condensed)} > {limit} characters)"
            )
            return None

        self.logger.info(f"Condensed text from {len(text)} to {len(condensed)} characters")
        return condensed

    @staticmethod
    def verify_stored(sent: str, stored: str | None, what: str) -> str | None:
        """
        Compare what was sent with what the tracker kept.

        Returns:
            A warning message if the tracker silently shortened the text, else None.
        """
        stored_length = len(stored or "")
        if stored_length < len(sent.rstrip()):
            return (
                f"{what}: tracker stored {stored_length} of {len(sent)} characters; "
                "the remaining text was cut by the tracker"
            )
        return None
