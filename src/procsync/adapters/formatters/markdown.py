"""
Markdown field rendering.

Process documentation is stored either as ``{"content": "..."}`` or as a
structured object of named fields. Both render to plain markdown text, which
is what the tracker receives.
"""

from __future__ import annotations

import re
from typing import Any


def field_label(key: str) -> str:
    """``success_measures`` -> ``Success Measures``."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), key.replace("_", " "))


def render_field(data: Any) -> str:
    """
    Render a stored documentation field as markdown.

    A string renders as itself. A dict with a string ``content`` renders as
    that content. Any other dict renders each non-empty key as a bold label,
    with list values as bullets.
    """
    if data is None:
        return ""
    if isinstance(data, str):
        return data.strip()
    if not isinstance(data, dict):
        return str(data).strip()

    content = data.get("content")
    if isinstance(content, str) and content.strip():
        return content.strip()

    parts: list[str] = []
    for key, value in data.items():
        if key == "content":
            continue
        label = field_label(key)
        if isinstance(value, list) and value:
            bullets = "\n".join(f"- {item}" for item in value)
            parts.append(f"**{label}:**\n{bullets}")
        elif isinstance(value, str) and value.strip():
            parts.append(f"**{label}:** {value.strip()}")
    return "\n\n".join(parts)


def charter_text(charter: Any, fallback: str = "") -> str:
    """Project description: charter content, else its purpose, else ``fallback``."""
    if isinstance(charter, dict):
        for key in ("content", "purpose"):
            value = charter.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    elif isinstance(charter, str) and charter.strip():
        return charter.strip()
    return fallback.strip()
