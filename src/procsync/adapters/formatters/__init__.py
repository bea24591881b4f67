"""
Formatters - Convert stored documentation into tracker-ready text.
"""

from .markdown import charter_text, field_label, render_field


__all__ = ["charter_text", "field_label", "render_field"]
