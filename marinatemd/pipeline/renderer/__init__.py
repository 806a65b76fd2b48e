"""
Markdown rendering of schemas.
"""

from __future__ import annotations

from .renderer import SchemaRenderer, render_schema
from .template import AttributeContext, EscapeMode, IndentStyle, TemplateConfig, convert_legacy_placeholders, format_value

__all__ = [
    "AttributeContext",
    "EscapeMode",
    "IndentStyle",
    "SchemaRenderer",
    "TemplateConfig",
    "convert_legacy_placeholders",
    "format_value",
    "render_schema",
]
