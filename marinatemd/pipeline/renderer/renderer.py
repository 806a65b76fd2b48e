"""
Schema renderer.

Walks a schema in sorted field order and turns each documented node into
one markdown line. The output is byte-identical for identical input, which
keeps regenerated documentation diff-friendly.
"""

from __future__ import annotations

import logging

from ..schema_ast.nodes import Node, Schema
from .template import AttributeContext, TemplateConfig

logger = logging.getLogger(__name__)


class SchemaRenderer:
    """Renders schemas to hierarchical markdown lists."""

    def __init__(self, template_config: TemplateConfig | None = None):
        self.template_config = template_config or TemplateConfig()

    def render(self, schema: Schema | None) -> str:
        """
        Render a schema to markdown.

        Args:
            schema: The merged schema to render

        Returns:
            Markdown text, one line per emitted attribute, newline-terminated

        Raises:
            ValueError: If schema is None
        """
        if schema is None:
            raise ValueError("schema cannot be None")

        lines = self._render_siblings(schema.nodes, 0)
        logger.debug("Rendered %d lines for %s", len(lines), schema.name)
        return "".join(f"{line}\n" for line in lines)

    def _render_siblings(self, nodes: dict[str, Node], depth: int) -> list[str]:
        separate = depth in self.template_config.separator_indents
        lines: list[str] = []
        for name in sorted(nodes):
            node_lines = self._render_node(name, nodes[name], depth)
            if not node_lines:
                continue
            if separate and lines:
                lines.append(self.template_config.format_separator(depth))
            lines.extend(node_lines)
        return lines

    def _render_node(self, name: str, node: Node, depth: int) -> list[str]:
        lines = []
        # Structural wrappers without their own text are skipped but still recursed into
        if node.description or node.is_leaf:
            context = AttributeContext(
                attribute=name,
                required=node.required,
                description=node.description if node.description_visible else "",
                type=node.display_type,
                default=node.default,
                has_default=node.has_default,
                example=node.example,
                has_example=node.has_example,
            )
            line = self.template_config.format_indent(depth) + self.template_config.render_attribute(context)
            lines.append(line.rstrip())

        lines.extend(self._render_siblings(node.children, depth + 1))
        return lines


def render_schema(schema: Schema, template_config: TemplateConfig | None = None) -> str:
    """Render a schema with the given (or default) template configuration."""
    return SchemaRenderer(template_config).render(schema)
