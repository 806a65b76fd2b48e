"""
Schema merger implementation.

Combines a freshly parsed schema with a previously persisted one: structure
always comes from the fresh schema, human-authored text comes from the
persisted one.
"""

from __future__ import annotations

import copy
import logging

from ..schema_ast.nodes import Node, Schema, ShowDescription, is_placeholder
from .base import zip_keyed

logger = logging.getLogger(__name__)


class SchemaMerger:
    """Merges schemas so re-running the pipeline never loses edited text."""

    def merge(self, fresh: Schema, existing: Schema | None) -> Schema:
        """
        Merge a fresh schema with the persisted one.

        Args:
            fresh: Schema just built from the variable's type expression
            existing: Schema loaded from the store, or None for a new variable

        Returns:
            A new schema with fresh's structure and existing's annotations
        """
        if existing is None:
            return Schema(name=fresh.name, format_version=fresh.format_version, nodes=zip_keyed(fresh.nodes, {}, self.merge_node))

        removed = sorted(set(existing.nodes) - set(fresh.nodes))
        if removed:
            logger.info("Dropping fields no longer in %s: %s", fresh.name, ", ".join(removed))

        return Schema(
            name=fresh.name,
            format_version=fresh.format_version,
            nodes=zip_keyed(fresh.nodes, existing.nodes, self.merge_node),
        )

    def merge_node(self, fresh: Node, existing: Node) -> Node:
        """Merge one node present on both sides, recursing into children."""
        description = existing.description
        if not description or is_placeholder(description):
            description = fresh.description

        show_description = existing.show_description
        if show_description is ShowDescription.DEFAULT:
            show_description = fresh.show_description

        merged = Node(
            kind=fresh.kind,
            primitive_name=fresh.primitive_name,
            element_type=fresh.element_type,
            value_type=fresh.value_type,
            required=fresh.required,
            description=description,
            show_description=show_description,
            children=zip_keyed(fresh.children, existing.children, self.merge_node),
        )

        source = existing if existing.has_default else fresh
        if source.has_default:
            merged.set_default(copy.deepcopy(source.default))
        source = existing if existing.has_example else fresh
        if source.has_example:
            merged.set_example(copy.deepcopy(source.example))

        return merged


def merge_schemas(fresh: Schema, existing: Schema | None) -> Schema:
    """Merge a freshly parsed schema with a persisted one."""
    return SchemaMerger().merge(fresh, existing)
