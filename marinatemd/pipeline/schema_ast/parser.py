"""
Type expression parser that builds the node tree.

Phase 1 of the pipeline: turn a variable's type expression into nodes
without looking at any previously saved documentation.

The grammar is resolved by literal prefix matching in a fixed order:
optional(...), object({...}), list(...), set(...), map(...), and finally
anything else as a primitive token. Unknown constructs are primitives, so
documentation generation never blocks on a form it does not model.
"""

from __future__ import annotations

import logging
import re

from ..errors import MalformedTypeError
from .nodes import ROOT_NODE_KEY, Node, NodeKind, Schema, placeholder_description
from .tokenizer import matching_close, split_top_level, tokenize_object_body

logger = logging.getLogger(__name__)

_CONSTRUCTOR_PATTERNS = {name: re.compile(rf"{name}\s*\(") for name in ("optional", "object", "list", "set", "map")}

_COLLECTION_KINDS = {
    "list": NodeKind.LIST,
    "set": NodeKind.SET,
    "map": NodeKind.MAP,
}


def _has_constructor(expr: str, constructor: str) -> bool:
    return _CONSTRUCTOR_PATTERNS[constructor].match(expr) is not None


class TypeExpressionParser:
    """Parses type expressions into Node trees."""

    def __init__(self, variable_name: str = ""):
        """
        Args:
            variable_name: Enclosing variable, used for error context and the
                placeholder description of a collection-typed root
        """
        self.variable_name = variable_name

    def parse(self, type_expr: str) -> dict[str, Node]:
        """
        Parse a field-name-less type expression at the schema root.

        Args:
            type_expr: The variable's full type expression

        Returns:
            Top-level nodes: the fields of a root object, a single "_root"
            node for a root list/set/map, or nothing for a primitive

        Raises:
            MalformedTypeError: If a constructor's argument list is unusable
        """
        expr = type_expr.strip()
        if _has_constructor(expr, "optional"):
            expr = self._unwrap_optional(expr, self.variable_name)

        if _has_constructor(expr, "object"):
            return self._object_fields(expr, self.variable_name)

        for constructor in _COLLECTION_KINDS:
            if _has_constructor(expr, constructor):
                return {ROOT_NODE_KEY: self.parse_field(self.variable_name, type_expr)}

        logger.debug("Variable %s has primitive type %r, nothing to document", self.variable_name, expr)
        return {}

    def parse_object_body(self, content: str) -> dict[str, str]:
        """Split an object body into name -> raw type expression without recursing."""
        return tokenize_object_body(content)

    def parse_field(self, name: str, expr: str) -> Node:
        """
        Resolve one field's type expression into a node, recursing into children.

        Args:
            name: Field name (for the placeholder description and errors)
            expr: The field's type expression

        Returns:
            The field's node
        """
        expr = expr.strip()
        node = Node(description=placeholder_description(name))

        if _has_constructor(expr, "optional"):
            node.required = False
            expr = self._unwrap_optional(expr, name)

        if _has_constructor(expr, "object"):
            node.kind = NodeKind.OBJECT
            node.children = self._object_fields(expr, name)
            return node

        for constructor, kind in _COLLECTION_KINDS.items():
            if not _has_constructor(expr, constructor):
                continue
            inner = self._constructor_argument(expr, constructor, name).strip()
            node.kind = kind
            if kind is NodeKind.MAP:
                node.value_type = self.simplify(inner)
            else:
                node.element_type = self.simplify(inner)
            # Element structure is hoisted onto the collection node itself
            if _has_constructor(inner, "object"):
                node.children = self._object_fields(inner, name)
            return node

        node.kind = NodeKind.PRIMITIVE
        node.primitive_name = expr
        return node

    def simplify(self, expr: str) -> str:
        """
        Reduce an expression to its head constructor name or primitive token.

        Examples:
            "optional(object({a = string}))" -> "object"
            "list(string)" -> "list"
            "number" -> "number"
        """
        expr = expr.strip()
        if _has_constructor(expr, "optional"):
            expr = self._unwrap_optional(expr, "")
        for constructor in ("object", "list", "set", "map"):
            if _has_constructor(expr, constructor):
                return constructor
        return expr

    def _unwrap_optional(self, expr: str, field_name: str) -> str:
        """Return the type argument of optional(type[, default]); the default is discarded."""
        argument = self._constructor_argument(expr, "optional", field_name)
        inner = split_top_level(argument)[0].strip()
        if not inner:
            raise MalformedTypeError("optional() requires a type argument", field_name, self.variable_name)
        return inner

    def _constructor_argument(self, expr: str, constructor: str, field_name: str) -> str:
        """Return the text between a constructor's balanced parentheses."""
        open_index = expr.index("(")
        close_index = matching_close(expr, open_index)
        if close_index < 0:
            raise MalformedTypeError(f"unbalanced brackets in {constructor}(...)", field_name, self.variable_name)
        return expr[open_index + 1 : close_index]

    def _object_fields(self, expr: str, field_name: str) -> dict[str, Node]:
        """Parse object({ ... }) into child nodes."""
        argument = self._constructor_argument(expr, "object", field_name).strip()
        if not argument.startswith("{") or matching_close(argument, 0) != len(argument) - 1:
            raise MalformedTypeError("object() argument must be a single { ... } block", field_name, self.variable_name)

        children = {}
        for child_name, child_expr in self.parse_object_body(argument[1:-1]).items():
            children[child_name] = self.parse_field(child_name, child_expr)
        return children


def parse_type_expression(type_expr: str, variable_name: str = "") -> dict[str, Node]:
    """Parse a variable's type expression into its top-level nodes."""
    return TypeExpressionParser(variable_name).parse(type_expr)


def build_schema(name: str, type_expr: str) -> Schema:
    """Build a fresh schema for a variable from its type expression.

    Args:
        name: The variable's marker ID (the schema's stable name)
        type_expr: The variable's type expression
    """
    return Schema(name=name, nodes=parse_type_expression(type_expr, name))
