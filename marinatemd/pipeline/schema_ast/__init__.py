"""
Schema AST module.

Contains the tree model and the type expression parser.
"""

from __future__ import annotations

from .nodes import (
    FORMAT_VERSION,
    PLACEHOLDER_PREFIX,
    ROOT_NODE_KEY,
    Node,
    NodeKind,
    Schema,
    ShowDescription,
    is_placeholder,
    placeholder_description,
)
from .parser import TypeExpressionParser, build_schema, parse_type_expression
from .tokenizer import tokenize_object_body

__all__ = [
    "FORMAT_VERSION",
    "PLACEHOLDER_PREFIX",
    "ROOT_NODE_KEY",
    "Node",
    "NodeKind",
    "Schema",
    "ShowDescription",
    "is_placeholder",
    "placeholder_description",
    "TypeExpressionParser",
    "build_schema",
    "parse_type_expression",
    "tokenize_object_body",
]
