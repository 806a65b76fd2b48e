"""
Tree model for documented variable types.

A Schema is the root of one documented variable; its nodes describe the
attributes of the variable's type. Nodes are a single dataclass with a kind
discriminator so an object node can carry its own description while also
holding children.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

FORMAT_VERSION = "1"

# Key used for the single node of a variable whose root type is a collection
ROOT_NODE_KEY = "_root"

# Reserved prefix marking descriptions that were generated, not written by a person
PLACEHOLDER_PREFIX = "# TODO:"


class NodeKind(str, Enum):
    """Structural kind of a node."""

    PRIMITIVE = "primitive"
    LIST = "list"
    SET = "set"
    MAP = "map"
    OBJECT = "object"


class ShowDescription(str, Enum):
    """Whether a node's description is rendered.

    DEFAULT means the user never said; it renders like SHOWN.
    """

    DEFAULT = "default"
    SHOWN = "shown"
    HIDDEN = "hidden"


def placeholder_description(name: str) -> str:
    """Build the generated description for a field that has none yet."""
    return f"{PLACEHOLDER_PREFIX} Add description for {name}"


def is_placeholder(description: str) -> bool:
    """Check whether a description is a generated placeholder."""
    return description.strip().lower().startswith(PLACEHOLDER_PREFIX.lower())


@dataclass
class Node:
    """One attribute in the type tree."""

    kind: NodeKind = NodeKind.PRIMITIVE

    # Literal type token for primitives ("string", "number", "any", ...)
    primitive_name: str = ""

    # Simplified element type for list/set, value type for map
    element_type: str = ""
    value_type: str = ""

    required: bool = True
    description: str = ""
    show_description: ShowDescription = ShowDescription.DEFAULT

    # Example/default values; the has_* flag distinguishes "never set" from a
    # present value such as None or an empty collection
    default: Any = None
    has_default: bool = False
    example: Any = None
    has_example: bool = False

    children: dict[str, Node] = field(default_factory=dict)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def description_visible(self) -> bool:
        return self.show_description is not ShowDescription.HIDDEN

    @property
    def display_type(self) -> str:
        """Short type label, e.g. "string", "object", "list(object)", "map(number)"."""
        if self.kind is NodeKind.PRIMITIVE:
            return self.primitive_name
        if self.kind in (NodeKind.LIST, NodeKind.SET) and self.element_type:
            return f"{self.kind.value}({self.element_type})"
        if self.kind is NodeKind.MAP and self.value_type:
            return f"map({self.value_type})"
        return self.kind.value

    def set_default(self, value: Any) -> None:
        self.default = value
        self.has_default = True

    def set_example(self, value: Any) -> None:
        self.example = value
        self.has_example = True


@dataclass
class Schema:
    """Root of one documented variable.

    Attributes:
        name: The variable's marker ID, unique within a module
        format_version: Version tag of the persisted format
        nodes: Top-level field name -> node
    """

    name: str = ""
    format_version: str = FORMAT_VERSION
    nodes: dict[str, Node] = field(default_factory=dict)
