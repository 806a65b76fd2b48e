"""
YAML persisted store for schemas.

Each schema is saved as <docs_path>/variables/<id>.yaml. A node's metadata
lives under "_marinate" and its children under "_attributes", so field
names are never mistaken for structural keys; a field may be called
"description" or even "_marinate". Files written by older versions, where
children sit next to "_marinate", are still read.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ..errors import StoreUnavailableError
from ..merger.atomic_writer import AtomicWriter
from ..schema_ast.nodes import FORMAT_VERSION, Node, NodeKind, Schema, ShowDescription

logger = logging.getLogger(__name__)

META_KEY = "_marinate"
CHILDREN_KEY = "_attributes"

_STRUCTURED_KINDS = {kind.value: kind for kind in NodeKind if kind is not NodeKind.PRIMITIVE}


def node_to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to its persisted mapping."""
    meta: dict[str, Any] = {"type": node.primitive_name if node.kind is NodeKind.PRIMITIVE else node.kind.value}
    if node.kind is NodeKind.PRIMITIVE and node.primitive_name in _STRUCTURED_KINDS:
        # A bare "list" or "map" token would otherwise load back as that kind
        meta["kind"] = NodeKind.PRIMITIVE.value
    if node.element_type:
        meta["element_type"] = node.element_type
    if node.value_type:
        meta["value_type"] = node.value_type
    meta["required"] = node.required
    meta["description"] = node.description
    if node.show_description is not ShowDescription.DEFAULT:
        meta["show_description"] = node.show_description is ShowDescription.SHOWN
    if node.has_default:
        meta["default"] = node.default
    if node.has_example:
        meta["example"] = node.example

    data: dict[str, Any] = {META_KEY: meta}
    if node.children:
        data[CHILDREN_KEY] = {name: node_to_dict(node.children[name]) for name in sorted(node.children)}
    return data


def node_from_dict(data: Any, path: str) -> Node:
    """Build a node from its persisted mapping.

    Args:
        data: The mapping loaded from YAML
        path: Dotted location, for error messages

    Raises:
        StoreUnavailableError: If the mapping has the wrong shape
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise StoreUnavailableError(f"Expected a mapping at {path}, got {type(data).__name__}")

    meta = data.get(META_KEY) or {}
    if not isinstance(meta, dict):
        raise StoreUnavailableError(f"Expected a mapping for {META_KEY} at {path}")

    node = Node()
    type_name = str(meta.get("type", "") or "")
    if type_name in _STRUCTURED_KINDS and meta.get("kind") != NodeKind.PRIMITIVE.value:
        node.kind = _STRUCTURED_KINDS[type_name]
    else:
        node.primitive_name = type_name
    node.element_type = str(meta.get("element_type", "") or "")
    node.value_type = str(meta.get("value_type", "") or "")
    # Older files omit required when it is false
    node.required = bool(meta.get("required", False))
    node.description = str(meta.get("description", "") or "")

    show = meta.get("show_description")
    if show is True:
        node.show_description = ShowDescription.SHOWN
    elif show is False:
        node.show_description = ShowDescription.HIDDEN

    if "default" in meta:
        node.set_default(meta["default"])
    if "example" in meta:
        node.set_example(meta["example"])

    if CHILDREN_KEY in data:
        children = data[CHILDREN_KEY] or {}
        if not isinstance(children, dict):
            raise StoreUnavailableError(f"Expected a mapping for {CHILDREN_KEY} at {path}")
    else:
        children = {key: value for key, value in data.items() if key != META_KEY}

    node.children = {str(name): node_from_dict(child, f"{path}.{name}") for name, child in children.items()}
    if node.children and node.kind is NodeKind.PRIMITIVE and not node.primitive_name:
        node.kind = NodeKind.OBJECT
    return node


def schema_to_dict(schema: Schema) -> dict[str, Any]:
    """Convert a schema to its persisted mapping, with nodes sorted by name."""
    return {
        "variable": schema.name,
        "version": schema.format_version,
        "schema": {name: node_to_dict(schema.nodes[name]) for name in sorted(schema.nodes)},
    }


def schema_from_dict(data: Any, source: str = "") -> Schema:
    """Build a schema from its persisted mapping.

    Raises:
        StoreUnavailableError: If the mapping has the wrong shape
    """
    if not isinstance(data, dict):
        raise StoreUnavailableError(f"Schema file {source} does not contain a mapping", source)

    nodes = data.get("schema") or {}
    if not isinstance(nodes, dict):
        raise StoreUnavailableError(f"'schema' in {source} must be a mapping", source)

    return Schema(
        name=str(data.get("variable", "") or ""),
        format_version=str(data.get("version", FORMAT_VERSION) or FORMAT_VERSION),
        nodes={str(name): node_from_dict(node, str(name)) for name, node in nodes.items()},
    )


class YamlSchemaStore:
    """Loads and saves schemas as YAML files keyed by schema name."""

    SUBDIRECTORY = "variables"

    def __init__(self, docs_path: Path | str, writer: AtomicWriter | None = None, subdirectory: str = SUBDIRECTORY):
        """
        Args:
            docs_path: Directory that holds (or will hold) the schema subdirectory
            writer: Writer used for saving; defaults to an AtomicWriter
            subdirectory: Subdirectory of docs_path holding the files; "" uses docs_path itself
        """
        self.docs_path = Path(docs_path)
        self.writer = writer or AtomicWriter()
        self.subdirectory = subdirectory

    @classmethod
    def from_variables_dir(cls, variables_dir: Path | str) -> YamlSchemaStore:
        """Open a store directly on a directory of <id>.yaml files."""
        return cls(variables_dir, subdirectory="")

    @property
    def variables_dir(self) -> Path:
        return self.docs_path / self.subdirectory if self.subdirectory else self.docs_path

    def schema_ids(self) -> list[str]:
        """Return the IDs of all stored schemas, sorted."""
        if not self.variables_dir.is_dir():
            return []
        return sorted(path.stem for path in self.variables_dir.glob("*.yaml"))

    def path_for(self, schema_id: str) -> Path:
        return self.variables_dir / f"{schema_id}.yaml"

    def exists(self, schema_id: str) -> bool:
        return self.path_for(schema_id).is_file()

    def load(self, schema_id: str) -> Schema | None:
        """
        Load a schema by ID.

        Returns:
            The schema, or None when no file exists for the ID yet

        Raises:
            StoreUnavailableError: If the file cannot be read or parsed
        """
        path = self.path_for(schema_id)
        if not path.exists():
            logger.debug("No schema file for %s at %s", schema_id, path)
            return None

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreUnavailableError(f"Failed to read schema file {path}: {e}", str(path)) from e

        schema = self.loads(text, str(path))
        if not schema.name:
            schema.name = schema_id
        return schema

    def save(self, schema: Schema) -> Path:
        """
        Save a schema to <variables_dir>/<schema.name>.yaml.

        Returns:
            The written path

        Raises:
            StoreUnavailableError: If the file cannot be written
        """
        if not schema.name:
            raise StoreUnavailableError("Cannot save a schema without a name")

        path = self.path_for(schema.name)
        try:
            self.writer.write(path, self.dumps(schema), "yaml")
        except OSError as e:
            raise StoreUnavailableError(f"Failed to write schema file {path}: {e}", str(path)) from e
        logger.debug("Wrote schema %s to %s", schema.name, path)
        return path

    def dumps(self, schema: Schema) -> str:
        return yaml.safe_dump(
            schema_to_dict(schema),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
            width=120,
        )

    def loads(self, text: str, source: str = "") -> Schema:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise StoreUnavailableError(f"Failed to parse schema file {source}: {e}", source) from e
        return schema_from_dict(data, source)
