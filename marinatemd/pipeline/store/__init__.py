"""
Persisted schema store.
"""

from __future__ import annotations

from .yaml_store import YamlSchemaStore, schema_from_dict, schema_to_dict

__all__ = [
    "YamlSchemaStore",
    "schema_from_dict",
    "schema_to_dict",
]
