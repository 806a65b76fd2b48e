"""
Merger module.

Reconciles freshly parsed schemas with persisted ones, and writes the
results atomically.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .base import zip_keyed
from .schema_merger import SchemaMerger, merge_schemas

__all__ = [
    "AtomicWriter",
    "SchemaMerger",
    "merge_schemas",
    "zip_keyed",
]
