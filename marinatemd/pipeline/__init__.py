"""
Pipeline - structured documentation for Terraform variables.

1. Phase 1 (Parser): Parse a variable's type expression into a node tree
2. Phase 2 (Merger): Merge with the stored schema, keeping written descriptions
3. Phase 3 (Store): Persist the merged schema as YAML
4. Phase 4 (Renderer): Render the schema to markdown through a template
5. Phase 5 (Injector): Replace marked regions in markdown and Terraform files
"""

from __future__ import annotations

from .config import MarinateConfig, SplitConfig, load_config
from .errors import ConfigurationError, MalformedTypeError, MarinateError, MarkerNotFoundError, StoreUnavailableError
from .generator import ExportResult, MarinatePipeline
from .injector import InjectResult, MarkdownInjector, TerraformInjector
from .merger import AtomicWriter, SchemaMerger, merge_schemas
from .renderer import SchemaRenderer, TemplateConfig, render_schema
from .schema_ast import Node, NodeKind, Schema, ShowDescription, build_schema, parse_type_expression
from .splitter import MarkdownSplitter
from .store import YamlSchemaStore
from .variables import Variable, VariableScanner, scan_module

__all__ = [
    "MarinatePipeline",
    "MarinateConfig",
    "SplitConfig",
    "load_config",
    "ExportResult",
    "InjectResult",
    "MarinateError",
    "MalformedTypeError",
    "MarkerNotFoundError",
    "StoreUnavailableError",
    "ConfigurationError",
    "AtomicWriter",
    "SchemaMerger",
    "merge_schemas",
    "SchemaRenderer",
    "TemplateConfig",
    "render_schema",
    "MarkdownInjector",
    "TerraformInjector",
    "MarkdownSplitter",
    "YamlSchemaStore",
    "Node",
    "NodeKind",
    "Schema",
    "ShowDescription",
    "build_schema",
    "parse_type_expression",
    "Variable",
    "VariableScanner",
    "scan_module",
]
