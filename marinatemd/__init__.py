"""MarinateMD

Generates and maintains structured markdown documentation for complex
Terraform/OpenTofu variables. Variable types are parsed into YAML schemas
that keep hand-written descriptions across runs, then rendered into
README files and variable descriptions at MARINATED markers.
"""

__version__ = "0.4.0"

from .pipeline import (
    MarinateConfig,
    MarinateError,
    MarinatePipeline,
    Schema,
    TemplateConfig,
    YamlSchemaStore,
    build_schema,
    merge_schemas,
    render_schema,
)

__all__ = [
    "MarinatePipeline",
    "MarinateConfig",
    "MarinateError",
    "Schema",
    "TemplateConfig",
    "YamlSchemaStore",
    "build_schema",
    "merge_schemas",
    "render_schema",
]
