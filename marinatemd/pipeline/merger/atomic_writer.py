"""
Atomic writes for schema and documentation files.

A run that dies halfway must leave either the old file or the new one on
disk, never a truncated mix of both.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable
from pathlib import Path

import yaml

from ..errors import StoreUnavailableError


def check_yaml_mapping(content: str) -> None:
    """Raise StoreUnavailableError unless content loads as a YAML mapping."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise StoreUnavailableError(f"Generated YAML is not valid: {e}") from e
    if not isinstance(data, dict):
        raise StoreUnavailableError("Generated YAML is not a mapping")


class AtomicWriter:
    """Writes a file through a sibling temporary file and a rename.

    YAML content is checked before anything touches the disk, so a
    document that would not load back is never written at all.
    """

    def __init__(self, validate_yaml: Callable[[str], None] | None = None):
        self._validate_yaml = validate_yaml or check_yaml_mapping

    def write(
        self,
        path: Path,
        content: str,
        file_format: str = "text",
        validate: bool = True,
    ) -> None:
        """Replace path with content.

        Args:
            path: Target file, its directory is created when missing
            content: Full new file content
            file_format: "yaml" enables validation, anything else is written as-is
            validate: Set to False to skip YAML validation

        Raises:
            StoreUnavailableError: YAML content does not load back as a mapping
            OSError: The temporary file cannot be written or renamed
        """
        if validate and file_format == "yaml":
            self._validate_yaml(content)

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
