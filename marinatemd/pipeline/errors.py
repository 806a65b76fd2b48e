"""
Error types raised by the documentation pipeline.

Each phase raises its own error kind; the orchestration layer decides
whether a failure aborts the run or is recorded per item.
"""

from __future__ import annotations


class MarinateError(Exception):
    """Base class for all pipeline errors."""


class MalformedTypeError(MarinateError):
    """Raised when a type constructor's argument list cannot be parsed.

    Attributes:
        field_name: The field whose type expression is malformed
        variable_name: The enclosing variable declaration
    """

    def __init__(self, message: str, field_name: str = "", variable_name: str = ""):
        self.field_name = field_name
        self.variable_name = variable_name
        context = []
        if variable_name:
            context.append(f"variable '{variable_name}'")
        if field_name:
            context.append(f"field '{field_name}'")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class MarkerNotFoundError(MarinateError):
    """Raised when the start marker for an ID is absent from a document.

    An empty marker_id means the document has no markers at all.
    """

    def __init__(self, marker_id: str, where: str = ""):
        self.marker_id = marker_id
        suffix = f" in {where}" if where else ""
        if not marker_id:
            super().__init__(f"No MARINATED markers found{suffix}")
            return
        super().__init__(f"MARINATED marker '{marker_id}' not found{suffix}")


class StoreUnavailableError(MarinateError):
    """Raised when the persisted schema store cannot be read or written."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class ConfigurationError(MarinateError):
    """Raised for invalid configuration values or unreadable config files."""
