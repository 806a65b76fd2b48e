"""
Marker injectors for markdown and Terraform documents.
"""

from __future__ import annotations

from .base import InjectResult, MarkerInjector
from .markdown_injector import MarkdownInjector
from .terraform_injector import TerraformInjector, escape_template_sequences, heredoc_delimiter

__all__ = [
    "InjectResult",
    "MarkdownInjector",
    "MarkerInjector",
    "TerraformInjector",
    "escape_template_sequences",
    "heredoc_delimiter",
]
