"""
Attribute line templates.

Each documented attribute becomes one markdown line produced by a Jinja2
template. Older configurations use single-brace placeholders such as
{attribute} and {description}; those are converted to Jinja2 expressions
before compiling.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import jinja2
import jinja2.meta

from ..errors import ConfigurationError

DEFAULT_INDENT_SIZE = 2

LEGACY_PLACEHOLDERS = ("attribute", "required", "description", "type", "default", "example")


class EscapeMode(str, Enum):
    """How attribute names are decorated in the output."""

    INLINE_CODE = "inline_code"
    BOLD = "bold"
    ITALIC = "italic"
    NONE = "none"


class IndentStyle(str, Enum):
    BULLETS = "bullets"
    SPACES = "spaces"


def format_value(value: Any) -> str:
    """
    Format a default or example value for display.

    Examples:
        "" -> '""'
        True -> "true"
        None -> "null"
        {} -> "{}"
        ["a", "b"] -> '["a","b"]'
    """
    if isinstance(value, str):
        return value if value else '""'
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list, tuple, set)) and not value:
        return "{}"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    if isinstance(value, set):
        return json.dumps(sorted(value, key=str), separators=(",", ":"), default=str)
    return str(value)


def convert_legacy_placeholders(template: str) -> str:
    """Convert {attribute}-style placeholders to Jinja2 expressions.

    Templates that already contain "{{" are returned unchanged.
    """
    if "{{" in template or "{" not in template:
        return template
    for name in LEGACY_PLACEHOLDERS:
        template = template.replace(f"{{{name}}}", f"{{{{ {name} }}}}")
    return template


@dataclass
class AttributeContext:
    """Values available to the attribute template for one node."""

    attribute: str
    required: bool = True
    description: str = ""
    type: str = ""
    default: Any = None
    has_default: bool = False
    example: Any = None
    has_example: bool = False


@dataclass
class TemplateConfig:
    """Configuration for rendering attribute lines."""

    # Line template; legacy {placeholder} syntax is accepted
    attribute_template: str = "{attribute} - ({required}) {description}"

    required_text: str = "Required"
    optional_text: str = "Optional"

    escape_mode: str = EscapeMode.INLINE_CODE.value

    # "bullets" renders "- " items nested two spaces per level;
    # "spaces" indents by indent_size spaces per level
    indent_style: str = IndentStyle.BULLETS.value
    indent_size: int = DEFAULT_INDENT_SIZE

    # Depths at which a "---" line separates sibling attributes
    separator_indents: list[int] = field(default_factory=list)

    def __post_init__(self):
        self._compiled: jinja2.Template | None = None
        self._compiled_source: str | None = None

    @staticmethod
    def from_dict(d: dict) -> TemplateConfig:
        """Create a template config from a dictionary, ignoring unknown keys."""
        config = TemplateConfig()
        for k, v in (d or {}).items():
            if hasattr(config, k) and not k.startswith("_"):
                setattr(config, k, v)
        if config.separator_indents is None:
            config.separator_indents = []
        return config

    def to_dict(self) -> dict:
        return {
            "attribute_template": self.attribute_template,
            "required_text": self.required_text,
            "optional_text": self.optional_text,
            "escape_mode": self.escape_mode,
            "indent_style": self.indent_style,
            "indent_size": self.indent_size,
            "separator_indents": list(self.separator_indents),
        }

    @property
    def jinja_source(self) -> str:
        return convert_legacy_placeholders(self.attribute_template)

    def _environment(self) -> jinja2.Environment:
        env = jinja2.Environment(autoescape=False, keep_trailing_newline=False)
        env.filters["escape"] = self.escape
        return env

    def compile(self) -> jinja2.Template:
        """
        Compile the attribute template, caching the result.

        Raises:
            ConfigurationError: If the template has a syntax error
        """
        source = self.jinja_source
        if self._compiled is None or self._compiled_source != source:
            try:
                self._compiled = self._environment().from_string(source)
            except jinja2.TemplateSyntaxError as e:
                raise ConfigurationError(f"Invalid attribute_template: {e}") from e
            self._compiled_source = source
        return self._compiled

    def validate(self) -> None:
        """
        Check the configuration.

        Raises:
            ConfigurationError: On an uncompilable template, a template without the
                attribute placeholder, an unknown escape mode or indent style, or a
                negative indent size
        """
        self.compile()

        env = self._environment()
        variables = jinja2.meta.find_undeclared_variables(env.parse(self.jinja_source))
        if "attribute" not in variables:
            raise ConfigurationError("attribute_template must contain {attribute} or {{ attribute }}")

        valid_modes = [mode.value for mode in EscapeMode]
        if self.escape_mode not in valid_modes:
            raise ConfigurationError(f"Invalid escape_mode: {self.escape_mode} (valid options: {', '.join(valid_modes)})")

        valid_styles = [style.value for style in IndentStyle]
        if self.indent_style not in valid_styles:
            raise ConfigurationError(f"Invalid indent_style: {self.indent_style} (valid options: {', '.join(valid_styles)})")

        if not isinstance(self.indent_size, int) or self.indent_size < 0:
            raise ConfigurationError("indent_size must be a non-negative integer")

    def escape(self, text: Any) -> str:
        """Apply the escape mode; unknown modes fall back to inline code."""
        text = "" if text is None else str(text)
        if self.escape_mode == EscapeMode.NONE:
            return text
        if self.escape_mode == EscapeMode.BOLD:
            return f"**{text}**"
        if self.escape_mode == EscapeMode.ITALIC:
            return f"*{text}*"
        return f"`{text}`"

    def format_indent(self, depth: int) -> str:
        """Return the line prefix for an attribute at the given depth."""
        if self.indent_style == IndentStyle.BULLETS:
            return "  " * depth + "- "
        return " " * (depth * self.indent_size)

    def format_separator(self, depth: int) -> str:
        """Return the separator line used between siblings at the given depth."""
        if self.indent_style == IndentStyle.BULLETS:
            return "  " * depth + "---"
        return " " * (depth * self.indent_size) + "---"

    def render_attribute(self, context: AttributeContext) -> str:
        """Render one attribute line (without indentation), trailing whitespace trimmed."""
        template = self.compile()
        rendered = template.render(
            attribute=self.escape(context.attribute),
            required=self.required_text if context.required else self.optional_text,
            is_required=context.required,
            description=context.description,
            type=context.type,
            has_type=bool(context.type),
            default=format_value(context.default) if context.has_default else "",
            has_default=context.has_default,
            example=format_value(context.example) if context.has_example else "",
            has_example=context.has_example,
        )
        return rendered.rstrip()
