"""
Configuration for the documentation pipeline.

Loaded from a .marinated.yml file; every key is optional. A few top-level
values can be overridden through MARINATED_* environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigurationError
from .renderer.template import TemplateConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".marinated.yml"
ENV_PREFIX = "MARINATED"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class SplitConfig:
    """Options for splitting a document into per-variable files."""

    # Input document relative to export_path; empty means docs_file
    input_path: str = ""

    # Output directory relative to export_path
    output_dir: str = "variables"

    header_file: str = ""
    footer_file: str = ""

    @staticmethod
    def from_dict(d: dict) -> SplitConfig:
        config = SplitConfig()
        for k, v in (d or {}).items():
            if hasattr(config, k):
                setattr(config, k, "" if v is None else str(v))
        return config

    def to_dict(self) -> dict:
        return {
            "input_path": self.input_path,
            "output_dir": self.output_dir,
            "header_file": self.header_file,
            "footer_file": self.footer_file,
        }


@dataclass
class MarinateConfig:
    """Configuration options for the pipeline."""

    # Directory (relative to the module root) receiving schemas and docs
    export_path: str = "docs"

    # Documentation file (relative to the module root) to inject into
    docs_file: str = "README.md"

    verbose: bool = False

    markdown_template: TemplateConfig = field(default_factory=TemplateConfig)
    split: SplitConfig = field(default_factory=SplitConfig)

    # File the configuration was read from, if any
    config_file: Path | None = field(default=None, compare=False)

    @staticmethod
    def from_dict(d: dict) -> MarinateConfig:
        """Create a config from a dictionary, ignoring unknown keys."""
        config = MarinateConfig()
        for k, v in (d or {}).items():
            if k == "markdown_template":
                config.markdown_template = TemplateConfig.from_dict(v or {})
            elif k == "split":
                config.split = SplitConfig.from_dict(v or {})
            elif k == "verbose":
                config.verbose = bool(v)
            elif k in ("export_path", "docs_file"):
                setattr(config, k, str(v))
            else:
                logger.debug("Ignoring unknown configuration key %s", k)
        return config

    def to_dict(self) -> dict:
        return {
            "export_path": self.export_path,
            "docs_file": self.docs_file,
            "verbose": self.verbose,
            "markdown_template": self.markdown_template.to_dict(),
            "split": self.split.to_dict(),
        }

    def validate(self) -> None:
        """
        Raises:
            ConfigurationError: If any value is invalid
        """
        if not self.export_path:
            raise ConfigurationError("export_path must not be empty")
        if not self.docs_file:
            raise ConfigurationError("docs_file must not be empty")
        self.markdown_template.validate()

    def docs_path(self, module_path: Path) -> Path:
        return Path(module_path) / self.export_path

    def docs_file_path(self, module_path: Path) -> Path:
        docs_file = Path(self.docs_file)
        return docs_file if docs_file.is_absolute() else Path(module_path) / docs_file

    def apply_environment(self, environ: dict[str, str] | None = None) -> None:
        """Apply MARINATED_EXPORT_PATH, MARINATED_DOCS_FILE and MARINATED_VERBOSE."""
        environ = os.environ if environ is None else environ
        if f"{ENV_PREFIX}_EXPORT_PATH" in environ:
            self.export_path = environ[f"{ENV_PREFIX}_EXPORT_PATH"]
        if f"{ENV_PREFIX}_DOCS_FILE" in environ:
            self.docs_file = environ[f"{ENV_PREFIX}_DOCS_FILE"]
        if f"{ENV_PREFIX}_VERBOSE" in environ:
            value = environ[f"{ENV_PREFIX}_VERBOSE"].strip().lower()
            if value in _TRUE_VALUES:
                self.verbose = True
            elif value in _FALSE_VALUES:
                self.verbose = False
            else:
                raise ConfigurationError(f"Invalid {ENV_PREFIX}_VERBOSE value: {value!r}")


def config_search_paths(module_path: Path | None = None) -> list[Path]:
    """Return candidate config files, most specific first."""
    directories = []
    if module_path is not None:
        directories += [Path(module_path), Path(module_path) / ".config"]
    directories += [Path.cwd(), Path.cwd() / ".config", Path.home() / ".marinated.d"]
    return [directory / CONFIG_FILE_NAME for directory in directories]


def find_config_file(module_path: Path | None = None) -> Path | None:
    for candidate in config_search_paths(module_path):
        if candidate.is_file():
            return candidate
    return None


def load_config(
    config_file: Path | str | None = None,
    module_path: Path | str | None = None,
    environ: dict[str, str] | None = None,
) -> MarinateConfig:
    """
    Load, override and validate the configuration.

    Args:
        config_file: Explicit configuration file; searched for when None
        module_path: Module root, searched first
        environ: Environment mapping, os.environ by default

    Raises:
        ConfigurationError: If the file cannot be read or holds invalid values
    """
    path = Path(config_file) if config_file else find_config_file(Path(module_path) if module_path else None)

    data = {}
    if path is not None:
        logger.debug("Loading configuration from %s", path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read configuration file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    else:
        logger.debug("No configuration file found, using defaults")

    config = MarinateConfig.from_dict(data)
    config.config_file = path
    config.apply_environment(environ)
    config.validate()
    return config
