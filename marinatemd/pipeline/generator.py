"""
Pipeline orchestration.

Runs the phases for a whole module:
1. Export: scan variables, parse each type, merge with the stored schema, save
2. Inject: render stored schemas and replace the marked regions of documents
3. Split: cut a rendered document into per-variable files

Per-item failures are logged and recorded; sibling items keep going.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import MarinateConfig
from .errors import MalformedTypeError, MarinateError, StoreUnavailableError
from .injector import InjectResult, MarkdownInjector, TerraformInjector
from .merger import AtomicWriter, SchemaMerger
from .renderer import SchemaRenderer
from .schema_ast import Schema, build_schema
from .splitter import MarkdownSplitter
from .store import YamlSchemaStore
from .variables import VariableScanner, variable_files

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of exporting a module's variables to schema files.

    Attributes:
        created: IDs whose schema file did not exist before
        updated: IDs whose existing schema was merged and rewritten
        failures: ID -> error message
    """

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.created) + len(self.updated) + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


class MarinatePipeline:
    """Runs export, inject and split for one module."""

    def __init__(self, config: MarinateConfig | None = None):
        self.config = config or MarinateConfig()
        self.writer = AtomicWriter()
        self.scanner = VariableScanner()
        self.merger = SchemaMerger()
        self.renderer = SchemaRenderer(self.config.markdown_template)

    def store_for(self, module_path: Path) -> YamlSchemaStore:
        return YamlSchemaStore(self.config.docs_path(module_path), self.writer)

    def export(self, module_path: Path | str) -> ExportResult:
        """
        Parse every marked variable of a module and save its merged schema.

        Returns:
            Which schemas were created or updated, and which failed
        """
        module_path = Path(module_path)
        store = self.store_for(module_path)
        result = ExportResult()

        variables = [v for v in self.scanner.scan_module(module_path) if v.marinated]
        if not variables:
            logger.warning("No MARINATED variables found in %s", module_path)
            return result
        logger.info("Found %d MARINATED variable(s) in %s", len(variables), module_path)

        for variable in variables:
            schema_id = variable.marker_id
            try:
                fresh = build_schema(schema_id, variable.type)
                existing = store.load(schema_id)
                store.save(self.merger.merge(fresh, existing))
            except (MalformedTypeError, StoreUnavailableError) as e:
                logger.warning("Failed to export %s (variable %s): %s", schema_id, variable.name, e)
                result.failures[schema_id] = str(e)
                continue

            if existing is None:
                logger.info("Created schema for %s", schema_id)
                result.created.append(schema_id)
            else:
                logger.info("Updated schema for %s", schema_id)
                result.updated.append(schema_id)
        return result

    def render(self, schema: Schema) -> str:
        return self.renderer.render(schema)

    def _render_ids(self, store: YamlSchemaStore, marker_ids: list[str], result: InjectResult) -> dict[str, str]:
        """Render the stored schemas for the given IDs, recording missing ones as failures."""
        contents = {}
        for marker_id in marker_ids:
            try:
                schema = store.load(marker_id)
            except StoreUnavailableError as e:
                logger.warning("Cannot load schema for %s: %s", marker_id, e)
                result.failures[marker_id] = str(e)
                continue
            if schema is None:
                message = f"No schema file for {marker_id} at {store.path_for(marker_id)}"
                logger.warning(message)
                result.failures[marker_id] = message
                continue
            contents[marker_id] = self.render(schema)
        return contents

    def inject_markdown(self, schema_dir: Path | str, markdown_path: Path | str) -> InjectResult:
        """
        Render the schemas for every marker in a markdown file and inject them.

        The file is read once and written once.
        """
        markdown_path = Path(markdown_path)
        store = YamlSchemaStore.from_variables_dir(schema_dir)
        injector = MarkdownInjector()

        document = self._read(markdown_path)
        marker_ids = injector.find_markers(document)
        result = InjectResult(total=len(marker_ids))
        if not marker_ids:
            logger.warning("No MARINATED markers found in %s", markdown_path)
            return result

        contents = self._render_ids(store, marker_ids, result)
        document, injected = injector.inject_all(document, contents, str(markdown_path))
        result.injected.extend(injected.injected)
        result.failures.update(injected.failures)

        if result.injected:
            self.writer.write(markdown_path, document)
        return result

    def inject_terraform(self, schema_dir: Path | str, module_path: Path | str) -> InjectResult:
        """
        Render the schemas for every marked variable and inject them into the
        variable descriptions of the module's variables*.tf files.
        """
        store = YamlSchemaStore.from_variables_dir(schema_dir)
        injector = TerraformInjector()
        result = InjectResult()

        for path in variable_files(module_path):
            document = self._read(path)
            marker_ids = [v.marker_id for v in self.scanner.scan_text(document, path) if v.marinated]
            if not marker_ids:
                continue

            file_result = InjectResult(total=len(marker_ids))
            contents = self._render_ids(store, marker_ids, file_result)
            document, injected = injector.inject_all(document, contents, str(path))
            file_result.injected.extend(injected.injected)
            file_result.failures.update(injected.failures)

            if file_result.injected:
                self.writer.write(path, document)
            result.extend(file_result)

        if not result.total:
            logger.warning("No MARINATED variables found in %s", module_path)
        return result

    def split(
        self,
        input_path: Path | str,
        output_dir: Path | str,
        header_file: Path | str | None = None,
        footer_file: Path | str | None = None,
    ) -> list[Path]:
        """Split a document into <output_dir>/<id>.md files."""
        try:
            splitter = MarkdownSplitter.from_files(header_file, footer_file)
        except OSError as e:
            raise MarinateError(f"Failed to read header or footer file: {e}") from e
        return splitter.split(Path(input_path), Path(output_dir))

    def split_module(
        self,
        module_path: Path | str,
        input_path: Path | None = None,
        output_dir: Path | None = None,
        header_file: Path | None = None,
        footer_file: Path | None = None,
    ) -> list[Path]:
        """Split a module's document; paths not given come from the split configuration.

        input_path and output_dir default relative to the export path, header
        and footer files relative to the module root.
        """
        module_path = Path(module_path)
        docs_path = self.config.docs_path(module_path)
        split = self.config.split

        if input_path is None:
            input_path = docs_path / split.input_path if split.input_path else self.config.docs_file_path(module_path)
        if output_dir is None:
            output_dir = docs_path / split.output_dir
        if header_file is None and split.header_file:
            header_file = module_path / split.header_file
        if footer_file is None and split.footer_file:
            footer_file = module_path / split.footer_file
        return self.split(input_path, output_dir, header_file, footer_file)

    def run(self, module_path: Path | str) -> tuple[ExportResult, InjectResult | None]:
        """Export a module, then inject into its docs file when that file exists."""
        module_path = Path(module_path)
        export_result = self.export(module_path)

        docs_file = self.config.docs_file_path(module_path)
        if not docs_file.is_file():
            logger.warning("%s not found, skipping markdown injection", docs_file)
            return export_result, None

        schema_dir = self.store_for(module_path).variables_dir
        return export_result, self.inject_markdown(schema_dir, docs_file)

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise MarinateError(f"Failed to read {path}: {e}") from e
