"""
Integration tests running the whole pipeline on a sample module.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
import yaml

from marinatemd.pipeline import MarinateConfig, MarinatePipeline, YamlSchemaStore
from marinatemd.pipeline.variables import scan_module

TEST_MODULE = Path(__file__).parent / "test_data" / "module"


@pytest.fixture
def module(tmp_path):
    target = tmp_path / "module"
    shutil.copytree(TEST_MODULE, target)
    return target


@pytest.fixture
def pipeline():
    return MarinatePipeline(MarinateConfig())


def set_description(module: Path, schema_id: str, path: list[str], text: str) -> None:
    """Edit a stored schema file the way a person would."""
    schema_file = module / "docs" / "variables" / f"{schema_id}.yaml"
    data = yaml.safe_load(schema_file.read_text())
    node = data["schema"][path[0]]
    for name in path[1:]:
        node = node["_attributes"][name]
    node["_marinate"]["description"] = text
    schema_file.write_text(yaml.safe_dump(data, sort_keys=False))


class TestExport:
    """Tests for MarinatePipeline.export."""

    def test_creates_schemas(self, module, pipeline):
        result = pipeline.export(module)

        assert result.created == ["app_config", "users"]
        assert result.updated == []
        assert result.ok
        store = YamlSchemaStore(module / "docs")
        app_config = store.load("app_config")
        assert set(app_config.nodes) == {"name", "database", "tags"}
        assert set(store.load("users").nodes) == {"_root"}

    def test_second_export_updates_and_keeps_descriptions(self, module, pipeline):
        pipeline.export(module)
        set_description(module, "app_config", ["database", "host"], "The database host")

        result = pipeline.export(module)

        assert result.updated == ["app_config", "users"]
        schema = YamlSchemaStore(module / "docs").load("app_config")
        assert schema.nodes["database"].children["host"].description == "The database host"

    def test_export_is_stable(self, module, pipeline):
        pipeline.export(module)
        first = (module / "docs" / "variables" / "app_config.yaml").read_text()
        pipeline.export(module)
        assert (module / "docs" / "variables" / "app_config.yaml").read_text() == first

    def test_removed_field_disappears(self, module, pipeline):
        pipeline.export(module)
        variables_tf = module / "variables.tf"
        variables_tf.write_text(variables_tf.read_text().replace("    tags = optional(map(string), {})\n", ""))

        pipeline.export(module)

        assert "tags" not in YamlSchemaStore(module / "docs").load("app_config").nodes

    def test_malformed_type_does_not_stop_siblings(self, module, pipeline):
        variables_tf = module / "variables.tf"
        variables_tf.write_text(variables_tf.read_text().replace("    name = string\n", "    name = object(string)\n"))

        result = pipeline.export(module)

        assert set(result.failures) == {"app_config"}
        assert "name" in result.failures["app_config"]
        assert result.created == ["users"]

    def test_no_marked_variables(self, tmp_path, pipeline):
        (tmp_path / "variables.tf").write_text('variable "x" {\n  type = string\n}\n')
        result = pipeline.export(tmp_path)
        assert result.total == 0


class TestInjectMarkdown:
    """Tests for MarinatePipeline.inject_markdown."""

    def test_injects_all_markers(self, module, pipeline):
        pipeline.export(module)
        set_description(module, "app_config", ["database", "host"], "The database host")

        result = pipeline.inject_markdown(module / "docs" / "variables", module / "README.md")

        assert result.injected == ["app_config", "users"]
        assert result.total == 2
        readme = (module / "README.md").read_text()
        assert "  - `host` - (Required) The database host\n" in readme
        assert "<!-- /MARINATED: app\\_config -->" in readme
        assert "- `_root` - (Required) # TODO: Add description for users\n" in readme
        assert "  - `login` - (Required) # TODO: Add description for login\n" in readme
        assert readme.startswith("# Example module\n")
        assert readme.endswith("## Outputs\n\nNo outputs.\n")

    def test_is_idempotent(self, module, pipeline):
        pipeline.export(module)
        pipeline.inject_markdown(module / "docs" / "variables", module / "README.md")
        first = (module / "README.md").read_text()

        pipeline.inject_markdown(module / "docs" / "variables", module / "README.md")

        assert (module / "README.md").read_text() == first

    def test_missing_schema_is_a_failure(self, module, pipeline):
        result = pipeline.inject_markdown(module / "docs" / "variables", module / "README.md")

        assert result.injected == []
        assert set(result.failures) == {"app_config", "users"}


class TestInjectTerraform:
    """Tests for MarinatePipeline.inject_terraform."""

    def test_injects_into_descriptions(self, module, pipeline):
        pipeline.export(module)

        result = pipeline.inject_terraform(module / "docs" / "variables", module)

        assert sorted(result.injected) == ["app_config", "users"]
        text = (module / "variables.tf").read_text()
        assert '  description = <<-EOT\n<!-- MARINATED: app_config -->\n\n- `database`' in text
        assert 'variable "region" {\n  type        = string\n  description = "Region to deploy into"\n' in text

    def test_module_still_scans_after_injection(self, module, pipeline):
        pipeline.export(module)
        pipeline.inject_terraform(module / "docs" / "variables", module)

        variables = scan_module(module)

        assert [v.marker_id for v in variables] == ["app_config", "users"]
        assert variables[0].type.startswith("object({")

    def test_is_idempotent(self, module, pipeline):
        pipeline.export(module)
        pipeline.inject_terraform(module / "docs" / "variables", module)
        first = (module / "variables.tf").read_text()

        pipeline.inject_terraform(module / "docs" / "variables", module)

        assert (module / "variables.tf").read_text() == first


class TestRunAndSplit:
    """Tests for MarinatePipeline.run and split_module."""

    def test_run(self, module, pipeline):
        export_result, inject_result = pipeline.run(module)

        assert export_result.created == ["app_config", "users"]
        assert inject_result.injected == ["app_config", "users"]

    def test_run_without_docs_file(self, module, pipeline):
        (module / "README.md").unlink()
        _, inject_result = pipeline.run(module)
        assert inject_result is None

    def test_split_module(self, module, pipeline):
        pipeline.run(module)

        written = pipeline.split_module(module)

        assert [p.name for p in written] == ["app_config.md", "users.md"]
        assert all(p.parent == module / "docs" / "variables" for p in written)
        assert "`host`" in written[0].read_text()


if __name__ == "__main__":
    pytest.main([__file__])
