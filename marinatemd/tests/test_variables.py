"""
Tests for the variable block scanner.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from marinatemd.pipeline.variables import VariableScanner, parse_block_attributes, scan_module

TEST_MODULE = Path(__file__).parent / "test_data" / "module"


@pytest.fixture
def scanner():
    return VariableScanner()


class TestParseBlockAttributes:
    """Tests for attribute extraction from a block body."""

    def test_simple_attributes(self):
        attributes = parse_block_attributes('\n  type = string\n  default = "a"\n')
        assert attributes == {"type": "string", "default": '"a"'}

    def test_multiline_value(self):
        attributes = parse_block_attributes("\n  type = object({\n    a = string\n  })\n  nullable = false\n")
        assert attributes["type"] == "object({\n    a = string\n  })"
        assert attributes["nullable"] == "false"

    def test_nested_blocks_are_skipped(self):
        body = '\n  validation {\n    condition = true\n    error_message = "}"\n  }\n  sensitive = true\n'
        assert parse_block_attributes(body) == {"sensitive": "true"}

    def test_trailing_comment_ends_value(self):
        assert parse_block_attributes("  type = string # the type\n") == {"type": "string"}

    def test_heredoc_value(self):
        attributes = parse_block_attributes("  description = <<EOT\nline } one\nEOT\n  type = bool\n")
        assert attributes["description"] == "<<EOT\nline } one\nEOT"
        assert attributes["type"] == "bool"


class TestVariableScanner:
    """Tests for VariableScanner."""

    def test_scan_text(self, scanner):
        variables = scanner.scan_text(
            'variable "a" {\n  type = string\n  description = "Plain \\"quoted\\" text"\n}\n\nvariable "b" {}\n'
        )

        assert [v.name for v in variables] == ["a", "b"]
        assert variables[0].type == "string"
        assert variables[0].description == 'Plain "quoted" text'
        assert variables[0].line == 1
        assert variables[1].type == "any"
        assert variables[1].default is None
        assert variables[1].line == 6

    def test_marker_in_quoted_description(self, scanner):
        variables = scanner.scan_text('variable "cfg" {\n  description = "Config <!-- MARINATED: app\\\\_config -->"\n}\n')
        assert variables[0].marker_id == "app_config"
        assert variables[0].marinated

    def test_heredoc_description_is_dedented(self, scanner):
        variables = scanner.scan_text('variable "x" {\n  description = <<-EOT\n    First\n      Second\n  EOT\n}\n')
        assert variables[0].description == "First\n  Second"

    def test_other_blocks_are_ignored(self, scanner):
        text = 'locals {\n  a = "variable \\"fake\\" {"\n}\n\nresource "null_resource" "r" {}\n\nvariable "real" {}\n'
        assert [v.name for v in scanner.scan_text(text)] == ["real"]

    def test_comments_before_blocks(self, scanner):
        text = '# variable "commented" {\n/* variable "block" { */\nvariable "real" {\n  type = number\n}\n'
        assert [v.name for v in scanner.scan_text(text)] == ["real"]

    def test_unbalanced_block_is_skipped(self, scanner, caplog):
        text = 'variable "good" {\n  type = string\n}\n\nvariable "broken" {\n  type = object({\n'
        variables = scanner.scan_text(text)
        assert [v.name for v in variables] == ["good"]
        assert "Unbalanced" in caplog.text

    def test_scan_module(self):
        variables = scan_module(TEST_MODULE)

        assert [(v.name, v.marker_id) for v in variables] == [("app_config", "app_config"), ("users", "users")]
        app_config = variables[0]
        assert app_config.type.startswith("object({")
        assert "# Connection settings" not in app_config.type
        assert "// default port" not in app_config.type
        assert app_config.source_file == TEST_MODULE / "variables.tf"

        users = variables[1]
        assert users.default == "[]"
        assert "Users of the application." in users.description

    def test_scan_module_includes_unmarked_variables(self, scanner):
        names = [v.name for v in scanner.scan_module(TEST_MODULE)]
        assert names == ["app_config", "region", "users"]


if __name__ == "__main__":
    pytest.main([__file__])
