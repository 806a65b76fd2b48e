"""
Tests for marker injection into Terraform variable descriptions.
"""

from __future__ import annotations

import pytest

from marinatemd.pipeline.errors import MarkerNotFoundError
from marinatemd.pipeline.injector import TerraformInjector, escape_template_sequences, heredoc_delimiter

START = "<!-- MARINATED: app_config -->"
END = "<!-- /MARINATED: app_config -->"

SINGLE_LINE = f'''variable "app_config" {{
  type        = object({{ name = string }})
  description = "{START}"
  default     = null
}}
'''

HEREDOC = f'''variable "app_config" {{
  type = object({{ name = string }})
  description = <<-EOT
    Application settings.
    {START}
    old content
    {END}
    Trailing note.
  EOT
  nullable = false
}}
'''


@pytest.fixture
def injector():
    return TerraformInjector()


class TestHelpers:
    """Tests for the module-level helpers."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("  description = <<-EOT", "EOT"),
            ("  description = <<DOC", "DOC"),
            ("  description = <<-my_doc", "my_doc"),
            ('  description = "text"', ""),
            ('  description = "bits << n"', ""),
            ("  description = << EOT", ""),
        ],
    )
    def test_heredoc_delimiter(self, line, expected):
        assert heredoc_delimiter(line) == expected

    def test_escape_template_sequences(self):
        assert escape_template_sequences("${var.a} and %{if x}") == "$${var.a} and %%{if x}"
        assert escape_template_sequences("$${already}") == "$${already}"


class TestSingleLineConversion:
    """Tests for rewriting a quoted description into a heredoc."""

    def test_converts_to_heredoc(self, injector):
        result = injector.inject(SINGLE_LINE, "app_config", "- `name` - (Required) Name\n- `size` - (Optional) Size")

        assert result == (
            'variable "app_config" {\n'
            "  type        = object({ name = string })\n"
            "  description = <<-EOT\n"
            f"{START}\n"
            "\n"
            "- `name` - (Required) Name\n"
            "- `size` - (Optional) Size\n"
            "\n"
            f"{END}\n"
            "  EOT\n"
            "  default     = null\n"
            "}\n"
        )

    def test_sibling_attributes_are_untouched(self, injector):
        result = injector.inject(SINGLE_LINE, "app_config", "line one\nline two")

        assert "  type        = object({ name = string })\n" in result
        assert "  default     = null\n" in result

    def test_trailing_comment_is_kept(self, injector):
        document = f'variable "x" {{\n  description = "Cfg {START}" # keep me\n  default = null\n}}\n'

        once = injector.inject(document, "app_config", "content")

        assert once == (
            'variable "x" {\n'
            "  description = <<-EOT\n"
            f"Cfg {START}\n"
            "\n"
            "content\n"
            "\n"
            f"{END}\n"
            "  EOT\n"
            "  # keep me\n"
            "  default = null\n"
            "}\n"
        )
        assert injector.inject(once, "app_config", "content") == once

    def test_shift_operator_inside_quotes(self, injector):
        document = f'variable "x" {{\n  description = "bits << n {START}"\n}}\n'

        result = injector.inject(document, "app_config", "content")

        assert f"  description = <<-EOT\nbits << n {START}\n\ncontent\n\n{END}\n  EOT\n" in result

    def test_compact_marker_spelling(self, injector):
        document = 'variable "x" {\n  description = "<!--MARINATED:x-->"\n}\n'

        assert injector.find_markers(document) == ["x"]
        result = injector.inject(document, "x", "content")

        assert "<!--MARINATED:x-->\n\ncontent\n\n<!-- /MARINATED: x -->\n  EOT\n" in result

    def test_keeps_text_before_marker(self, injector):
        document = f'variable "x" {{\n  description = "Settings: {START}"\n}}\n'

        result = injector.inject(document, "app_config", "content")

        assert f"Settings: {START}\n" in result

    def test_unescapes_quoted_text(self, injector):
        document = f'variable "x" {{\n  description = "Say \\"hi\\" {START}"\n}}\n'

        result = injector.inject(document, "app_config", "content")

        assert f'Say "hi" {START}\n' in result

    def test_conversion_is_idempotent(self, injector):
        once = injector.inject(SINGLE_LINE, "app_config", "content")
        assert injector.inject(once, "app_config", "content") == once


class TestHeredocInjection:
    """Tests for injecting into an existing heredoc."""

    def test_replaces_marked_region(self, injector):
        result = injector.inject(HEREDOC, "app_config", "new content")

        assert result == (
            'variable "app_config" {\n'
            "  type = object({ name = string })\n"
            "  description = <<-EOT\n"
            "    Application settings.\n"
            f"    {START}\n"
            "\n"
            "    new content\n"
            "\n"
            f"    {END}\n"
            "    Trailing note.\n"
            "  EOT\n"
            "  nullable = false\n"
            "}\n"
        )

    def test_is_idempotent(self, injector):
        once = injector.inject(HEREDOC, "app_config", "new content")
        assert injector.inject(once, "app_config", "new content") == once

    def test_delimiter_inside_content_does_not_close(self, injector):
        once = injector.inject(HEREDOC, "app_config", "EOT\nmore")
        twice = injector.inject(once, "app_config", "replaced")

        assert "more" not in twice
        assert twice.count("  EOT\n") == 1
        assert "    Trailing note.\n  EOT\n  nullable = false\n" in twice

    def test_missing_end_marker_keeps_following_lines(self, injector):
        document = f'variable "x" {{\n  description = <<EOT\n{START}\nnote\nEOT\n}}\n'

        result = injector.inject(document, "app_config", "content")

        assert result == f'variable "x" {{\n  description = <<EOT\n{START}\n\ncontent\n\n{END}\nnote\nEOT\n}}\n'

    def test_escaped_marker(self, injector):
        start = "<!-- MARINATED: app\\_config -->"
        end = "<!-- /MARINATED: app\\_config -->"
        document = f'variable "x" {{\n  description = <<-EOT\n    {start}\n    {end}\n  EOT\n}}\n'

        result = injector.inject(document, "app_config", "content")

        assert f"    {start}\n\n    content\n\n    {end}\n  EOT\n" in result

    def test_compact_markers_in_heredoc(self, injector):
        document = 'variable "x" {\n  description = <<EOT\n<!--MARINATED:x-->\nold\n<!--/MARINATED:x-->\nEOT\n}\n'

        result = injector.inject(document, "x", "new")

        assert result == 'variable "x" {\n  description = <<EOT\n<!--MARINATED:x-->\n\nnew\n\n<!--/MARINATED:x-->\nEOT\n}\n'

    def test_interpolation_is_escaped(self, injector):
        result = injector.inject(HEREDOC, "app_config", "uses ${var.name}")
        assert "uses $${var.name}" in result

    def test_other_variables_untouched(self, injector):
        other = 'variable "other" {\n  description = "plain"\n}\n'
        result = injector.inject(other + HEREDOC, "app_config", "new")
        assert result.startswith(other)


class TestMissingMarker:
    """Tests for absent markers."""

    def test_raises(self, injector):
        document = 'variable "x" {\n  description = "no marker"\n}\n'
        with pytest.raises(MarkerNotFoundError):
            injector.inject(document, "app_config", "content")

    def test_find_markers(self, injector):
        assert injector.find_markers(HEREDOC + SINGLE_LINE.replace("app_config", "other")) == ["app_config", "other"]


if __name__ == "__main__":
    pytest.main([__file__])
