"""
Tests for marker injection into markdown.
"""

from __future__ import annotations

import pytest

from marinatemd.pipeline.errors import MarkerNotFoundError
from marinatemd.pipeline.injector import MarkdownInjector

START = "<!-- MARINATED: app_config -->"
END = "<!-- /MARINATED: app_config -->"


@pytest.fixture
def injector():
    return MarkdownInjector()


class TestFindMarkers:
    """Tests for MarkdownInjector.find_markers."""

    def test_first_seen_order_and_distinct(self, injector):
        document = "<!-- MARINATED: b -->\ntext\n<!-- MARINATED: a -->\n<!-- /MARINATED: a -->\n<!-- MARINATED: b -->\n"
        assert injector.find_markers(document) == ["b", "a"]

    def test_escaped_ids_are_normalized(self, injector):
        document = "Description: <!-- MARINATED: app\\_config -->\n<!-- MARINATED: app_config -->\n"
        assert injector.find_markers(document) == ["app_config"]

    def test_no_markers(self, injector):
        assert injector.find_markers("# Title\n\nNothing here\n") == []


class TestInject:
    """Tests for MarkdownInjector.inject."""

    def test_replaces_between_markers(self, injector):
        document = f"A\n{START}\nOLD\n{END}\nB\n"

        result = injector.inject(document, "app_config", "NEW")

        assert result == f"A\n{START}\n\nNEW\n\n{END}\nB\n"
        assert result.startswith("A\n")
        assert result.endswith("B\n")
        assert "OLD" not in result

    def test_is_idempotent(self, injector):
        document = f"A\n{START}\nOLD\n{END}\nB\n"
        once = injector.inject(document, "app_config", "- `a` - (Required) text\n")
        assert injector.inject(once, "app_config", "- `a` - (Required) text\n") == once

    def test_preserves_same_line_prefix(self, injector):
        document = f"### app_config\n\nDescription: {START}\n{END}\n\nType: object\n"

        result = injector.inject(document, "app_config", "content")

        assert result == f"### app_config\n\nDescription: {START}\n\ncontent\n\n{END}\n\nType: object\n"

    def test_synthesizes_missing_end_marker(self, injector):
        document = f"Intro\nDescription: {START}\n\nType: object\n"

        once = injector.inject(document, "app_config", "content")

        assert once == f"Intro\nDescription: {START}\n\ncontent\n\n{END}\n\nType: object\n"
        assert injector.inject(once, "app_config", "content") == once

    def test_escaped_markers(self, injector):
        start = "<!-- MARINATED: app\\_config -->"
        end = "<!-- /MARINATED: app\\_config -->"
        document = f"before\n{start}\nold\n{end}\nafter"

        result = injector.inject(document, "app_config", "new")

        assert result == f"before\n{start}\n\nnew\n\n{end}\nafter"

    def test_compact_marker_spelling(self, injector):
        document = "A\n<!--MARINATED:x-->\nOLD\n<!--/MARINATED:x-->\nB\n"

        assert injector.find_markers(document) == ["x"]
        result = injector.inject(document, "x", "NEW")

        assert result == "A\n<!--MARINATED:x-->\n\nNEW\n\n<!--/MARINATED:x-->\nB\n"

    def test_every_found_marker_can_be_injected(self, injector):
        document = "<!--MARINATED:a-->\n<!--  MARINATED:  b\\_c  -->\ntail\n"

        for marker_id in injector.find_markers(document):
            document = injector.inject(document, marker_id, f"content {marker_id}")

        assert "content a" in document
        assert "<!--  MARINATED:  b\\_c  -->\n\ncontent b_c\n\n<!-- /MARINATED: b\\_c -->\ntail\n" in document

    def test_only_target_block_changes(self, injector):
        other = "<!-- MARINATED: other -->\nkeep me\n<!-- /MARINATED: other -->"
        document = f"{other}\n{START}\nold\n{END}\n"

        result = injector.inject(document, "app_config", "new")

        assert result.startswith(f"{other}\n")
        assert "keep me" in result

    def test_missing_marker(self, injector):
        with pytest.raises(MarkerNotFoundError) as exc_info:
            injector.inject("# Nothing\n", "app_config", "content")
        assert exc_info.value.marker_id == "app_config"

    def test_inject_all_records_failures(self, injector):
        document = f"{START}\n{END}\n"

        result_document, result = injector.inject_all(document, {"app_config": "x", "missing": "y"}, "README.md")

        assert result.injected == ["app_config"]
        assert set(result.failures) == {"missing"}
        assert "README.md" in result.failures["missing"]
        assert result.total == 2
        assert "\n\nx\n\n" in result_document


if __name__ == "__main__":
    pytest.main([__file__])
