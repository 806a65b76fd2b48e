"""
Marker injection into Terraform variable descriptions.

Markers live inside the description of a variable block, either in a
single-line quoted string or in a heredoc. A quoted string cannot hold
multi-line content, so it is rewritten as a "<<-EOT" heredoc first.
"""

from __future__ import annotations

import logging
import re

from ...utils import end_marker, find_end_marker, find_marker_ids, find_start_marker, leading_whitespace
from ..errors import MarkerNotFoundError
from ..schema_ast.tokenizer import skip_string
from .base import MarkerInjector

logger = logging.getLogger(__name__)

HEREDOC_DELIMITER = "EOT"

_DESCRIPTION_LINE = re.compile(r"^\s*description\s*=")
# Only a heredoc opening the attribute value counts, not "<<" inside a quoted string
_HEREDOC_OPEN = re.compile(r"^[^=\"]*=\s*<<-?([A-Za-z_][A-Za-z0-9_]*)")
_VARIABLE_BLOCK = re.compile(r'^\s*variable\s+"')
_QUOTED_ESCAPE = re.compile(r'\\(["\\nrt])')
_QUOTED_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "r": "\r", "t": "\t"}


def heredoc_delimiter(line: str) -> str:
    """Return the delimiter of a heredoc opened as the line's value, or "" if there is none."""
    match = _HEREDOC_OPEN.match(line)
    return match.group(1) if match else ""


def escape_template_sequences(text: str) -> str:
    """Escape ${ and %{ so Terraform keeps them literally inside a heredoc."""
    return re.sub(r"(?<![$%])([$%])\{", r"\1\1{", text)


def _unquote(literal: str) -> str:
    return _QUOTED_ESCAPE.sub(lambda m: _QUOTED_ESCAPES[m.group(1)], literal)


class TerraformInjector(MarkerInjector):
    """Injects rendered markdown into the description of a marked variable."""

    DOCUMENT_KIND = "terraform"

    def find_markers(self, document: str) -> list[str]:
        return find_marker_ids(document)

    def inject(self, document: str, marker_id: str, content: str) -> str:
        lines = document.split("\n")
        content = escape_template_sequences(content.strip())

        for index, line in enumerate(lines):
            if not _DESCRIPTION_LINE.match(line):
                continue

            delimiter = heredoc_delimiter(line)
            if delimiter:
                replaced = self._inject_heredoc(lines, index, delimiter, marker_id, content)
            else:
                replaced = self._inject_single_line(lines, index, marker_id, content)

            if replaced is not None:
                logger.debug("Injected %s at line %d", marker_id, index + 1)
                return "\n".join(replaced)

        raise MarkerNotFoundError(marker_id)

    def _inject_single_line(
        self,
        lines: list[str],
        index: int,
        marker_id: str,
        content: str,
    ) -> list[str] | None:
        """Rewrite `description = "..."` into a heredoc holding the markers and content.

        Anything after the closing quote (usually a comment) moves to its own
        line after the heredoc, since nothing may follow a heredoc delimiter.
        """
        line = lines[index]
        open_quote = line.find('"', line.index("=") + 1)
        if open_quote < 0:
            return None
        close_quote = skip_string(line, open_quote)
        if line[close_quote - 1] != '"' or close_quote == open_quote + 1:
            return None
        text = _unquote(line[open_quote + 1 : close_quote - 1])

        start = find_start_marker(text, marker_id)
        if start is None:
            return None
        before = text[: start.start()]
        end = find_end_marker(text, marker_id, start.end())
        if end is not None:
            end_text, tail = end.group(0), text[end.end() :]
        else:
            end_text, tail = end_marker(start.group(1)), ""

        indent = leading_whitespace(line)
        block = [
            f"{indent}description = <<-{HEREDOC_DELIMITER}",
            f"{before}{start.group(0)}",
            "",
            *content.split("\n"),
            "",
            f"{end_text}{tail}",
            f"{indent}{HEREDOC_DELIMITER}",
        ]
        trailing = line[close_quote:].strip()
        if trailing:
            block.append(f"{indent}{trailing}")
        return lines[:index] + block + lines[index + 1 :]

    def _inject_heredoc(
        self,
        lines: list[str],
        index: int,
        delimiter: str,
        marker_id: str,
        content: str,
    ) -> list[str] | None:
        """Replace the marked region inside a heredoc description.

        Lines between the start and end markers are never taken as the
        closing delimiter, so injected content that happens to contain the
        delimiter word cannot cut the heredoc short.
        """
        start = None
        start_line = -1
        for i in range(index + 1, len(lines)):
            if lines[i].strip() == delimiter:
                return None
            start = find_start_marker(lines[i], marker_id)
            if start is not None:
                start_line = i
                break
        if start is None:
            return None

        prefix = lines[start_line][: start.start()]

        end = None
        end_line = -1
        for i in range(start_line, len(lines)):
            if i > start_line and _VARIABLE_BLOCK.match(lines[i]):
                break
            end = find_end_marker(lines[i], marker_id, start.end() if i == start_line else 0)
            if end is not None:
                end_line = i
                break

        close_line = len(lines)
        for i in range(max(end_line, start_line) + 1, len(lines)):
            if lines[i].strip() == delimiter:
                close_line = i
                break

        if end is not None:
            end_text = end.group(0)
            tail = lines[end_line][end.end() :]
            kept_after = lines[end_line + 1 : close_line]
        else:
            end_text = end_marker(start.group(1))
            tail = ""
            kept_after = lines[start_line + 1 : close_line]

        # Indented heredocs have their common indentation stripped, so content
        # can follow the marker's indentation there
        indent = leading_whitespace(prefix) if "<<-" in lines[index] else ""
        body = [f"{indent}{line}" if line else "" for line in content.split("\n")]
        block = [f"{prefix}{start.group(0)}", "", *body, "", f"{indent}{end_text}{tail}"]
        return lines[:start_line] + block + kept_after + lines[close_line:]
