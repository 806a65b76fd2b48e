"""
Markdown splitter.

Cuts a terraform-docs style document into one file per marked variable so
each variable's documentation can be linked or published on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..utils import find_marker_ids
from .errors import MarinateError, MarkerNotFoundError
from .merger.atomic_writer import AtomicWriter

logger = logging.getLogger(__name__)

# A variable heading has "Description:" within this many lines
DESCRIPTION_LOOKAHEAD = 15

# How far past a variable heading to look for its marker
MARKER_LOOKAHEAD = 50


@dataclass
class VariableSection:
    """Extracted documentation of one marked variable."""

    marker_id: str
    content: str


def is_variable_heading(line: str) -> bool:
    return line.startswith("### ")


def is_major_heading(line: str) -> bool:
    return line.startswith("## ") or line.startswith("# ")


class MarkdownSplitter:
    """Splits a markdown document into per-variable sections."""

    def __init__(self, header: str = "", footer: str = "", writer: AtomicWriter | None = None):
        """
        Args:
            header: Text written before each section
            footer: Text written after each section
            writer: Writer for the output files
        """
        self.header = header
        self.footer = footer
        self.writer = writer or AtomicWriter()

    @classmethod
    def from_files(cls, header_file: Path | str | None = None, footer_file: Path | str | None = None) -> MarkdownSplitter:
        header = Path(header_file).read_text(encoding="utf-8") if header_file else ""
        footer = Path(footer_file).read_text(encoding="utf-8") if footer_file else ""
        return cls(header, footer)

    def extract_sections(self, content: str) -> list[VariableSection]:
        """
        Extract the sections of marked variables.

        A "### " heading starts a variable when "Description:" follows it
        closely; other "### " headings are subsections of the current
        variable. "## " and "# " headings end the current variable.
        """
        lines = content.split("\n")
        sections: list[VariableSection] = []
        current_id: str | None = None
        current: list[str] = []

        def flush():
            if current_id and current:
                sections.append(VariableSection(current_id, "\n".join(current)))

        for index, line in enumerate(lines):
            stripped = line.strip()

            if is_variable_heading(stripped) and self._starts_variable(lines, index):
                flush()
                current_id = self._find_marker(lines, index)
                current = [line]
                continue

            if is_major_heading(stripped):
                flush()
                current_id = None
                current = []
                continue

            if current_id is not None:
                current.append(line)

        flush()
        return sections

    def _starts_variable(self, lines: list[str], heading_index: int) -> bool:
        end = min(heading_index + DESCRIPTION_LOOKAHEAD, len(lines))
        for j in range(heading_index + 1, end):
            stripped = lines[j].strip()
            if stripped.startswith("Description:"):
                return True
            if is_variable_heading(stripped) or is_major_heading(stripped):
                return False
        return False

    def _find_marker(self, lines: list[str], heading_index: int) -> str | None:
        end = min(heading_index + 1 + MARKER_LOOKAHEAD, len(lines))
        for j in range(heading_index + 1, end):
            marker_ids = find_marker_ids(lines[j])
            if marker_ids:
                return marker_ids[0]
            stripped = lines[j].strip()
            if is_variable_heading(stripped) and self._starts_variable(lines, j):
                break
            if is_major_heading(stripped):
                break
        return None

    def format_section(self, section: VariableSection) -> str:
        """Wrap a section's content in the header and footer."""
        parts = []
        if self.header:
            parts.append(self.header if self.header.endswith("\n") else self.header + "\n")
            parts.append("\n")
        parts.append(section.content.strip() + "\n")
        if self.footer:
            parts.append("\n")
            parts.append(self.footer if self.footer.endswith("\n") else self.footer + "\n")
        return "".join(parts)

    def split(self, input_path: Path, output_dir: Path) -> list[Path]:
        """
        Write each marked section of input_path to <output_dir>/<id>.md.

        Returns:
            The written paths, in document order

        Raises:
            MarkerNotFoundError: If the document has no marked variable sections
        """
        try:
            content = Path(input_path).read_text(encoding="utf-8")
        except OSError as e:
            raise MarinateError(f"Failed to read {input_path}: {e}") from e

        sections = self.extract_sections(content)
        if not sections:
            raise MarkerNotFoundError("", str(input_path))

        written = []
        for section in sections:
            path = Path(output_dir) / f"{section.marker_id}.md"
            self.writer.write(path, self.format_section(section))
            logger.info("Wrote %s", path)
            written.append(path)
        return written
