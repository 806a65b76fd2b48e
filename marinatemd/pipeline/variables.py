"""
Variable block scanner for Terraform/OpenTofu modules.

Finds `variable "<name>" { ... }` blocks in a module's variables*.tf files
and extracts the raw type expression, the description and the default.
The scanner understands quoted strings, heredocs and comments well enough
to balance braces; it does not evaluate anything.
"""

from __future__ import annotations

import logging
import re
import textwrap
from dataclasses import dataclass
from pathlib import Path

from ..utils import find_marker_ids
from .errors import MarinateError
from .schema_ast.tokenizer import CLOSERS, OPENERS, skip_string, strip_comments

logger = logging.getLogger(__name__)

VARIABLE_FILE_PATTERN = "variables*.tf"

_BLOCK_HEADER = re.compile(r'([A-Za-z_][A-Za-z0-9_-]*)((?:\s+"[^"\n]*")*)\s*\{')
_ATTRIBUTE = re.compile(r"([A-Za-z_][A-Za-z0-9_-]*)[ \t]*(=(?!=))?")
_HEREDOC = re.compile(r"<<(-?)([A-Za-z_][A-Za-z0-9_]*)[ \t]*\r?\n")
_QUOTED_ESCAPE = re.compile(r'\\(["\\nrt])')
_QUOTED_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "r": "\r", "t": "\t"}


class UnbalancedBlockError(MarinateError):
    """Raised when a block's braces never balance."""


@dataclass
class Variable:
    """One variable declaration.

    Attributes:
        name: The variable name
        type: Raw type expression ("any" when the block declares none)
        description: Description text, unquoted or heredoc body
        default: Raw default expression, or None when absent
        marker_id: First MARINATED marker ID in the description, or ""
        source_file: File declaring the variable
        line: 1-based line of the block header
    """

    name: str
    type: str = "any"
    description: str = ""
    default: str | None = None
    marker_id: str = ""
    source_file: Path | None = None
    line: int = 0

    @property
    def marinated(self) -> bool:
        return bool(self.marker_id)


def _skip_comment(text: str, index: int) -> int:
    """Return the index past a comment starting at index, or -1 if none starts there."""
    if text.startswith("/*", index):
        end = text.find("*/", index + 2)
        return len(text) if end < 0 else end + 2
    if text[index] == "#" or text.startswith("//", index):
        end = text.find("\n", index)
        return len(text) if end < 0 else end
    return -1


def _skip_heredoc(text: str, index: int) -> int:
    """Return the index past a heredoc starting at index, or -1 if none starts there."""
    match = _HEREDOC.match(text, index)
    if match is None:
        return -1
    delimiter = match.group(2)
    pos = match.end()
    while pos < len(text):
        line_end = text.find("\n", pos)
        if line_end < 0:
            line_end = len(text)
        if text[pos:line_end].strip() == delimiter:
            return line_end
        pos = line_end + 1
    return len(text)


def _skip_opaque(text: str, index: int) -> int:
    """Skip a string, heredoc or comment at index; -1 when index starts none of them."""
    if text[index] == '"':
        return skip_string(text, index)
    if text.startswith("<<", index):
        return _skip_heredoc(text, index)
    return _skip_comment(text, index)


def block_end(text: str, open_index: int) -> int:
    """
    Find the brace closing the block opened at open_index.

    Raises:
        UnbalancedBlockError: If the block never closes
    """
    depth = 0
    i = open_index
    while i < len(text):
        skipped = _skip_opaque(text, i)
        if skipped >= 0:
            i = skipped
            continue
        c = text[i]
        if c in OPENERS:
            depth += 1
        elif c in CLOSERS:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise UnbalancedBlockError(f"Unbalanced block starting at offset {open_index}")


def _value_end(text: str, index: int) -> int:
    """Return the end of an attribute value: the first newline at bracket depth 0."""
    depth = 0
    i = index
    while i < len(text):
        skipped = _skip_opaque(text, i)
        if skipped >= 0:
            # A comment at depth 0 ends the value's line
            if depth == 0 and text[i] != '"' and not text.startswith("<<", i):
                return i
            i = skipped
            continue
        c = text[i]
        if c in OPENERS:
            depth += 1
        elif c in CLOSERS:
            depth -= 1
        elif c == "\n" and depth == 0:
            return i
        i += 1
    return len(text)


def _string_value(raw: str) -> str:
    """Decode a quoted string or heredoc attribute value to its text."""
    heredoc = _HEREDOC.match(raw)
    if heredoc is not None:
        body = raw[heredoc.end() :]
        lines = body.split("\n")
        # Drop the closing delimiter line
        if lines and lines[-1].strip() == heredoc.group(2):
            lines = lines[:-1]
        text = "\n".join(lines)
        return textwrap.dedent(text) if heredoc.group(1) else text
    raw = raw.strip()
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return _QUOTED_ESCAPE.sub(lambda m: _QUOTED_ESCAPES[m.group(1)], raw[1:-1])
    return raw


def parse_block_attributes(body: str) -> dict[str, str]:
    """
    Collect `name = value` attributes from a block body; nested blocks are skipped.

    Returns:
        Attribute name -> raw value text (heredocs included verbatim)
    """
    attributes: dict[str, str] = {}
    pos = 0
    while pos < len(body):
        if body[pos] in " \t\r\n":
            pos += 1
            continue
        skipped = _skip_comment(body, pos)
        if skipped >= 0:
            pos = skipped
            continue

        match = _ATTRIBUTE.match(body, pos)
        if match is None:
            line_end = body.find("\n", pos)
            pos = len(body) if line_end < 0 else line_end + 1
            continue

        if match.group(2) is None:
            # Nested block such as validation { ... }
            header = _BLOCK_HEADER.match(body, pos)
            if header is None:
                line_end = body.find("\n", pos)
                pos = len(body) if line_end < 0 else line_end + 1
                continue
            pos = block_end(body, header.end() - 1) + 1
            continue

        value_start = match.end()
        while value_start < len(body) and body[value_start] in " \t":
            value_start += 1
        heredoc_end = _skip_heredoc(body, value_start)
        end = heredoc_end if heredoc_end >= 0 else _value_end(body, value_start)
        attributes[match.group(1)] = body[value_start:end].strip()
        pos = end
    return attributes


class VariableScanner:
    """Extracts variable declarations from Terraform source text."""

    def scan_text(self, text: str, source_file: Path | None = None) -> list[Variable]:
        """
        Scan one file's text for variable blocks.

        Blocks that cannot be balanced are logged and skipped; the scan stops
        there since the rest of the file cannot be located reliably.
        """
        variables = []
        pos = 0
        while pos < len(text):
            if text[pos] in " \t\r\n":
                pos += 1
                continue
            skipped = _skip_comment(text, pos)
            if skipped >= 0:
                pos = skipped
                continue

            header = _BLOCK_HEADER.match(text, pos)
            if header is None:
                line_end = text.find("\n", pos)
                pos = len(text) if line_end < 0 else line_end + 1
                continue

            open_index = header.end() - 1
            try:
                close_index = block_end(text, open_index)
            except UnbalancedBlockError:
                logger.warning(
                    "Unbalanced %s block in %s at line %d, skipping rest of file",
                    header.group(1),
                    source_file or "<text>",
                    text.count("\n", 0, pos) + 1,
                )
                break

            if header.group(1) == "variable":
                labels = re.findall(r'"([^"\n]*)"', header.group(2))
                if labels:
                    variable = self._variable(labels[0], text[open_index + 1 : close_index], source_file)
                    if variable is not None:
                        variable.line = text.count("\n", 0, pos) + 1
                        variables.append(variable)
            pos = close_index + 1
        return variables

    def _variable(self, name: str, body: str, source_file: Path | None) -> Variable | None:
        try:
            attributes = parse_block_attributes(body)
        except UnbalancedBlockError as e:
            logger.warning("Skipping variable %s in %s: %s", name, source_file or "<text>", e)
            return None

        variable = Variable(name=name, source_file=source_file)
        if "type" in attributes:
            variable.type = strip_comments(attributes["type"]).strip()
        if "description" in attributes:
            variable.description = _string_value(attributes["description"])
            marker_ids = find_marker_ids(variable.description)
            if marker_ids:
                variable.marker_id = marker_ids[0]
        variable.default = attributes.get("default")
        return variable

    def scan_file(self, path: Path) -> list[Variable]:
        """Scan one .tf file."""
        return self.scan_text(path.read_text(encoding="utf-8"), path)

    def scan_module(self, module_path: Path) -> list[Variable]:
        """Scan every variables*.tf file in a module directory, in file name order."""
        variables = []
        for path in sorted(Path(module_path).glob(VARIABLE_FILE_PATTERN)):
            logger.debug("Scanning %s", path)
            variables.extend(self.scan_file(path))
        return variables


def scan_module(module_path: Path | str) -> list[Variable]:
    """Return the marked variables of a module, in file order."""
    return [variable for variable in VariableScanner().scan_module(Path(module_path)) if variable.marinated]


def variable_files(module_path: Path | str) -> list[Path]:
    return sorted(Path(module_path).glob(VARIABLE_FILE_PATTERN))
