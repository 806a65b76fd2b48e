"""
Bracket-depth aware scanning helpers for the type grammar.

Nested constructors cannot be balanced with regular expressions, so these
helpers walk the text character by character with an explicit depth
counter. String literals (e.g. defaults inside optional(...)) are skipped so
brackets or commas inside them never affect the depth.
"""

from __future__ import annotations

import re

OPENERS = "({["
CLOSERS = ")}]"

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")


def skip_string(text: str, index: int) -> int:
    """Return the index just past the string literal starting at text[index]."""
    i = index + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i + 1
        i += 1
    return len(text)


def matching_close(text: str, open_index: int) -> int:
    """Find the bracket closing the one at open_index.

    Returns:
        Index of the matching closer, or -1 when the brackets never balance
        or a closer does not match its opener (e.g. "({)}")
    """
    expected: list[str] = []
    i = open_index
    while i < len(text):
        c = text[i]
        if c == '"':
            i = skip_string(text, i)
            continue
        if c in OPENERS:
            expected.append(CLOSERS[OPENERS.index(c)])
        elif c in CLOSERS:
            if not expected or expected.pop() != c:
                return -1
            if not expected:
                return i
        i += 1
    return -1


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split text on separator occurrences at bracket depth 0."""
    parts = []
    depth = 0
    start = 0
    i = 0
    while i < len(text):
        c = text[i]
        if c == '"':
            i = skip_string(text, i)
            continue
        if c in OPENERS:
            depth += 1
        elif c in CLOSERS:
            depth -= 1
        elif c == separator and depth == 0:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return parts


def strip_comments(text: str) -> str:
    """Remove # and // line comments outside string literals."""
    out = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == '"':
            end = skip_string(text, i)
            out.append(text[i:end])
            i = end
            continue
        if c == "#" or text.startswith("//", i):
            newline = text.find("\n", i)
            if newline < 0:
                break
            i = newline
            continue
        out.append(c)
        i += 1
    return "".join(out)


def _match_field_header(text: str, pos: int) -> tuple[str, int] | None:
    """Match `identifier =` starting at pos, skipping leading whitespace.

    Returns:
        (field name, index just past the "=") or None
    """
    while pos < len(text) and text[pos] in " \t\r\n,":
        pos += 1
    match = _IDENTIFIER.match(text, pos)
    if match is None:
        return None
    i = match.end()
    while i < len(text) and text[i] in " \t":
        i += 1
    if i >= len(text) or text[i] != "=" or text.startswith("==", i):
        return None
    return match.group(0), i + 1


def tokenize_object_body(content: str) -> dict[str, str]:
    """Split the interior of an object({ ... }) block into name -> type expression.

    A field starts with an identifier followed by "=" at depth 0. Its value
    runs until the next depth-0 newline or comma that is followed by another
    `identifier =` pair or by the end of input, so values may span lines
    (e.g. a nested multi-line object). Field names are opaque: a field named
    "description" is tokenized like any other.

    Args:
        content: Text between the object's braces

    Returns:
        Field name -> raw type expression, in source order
    """
    text = strip_comments(content)
    fields: dict[str, str] = {}

    header = _match_field_header(text, 0)
    if header is None:
        return fields
    name, value_start = header

    depth = 0
    i = value_start
    while i < len(text):
        c = text[i]
        if c == '"':
            i = skip_string(text, i)
            continue
        if c in OPENERS:
            depth += 1
        elif c in CLOSERS:
            depth -= 1
        elif depth == 0 and c in "\n,":
            following = _match_field_header(text, i + 1)
            if following is not None:
                fields[name] = text[value_start:i].strip()
                name, value_start = following
                i = value_start
                continue
        i += 1

    fields[name] = text[value_start:].strip().rstrip(",").strip()
    return fields
