"""
Utility functions for marker handling and text layout.
"""

import re

MARKER_KEYWORD = "MARINATED"

_MARKER_ID = r"([A-Za-z0-9_.\\-]+?)"
# Start anchors only; "<!-- /MARINATED: ... -->" never matches because of the slash.
_START_MARKER_PATTERN = re.compile(r"<!--\s*" + MARKER_KEYWORD + r":\s*" + _MARKER_ID + r"\s*-->")
_END_MARKER_PATTERN = re.compile(r"<!--\s*/" + MARKER_KEYWORD + r":\s*" + _MARKER_ID + r"\s*-->")


def normalize_marker_id(marker_id: str) -> str:
    """Undo markdown escaping of separators (app\\_config -> app_config)."""
    return marker_id.strip().replace("\\_", "_")


def start_marker(marker_id: str) -> str:
    return f"<!-- {MARKER_KEYWORD}: {marker_id} -->"


def end_marker(marker_id: str) -> str:
    return f"<!-- /{MARKER_KEYWORD}: {marker_id} -->"


def _find_marker(pattern: re.Pattern, text: str, marker_id: str, pos: int) -> re.Match | None:
    marker_id = normalize_marker_id(marker_id)
    for match in pattern.finditer(text, pos):
        if normalize_marker_id(match.group(1)) == marker_id:
            return match
    return None


def find_start_marker(text: str, marker_id: str, pos: int = 0) -> re.Match | None:
    """Return the first start marker for an ID at or after pos, in any spelling.

    Spacing inside the comment and escaped underscores are both accepted, the
    same way find_marker_ids accepts them. group(0) is the marker as written
    and group(1) the ID as written.
    """
    return _find_marker(_START_MARKER_PATTERN, text, marker_id, pos)


def find_end_marker(text: str, marker_id: str, pos: int = 0) -> re.Match | None:
    """Return the first end marker for an ID at or after pos, in any spelling."""
    return _find_marker(_END_MARKER_PATTERN, text, marker_id, pos)


def find_marker_ids(text: str) -> list[str]:
    """Return every distinct marker ID in the text, in first-seen order.

    Examples:
        "<!-- MARINATED: app_config -->" -> ["app_config"]
        "<!-- MARINATED: app\\_config -->" -> ["app_config"]
    """
    seen: dict[str, None] = {}
    for match in _START_MARKER_PATTERN.finditer(text):
        marker_id = normalize_marker_id(match.group(1))
        if marker_id:
            seen.setdefault(marker_id, None)
    return list(seen)


def leading_whitespace(line: str) -> str:
    """Return the run of spaces and tabs at the start of a line."""
    return line[: len(line) - len(line.lstrip(" \t"))]
