"""
Marker injection into markdown documents.
"""

from __future__ import annotations

from ...utils import end_marker, find_end_marker, find_marker_ids, find_start_marker
from ..errors import MarkerNotFoundError
from .base import MarkerInjector


class MarkdownInjector(MarkerInjector):
    """Injects rendered markdown between MARINATED comment markers.

    Text before the start marker on its line (e.g. "Description: ") and
    everything outside the marker pair is preserved byte for byte. When no
    end marker exists yet one is written after the content; in that case the
    rest of the start marker's line is replaced, later lines are kept.
    """

    DOCUMENT_KIND = "markdown"

    def find_markers(self, document: str) -> list[str]:
        return find_marker_ids(document)

    def inject(self, document: str, marker_id: str, content: str) -> str:
        start = find_start_marker(document, marker_id)
        if start is None:
            raise MarkerNotFoundError(marker_id)

        line_start = document.rfind("\n", 0, start.start()) + 1
        prefix = document[line_start : start.start()]

        # Markers are written back exactly as found; a synthesized end marker
        # follows the start marker's spelling of the ID
        end = find_end_marker(document, marker_id, start.end())
        if end is not None:
            end_text = end.group(0)
            rest = document[end.end() :]
        else:
            end_text = end_marker(start.group(1))
            line_end = document.find("\n", start.end())
            rest = "" if line_end < 0 else document[line_end:]

        block = f"{prefix}{start.group(0)}\n\n{content.strip()}\n\n{end_text}"
        return document[:line_start] + block + rest
