"""
Base class for marker injectors.

An injector replaces the region between a start marker and its end marker
with freshly rendered content. Subclasses know the syntax of the document
the markers live in.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field

from ..errors import MarkerNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class InjectResult:
    """Outcome of injecting content into one or more documents.

    Attributes:
        injected: Marker IDs whose content was replaced
        failures: Marker ID -> error message for IDs that could not be injected
        total: Number of marker IDs attempted
    """

    injected: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    total: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures

    def extend(self, other: InjectResult) -> None:
        self.injected.extend(other.injected)
        self.failures.update(other.failures)
        self.total += other.total


class MarkerInjector(ABC):
    """Abstract base class for document-specific injectors."""

    # Human-readable document kind, used in log and error messages
    DOCUMENT_KIND = "document"

    @abstractmethod
    def find_markers(self, document: str) -> list[str]:
        """Return the distinct marker IDs in the document, in first-seen order."""
        pass

    @abstractmethod
    def inject(self, document: str, marker_id: str, content: str) -> str:
        """
        Replace the content between the markers for marker_id.

        Raises:
            MarkerNotFoundError: If the start marker for marker_id is absent
        """
        pass

    def inject_all(self, document: str, contents: Mapping[str, str], where: str = "") -> tuple[str, InjectResult]:
        """
        Inject several blocks into one document.

        A missing marker is recorded as a failure and does not stop the
        remaining IDs.

        Args:
            document: The document text
            contents: Marker ID -> rendered content
            where: Document name for messages

        Returns:
            The updated document and the per-ID outcome
        """
        result = InjectResult(total=len(contents))
        for marker_id, content in contents.items():
            try:
                document = self.inject(document, marker_id, content)
            except MarkerNotFoundError as e:
                message = str(MarkerNotFoundError(marker_id, where)) if where else str(e)
                logger.warning("Skipping %s: %s", marker_id, message)
                result.failures[marker_id] = message
                continue
            result.injected.append(marker_id)
            logger.info("Injected %s into %s %s", marker_id, self.DOCUMENT_KIND, where)
        return document, result
