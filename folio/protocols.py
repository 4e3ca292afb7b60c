"""Protocol definitions for Folio.

This module defines the interfaces (protocols) used throughout Folio,
so that loaders, extractors, builders and validators can be swapped
independently.

These protocols enable:
- Loose coupling between components
- Easy testing through fake implementations
- Extensibility without modifying existing code
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import ContentDocument
    from .validation import ValidationIssue


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for extracting metadata from content.

    Implementations extract one concern each (metadata block, filename
    date and slug, headings).
    """

    @abstractmethod
    def extract(self, content: str, path: Path | None) -> dict[str, Any]:
        """Extract metadata from content.

        Args:
            content: Source content.
            path: Path to the source file, if the content came from one.

        Returns:
            Dictionary of extracted metadata.
        """
        ...


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files.

    This separates file discovery from document building.
    """

    @abstractmethod
    def iter_files(self) -> list[Path]:
        """Return all content files.

        Returns:
            List of paths to content files.
        """
        ...


@runtime_checkable
class DocumentBuilder(Protocol):
    """Protocol for building ContentDocument objects."""

    @abstractmethod
    def build(self, path: Path) -> ContentDocument:
        """Build a ContentDocument from a source file.

        Args:
            path: Path to the source file.

        Returns:
            ContentDocument object.

        Raises:
            InvalidDocument: If the metadata block is missing or malformed.
        """
        ...


@runtime_checkable
class DocumentValidator(Protocol):
    """Protocol for checking a parsed document against conventions."""

    @abstractmethod
    def validate(self, document: ContentDocument) -> list[ValidationIssue]:
        """Check a document.

        Args:
            document: Parsed document.

        Returns:
            List of issues; empty when the document conforms.
        """
        ...
