"""Metadata extractors for Folio.

This module contains implementations of the MetadataExtractor protocol.
Each extractor handles a single type of metadata.

Key classes:
- MetadataBlockExtractor: Splits the leading literal map from the body.
- PostFilenameExtractor: Extracts publish date and slug from the filename.
- HeadingExtractor: Extracts markdown headings from the body.
- CompositeMetadataExtractor: Runs several extractors and merges their results.
"""

from __future__ import annotations

import html
import re
from pathlib import Path
from typing import Any

import mistune

from .edn import MetadataSyntaxError, read_map
from .utils import parse_post_filename, slugify

BLANK_LINES_RE = re.compile(r"\A(?:[ \t]*\r?\n)+")
LEADING_WHITESPACE = " \t\r\n\ufeff"
TAG_RE = re.compile(r"<[^>]+>")


def extract_metadata_block(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into its metadata map and markdown body.

    The first non-whitespace construct must be a literal map. Blank lines
    between the closing brace and the body are dropped.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (metadata dict, body).

    Raises:
        InvalidDocument: If the metadata block is missing or malformed.
    """
    # Import here to avoid circular imports
    from .content import InvalidDocument

    leading = text.lstrip(LEADING_WHITESPACE)
    if not leading:
        raise InvalidDocument(None, "Document is empty; expected a metadata block")
    if not leading.startswith("{"):
        raise InvalidDocument(
            None, "Missing metadata block: document must start with '{'"
        )
    try:
        metadata, end = read_map(text, len(text) - len(leading))
    except MetadataSyntaxError as exc:
        raise InvalidDocument(None, f"Malformed metadata block: {exc}", exc) from exc
    body = BLANK_LINES_RE.sub("", text[end:], count=1)
    if not body.strip():
        body = ""
    return metadata, body


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


class _HeadingCollector(mistune.HTMLRenderer):
    """Markdown renderer that records headings as it renders them.

    Attributes:
        headings: List of Heading objects in document order.
    """

    def __init__(self):
        super().__init__(escape=False)
        self.headings: list = []
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        # Import here to avoid circular imports
        from .content import Heading

        plain = html.unescape(TAG_RE.sub("", text)).strip()
        base_id = _generate_heading_id(plain)
        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id
        self.headings.append(Heading(id=heading_id, text=plain, level=level))
        return super().heading(text, level, **attrs)


class MetadataBlockExtractor:
    """Extracts the leading literal-map metadata block."""

    def extract(self, content: str, path: Path | None) -> dict[str, Any]:
        """Extract metadata and body from content.

        Args:
            content: Raw document text.
            path: Path to the source file (unused).

        Returns:
            Dictionary with 'metadata' and 'body' keys.
        """
        metadata, body = extract_metadata_block(content)
        return {"metadata": metadata, "body": body}


class PostFilenameExtractor:
    """Extracts publish date and slug from the filename.

    Posts follow ``YYYY-MM-DD-slug.md``. Other files get no date and a
    slug derived from the stem.
    """

    def extract(self, content: str, path: Path | None) -> dict[str, Any]:
        if path is None:
            return {}
        parsed = parse_post_filename(path.name)
        if parsed is None:
            return {"date": None, "slug": slugify(path.stem)}
        date, slug = parsed
        return {"date": date, "slug": slug}


class HeadingExtractor:
    """Extracts markdown headings, in document order, with anchor ids."""

    def extract(self, content: str, path: Path | None) -> dict[str, Any]:
        collector = _HeadingCollector()
        markdown = mistune.create_markdown(renderer=collector)
        markdown(content)
        return {"headings": collector.headings}


class CompositeMetadataExtractor:
    """Combines multiple metadata extractors.

    Extractors run in order and their results are merged, later ones
    overriding earlier ones. Once an extractor has produced a 'body',
    the extractors after it receive that body instead of the raw text.
    """

    def __init__(self, extractors: list | None = None):
        """Initialize with a list of extractors.

        Args:
            extractors: List of MetadataExtractor implementations.
                       If None, uses default extractors.
        """
        if extractors is None:
            self._extractors = [
                MetadataBlockExtractor(),
                PostFilenameExtractor(),
                HeadingExtractor(),
            ]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor) -> None:
        """Add an extractor to the composite.

        Args:
            extractor: A MetadataExtractor implementation.
        """
        self._extractors.append(extractor)

    def extract(self, content: str, path: Path | None) -> dict[str, Any]:
        """Extract all metadata from content.

        Args:
            content: Raw document text.
            path: Path to the source file, if any.

        Returns:
            Dictionary with all extracted metadata.
        """
        result: dict[str, Any] = {}
        for extractor in self._extractors:
            source = result.get("body", content)
            result.update(extractor.extract(source, path))
        return result


# Default composite extractor instance
default_metadata_extractor = CompositeMetadataExtractor()
