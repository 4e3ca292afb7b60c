"""Utility functions for Folio.

This module contains small helpers used throughout the Folio codebase.
These include string processing, filename conventions, and tag indexing.

Key functions:
    slugify: Convert filenames to URL slugs.
    extract_date_from_name: Extract date from filename prefix.
    parse_post_filename: Split a YYYY-MM-DD-slug.md filename into date and slug.
    is_markdown: Check if a path is a Markdown file.
    is_internal_path: Check if a path lies under an ignored directory.
    build_tags_index: Build index of documents by tags.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

POST_FILENAME_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(.+)$")


def _strip_date_prefix(name: str) -> str:
    parts = name.split("-")
    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        return "-".join(parts[3:])
    return name


def slugify(name: str) -> str:
    """Convert filename (without extension) to slug, dropping date prefix.

    Args:
        name: Filename stem.

    Returns:
        URL-friendly slug.
    """
    cleaned = _strip_date_prefix(name)
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def extract_date_from_name(name: str) -> datetime | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        datetime object if a valid date prefix is found, None otherwise.

    Examples:
        >>> extract_date_from_name("2024-01-15-hello-world")
        datetime(2024, 1, 15, 0, 0)

        >>> extract_date_from_name("hello-world")
        None
    """
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        try:
            return datetime(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return None
    return None


def parse_post_filename(filename: str) -> tuple[datetime, str] | None:
    """Split a post filename into its publish date and slug.

    Posts are named ``YYYY-MM-DD-slug.md``; the date must be a real
    calendar date and the slug must not be empty.

    Args:
        filename: Filename with or without extension.

    Returns:
        Tuple of (date, slug), or None if the name doesn't follow the convention.

    Examples:
        >>> parse_post_filename("2015-08-30-schemas.md")
        (datetime(2015, 8, 30, 0, 0), 'schemas')
    """
    match = POST_FILENAME_RE.match(Path(filename).stem)
    if not match:
        return None
    date = extract_date_from_name(Path(filename).stem)
    if date is None:
        return None
    if not re.search(r"[a-zA-Z0-9]", match.group(4)):
        return None
    return date, slugify(match.group(4))


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == ".md"


def is_internal_path(path: Path) -> bool:
    """Check if a path is internal (contains components starting with _ or .).

    Internal paths hold drafts, partials and tool state, never content.

    Args:
        path: Relative path to check.

    Returns:
        True if any directory component starts with an underscore or a dot.
    """
    return any(part.startswith(("_", ".")) for part in path.parts[:-1])


def build_tags_index(documents: Iterable) -> dict[str, list]:
    """Build an index mapping tags to lists of documents carrying that tag.

    Tags keep the order in which they are first seen.

    Args:
        documents: Iterable of ContentDocument objects with a 'tags' attribute.

    Returns:
        Dictionary mapping tag names to lists of documents.
    """
    tags: dict[str, list] = {}
    for document in documents:
        for tag in document.tags:
            bucket = tags.setdefault(tag, [])
            if not bucket or bucket[-1] is not document:
                bucket.append(document)
    return tags
