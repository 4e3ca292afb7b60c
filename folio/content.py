"""Content processing for Folio.

This module handles loading of content documents: markdown files that open
with a literal-map metadata block. It splits metadata from body, decides
whether a document is a page or a post, and creates ContentDocument objects.

Key classes:
- ContentDocument: Dataclass representing one page or post.
- Heading: Dataclass representing a heading found in the body.
- InvalidDocument: Raised when a document's metadata block is missing or malformed.
- FileContentLoader: Discovers content files under a directory.
- KindResolver: Decides whether a file is a page or a post.
- DefaultDocumentBuilder: Builds ContentDocument instances from files.
- ContentProcessor: Facade that loads a whole content directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .extractors import CompositeMetadataExtractor, default_metadata_extractor
from .utils import is_internal_path, is_markdown, parse_post_filename

logger = logging.getLogger(__name__)

PAGE = "page"
POST = "post"
DOCUMENT_KINDS = (PAGE, POST)


class InvalidDocument(Exception):
    """A document whose metadata block is missing or malformed.

    Attributes:
        source_path: Path to the offending file, when known.
        message: Human-readable error message.
        original_error: The underlying exception, if any.
    """

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}" if source_path else message)

    def with_path(self, source_path: Path) -> InvalidDocument:
        """Return a copy of this error attributed to ``source_path``."""
        return InvalidDocument(source_path, self.message, self.original_error)


@dataclass
class Heading:
    """Represents a heading found in a document body.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: The text content of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int

    def __str__(self) -> str:
        return f"{'#' * self.level} {self.text}"


@dataclass(eq=False)
class ContentDocument:
    """A page or post: a metadata mapping plus a markdown body.

    Attributes:
        metadata: Parsed metadata block, keyed by keyword name (``"navbar?"``).
        body: Markdown text following the metadata block.
        kind: "page" or "post".
        path: Source file, if the document was read from disk.
        slug: URL slug derived from the filename.
        date: Publish date for posts named ``YYYY-MM-DD-slug.md``.
        headings: Headings in the body, in document order.
    """

    metadata: dict[str, Any]
    body: str
    kind: str = PAGE
    path: Path | None = None
    slug: str = ""
    date: datetime | None = None
    headings: list[Heading] = field(default_factory=list)

    @property
    def title(self) -> Any:
        return self.metadata.get("title")

    @property
    def layout(self) -> Any:
        return self.metadata.get("layout")

    @property
    def tags(self) -> list[str]:
        tags = self.metadata.get("tags")
        if isinstance(tags, list):
            return [tag for tag in tags if isinstance(tag, str)]
        return []

    @property
    def page_index(self) -> Any:
        return self.metadata.get("page-index")

    @property
    def navbar(self) -> bool:
        return self.metadata.get("navbar?") is True

    @property
    def first_heading(self) -> Heading | None:
        return self.headings[0] if self.headings else None

    @property
    def is_page(self) -> bool:
        return self.kind == PAGE

    @property
    def is_post(self) -> bool:
        return self.kind == POST

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"ContentDocument({self.kind}, {self.path or self.title!r})"


class KindResolver:
    """Decides whether a document is a page or a post.

    Placement wins: files under the posts directory are posts and files
    under the pages directory are pages. Elsewhere a ``:post`` layout or a
    ``YYYY-MM-DD-`` filename marks a post.

    Attributes:
        content_dir: Root of the content tree, if known.
        pages_dir: Name of the pages directory.
        posts_dir: Name of the posts directory.
    """

    def __init__(
        self,
        content_dir: Path | None = None,
        pages_dir: str = "pages",
        posts_dir: str = "posts",
    ):
        self.content_dir = content_dir
        self.pages_dir = pages_dir
        self.posts_dir = posts_dir

    def resolve(self, path: Path | None, metadata: dict[str, Any]) -> str:
        """Resolve the kind for a document.

        Args:
            path: Path to the source file, if any.
            metadata: Parsed metadata block.

        Returns:
            "page" or "post".
        """
        if path is not None:
            folders = self._folders(path)
            if self.posts_dir in folders:
                return POST
            if self.pages_dir in folders:
                return PAGE
        if metadata.get("layout") == POST:
            return POST
        if path is not None and parse_post_filename(path.name) is not None:
            return POST
        return PAGE

    def _folders(self, path: Path) -> tuple[str, ...]:
        if self.content_dir is not None:
            try:
                return path.relative_to(self.content_dir).parts[:-1]
            except ValueError:
                pass
        return path.parts[:-1]


class FileContentLoader:
    """Discovers content files under a directory.

    Attributes:
        content_dir: Directory containing content.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self) -> list[Path]:
        """Return all markdown files, sorted.

        Directories whose names start with ``_`` or ``.`` are skipped.

        Returns:
            List of paths to content files.
        """
        files: list[Path] = []
        for path in sorted(self.content_dir.rglob("*")):
            if path.is_dir():
                continue
            rel = path.relative_to(self.content_dir)
            if is_internal_path(rel):
                continue
            if is_markdown(path):
                files.append(path)
        logger.debug("Found %d content files under %s", len(files), self.content_dir)
        return files


class DefaultDocumentBuilder:
    """Builds ContentDocument objects from source text or files.

    Attributes:
        metadata_extractor: Composite metadata extractor.
        kind_resolver: Kind resolver instance.
    """

    def __init__(
        self,
        content_dir: Path | None = None,
        metadata_extractor: CompositeMetadataExtractor | None = None,
        kind_resolver: KindResolver | None = None,
    ):
        """Initialize the document builder.

        Args:
            content_dir: Root of the content tree, used for kind resolution.
            metadata_extractor: Optional custom metadata extractor.
            kind_resolver: Optional custom kind resolver.
        """
        self.metadata_extractor = metadata_extractor or default_metadata_extractor
        self.kind_resolver = kind_resolver or KindResolver(content_dir)

    def build(self, path: Path) -> ContentDocument:
        """Build a ContentDocument from a source file.

        Args:
            path: Path to the source file.

        Returns:
            ContentDocument object.

        Raises:
            InvalidDocument: If the file is not UTF-8 text, or its metadata
                block is missing or malformed.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidDocument(path, "File is not valid UTF-8 text", exc) from exc
        return self.build_from_text(text, path)

    def build_from_text(
        self, text: str, path: Path | None = None, kind: str | None = None
    ) -> ContentDocument:
        """Build a ContentDocument from raw text.

        Args:
            text: Raw document text.
            path: Path the text came from, if any.
            kind: Force "page" or "post" instead of resolving it.

        Returns:
            ContentDocument object.

        Raises:
            InvalidDocument: If the metadata block is missing or malformed.
            ValueError: If ``kind`` is not a known document kind.
        """
        if kind is not None and kind not in DOCUMENT_KINDS:
            raise ValueError(f"Unknown document kind {kind!r}")
        try:
            extracted = self.metadata_extractor.extract(text, path)
        except InvalidDocument as exc:
            if path is not None and exc.source_path is None:
                raise exc.with_path(path) from exc.original_error
            raise
        metadata = extracted.get("metadata", {})
        resolved = kind or self.kind_resolver.resolve(path, metadata)
        logger.debug("Parsed %s as %s", path or "<text>", resolved)
        return ContentDocument(
            metadata=metadata,
            body=extracted.get("body", text),
            kind=resolved,
            path=path,
            slug=extracted.get("slug", ""),
            date=extracted.get("date") if resolved == POST else None,
            headings=extracted.get("headings", []),
        )


class ContentProcessor:
    """Facade for loading every document in a content directory.

    Attributes:
        content_dir: Directory containing content.
    """

    def __init__(
        self,
        content_dir: Path,
        content_loader: FileContentLoader | None = None,
        document_builder: DefaultDocumentBuilder | None = None,
        pages_dir: str = "pages",
        posts_dir: str = "posts",
    ):
        """Initialize the content processor.

        Args:
            content_dir: Path to the content directory.
            content_loader: Optional custom content loader.
            document_builder: Optional custom document builder.
            pages_dir: Name of the pages directory.
            posts_dir: Name of the posts directory.
        """
        self.content_dir = content_dir
        self._content_loader = content_loader or FileContentLoader(content_dir)
        self._document_builder = document_builder or DefaultDocumentBuilder(
            content_dir,
            kind_resolver=KindResolver(content_dir, pages_dir, posts_dir),
        )

    def load(self) -> list[ContentDocument]:
        """Load all content files.

        Returns:
            List of ContentDocument objects.

        Raises:
            InvalidDocument: On the first document that cannot be parsed.
        """
        return [
            self._document_builder.build(path)
            for path in self._content_loader.iter_files()
        ]

    def load_with_errors(self) -> tuple[list[ContentDocument], list[InvalidDocument]]:
        """Load all content files, collecting rejected documents.

        Returns:
            Tuple of (parsed documents, errors for rejected documents).
        """
        documents: list[ContentDocument] = []
        errors: list[InvalidDocument] = []
        for path in self._content_loader.iter_files():
            try:
                documents.append(self._document_builder.build(path))
            except InvalidDocument as exc:
                logger.warning("Rejected %s: %s", path, exc.message)
                errors.append(exc)
        return documents, errors


def parse_document(
    text: str, path: Path | None = None, kind: str | None = None
) -> ContentDocument:
    """Parse raw document text into a ContentDocument.

    Args:
        text: Raw document text.
        path: Path the text came from, used for slug, date and kind.
        kind: Force "page" or "post".

    Returns:
        ContentDocument object.

    Raises:
        InvalidDocument: If the metadata block is missing or malformed.
    """
    return DefaultDocumentBuilder().build_from_text(text, path, kind)
