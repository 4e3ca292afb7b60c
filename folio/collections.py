from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from .content import PAGE, POST, ContentDocument
from .utils import build_tags_index


class DocumentCollection(Sequence[ContentDocument]):
    """Lightweight helper for working with lists of ContentDocuments."""

    def __init__(self, documents: Iterable[ContentDocument]):
        self._documents = list(documents)

    def __iter__(self) -> Iterator[ContentDocument]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, item):
        return self._documents[item]

    def pages(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.kind == PAGE)

    def posts(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.kind == POST)

    def with_tag(self, tag: str) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if tag in d.tags)

    def with_layout(self, layout: str) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.layout == layout)

    def navigation(self) -> DocumentCollection:
        """Pages shown in navigation, ordered by page-index then title.

        Pages without an integer page-index sort after the numbered ones.
        """

        def sort_key(d: ContentDocument):
            index = d.page_index
            numbered = isinstance(index, int) and not isinstance(index, bool)
            return (not numbered, index if numbered else 0, str(d.title or ""))

        return DocumentCollection(sorted(self.pages().filter_navbar(), key=sort_key))

    def filter_navbar(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.navbar)

    def sorted(self, reverse: bool = True) -> DocumentCollection:
        """Sort documents by date, then by slug.

        Documents without a date (pages, misnamed posts) sort as oldest.

        Args:
            reverse: If True (default), newest first. If False, oldest first.

        Returns:
            A new DocumentCollection with sorted documents.
        """

        def sort_key(d: ContentDocument):
            return (d.date is not None, d.date or 0, d.slug)

        ordered = sorted(self._documents, key=sort_key, reverse=reverse)
        return DocumentCollection(ordered)

    def latest(self, count: int = 5) -> DocumentCollection:
        return DocumentCollection(self.posts().sorted()[:count])

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"DocumentCollection({len(self._documents)} documents)"


class TagCollection(Mapping[str, DocumentCollection]):
    """Mapping of tag name to DocumentCollection, in first-seen tag order."""

    def __init__(self, mapping: dict[str, Iterable[ContentDocument]]):
        self._mapping = {k: DocumentCollection(v) for k, v in mapping.items()}

    @classmethod
    def from_documents(cls, documents: Iterable[ContentDocument]) -> TagCollection:
        return cls(build_tags_index(documents))

    def __getitem__(self, key: str) -> DocumentCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def counts(self) -> dict[str, int]:
        return {tag: len(documents) for tag, documents in self._mapping.items()}

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TagCollection({len(self._mapping)} tags)"
