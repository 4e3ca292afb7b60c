"""Validation of content documents against page and post conventions.

Every document needs a ``title`` and a ``layout``. Pages carry an integer
``page-index`` and may carry a boolean ``navbar?``; posts carry a ``tags``
sequence and live in ``YYYY-MM-DD-slug.md`` files. Keys outside the
recognized set, and keys that belong to the other kind, are only warnings.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .content import POST, ContentDocument
from .edn import Keyword
from .utils import parse_post_filename

ERROR = "error"
WARNING = "warning"

DEFAULT_LAYOUTS = (
    "home",
    "page",
    "post",
    "archives",
    "tags",
    "tag",
    "previews",
    "author",
)
COMMON_KEYS = frozenset({"title", "layout"})
PAGE_KEYS = frozenset({"page-index", "navbar?"})
POST_KEYS = frozenset({"tags"})
RECOGNIZED_KEYS = COMMON_KEYS | PAGE_KEYS | POST_KEYS


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found in a document.

    Attributes:
        path: Source file, if the document came from one.
        key: Metadata key involved, or None for whole-document problems.
        message: Human-readable description.
        severity: "error" or "warning".
    """

    path: Path | None
    key: str | None
    message: str
    severity: str = ERROR

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    def __str__(self) -> str:
        location = f"{self.path}: " if self.path else ""
        field = f":{self.key} " if self.key else ""
        return f"{location}{self.severity}: {field}{self.message}"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_tag(value: Any) -> bool:
    if not isinstance(value, str) or isinstance(value, Keyword):
        return False
    return bool(value.strip())


class DocumentValidator:
    """Checks documents against the page/post conventions.

    Attributes:
        layouts: Accepted layout identifiers.
    """

    def __init__(self, layouts: Iterable[str] | None = None):
        self.layouts = frozenset(layouts if layouts is not None else DEFAULT_LAYOUTS)

    def validate(self, document: ContentDocument) -> list[ValidationIssue]:
        """Check a document.

        Args:
            document: Parsed document.

        Returns:
            List of issues, errors before warnings in key order.
        """
        issues: list[ValidationIssue] = []

        def report(key: str | None, message: str, severity: str = ERROR) -> None:
            issues.append(ValidationIssue(document.path, key, message, severity))

        metadata = document.metadata
        self._check_common(metadata, report)
        if document.kind == POST:
            self._check_post(document, report)
        else:
            self._check_page(metadata, report)

        for key in metadata:
            if key not in RECOGNIZED_KEYS:
                report(key, "is not a recognized metadata key", WARNING)

        issues.sort(key=lambda issue: not issue.is_error)
        return issues

    def is_valid(self, document: ContentDocument) -> bool:
        return not any(issue.is_error for issue in self.validate(document))

    def _check_common(self, metadata: dict[str, Any], report) -> None:
        title = metadata.get("title")
        if "title" not in metadata:
            report("title", "is required")
        elif (
            not isinstance(title, str)
            or isinstance(title, Keyword)
            or not title.strip()
        ):
            report("title", "must be a non-empty string")

        layout = metadata.get("layout")
        if "layout" not in metadata:
            report("layout", "is required")
        elif not isinstance(layout, str):
            report("layout", "must be a keyword such as :page")
        elif layout not in self.layouts:
            known = ", ".join(f":{name}" for name in sorted(self.layouts))
            report("layout", f"unknown layout :{layout} (expected one of {known})")

    def _check_page(self, metadata: dict[str, Any], report) -> None:
        if "page-index" not in metadata:
            report("page-index", "is required for pages")
        elif not _is_int(metadata["page-index"]) or metadata["page-index"] < 0:
            report("page-index", "must be a non-negative integer")

        if "navbar?" in metadata and not isinstance(metadata["navbar?"], bool):
            report("navbar?", "must be true or false")

        if "tags" in metadata:
            report("tags", "is meant for posts, not pages", WARNING)

    def _check_post(self, document: ContentDocument, report) -> None:
        metadata = document.metadata
        tags = metadata.get("tags")
        if "tags" not in metadata:
            report("tags", "is required for posts")
        elif not isinstance(tags, list):
            report("tags", 'must be a sequence of strings such as ["clojure"]')
        else:
            if not all(_is_tag(tag) for tag in tags):
                report("tags", "must contain only non-empty strings")
            elif len(set(tags)) != len(tags):
                report("tags", "contains duplicates", WARNING)

        for key in sorted(metadata.keys() & PAGE_KEYS):
            report(key, "is meant for pages, not posts", WARNING)

        path = document.path
        if path is not None and parse_post_filename(path.name) is None:
            report(None, "post filename must look like YYYY-MM-DD-slug.md")


def validate_documents(
    documents: Iterable[ContentDocument], validator: DocumentValidator | None = None
) -> list[ValidationIssue]:
    """Validate many documents and return all their issues in order."""
    validator = validator or DocumentValidator()
    issues: list[ValidationIssue] = []
    for document in documents:
        issues.extend(validator.validate(document))
    return issues
