"""Corpus checking for Folio.

This module contains the logic for checking a whole content directory.
It loads configuration, parses every document, and validates the ones that parse.

Key functions:
- check_corpus: Main function to check the entire content tree.
- load_config: Loads configuration from folio.yaml.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .content import ContentDocument, ContentProcessor
from .validation import (
    DEFAULT_LAYOUTS,
    ERROR,
    WARNING,
    DocumentValidator,
    ValidationIssue,
    validate_documents,
)

logger = logging.getLogger(__name__)

CONFIG_FILE = "folio.yaml"

DEFAULT_CONFIG = {
    "content_dir": "content/md",
    "pages_dir": "pages",
    "posts_dir": "posts",
    "layouts": list(DEFAULT_LAYOUTS),
    "strict": False,
}


class ConfigError(Exception):
    """Invalid folio.yaml contents.

    Attributes:
        source_path: Path to the configuration file.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}")


@dataclass
class CheckResult:
    """Result of a corpus check.

    Attributes:
        documents: Documents that parsed.
        issues: Issues for every document, including rejected ones.
        content_dir: Directory that was checked.
        strict: Whether warnings count as failures.
        rejected: Files that could not be parsed into documents.
    """

    documents: list[ContentDocument]
    issues: list[ValidationIssue]
    content_dir: Path
    strict: bool = False
    rejected: list[Path] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == WARNING]

    @property
    def ok(self) -> bool:
        if self.errors:
            return False
        return not (self.strict and self.warnings)


def load_config(project_root: Path) -> dict[str, Any]:
    """Load configuration from folio.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    config_path = project_root / CONFIG_FILE
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(config_path, f"Invalid YAML: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(config_path, "Expected a mapping of settings")
        config.update(loaded)
    layouts = config.get("layouts")
    if not isinstance(layouts, list) or not all(isinstance(x, str) for x in layouts):
        raise ConfigError(config_path, "'layouts' must be a list of names")
    return config


def load_documents(
    project_root: Path, content_dir: Path | None = None
) -> list[ContentDocument]:
    """Load every document in the configured content directory.

    Raises:
        FileNotFoundError: If the content directory is missing.
        InvalidDocument: On the first document that cannot be parsed.
    """
    config = load_config(project_root)
    return _processor(project_root, config, content_dir).load()


def check_corpus(
    project_root: Path,
    content_dir: Path | None = None,
    strict: bool | None = None,
) -> CheckResult:
    """Check every document in the content tree.

    Rejected documents become error issues; the check carries on with the
    remaining files.

    Args:
        project_root: Root directory of the project.
        content_dir: Optional content directory instead of config content_dir.
        strict: Treat warnings as failures; defaults to the config value.

    Returns:
        CheckResult with parsed documents and all issues.

    Raises:
        FileNotFoundError: If the content directory is missing.
    """
    config = load_config(project_root)
    if strict is None:
        strict = bool(config.get("strict"))
    processor = _processor(project_root, config, content_dir)
    documents, errors = processor.load_with_errors()

    issues = [
        ValidationIssue(exc.source_path, None, exc.message, ERROR) for exc in errors
    ]
    validator = DocumentValidator(layouts=config["layouts"])
    issues.extend(validate_documents(documents, validator))
    issues.sort(key=lambda issue: str(issue.path or ""))
    logger.debug(
        "Checked %d documents: %d issues", len(documents) + len(errors), len(issues)
    )
    return CheckResult(
        documents=documents,
        issues=issues,
        content_dir=processor.content_dir,
        strict=strict,
        rejected=[exc.source_path for exc in errors if exc.source_path],
    )


def _processor(
    project_root: Path, config: dict[str, Any], content_dir: Path | None
) -> ContentProcessor:
    resolved = content_dir or (project_root / config.get("content_dir", "content/md"))
    if not resolved.is_dir():
        raise FileNotFoundError(f"Expected content directory at {resolved}")
    return ContentProcessor(
        resolved,
        pages_dir=config.get("pages_dir", "pages"),
        posts_dir=config.get("posts_dir", "posts"),
    )
