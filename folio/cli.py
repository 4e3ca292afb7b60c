"""Command-line interface for Folio.

This module defines the CLI commands using Click framework.
It provides commands for checking a content corpus, inspecting documents,
and scaffolding new pages and posts.

Commands:
- check: Validate every document in the content directory.
- show: Print the parsed metadata of one document.
- tags: List tags with their post counts.
- nav: List the pages shown in navigation, in order.
- new: Create a new page or post interactively.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import click
import questionary
import yaml

from . import __version__
from .check import ConfigError, check_corpus, load_config, load_documents
from .collections import DocumentCollection, TagCollection
from .content import (
    PAGE,
    POST,
    ContentProcessor,
    DefaultDocumentBuilder,
    InvalidDocument,
)
from .edn import Keyword, dumps
from .utils import slugify


@click.group()
@click.version_option(version=__version__, prog_name="folio")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Folio content-document checker."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


@cli.command()
@click.option("--strict", is_flag=True, help="Treat warnings as failures")
@click.option(
    "--content-dir",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Content directory to check (overrides folio.yaml content_dir)",
)
def check(strict: bool, content_dir: Path | None):
    """Validate every document in the content directory."""
    project_root = Path.cwd()
    try:
        result = check_corpus(
            project_root, content_dir=content_dir, strict=True if strict else None
        )
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from None

    current = None
    for issue in result.issues:
        if issue.path != current:
            current = issue.path
            click.echo(click.style(_display_path(current, project_root), bold=True))
        color = "red" if issue.is_error else "yellow"
        key = f":{issue.key} " if issue.key else ""
        label = click.style(f"{issue.severity}:", fg=color)
        click.echo(f"  {label} {key}{issue.message}")

    total = len(result.documents) + len(result.rejected)
    summary = (
        f"Checked {total} documents: "
        f"{len(result.errors)} errors, {len(result.warnings)} warnings"
    )
    if result.ok:
        click.echo(click.style(summary, fg="green"))
        return
    click.echo(click.style(summary, fg="red", bold=True), err=True)
    raise SystemExit(1)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["edn", "json", "yaml"]),
    default="edn",
    show_default=True,
    help="Output format for the metadata",
)
def show(path: Path, output_format: str):
    """Print the parsed metadata of one document."""
    try:
        document = DefaultDocumentBuilder().build(path)
    except InvalidDocument as exc:
        raise click.ClickException(str(exc)) from None

    if output_format == "edn":
        click.echo(dumps(document.metadata, multiline=True))
    elif output_format == "json":
        click.echo(json.dumps(document.metadata, indent=2, ensure_ascii=False))
    else:
        click.echo(
            yaml.safe_dump(
                _plain(document.metadata), allow_unicode=True, sort_keys=False
            ),
            nl=False,
        )
    click.echo(click.style(f"kind: {document.kind}", dim=True), err=True)
    if document.first_heading:
        click.echo(
            click.style(f"first heading: {document.first_heading}", dim=True), err=True
        )


@cli.command()
def tags():
    """List tags with their post counts."""
    documents = _load_or_fail()
    index = TagCollection.from_documents(DocumentCollection(documents).posts())
    if not index:
        click.echo("No tags found.")
        return
    for tag, count in index.counts().items():
        click.echo(f"{tag} ({count})")


@cli.command()
def nav():
    """List the pages shown in navigation, in order."""
    documents = _load_or_fail()
    for document in DocumentCollection(documents).navigation():
        click.echo(f"{document.page_index}\t{document.title}")


@cli.command()
def new():
    """Create a new page or post interactively."""
    project_root = Path.cwd()
    try:
        config = load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from None
    content_dir = project_root / config["content_dir"]

    if not content_dir.exists():
        raise click.ClickException(
            f"No {config['content_dir']}/ directory found. "
            "Run this command from a project root."
        )

    kind = questionary.select(
        "Document kind:",
        choices=[POST, PAGE],
        style=_questionary_style(),
    ).ask()
    if kind is None:
        raise click.Abort()

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    metadata: dict[str, Any] = {"title": title, "layout": Keyword(kind)}
    if kind == POST:
        target_dir = content_dir / config["posts_dir"]
        answer = questionary.text(
            "Tags (comma separated):",
            style=_questionary_style(),
        ).ask()
        if answer is None:
            raise click.Abort()
        metadata["tags"] = _split_tags(answer)
        filename = f"{datetime.now().strftime('%Y-%m-%d')}-{slugify(title)}.md"
    else:
        target_dir = content_dir / config["pages_dir"]
        answer = questionary.text(
            "Page index:",
            default=str(_next_page_index(target_dir)),
            validate=lambda x: x.strip().isdigit() or "Enter a non-negative integer",
            style=_questionary_style(),
        ).ask()
        if answer is None:
            raise click.Abort()
        metadata["page-index"] = int(answer.strip())
        navbar = questionary.confirm(
            "Show in navbar?",
            default=True,
            style=_questionary_style(),
        ).ask()
        if navbar is None:
            raise click.Abort()
        metadata["navbar?"] = navbar
        filename = f"{slugify(title)}.md"

    target_path = target_dir / filename
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )

    slug = slugify(Path(filename).stem)
    conflicting = [
        f for f in _existing_markdown(target_dir) if slugify(f.stem) == slug
    ]
    if conflicting:
        raise click.ClickException(
            f"A file with slug '{slug}' already exists: {conflicting[0].name}"
        )

    target_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(dumps(metadata, multiline=True) + "\n\n", encoding="utf-8")
    click.echo(f"Created {target_path.relative_to(project_root)}")


def _load_or_fail():
    """Load all documents from the current project or exit with a message."""
    try:
        return load_documents(Path.cwd())
    except (ConfigError, FileNotFoundError, InvalidDocument) as exc:
        raise click.ClickException(str(exc)) from None


def _display_path(path: Path | None, project_root: Path) -> str:
    if path is None:
        return "<unknown>"
    try:
        return str(path.relative_to(project_root))
    except ValueError:
        return str(path)


def _plain(value: Any) -> Any:
    """Convert keyword values to plain strings for YAML output."""
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, Keyword):
        return str(value)
    return value


def _split_tags(answer: str) -> list[str]:
    tags: list[str] = []
    for part in answer.split(","):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _existing_markdown(folder: Path) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(f for f in folder.iterdir() if f.is_file() and f.suffix == ".md")


def _next_page_index(pages_dir: Path) -> int:
    """Return one past the highest page-index among existing pages."""
    if not pages_dir.exists():
        return 0
    documents, _ = ContentProcessor(pages_dir).load_with_errors()
    indexes = [
        d.page_index
        for d in documents
        if isinstance(d.page_index, int) and not isinstance(d.page_index, bool)
    ]
    return max(indexes) + 1 if indexes else 0


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
