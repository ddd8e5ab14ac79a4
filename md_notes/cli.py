"""
Command-line interface for md-notes.

Renders notes to HTML markup and manages their version history.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

import click

from .config import ConfigError, NotesConfig, build_config
from .documents import DocumentStore
from .exceptions import (
    DocumentExistsError,
    InvalidDocumentNameError,
    NotFoundError,
    StorageError,
)
from .filesystem import get_max_file_size, read_text
from .renderer import MarkdownRenderer
from .snapshots import SnapshotStore

__all__ = ["cli"]


class Context:
    """Objects shared by every subcommand."""

    def __init__(self, config: NotesConfig):
        self.config = config
        self.documents = DocumentStore(config)
        self.snapshots = SnapshotStore(self.documents, config)
        self.renderer = MarkdownRenderer(config)


pass_context = click.make_pass_decorator(Context)


def _fail(error: Exception):
    if isinstance(error, InvalidDocumentNameError):
        raise click.BadParameter(str(error)) from error
    raise click.ClickException(str(error)) from error


def _read_stdin() -> str:
    data = click.get_binary_stream("stdin").read()
    try:
        return data.decode("UTF-8")
    except UnicodeDecodeError as error:
        raise StorageError(f"Invalid UTF-8 sequence in standard input: {error}") from error


@click.group()
@click.version_option(package_name="md-notes")
@click.option("--notes-dir", help="Directory holding the notes")
@click.option("--max-snapshots", type=int, help="Snapshots retained per document")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    notes_dir: str | None = None,
    max_snapshots: int | None = None,
    verbose: bool = False,
):
    """
    Render markdown notes and keep a bounded history of their versions.

    Configuration is read from `[tool.md-notes]` in `pyproject.toml` or from
    `.md-notes.toml`, searched upward from the current directory; options
    given on the command line take precedence.

    Examples:
        md-notes save todo --file todo.md
        md-notes history todo
    """
    logging.basicConfig(
        level=(logging.DEBUG if verbose else logging.WARNING),
        format="[%(levelname).1s] %(name)s: %(message)s",
    )

    try:
        config = build_config(Path.cwd(), notes_dir=notes_dir, max_snapshots=max_snapshots)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = replace(config, max_file_size=get_max_file_size(default=config.max_file_size))
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    ctx.obj = Context(config)


@cli.command()
@click.argument("name", required=False)
@click.option(
    "--file",
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Render this file instead of a stored note",
)
@pass_context
def render(context: Context, name: str | None = None, source: Path | None = None):
    """Print the rendered markup of a note (the default note when NAME is omitted)."""
    try:
        if source is not None:
            text = read_text(source, context.config.max_file_size)
        else:
            text = context.documents.read_document(name or context.documents.ensure_default())
    except (NotFoundError, StorageError, InvalidDocumentNameError) as error:
        _fail(error)
    click.echo(context.renderer.render(text))


@cli.command()
@click.argument("name")
@click.option(
    "--file",
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the new content from this file instead of standard input",
)
@pass_context
def save(context: Context, name: str, source: Path | None = None):
    """Save new content for NAME and record a snapshot of it."""
    try:
        if source is not None:
            content = read_text(source, context.config.max_file_size)
        else:
            content = _read_stdin()
        snapshot = context.snapshots.save(name, content)
    except (StorageError, InvalidDocumentNameError) as error:
        _fail(error)
    click.echo(snapshot.snapshot_id)


@cli.command()
@click.argument("name")
@pass_context
def history(context: Context, name: str):
    """List the snapshots of NAME, newest first."""
    try:
        snapshots = context.snapshots.list(name)
    except InvalidDocumentNameError as error:
        _fail(error)
    for snapshot in snapshots:
        click.echo(snapshot.snapshot_id)


@cli.command()
@click.argument("name")
@click.argument("snapshot_id")
@pass_context
def show(context: Context, name: str, snapshot_id: str):
    """Print the content captured by one snapshot."""
    try:
        content = context.snapshots.read(name, snapshot_id)
    except (NotFoundError, StorageError, InvalidDocumentNameError) as error:
        _fail(error)
    click.echo(content, nl=False)


@cli.command()
@click.argument("name")
@click.argument("snapshot_id")
@pass_context
def restore(context: Context, name: str, snapshot_id: str):
    """Replace the current content of NAME with a snapshot."""
    try:
        snapshot = context.snapshots.restore(name, snapshot_id)
    except (NotFoundError, StorageError, InvalidDocumentNameError) as error:
        _fail(error)
    click.echo(f"Restored {snapshot.document} from {snapshot.snapshot_id}")


@cli.command()
@click.argument("name")
@pass_context
def purge(context: Context, name: str):
    """Delete every snapshot of NAME."""
    try:
        deleted = context.snapshots.delete_all(name)
    except (StorageError, InvalidDocumentNameError) as error:
        _fail(error)
    click.echo(f"Deleted {deleted} snapshot(s)")


@cli.command("list")
@pass_context
def list_notes(context: Context):
    """List the notes in the notes directory."""
    for name in context.documents.list_documents():
        click.echo(name)


@cli.command()
@click.argument("name")
@pass_context
def new(context: Context, name: str):
    """Create a note from the starter template."""
    try:
        created = context.documents.create_document(name)
    except (DocumentExistsError, StorageError, InvalidDocumentNameError) as error:
        _fail(error)
    click.echo(f"Created {created}")


@cli.command()
@click.argument("name")
@click.confirmation_option(prompt="Are you sure you want to delete this note?")
@pass_context
def delete(context: Context, name: str):
    """Delete a note. Its snapshots are kept; use `purge` to remove them."""
    try:
        deleted = context.documents.delete_document(name)
    except (NotFoundError, StorageError, InvalidDocumentNameError) as error:
        _fail(error)
    click.echo(f"Deleted {deleted}")


if __name__ == "__main__":
    cli()
