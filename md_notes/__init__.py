"""
md-notes: markdown notes with rendering and version history.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    md-notes render welcome
    md-notes save todo --file todo.md
    md-notes history todo

Library Usage:
    from md_notes import DocumentStore, SnapshotStore, render_markdown

    html = render_markdown("# Title\\n\\n- a\\n  - b")

    documents = DocumentStore()
    snapshots = SnapshotStore(documents)
    snapshot = snapshots.save("todo", "# Todo\\n")
    snapshots.restore("todo", snapshot.snapshot_id)
"""

from .config import ConfigError, NotesConfig, build_config, load_config
from .documents import DocumentStore, sanitize_document_name
from .exceptions import (
    DocumentExistsError,
    DocumentNotFoundError,
    InvalidDocumentNameError,
    NotesError,
    NotFoundError,
    SnapshotNotFoundError,
    StorageError,
)
from .models import ListBlock, ListItem, Snapshot, TableBlock, TextSegment
from .renderer import MarkdownRenderer, render_markdown
from .snapshots import SnapshotStore, format_timestamp, parse_timestamp

__version__ = "0.1.0"

__all__ = [
    # Rendering
    "MarkdownRenderer",
    "render_markdown",
    # History
    "SnapshotStore",
    "format_timestamp",
    "parse_timestamp",
    # Storage
    "DocumentStore",
    "sanitize_document_name",
    # Configuration
    "NotesConfig",
    "build_config",
    "load_config",
    # Data models
    "ListBlock",
    "ListItem",
    "Snapshot",
    "TableBlock",
    "TextSegment",
    # Exceptions
    "ConfigError",
    "DocumentExistsError",
    "DocumentNotFoundError",
    "InvalidDocumentNameError",
    "NotesError",
    "NotFoundError",
    "SnapshotNotFoundError",
    "StorageError",
    # Version
    "__version__",
]
