"""Data models for md-notes."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Union

from .constants import SNAPSHOT_TIMESTAMP_FORMAT


@dataclass
class TextSegment:
    """A run of lines that are neither list items nor table rows.

    Attributes:
        lines: Lines after inline formatting, without line endings.
    """

    lines: list[str] = field(default_factory=list)


@dataclass
class ListItem:
    """A single list entry.

    Attributes:
        content: Inline-formatted item text.
        depth: Nesting depth derived from leading whitespace.
        children: Nested lists opened directly under this item.
    """

    content: str
    depth: int
    children: list[ListBlock] = field(default_factory=list)


@dataclass
class ListBlock:
    """An unordered list: ordered items, each possibly owning nested lists."""

    items: list[ListItem] = field(default_factory=list)

    def iter_items(self) -> Iterator[ListItem]:
        """Yield every item depth-first, in document order."""
        for item in self.items:
            yield item
            for child in item.children:
                yield from child.iter_items()


@dataclass
class TableBlock:
    """A table extracted from a run of pipe-delimited lines.

    Attributes:
        header: Cells of the first non-separator row.
        rows: Cells of every following non-separator row.
    """

    header: list[str]
    rows: list[list[str]] = field(default_factory=list)


Segment = Union[TextSegment, ListBlock, TableBlock]


@dataclass(frozen=True)
class Snapshot:
    """An immutable, timestamped copy of a document's content.

    Attributes:
        document: Name of the owning document.
        timestamp: Creation time in UTC, second resolution.
        path: Location of the captured content on disk.
    """

    document: str
    timestamp: datetime
    path: Path

    @property
    def snapshot_id(self) -> str:
        """Identifier of the snapshot, which is also its file stem."""
        return self.timestamp.strftime(SNAPSHOT_TIMESTAMP_FORMAT)
