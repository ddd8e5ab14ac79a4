"""Block-level classification: headers, tables, and lists."""

from __future__ import annotations

import re

from .config import NotesConfig
from .constants import MAX_HEADER_LEVEL
from .lists import ListStructureBuilder
from .models import Segment
from .tables import TableBlockExtractor

HEADER_MARKUP_PATTERN = re.compile(rf"^<h[1-{MAX_HEADER_LEVEL}]>")


def header_level(line: str) -> int:
    """Return the header level of a markdown line, or 0 when it is not a header.

    The whole leading ``#`` run is counted before checking for the space, so
    ``### Title`` is level 3 and never a level-1 header of ``## Title``.

    Examples:
        header_level("## Section")  # 2
        header_level("#### Deep")  # 0
        header_level("#NoSpace")  # 0
    """
    level = len(line) - len(line.lstrip("#"))
    if not 1 <= level <= MAX_HEADER_LEVEL:
        return 0
    if line[level : level + 1] != " ":
        return 0
    return level


def apply_headers(text: str) -> str:
    """Convert header lines to ``<hN>`` elements, one line at a time."""
    lines = text.split("\n")
    for index, line in enumerate(lines):
        level = header_level(line)
        if level:
            lines[index] = f"<h{level}>{line[level + 1 :]}</h{level}>"
    return "\n".join(lines)


def is_block_markup(line: str) -> bool:
    """Return True when a text line already carries header markup."""
    return HEADER_MARKUP_PATTERN.match(line) is not None


class BlockClassifier:
    """Split formatted text into text, table, and list segments.

    Tables are extracted before lists so that ``-`` or ``*`` inside a table
    row is never read as a list marker.
    """

    def __init__(self, config: NotesConfig | None = None):
        config = config or NotesConfig()
        self.tables = TableBlockExtractor()
        self.lists = ListStructureBuilder(
            indent_unit=config.indent_unit, markers=config.list_markers
        )

    def classify(self, text: str) -> list[Segment]:
        """Partition `text` into segments in document order."""
        entries = self.tables.extract(text.split("\n"))
        return self.lists.build(entries)
