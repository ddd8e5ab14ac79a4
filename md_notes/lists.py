"""Nested list reconstruction from indented list lines."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .constants import ALLOWED_LIST_MARKERS
from .models import ListBlock, ListItem, Segment, TableBlock, TextSegment


class ListStructureBuilder:
    """Rebuild nested lists from flat lines using a depth stack.

    A list line is optional leading whitespace, one marker character, one
    space, and content. Its depth is ``len(leading whitespace) // indent_unit``;
    odd widths round down, so 2 and 3 spaces are both depth 1.

    The stack holds one ``(depth, ListBlock)`` entry per open level:

    - An item deeper than the top opens a list under the previous item.
    - A shallower item closes levels while the top is deeper than it; if that
      leaves no level at its depth or above, a new level is opened.
    - Any other line, or a table, closes every open level.

    Args:
        indent_unit: Number of whitespace characters per nesting level.
        markers: Characters accepted as list markers.

    Examples:
        builder = ListStructureBuilder()
        segments = builder.build(["- a", "  - b", "- c"])
    """

    def __init__(self, indent_unit: int = 2, markers: str = ALLOWED_LIST_MARKERS):
        self.indent_unit = indent_unit
        self.pattern = re.compile(rf"^(?P<indent>\s*)[{re.escape(markers)}] (?P<content>.+)$")

    def match_item(self, line: str) -> ListItem | None:
        """Return a `ListItem` when `line` is a list line, otherwise None.

        Examples:
            ListStructureBuilder().match_item("   - item").depth  # 1
        """
        match = self.pattern.match(line)
        if match is None:
            return None
        depth = len(match.group("indent")) // self.indent_unit
        return ListItem(content=match.group("content"), depth=depth)

    def build(self, entries: Iterable[str | TableBlock]) -> list[Segment]:
        """Group lines into text segments, list blocks, and tables.

        Args:
            entries: Lines and already-extracted tables, in document order.

        Returns:
            list[Segment]: Segments covering every entry exactly once.
        """
        segments: list[Segment] = []
        stack: list[tuple[int, ListBlock]] = []
        text: TextSegment | None = None

        for entry in entries:
            item = self.match_item(entry) if isinstance(entry, str) else None

            if item is None:
                stack.clear()
                if isinstance(entry, TableBlock):
                    segments.append(entry)
                    text = None
                    continue
                if text is None:
                    text = TextSegment()
                    segments.append(text)
                text.lines.append(entry)
                continue

            text = None
            self._place(item, stack, segments)

        return segments

    def _place(
        self, item: ListItem, stack: list[tuple[int, ListBlock]], segments: list[Segment]
    ) -> None:
        depth = item.depth

        while stack and stack[-1][0] > depth:
            stack.pop()

        if not stack:
            root = ListBlock()
            segments.append(root)
            stack.append((depth, root))
        elif depth > stack[-1][0]:
            parent_item = stack[-1][1].items[-1]
            nested = ListBlock()
            parent_item.children.append(nested)
            stack.append((depth, nested))

        stack[-1][1].items.append(item)


def render_list(block: ListBlock) -> list[str]:
    """Render a list tree as ``<ul>``/``<li>`` markup lines.

    Nested lists are placed inside the ``<li>`` of the item that owns them.
    """
    lines = ["<ul>"]
    for item in block.items:
        if not item.children:
            lines.append(f"<li>{item.content}</li>")
            continue
        lines.append(f"<li>{item.content}")
        for child in item.children:
            lines.extend(render_list(child))
        lines.append("</li>")
    lines.append("</ul>")
    return lines
