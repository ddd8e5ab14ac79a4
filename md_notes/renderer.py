"""Markdown to HTML rendering pipeline."""

from __future__ import annotations

import re

from .blocks import BlockClassifier, apply_headers, is_block_markup
from .config import NotesConfig
from .constants import BREAK_MARKER, CODE_BLOCK_CLOSE, CODE_BLOCK_OPEN
from .inline import transform_inline
from .lists import render_list
from .models import ListBlock, TableBlock, TextSegment

_REPEATED_BREAKS = re.compile(rf"(?:{re.escape(BREAK_MARKER)}){{2,}}")
_TRAILING_BREAK = re.compile(rf"{re.escape(BREAK_MARKER)}(\s*)\Z")


def render_table(table: TableBlock) -> list[str]:
    """Render a table as markup lines; ``<tbody>`` is omitted without body rows."""
    header_cells = "".join(f"<th>{cell}</th>" for cell in table.header)
    lines = ["<table>", "<thead>", f"<tr>{header_cells}</tr>", "</thead>"]
    if table.rows:
        lines.append("<tbody>")
        for row in table.rows:
            cells = "".join(f"<td>{cell}</td>" for cell in row)
            lines.append(f"<tr>{cells}</tr>")
        lines.append("</tbody>")
    lines.append("</table>")
    return lines


def render_text(segment: TextSegment, in_code: bool = False) -> tuple[list[str], bool]:
    """Terminate plain-text lines with a break marker.

    Whitespace-only lines become empty lines. Header lines and lines of a
    fenced code block are block markup and are left as they are.

    Args:
        segment: Text lines to terminate.
        in_code: Whether the segment starts inside a fenced code block.

    Returns:
        tuple[list[str], bool]: Output lines, and whether the segment ends
            inside a fenced code block.
    """
    lines = []
    for line in segment.lines:
        opened = line.rfind(CODE_BLOCK_OPEN)
        closed = line.rfind(CODE_BLOCK_CLOSE)
        preformatted = in_code or opened != -1
        if opened > closed:
            in_code = True
        elif closed != -1:
            in_code = False

        if not line.strip():
            lines.append("")
        elif preformatted or is_block_markup(line):
            lines.append(line)
        else:
            lines.append(f"{line}{BREAK_MARKER}")
    return lines, in_code


def normalize_breaks(markup: str) -> str:
    """Collapse directly adjacent break markers and drop one at the very end.

    Markers separated by a newline are left alone so that no source line is
    merged into another.
    """
    markup = _REPEATED_BREAKS.sub(BREAK_MARKER, markup)
    return _TRAILING_BREAK.sub(r"\1", markup)


class MarkdownRenderer:
    """Render markdown text into HTML markup.

    Stages run in a fixed order, each on the output of the previous one:
    headers, emphasis, code, links, tables, lists, then line breaks. The
    renderer holds no state between calls and never raises on string input;
    anything it does not recognize is passed through as literal text.

    Rendering its own output again is not idempotent: markup is not escaped
    and the stages are not designed to be re-entrant.

    Args:
        config: Configuration providing the list indentation unit and list
            markers. Defaults to a new `NotesConfig`.

    Examples:
        MarkdownRenderer().render("# Title\\n\\nSome **bold** text")
    """

    def __init__(self, config: NotesConfig | None = None):
        self.classifier = BlockClassifier(config)

    def render(self, text: str) -> str:
        """Render `text` and return the markup."""
        if not text:
            return ""

        text = text.replace("\r\n", "\n")
        text = apply_headers(text)
        text = transform_inline(text)

        lines: list[str] = []
        in_code = False
        for segment in self.classifier.classify(text):
            if isinstance(segment, ListBlock):
                lines.extend(render_list(segment))
            elif isinstance(segment, TableBlock):
                lines.extend(render_table(segment))
            else:
                text_lines, in_code = render_text(segment, in_code)
                lines.extend(text_lines)

        return normalize_breaks("\n".join(lines))


def render_markdown(text: str, config: NotesConfig | None = None) -> str:
    """Render `text` with a one-off `MarkdownRenderer`.

    Examples:
        render_markdown("- a\\n  - b")
    """
    return MarkdownRenderer(config).render(text)
