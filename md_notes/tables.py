"""Table extraction from runs of pipe-delimited lines."""

from __future__ import annotations

from .constants import TABLE_SEPARATOR_CHARS
from .models import TableBlock

MIN_TABLE_ROWS = 2


def is_table_row(line: str) -> bool:
    """Return True when a trimmed line starts and ends with ``|``.

    Examples:
        is_table_row("| A | B |")  # True
        is_table_row("| still text")  # False
    """
    stripped = line.strip()
    return len(stripped) >= 2 and stripped.startswith("|") and stripped.endswith("|")


def is_separator_row(line: str) -> bool:
    """Return True for rows made only of ``|``, ``-``, ``:``, and whitespace."""
    return all(character in TABLE_SEPARATOR_CHARS for character in line)


def split_cells(line: str) -> list[str]:
    """Split a table row into trimmed cells.

    One leading and one trailing ``|`` are removed before splitting. Empty
    cells are kept so column counts survive.

    Examples:
        split_cells("| A | B |")  # ["A", "B"]
        split_cells("| A || B |")  # ["A", "", "B"]
    """
    inner = line.strip()[1:-1]
    return [cell.strip() for cell in inner.split("|")]


def build_table(rows: list[str]) -> TableBlock | None:
    """Build a table from a run of table rows.

    Separator rows are dropped; the first remaining row becomes the header.

    Returns:
        TableBlock | None: The table, or None when every row is a separator.
    """
    content_rows = [row for row in rows if not is_separator_row(row)]
    if not content_rows:
        return None
    header, *body = content_rows
    return TableBlock(header=split_cells(header), rows=[split_cells(row) for row in body])


class TableBlockExtractor:
    """Partition lines into plain lines and tables.

    Output items are either a line (`str`) left for later stages, or a
    `TableBlock` that replaces the run of rows it was built from. Runs shorter
    than two rows are returned untouched.
    """

    def __init__(self, min_rows: int = MIN_TABLE_ROWS):
        self.min_rows = min_rows

    def extract(self, lines: list[str]) -> list[str | TableBlock]:
        """Replace every qualifying run of table rows with a `TableBlock`."""
        output: list[str | TableBlock] = []
        run: list[str] = []

        for line in lines:
            if is_table_row(line):
                run.append(line)
                continue
            self._flush(run, output)
            run = []
            output.append(line)

        self._flush(run, output)
        return output

    def _flush(self, run: list[str], output: list[str | TableBlock]) -> None:
        if not run:
            return
        table = build_table(run) if len(run) >= self.min_rows else None
        if table is None:
            output.extend(run)
        else:
            output.append(table)
