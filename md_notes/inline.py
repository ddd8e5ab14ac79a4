"""Inline formatting: emphasis, code, and links.

Each pass is a small scanner over the whole current text. Passes run in a
fixed order because later passes see the markup produced by earlier ones:
bold before italic, fenced code before code spans, links last.
"""

from __future__ import annotations

from .constants import CODE_BLOCK_CLOSE, CODE_BLOCK_OPEN, CODE_FENCE


def _line_end(text: str, pos: int) -> int:
    """Return the index of the newline ending the line at `pos`, or len(text)."""
    end = text.find("\n", pos)
    return len(text) if end == -1 else end


def replace_delimited(
    text: str,
    delimiter: str,
    open_tag: str,
    close_tag: str,
    *,
    span_lines: bool = False,
    allow_empty: bool = False,
) -> str:
    """Wrap delimiter-enclosed runs in tags, closing at the first match.

    Scans left to right. At each unconsumed delimiter, the nearest following
    delimiter closes the run (non-greedy). When no closing delimiter exists
    the opening character stays literal and scanning resumes one character
    later.

    Args:
        text: Text to transform.
        delimiter: Opening and closing delimiter, such as ``"**"``.
        open_tag: Markup emitted in place of the opening delimiter.
        close_tag: Markup emitted in place of the closing delimiter.
        span_lines: Whether a run may contain newlines.
        allow_empty: Whether two adjacent delimiters form an empty run.

    Returns:
        str: Text with every matched run replaced.

    Examples:
        replace_delimited("a **b** c", "**", "<strong>", "</strong>")
        # "a <strong>b</strong> c"
    """
    width = len(delimiter)
    min_content = 0 if allow_empty else 1
    result: list[str] = []
    i = 0

    while i < len(text):
        if text.startswith(delimiter, i):
            start = i + width
            limit = len(text) if span_lines else _line_end(text, start)
            end = text.find(delimiter, start + min_content, limit)
            if end != -1:
                result.append(open_tag)
                result.append(text[start:end])
                result.append(close_tag)
                i = end + width
                continue
        result.append(text[i])
        i += 1

    return "".join(result)


def apply_emphasis(text: str) -> str:
    """Convert ``**bold**`` then ``*italic*`` runs.

    Bold runs are resolved first so that ``**a**`` is never read as two
    italic runs.
    """
    text = replace_delimited(text, "**", "<strong>", "</strong>")
    return replace_delimited(text, "*", "<em>", "</em>")


def apply_code(text: str) -> str:
    """Convert fenced code blocks, then single-backtick code spans.

    Fenced blocks may span lines and may be empty. Spans are matched over the
    whole text afterwards, so a pair of backticks inside a fenced block still
    becomes a span; a lone backtick there stays literal.
    """
    text = replace_delimited(
        text,
        CODE_FENCE,
        CODE_BLOCK_OPEN,
        CODE_BLOCK_CLOSE,
        span_lines=True,
        allow_empty=True,
    )
    return replace_delimited(text, "`", "<code>", "</code>")


def _match_link(text: str, start: int) -> tuple[str, str, int] | None:
    """Match ``[label](target)`` beginning at `start`.

    The first ``]`` closes the label and must be followed directly by ``(``;
    the first ``)`` after it closes the target. Label and target must be
    non-empty and stay on the line where the link starts.

    Returns:
        tuple[str, str, int] | None: Label, target, and the index just past
            the closing parenthesis, or None when the text is not a link.
    """
    limit = _line_end(text, start)
    label_end = text.find("]", start + 1, limit)
    if label_end == -1 or label_end == start + 1:
        return None
    if label_end + 1 >= limit or text[label_end + 1] != "(":
        return None

    target_start = label_end + 2
    target_end = text.find(")", target_start, limit)
    if target_end == -1 or target_end == target_start:
        return None

    return text[start + 1 : label_end], text[target_start:target_end], target_end + 1


def apply_links(text: str) -> str:
    """Convert ``[label](target)`` into hyperlinks.

    Label and target are copied verbatim; nested brackets are not balanced.

    Examples:
        apply_links("see [docs](https://example.com)")
        # 'see <a href="https://example.com">docs</a>'
    """
    result: list[str] = []
    i = 0

    while i < len(text):
        if text[i] == "[":
            link = _match_link(text, i)
            if link is not None:
                label, target, i = link
                result.append(f'<a href="{target}">{label}</a>')
                continue
        result.append(text[i])
        i += 1

    return "".join(result)


def transform_inline(text: str) -> str:
    """Apply emphasis, code, and link formatting in that order.

    Line count is preserved: no pass adds or removes newlines.
    """
    text = apply_emphasis(text)
    text = apply_code(text)
    return apply_links(text)
