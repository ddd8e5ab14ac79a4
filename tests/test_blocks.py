from __future__ import annotations

import pytest

from md_notes.blocks import BlockClassifier, apply_headers, header_level, is_block_markup
from md_notes.config import NotesConfig
from md_notes.models import ListBlock, TableBlock, TextSegment


@pytest.mark.parametrize(
    "line, level",
    [
        ("# Title", 1),
        ("## Title", 2),
        ("### Title", 3),
        ("#### Title", 0),
        ("#Title", 0),
        (" # Title", 0),
        ("#", 0),
        ("Title #", 0),
    ],
)
def test_header_level(line: str, level: int):
    assert header_level(line) == level


def test_apply_headers_converts_each_line():
    text = "# One\ntext\n### Three"
    assert apply_headers(text) == "<h1>One</h1>\ntext\n<h3>Three</h3>"


def test_longer_header_prefix_is_never_read_as_shorter():
    assert apply_headers("### Title") == "<h3>Title</h3>"
    assert apply_headers("#### Title") == "#### Title"


def test_header_keeps_inner_hashes():
    assert apply_headers("# C# notes") == "<h1>C# notes</h1>"


def test_is_block_markup_recognizes_headers_only():
    assert is_block_markup("<h2>x</h2>")
    assert not is_block_markup("<h4>x</h4>")
    assert not is_block_markup("text <h1>x</h1>")


def test_classify_extracts_tables_before_lists():
    segments = BlockClassifier().classify("| - a | * b |\n| - c | + d |")

    assert segments == [TableBlock(header=["- a", "* b"], rows=[["- c", "+ d"]])]


def test_classify_mixed_document():
    text = "intro\n- a\n| A |\n|---|\n| 1 |\noutro"

    segments = BlockClassifier().classify(text)

    assert [type(segment) for segment in segments] == [
        TextSegment,
        ListBlock,
        TableBlock,
        TextSegment,
    ]


def test_classify_uses_configured_list_markers():
    classifier = BlockClassifier(NotesConfig(list_markers="+"))

    segments = classifier.classify("- a\n+ b")

    assert segments[0] == TextSegment(lines=["- a"])
    assert isinstance(segments[1], ListBlock)
