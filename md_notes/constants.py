"""Constants used across the md-notes package."""

from __future__ import annotations

import re

# Rendering
MAX_HEADER_LEVEL = 3
BREAK_MARKER = "<br>"
CODE_FENCE = "```"
CODE_BLOCK_OPEN = "<pre><code>"
CODE_BLOCK_CLOSE = "</code></pre>"
TABLE_SEPARATOR_CHARS = frozenset("|-: \t")
ALLOWED_LIST_MARKERS = "*-+"

# Storage
DOCUMENT_SUFFIX = ".md"
SNAPSHOT_SUFFIX = ".md"
SNAPSHOT_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
DOCUMENT_NAME_PATTERN = re.compile(r"[^a-zA-Z0-9._-]")
NEW_DOCUMENT_TEMPLATE = "# {title}\n\nStart writing your notes here..."
WELCOME_DOCUMENT = (
    "# Welcome to Markdown Notes!\n"
    "\n"
    "This is your notes app. You can:\n"
    "\n"
    "* Write in **Markdown**\n"
    "* Create multiple files\n"
    "* Restore earlier versions from history\n"
    "\n"
    "## Features\n"
    "\n"
    "- Markdown preview\n"
    "- File management\n"
    "- Version history\n"
    "\n"
    "Start taking notes!"
)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
