from __future__ import annotations

import itertools
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from click.testing import CliRunner

from md_notes.config import NotesConfig
from md_notes.documents import DocumentStore
from md_notes.snapshots import SnapshotStore

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def make_clock(start: datetime = BASE_TIME, step: timedelta = timedelta(seconds=1)):
    """Return a clock that advances by `step` on every call."""
    ticks = itertools.count()

    def now() -> datetime:
        return start + step * next(ticks)

    return now


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def config(tmp_path: Path) -> NotesConfig:
    return NotesConfig(notes_dir=str(tmp_path / "notes"), max_snapshots=3)


@pytest.fixture()
def documents(config: NotesConfig) -> DocumentStore:
    return DocumentStore(config)


@pytest.fixture()
def store(documents: DocumentStore) -> SnapshotStore:
    """Snapshot store whose clock ticks one second per save."""
    return SnapshotStore(documents, clock=make_clock())
