"""Timestamped document history with a retention cap."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from .config import NotesConfig
from .constants import SNAPSHOT_SUFFIX, SNAPSHOT_TIMESTAMP_FORMAT
from .documents import DocumentStore, sanitize_document_name
from .exceptions import SnapshotNotFoundError, StorageError
from .filesystem import atomic_write, enforce_content_size, read_text, remove_file
from .models import Snapshot

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(moment: datetime) -> datetime:
    """Convert `moment` to an aware UTC datetime; naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format a moment as a sortable UTC snapshot identifier (second resolution).

    Aware moments are converted to UTC first, so identifiers keep their order
    across daylight saving changes.

    Examples:
        format_timestamp(datetime(2024, 5, 1, 9, 30, 5))  # "2024-05-01_09-30-05"
    """
    return to_utc(moment).strftime(SNAPSHOT_TIMESTAMP_FORMAT)


def parse_timestamp(snapshot_id: str) -> datetime | None:
    """Parse a snapshot identifier back into the moment it encodes.

    Returns:
        datetime | None: The parsed UTC moment, or None when `snapshot_id` does not
            round-trip through `format_timestamp` exactly.
    """
    try:
        moment = datetime.strptime(snapshot_id, SNAPSHOT_TIMESTAMP_FORMAT)
    except ValueError:
        return None
    if moment.strftime(SNAPSHOT_TIMESTAMP_FORMAT) != snapshot_id:
        return None
    return moment.replace(tzinfo=timezone.utc)


class SnapshotStore:
    """Persist, list, evict, and restore full-content snapshots of documents.

    Snapshots live in ``<notes_dir>/<history_dir>/<document stem>/`` and are
    named by their creation time in UTC. Every save writes the current content
    and a snapshot of it, then evicts the oldest snapshots beyond
    ``max_snapshots``. Each document is guarded by its own lock so that a
    save, its eviction, and a restore never interleave with another operation
    on the same document; different documents proceed independently.

    Two saves within the same second share one identifier and the later one
    overwrites the earlier snapshot.

    Args:
        documents: Store holding the current content of documents.
        config: Configuration providing the history location and retention cap.
        clock: Callable returning the current time; used for snapshot names.
            Naive results are taken as UTC.

    Examples:
        store = SnapshotStore(DocumentStore())
        snapshot = store.save("todo", "# Todo\\n")
        store.restore("todo", snapshot.snapshot_id)
    """

    def __init__(
        self,
        documents: DocumentStore,
        config: NotesConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.documents = documents
        self.config = config or documents.config
        self.clock = clock
        self.root = Path(self.config.notes_dir) / self.config.history_dir
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, document: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault(document, threading.Lock())

    def history_dir(self, document: str) -> Path:
        """Return the directory holding the snapshots of `document`."""
        return self.root / Path(sanitize_document_name(document)).stem

    def _snapshot_path(self, document: str, snapshot_id: str) -> Path:
        return self.history_dir(document) / f"{snapshot_id}{SNAPSHOT_SUFFIX}"

    def save(self, document: str, content: str) -> Snapshot:
        """Write `content` as the document's current state and snapshot it.

        Raises:
            StorageError: If `content` is larger than `max_file_size`, so that
                it could not be read back, or if either write fails. The
                previous current content is left in place.
        """
        name = sanitize_document_name(document)
        enforce_content_size(content, self.config.max_file_size, self.documents.path_for(name))
        with self._lock_for(name):
            previous = self._read_previous(name)
            self.documents.write_document(name, content)

            moment = to_utc(self.clock()).replace(microsecond=0)
            path = self._snapshot_path(name, format_timestamp(moment))
            try:
                atomic_write(path, content)
            except StorageError:
                self._roll_back(name, previous)
                raise

            snapshot = Snapshot(document=name, timestamp=moment, path=path)
            logger.info("Saved %s as snapshot %s", name, snapshot.snapshot_id)
            self._evict(name)
            return snapshot

    def _read_previous(self, name: str) -> str | None:
        path = self.documents.path_for(name)
        if not path.exists():
            return None
        # no size limit here so an oversized document can still be replaced
        return read_text(path, max_size=None)

    def _roll_back(self, name: str, previous: str | None) -> None:
        logger.warning("Snapshot write failed for %s; rolling back current content", name)
        if previous is None:
            remove_file(self.documents.path_for(name))
        else:
            self.documents.write_document(name, previous)

    def evict(self, document: str) -> int:
        """Delete the oldest snapshots beyond the retention cap.

        Returns:
            int: Number of snapshots deleted.
        """
        name = sanitize_document_name(document)
        with self._lock_for(name):
            return self._evict(name)

    def _evict(self, name: str) -> int:
        snapshots = self._list(name)
        excess = len(snapshots) - self.config.max_snapshots
        if excess <= 0:
            return 0

        # _list is newest first, so the oldest are at the end
        for snapshot in reversed(snapshots[-excess:]):
            remove_file(snapshot.path)
        logger.info("Evicted %d old snapshot(s) of %s", excess, name)
        return excess

    def list(self, document: str) -> list[Snapshot]:
        """Return every snapshot of a document, newest first.

        Files whose names are not valid timestamps are skipped.
        """
        return self._list(sanitize_document_name(document))

    def _list(self, name: str) -> list[Snapshot]:
        directory = self.history_dir(name)
        if not directory.is_dir():
            return []

        snapshots = []
        for path in directory.glob(f"*{SNAPSHOT_SUFFIX}"):
            moment = parse_timestamp(path.name[: -len(SNAPSHOT_SUFFIX)])
            if moment is None:
                logger.debug("Skipping unrecognized snapshot file %s", path)
                continue
            snapshots.append(Snapshot(document=name, timestamp=moment, path=path))

        snapshots.sort(key=lambda snapshot: snapshot.timestamp, reverse=True)
        return snapshots

    def get(self, document: str, snapshot_id: str) -> Snapshot:
        """Return the descriptor of one snapshot.

        Raises:
            SnapshotNotFoundError: If the identifier is malformed or absent.
        """
        name = sanitize_document_name(document)
        moment = parse_timestamp(snapshot_id)
        path = self._snapshot_path(name, snapshot_id)
        if moment is None or not path.is_file():
            raise SnapshotNotFoundError(name, snapshot_id)
        return Snapshot(document=name, timestamp=moment, path=path)

    def read(self, document: str, snapshot_id: str) -> str:
        """Return the content captured by a snapshot.

        Raises:
            SnapshotNotFoundError: If the snapshot does not exist.
            StorageError: If the snapshot cannot be read.
        """
        snapshot = self.get(document, snapshot_id)
        return read_text(snapshot.path, self.config.max_file_size)

    def restore(self, document: str, snapshot_id: str) -> Snapshot:
        """Overwrite the document's current content with a snapshot.

        The pre-restore content is not snapshotted; it is recoverable only if
        an earlier save captured it.

        Raises:
            SnapshotNotFoundError: If the snapshot does not exist.
            StorageError: If reading the snapshot or writing the document fails;
                the current content is left unchanged.
        """
        name = sanitize_document_name(document)
        with self._lock_for(name):
            snapshot = self.get(name, snapshot_id)
            content = read_text(snapshot.path, self.config.max_file_size)
            self.documents.write_document(name, content)
            logger.info("Restored %s from snapshot %s", name, snapshot_id)
            return snapshot

    def delete_all(self, document: str) -> int:
        """Delete every snapshot of a document.

        The history directory is removed once empty. Nothing to delete is not
        an error.

        Returns:
            int: Number of snapshots deleted.
        """
        name = sanitize_document_name(document)
        with self._lock_for(name):
            directory = self.history_dir(name)
            if not directory.is_dir():
                return 0

            deleted = 0
            for path in directory.glob(f"*{SNAPSHOT_SUFFIX}"):
                if remove_file(path):
                    deleted += 1

            try:
                directory.rmdir()
            except OSError:
                logger.debug("Keeping non-empty history directory %s", directory)

            logger.info("Deleted %d snapshot(s) of %s", deleted, name)
            return deleted
