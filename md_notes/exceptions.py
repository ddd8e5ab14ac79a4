"""Package-specific exception types."""

from __future__ import annotations


class NotesError(Exception):
    """Base class for md-notes storage errors."""


class StorageError(NotesError, OSError):
    """Raised when durable storage cannot be read or written.

    No partial effect should be assumed by callers; the operation that raised
    it left the previous durable state in place.
    """


class NotFoundError(NotesError, LookupError):
    """Raised when a referenced document or snapshot is absent."""


class DocumentNotFoundError(NotFoundError):
    """Raised when a document does not exist in the notes directory.

    Args:
        name: Sanitized document name.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Document {name!r} does not exist")


class SnapshotNotFoundError(NotFoundError):
    """Raised when a snapshot is not present in a document's history.

    Args:
        document: Sanitized document name.
        snapshot_id: Timestamp identifier of the requested snapshot.
    """

    def __init__(self, document: str, snapshot_id: str):
        self.document = document
        self.snapshot_id = snapshot_id
        super().__init__(f"No snapshot {snapshot_id!r} for document {document!r}")


class DocumentExistsError(NotesError):
    """Raised when creating a document whose file already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Document {name!r} already exists")


class InvalidDocumentNameError(NotesError, ValueError):
    """Raised when a document name is empty after sanitization."""
