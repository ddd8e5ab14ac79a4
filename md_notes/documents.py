"""Current-content storage for notes documents."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import NotesConfig
from .constants import (
    DOCUMENT_NAME_PATTERN,
    DOCUMENT_SUFFIX,
    NEW_DOCUMENT_TEMPLATE,
    WELCOME_DOCUMENT,
)
from .exceptions import (
    DocumentExistsError,
    DocumentNotFoundError,
    InvalidDocumentNameError,
)
from .filesystem import atomic_write, read_text, remove_file

logger = logging.getLogger(__name__)


def sanitize_document_name(raw_name: str) -> str:
    """Reduce a user-supplied name to a safe document file name.

    Every character outside ``[A-Za-z0-9._-]`` is dropped and ``.md`` is
    appended when missing.

    Raises:
        InvalidDocumentNameError: If nothing usable remains.

    Examples:
        sanitize_document_name("my notes")  # "mynotes.md"
        sanitize_document_name("../../etc/passwd")  # "....etcpasswd.md"
    """
    name = DOCUMENT_NAME_PATTERN.sub("", raw_name)
    if not name.strip("."):
        raise InvalidDocumentNameError(f"Invalid document name: {raw_name!r}")
    if not name.endswith(DOCUMENT_SUFFIX):
        name += DOCUMENT_SUFFIX
    return name


class DocumentStore:
    """Read and write the current content of documents in the notes directory.

    Document names are sanitized on every call, so callers may pass raw user
    input. Writes are atomic.

    Args:
        config: Configuration providing the notes directory, the default
            document name, and the maximum readable file size.
    """

    def __init__(self, config: NotesConfig | None = None):
        self.config = config or NotesConfig()
        self.root = Path(self.config.notes_dir)

    def path_for(self, name: str) -> Path:
        """Return the path of the document called `name`."""
        return self.root / sanitize_document_name(name)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def list_documents(self) -> list[str]:
        """Return the sorted names of every document in the notes directory."""
        if not self.root.is_dir():
            return []
        return sorted(path.name for path in self.root.glob(f"*{DOCUMENT_SUFFIX}") if path.is_file())

    def read_document(self, name: str) -> str:
        """Return the current content of a document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            StorageError: If the file cannot be read safely.
        """
        path = self.path_for(name)
        if not path.exists() and not path.is_symlink():
            raise DocumentNotFoundError(path.name)
        return read_text(path, self.config.max_file_size)

    def write_document(self, name: str, content: str) -> Path:
        """Atomically replace the content of a document, creating it if needed.

        Raises:
            StorageError: If the write fails; the previous content is kept.
        """
        path = self.path_for(name)
        atomic_write(path, content)
        logger.debug("Wrote %d characters to %s", len(content), path)
        return path

    def create_document(self, name: str) -> str:
        """Create a document from the starter template and return its name.

        Raises:
            DocumentExistsError: If a document with that name already exists.
        """
        path = self.path_for(name)
        if path.exists():
            raise DocumentExistsError(path.name)
        atomic_write(path, NEW_DOCUMENT_TEMPLATE.format(title=path.stem))
        logger.info("Created document %s", path.name)
        return path.name

    def delete_document(self, name: str) -> str:
        """Delete a document's current content and return its name.

        Its history is left alone.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        path = self.path_for(name)
        if not remove_file(path):
            raise DocumentNotFoundError(path.name)
        logger.info("Deleted document %s", path.name)
        return path.name

    def ensure_default(self) -> str:
        """Create the welcome document when missing and return its name."""
        name = sanitize_document_name(self.config.default_document)
        if not self.exists(name):
            self.write_document(name, WELCOME_DOCUMENT)
            logger.info("Created default document %s", name)
        return name
