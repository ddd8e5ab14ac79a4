from __future__ import annotations

from pathlib import Path

import pytest

from md_notes.config import NotesConfig
from md_notes.constants import WELCOME_DOCUMENT
from md_notes.documents import DocumentStore, sanitize_document_name
from md_notes.exceptions import (
    DocumentExistsError,
    DocumentNotFoundError,
    InvalidDocumentNameError,
    StorageError,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("todo", "todo.md"),
        ("todo.md", "todo.md"),
        ("my notes", "mynotes.md"),
        ("../../etc/passwd", "....etcpasswd.md"),
        ("résumé", "rsum.md"),
        ("a_b-c.txt", "a_b-c.txt.md"),
    ],
)
def test_sanitize_document_name(raw: str, expected: str):
    assert sanitize_document_name(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "..", "/", "éé"])
def test_sanitize_document_name_rejects_empty_results(raw: str):
    with pytest.raises(InvalidDocumentNameError):
        sanitize_document_name(raw)


def test_path_stays_inside_notes_dir(documents: DocumentStore):
    path = documents.path_for("../../outside")
    assert path.parent == documents.root


def test_write_and_read_document(documents: DocumentStore):
    path = documents.write_document("todo", "# Todo\n")

    assert path == documents.root / "todo.md"
    assert documents.read_document("todo.md") == "# Todo\n"
    assert documents.exists("todo")


def test_read_missing_document(documents: DocumentStore):
    with pytest.raises(DocumentNotFoundError, match="todo.md"):
        documents.read_document("todo")


def test_create_document_uses_template(documents: DocumentStore):
    name = documents.create_document("ideas")

    assert name == "ideas.md"
    assert documents.read_document(name) == "# ideas\n\nStart writing your notes here..."


def test_create_existing_document_raises(documents: DocumentStore):
    documents.write_document("ideas", "mine")

    with pytest.raises(DocumentExistsError):
        documents.create_document("ideas")

    assert documents.read_document("ideas") == "mine"


def test_delete_document(documents: DocumentStore):
    documents.write_document("gone", "x")

    assert documents.delete_document("gone") == "gone.md"
    assert not documents.exists("gone")
    with pytest.raises(DocumentNotFoundError):
        documents.delete_document("gone")


def test_list_documents_is_sorted_and_skips_history(documents: DocumentStore):
    documents.write_document("b", "")
    documents.write_document("a", "")
    (documents.root / ".history" / "a").mkdir(parents=True)
    (documents.root / "notes.txt").write_text("", encoding="utf-8")

    assert documents.list_documents() == ["a.md", "b.md"]


def test_list_documents_without_directory(documents: DocumentStore):
    assert documents.list_documents() == []


def test_ensure_default_creates_welcome_once(documents: DocumentStore):
    name = documents.ensure_default()

    assert name == "welcome.md"
    assert documents.read_document(name) == WELCOME_DOCUMENT

    documents.write_document(name, "edited")
    documents.ensure_default()
    assert documents.read_document(name) == "edited"


def test_read_respects_max_file_size(tmp_path: Path):
    store = DocumentStore(NotesConfig(notes_dir=str(tmp_path), max_file_size=4))
    store.write_document("big", "12345")

    with pytest.raises(StorageError):
        store.read_document("big")


def test_symlinked_document_is_rejected(documents: DocumentStore, tmp_path: Path):
    secret = tmp_path / "secret.txt"
    secret.write_text("secret", encoding="utf-8")
    documents.root.mkdir(parents=True)
    (documents.root / "link.md").symlink_to(secret)

    with pytest.raises(StorageError, match="Symlinks"):
        documents.read_document("link")
    with pytest.raises(StorageError):
        documents.write_document("link", "overwrite")

    assert secret.read_text(encoding="utf-8") == "secret"
