from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from md_notes.config import (
    ConfigError,
    NotesConfig,
    apply_overrides,
    build_config,
    load_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".md-notes.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-notes]
        notes_dir = "journal"
        history_dir = ".versions"
        default_document = "index.md"
        max_snapshots = 5
        indent_unit = 4
        list_markers = "-"
        max_file_size = 1024
        """,
    )

    config = load_config(tmp_path)

    assert config == NotesConfig(
        notes_dir="journal",
        history_dir=".versions",
        default_document="index.md",
        max_snapshots=5,
        indent_unit=4,
        list_markers="-",
        max_file_size=1024,
    )


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [md-notes]
        notes_dir = "dot"
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.notes_dir == "dot"
    assert config.max_snapshots == NotesConfig().max_snapshots


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.md-notes]
        max_snapshots = 7
        """,
    )

    assert load_config(tmp_path).max_snapshots == 7


def test_pyproject_takes_precedence_over_dotfile(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-notes]
        notes_dir = "from-pyproject"
        """,
    )
    _write_dotfile(
        tmp_path,
        """
        [md-notes]
        notes_dir = "from-dotfile"
        """,
    )

    assert load_config(tmp_path).notes_dir == "from-pyproject"


def test_nearest_config_wins(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-notes]
        notes_dir = "root"
        """,
    )
    nested = tmp_path / "nested"
    nested.mkdir()
    _write_dotfile(
        nested,
        """
        [md-notes]
        notes_dir = "nested"
        """,
    )

    assert load_config(nested).notes_dir == "nested"


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [project]
        name = "other"
        """,
    )
    _write_dotfile(
        tmp_path,
        """
        [md-notes]
        notes_dir = "dot"
        """,
    )

    assert load_config(tmp_path).notes_dir == "dot"


def test_invalid_toml_is_ignored(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text("[tool.md-notes\n", encoding="utf-8")
    assert load_config(tmp_path) == NotesConfig()


def test_unknown_key_raises(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-notes]
        colour = "blue"
        """,
    )

    with pytest.raises(ConfigError, match=r"\[tool.md-notes\]"):
        load_config(tmp_path)


def test_non_table_value_raises(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool]
        md-notes = 3
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_table_gives_defaults(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.md-notes]\n")
    assert load_config(tmp_path) == NotesConfig()


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"max_snapshots": 0}, "max_snapshots"),
        ({"max_snapshots": True}, "max_snapshots"),
        ({"indent_unit": -1}, "indent_unit"),
        ({"max_file_size": "big"}, "max_file_size"),
        ({"notes_dir": ""}, "notes_dir"),
        ({"history_dir": ""}, "history_dir"),
        ({"history_dir": "a/b"}, "history_dir"),
        ({"history_dir": ".."}, "history_dir"),
        ({"default_document": ""}, "default_document"),
        ({"list_markers": ""}, "list_markers"),
        ({"list_markers": "-#"}, "list_markers"),
    ],
)
def test_validate_config_rejects_invalid_values(changes: dict, message: str):
    config = NotesConfig(**changes)
    with pytest.raises(ConfigError, match=message):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(NotesConfig())


def test_apply_overrides_ignores_none():
    config = NotesConfig()

    assert apply_overrides(config, notes_dir=None) is config
    assert apply_overrides(config, notes_dir="x", max_snapshots=None).notes_dir == "x"


def test_build_config_applies_overrides_and_validates(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-notes]
        max_snapshots = 5
        """,
    )

    assert build_config(tmp_path, max_snapshots=9).max_snapshots == 9
    with pytest.raises(ConfigError):
        build_config(tmp_path, max_snapshots=-2)
