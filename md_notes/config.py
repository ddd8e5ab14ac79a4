"""Configuration loading and management."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from .constants import ALLOWED_LIST_MARKERS, DEFAULT_MAX_FILE_SIZE


@dataclass
class NotesConfig:
    """Configuration for rendering notes and keeping their history.

    Attributes:
        notes_dir: Directory holding the current content of every document.
        history_dir: Name of the directory, inside `notes_dir`, that holds
            per-document snapshot histories.
        default_document: Document created and opened when none is named.
        max_snapshots: Maximum number of snapshots retained per document.
        indent_unit: Number of leading spaces per list nesting level.
        list_markers: Characters recognized as unordered list markers.
        max_file_size: Maximum document size in bytes that will be read.

    Examples:
        NotesConfig(notes_dir="journal", max_snapshots=20)
    """

    # Storage
    notes_dir: str = "notes"
    history_dir: str = ".history"
    default_document: str = "welcome.md"

    # History
    max_snapshots: int = 50

    # Rendering
    indent_unit: int = 2
    list_markers: str = ALLOWED_LIST_MARKERS

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_snapshots` must be a positive integer")
    """


def load_config(search_path: Path) -> NotesConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.md-notes]`` table from `pyproject.toml` and the ``[md-notes]``
    or ``[tool.md-notes]`` table from `.md-notes.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        NotesConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("notes"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "md-notes")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".md-notes.toml",
            table_paths=[("md-notes",), ("tool", "md-notes")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return NotesConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> NotesConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> NotesConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return NotesConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return NotesConfig()

    try:
        return NotesConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: NotesConfig) -> None:
    """Validate a `NotesConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If directory names are empty, the history directory is
            not a plain name, list markers are unsupported, or numeric limits
            are non-positive.

    Examples:
        validate_config(NotesConfig(max_snapshots=10))
    """
    _ensure_integers(
        {
            "max_snapshots": config.max_snapshots,
            "indent_unit": config.indent_unit,
            "max_file_size": config.max_file_size,
        }
    )

    if not config.notes_dir:
        raise ConfigError("`notes_dir` must not be empty")
    if not config.history_dir:
        raise ConfigError("`history_dir` must not be empty")
    if "/" in config.history_dir or "\\" in config.history_dir or config.history_dir in (".", ".."):
        raise ConfigError("`history_dir` must be a plain directory name")
    if not config.default_document:
        raise ConfigError("`default_document` must not be empty")

    if not isinstance(config.list_markers, str) or not config.list_markers:
        raise ConfigError("`list_markers` must not be empty")
    if any(marker not in ALLOWED_LIST_MARKERS for marker in config.list_markers):
        raise ConfigError(f"`list_markers` may only contain: {', '.join(ALLOWED_LIST_MARKERS)}")

    _ensure_positive(
        {
            "max_snapshots": config.max_snapshots,
            "indent_unit": config.indent_unit,
            "max_file_size": config.max_file_size,
        }
    )


def apply_overrides(config: NotesConfig, **overrides: object) -> NotesConfig:
    """Apply override values to a `NotesConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        NotesConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `NotesConfig`.

    Examples:
        updated = apply_overrides(config, notes_dir="journal", max_snapshots=5)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> NotesConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        NotesConfig: Validated configuration ready for use.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), max_snapshots=10)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
