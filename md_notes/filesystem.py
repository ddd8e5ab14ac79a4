"""Filesystem helpers for md-notes."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE
from .exceptions import StorageError

MAX_FILE_SIZE_ENV_VAR = "MD_NOTES_MAX_FILE_SIZE"
DEFAULT_PERMISSIONS = 0o644


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed document size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["MD_NOTES_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Raises:
        StorageError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise StorageError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise StorageError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise StorageError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        StorageError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise StorageError(error_message)


def enforce_content_size(content: str, max_size: int, filepath: Path):
    """Guard against writing content that could not be read back.

    Raises:
        StorageError: If the UTF-8 encoding of `content` exceeds `max_size` bytes.
    """
    size = len(content.encode("UTF-8"))
    if size > max_size:
        error_message = (
            f"Content for {filepath} is {size} bytes, over the maximum allowed size of "
            f"{max_size} bytes."
        )
        raise StorageError(error_message)


def read_text(filepath: Path, max_size: int | None = DEFAULT_MAX_FILE_SIZE) -> str:
    """Read a whole UTF-8 file after symlink and size checks.

    Newlines are not translated, so content read back is byte-for-byte what
    was written.

    Args:
        filepath: Path to the file.
        max_size: Largest accepted size in bytes; None skips the size check.

    Raises:
        StorageError: If the file is unsafe, too large, unreadable, or not
            valid UTF-8.

    Examples:
        read_text(Path("notes/welcome.md"), max_size=1024)
    """
    stat_result = collect_file_stat(filepath)
    if max_size is not None:
        enforce_file_size(stat_result, max_size, filepath)
    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as handle:
            return handle.read()
    except UnicodeDecodeError as error:
        raise StorageError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except OSError as error:
        raise StorageError(f"Error reading {filepath}: {error}") from error


def atomic_write(filepath: Path, content: str) -> None:
    """Replace `filepath` with `content` in a single atomic rename.

    The content is written to a temporary file in the same directory, flushed,
    synced, and moved over the target with `os.replace`, so readers observe
    either the old or the new content. Permissions of an existing target are
    kept; new files get `DEFAULT_PERMISSIONS`. Parent directories are created
    when missing.

    Args:
        filepath: Destination file.
        content: Text to write, encoded as UTF-8 without newline translation.

    Raises:
        StorageError: If the destination is a symlink or the write fails.

    Examples:
        atomic_write(Path("notes/todo.md"), "# Todo\\n")
    """
    if filepath.is_symlink():
        raise StorageError(f"Symlinks are not supported for security reasons: {filepath}")

    permissions = DEFAULT_PERMISSIONS
    try:
        permissions = stat.S_IMODE(os.stat(filepath, follow_symlinks=False).st_mode)
    except FileNotFoundError:
        pass
    except OSError as error:
        raise StorageError(f"Error accessing {filepath}: {error}") from error

    temp_path: Path | None = None
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="UTF-8",
            newline="",
            delete=False,
            dir=filepath.parent,
            prefix=".",
            suffix=".tmp",
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, permissions)

        os.replace(temp_path, filepath)
    except OSError as error:
        raise StorageError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass


def remove_file(filepath: Path) -> bool:
    """Delete a file; return False when it was already gone.

    Raises:
        StorageError: If the file exists but cannot be removed.
    """
    try:
        filepath.unlink()
    except FileNotFoundError:
        return False
    except OSError as error:
        raise StorageError(f"Error deleting {filepath}: {error}") from error
    return True
