"""File storage utilities for exports and the input draft."""

import os
from pathlib import Path


def _resolve_path(filepath: str | os.PathLike[str]) -> str:
    """
    Resolve a file path to an absolute path.

    Relative paths are resolved under ``settings.data_root`` so exports and
    drafts land in the configured data directory (outside the repo).
    Absolute paths are returned unchanged.

    Args:
        filepath: An absolute or relative path.

    Returns:
        Absolute path string.
    """
    filepath = os.fspath(filepath)
    if os.path.isabs(filepath):
        return filepath

    # Import here to avoid circular imports at module load time
    from skill_log.config import settings

    return os.path.join(settings.data_root, filepath)


def file_exists(filepath: str | os.PathLike[str]) -> bool:
    """
    Check if a file exists.

    Args:
        filepath: The path to check (absolute or relative to data_root).

    Returns:
        True if the file exists, False otherwise.
    """
    return os.path.exists(_resolve_path(filepath))


def load_file(filepath: str | os.PathLike[str]) -> str:
    """
    Load content from a file.

    Args:
        filepath: The path to the file to load (absolute or relative to data_root).

    Returns:
        The file content as a string.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        OSError: If the file cannot be read.

    Examples:
        >>> text = load_file("skillData.json")
    """
    resolved = _resolve_path(filepath)
    with open(resolved, "r", encoding="utf-8") as f:
        return f.read()


def save_file(content: str, filepath: str | os.PathLike[str]) -> str:
    """
    Save content to a file, creating directories if needed.

    Args:
        content: The content to save.
        filepath: The destination path (absolute or relative to data_root).

    Returns:
        The absolute path where the file was saved.

    Raises:
        OSError: If the file cannot be written.

    Examples:
        >>> save_file("[]", "skillData.json")
    """
    resolved = _resolve_path(filepath)
    Path(resolved).parent.mkdir(parents=True, exist_ok=True)
    with open(resolved, "w", encoding="utf-8") as f:
        f.write(content)
    return resolved


def delete_file(filepath: str | os.PathLike[str]) -> bool:
    """
    Delete a file if it exists.

    Args:
        filepath: The path to delete (absolute or relative to data_root).

    Returns:
        True if a file was removed, False if there was nothing to remove.
    """
    resolved = _resolve_path(filepath)
    try:
        os.remove(resolved)
    except FileNotFoundError:
        return False
    return True
