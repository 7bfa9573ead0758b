"""
Path validation for SourceScope.

The analysis root is the one input that can abort a run, so it is checked
up front and every problem is reported as :class:`InvalidPathError`.
"""

import os
from pathlib import Path

from .exceptions import InvalidPathError


def validate_root_directory(path: Path) -> Path:
    """
    Validate that a root directory can be analyzed.

    Args:
        path: Directory path to validate

    Returns:
        Resolved absolute path

    Raises:
        InvalidPathError: If the path is missing, not a directory or unreadable
    """
    try:
        resolved = Path(path).resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidPathError(path, f"Cannot resolve path: {e}")

    if not resolved.exists():
        raise InvalidPathError(resolved, "Directory does not exist")

    if not resolved.is_dir():
        raise InvalidPathError(resolved, "Path is not a directory")

    if not os.access(resolved, os.R_OK | os.X_OK):
        raise InvalidPathError(resolved, "Directory is not readable")

    try:
        with os.scandir(resolved):
            pass
    except OSError as e:
        raise InvalidPathError(resolved, f"Cannot open directory: {e.strerror or e}")

    return resolved
