"""Analysis-related exceptions: file access and linting.

All of these are file-local. They are raised where the problem happens and
converted into issues or degraded metrics by the per-file analyzer; none of
them ever reaches the caller of ``analyze_codebase``.
"""

from pathlib import Path
from typing import Optional

from .base import SourceScopeError


class AnalysisError(SourceScopeError):
    """Base class for analysis-related errors."""

    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": filepath, "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class LintError(AnalysisError):
    """Raised when the external linter crashes, times out or emits garbage."""

    def __init__(self, filepath: str, reason: str, exit_code: Optional[int] = None):
        super().__init__(
            f"Lint failed for {filepath}",
            details={"filepath": filepath, "reason": reason, "exit_code": exit_code},
        )
        self.filepath = filepath
        self.reason = reason
        self.exit_code = exit_code
