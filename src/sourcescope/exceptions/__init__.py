"""Exception hierarchy for SourceScope."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    LintError,
)
from .base import SourceScopeError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "SourceScopeError",
    "AnalysisError",
    "FileAccessError",
    "LintError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
