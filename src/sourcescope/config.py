"""Configuration loading and management for SourceScope.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.sourcescope.toml)
    3. Project config (./sourcescope.toml)
    4. Explicit config file
    5. Environment variables (SOURCESCOPE_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=4, lint_enabled=False)
    >>> config.workers
    4
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, SourceScopeError

Verbosity = Literal["quiet", "normal", "verbose"]

# Dependency, build and VCS directories never worth analyzing
DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = (
    "node_modules",
    "dist",
    "build",
    ".git",
    ".next",
    ".nuxt",
    ".svelte-kit",
    ".output",
)

DEFAULT_SOURCE_EXTENSIONS: tuple[str, ...] = (
    ".mjs",
    ".cjs",
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".vue",
    ".svelte",
)


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Performance tuning:
            workers: Parallel file workers (None or 1 = sequential)

        File filtering:
            exclude_dirs: Directory names skipped during the walk
            source_extensions: File extensions treated as source code
            max_file_size_mb: Larger files are skipped at scan stage
            max_files: Files beyond this count are skipped at scan stage
            follow_symlinks: Descend into symlinked directories

        Linting:
            lint_enabled: Run the external linter at all
            eslint_command: Executable (or path) used for linting
            lint_timeout_seconds: Per-file linter timeout

        Detectors:
            large_function_lines: Line span above which LARGE_FUNCTION fires

        Output control:
            verbosity: Logging verbosity level
    """

    # Performance tuning
    workers: Optional[int] = None

    # File filtering
    exclude_dirs: tuple[str, ...] = field(default=DEFAULT_EXCLUDE_DIRS)
    source_extensions: tuple[str, ...] = field(default=DEFAULT_SOURCE_EXTENSIONS)
    max_file_size_mb: float = 5.0
    max_files: int = 20000
    follow_symlinks: bool = False

    # Linting
    lint_enabled: bool = True
    eslint_command: str = "eslint"
    lint_timeout_seconds: int = 30

    # Detectors
    large_function_lines: int = 50

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.max_files < 1:
            raise InvalidConfigError("max_files", self.max_files, "must be at least 1")
        if self.lint_timeout_seconds < 1:
            raise InvalidConfigError(
                "lint_timeout_seconds", self.lint_timeout_seconds, "must be at least 1"
            )
        if self.large_function_lines < 1:
            raise InvalidConfigError(
                "large_function_lines", self.large_function_lines, "must be at least 1"
            )
        for ext in self.source_extensions:
            if not ext.startswith("."):
                raise InvalidConfigError("source_extensions", ext, "extensions must start with '.'")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def parallel(self) -> bool:
        return self.workers is not None and self.workers > 1


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options do not mask file values.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        SourceScopeError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".sourcescope.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except SourceScopeError:
            raise
        except Exception as e:
            raise SourceScopeError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "sourcescope.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except SourceScopeError:
            raise
        except Exception as e:
            raise SourceScopeError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise SourceScopeError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except SourceScopeError:
            raise
        except Exception as e:
            raise SourceScopeError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    # TOML arrays arrive as lists
    for key in ("exclude_dirs", "source_extensions"):
        if isinstance(merged.get(key), list):
            merged[key] = tuple(merged[key])

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise SourceScopeError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from SOURCESCOPE_* environment variables.

    Supported environment variables:
        SOURCESCOPE_WORKERS: int
        SOURCESCOPE_MAX_FILE_SIZE_MB: float
        SOURCESCOPE_MAX_FILES: int
        SOURCESCOPE_FOLLOW_SYMLINKS: bool (true/false/1/0)
        SOURCESCOPE_LINT_ENABLED: bool
        SOURCESCOPE_ESLINT_COMMAND: str
        SOURCESCOPE_LINT_TIMEOUT_SECONDS: int
        SOURCESCOPE_LARGE_FUNCTION_LINES: int
        SOURCESCOPE_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any SOURCESCOPE_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"SOURCESCOPE_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise SourceScopeError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    # Sequences are file-only settings
    if origin in (list, tuple) or type_hint in (list, tuple):
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return the ``[sourcescope]`` table (or the whole file).

    Raises:
        SourceScopeError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise SourceScopeError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        data = tomllib.load(f)
    section = data.get("sourcescope")
    return dict(section) if isinstance(section, dict) else data
