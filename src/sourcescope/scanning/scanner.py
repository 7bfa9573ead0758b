"""Source tree scanner.

Walks a root directory and lists candidate source files. Entries are
visited in sorted order so identical trees always scan identically.
Unreadable directories and dangling links are skipped with a recorded
warning; they never abort the walk.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config import AnalysisConfig, DEFAULT_CONFIG
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ScanResult:
    """Files to analyze plus what was dropped along the way.

    Attributes:
        files: Absolute paths to analyze, in traversal order
        discovered: Candidate files seen (``files`` plus scan-stage skips)
        warnings: Human readable reasons for every skip
    """

    files: list[Path] = field(default_factory=list)
    discovered: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return self.discovered - len(self.files)


class SourceTreeScanner:
    """Recursive, deterministic source file discovery."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._exclude = frozenset(self.config.exclude_dirs)
        self._extensions = frozenset(ext.lower() for ext in self.config.source_extensions)

    def is_source_file(self, name: str) -> bool:
        return os.path.splitext(name)[1].lower() in self._extensions

    def scan(self, root: Path) -> ScanResult:
        """Scan ``root`` and return the files to analyze."""
        result = ScanResult()
        visited: set[tuple[int, int]] = set()
        self._walk(Path(root), result, visited)
        logger.info(
            f"Scan complete: {len(result.files)} files queued, "
            f"{result.skipped} skipped, {len(result.warnings)} warnings"
        )
        return result

    def _walk(self, directory: Path, result: ScanResult, visited: set[tuple[int, int]]) -> None:
        try:
            stat = directory.stat()
            key = (stat.st_dev, stat.st_ino)
            if key in visited:
                self._warn(result, f"Symlink loop at {directory}, skipping")
                return
            visited.add(key)
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            self._warn(result, f"Skipping directory {directory}: {e.strerror or e}")
            return

        for entry in entries:
            if entry.name in self._exclude:
                continue

            try:
                is_link = entry.is_symlink()
                is_dir = entry.is_dir(follow_symlinks=self.config.follow_symlinks)
            except OSError as e:
                self._warn(result, f"Skipping {entry.path}: {e.strerror or e}")
                continue

            if is_dir:
                self._walk(Path(entry.path), result, visited)
                continue

            if not self.is_source_file(entry.name):
                continue

            result.discovered += 1
            self._consider_file(entry, is_link, result)

    def _consider_file(self, entry: os.DirEntry, is_link: bool, result: ScanResult) -> None:
        try:
            if not entry.is_file(follow_symlinks=True):
                if is_link:
                    self._warn(result, f"Dangling symlink {entry.path}, skipping")
                return
            size = entry.stat(follow_symlinks=True).st_size
        except OSError as e:
            self._warn(result, f"Cannot stat {entry.path}: {e.strerror or e}")
            return

        if size > self.config.max_file_size_bytes:
            self._warn(result, f"Skipping {entry.path}: {size} bytes exceeds size limit")
            return

        if len(result.files) >= self.config.max_files:
            self._warn(result, f"Skipping {entry.path}: max files limit ({self.config.max_files})")
            return

        result.files.append(Path(entry.path))

    @staticmethod
    def _warn(result: ScanResult, message: str) -> None:
        logger.warning(message)
        result.warnings.append(message)
