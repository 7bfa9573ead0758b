"""Framework and source-root detection.

Detection is a file-presence heuristic: a prioritized table of
``(framework, signature entries)`` is evaluated top to bottom against the
listing of each candidate directory. The result only picks the lint profile
and the directory to scan. An inconclusive detection falls back to the
generic ``node`` profile on the project root and never blocks analysis.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from ..logging_config import get_logger

logger = get_logger(__name__)

GENERIC_FRAMEWORK = "node"

# Most specific signatures first. "react" claims any package.json and
# "express" any server.js, so both sit near the end. Component entry files
# (App.vue, App.svelte) are checked before nest, whose main.ts also appears in
# typed Vue projects.
DEFAULT_SIGNATURES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("next", ("next.config.js", "next.config.mjs", "next.config.ts", "pages")),
    ("nuxt", ("nuxt.config.js", "nuxt.config.ts")),
    ("angular", ("angular.json",)),
    ("svelte", ("App.svelte", "svelte.config.js")),
    ("vue", ("App.vue",)),
    ("nest", ("nest-cli.json", "main.ts")),
    ("reactnative", ("react-native.config.js",)),
    ("expo", ("app.json",)),
    ("express", ("server.js", "app.js")),
    ("react", ("App.js", "App.jsx", "App.tsx", "package.json")),
    ("fullstack", ("frontend", "backend", "client", "server")),
)

DEFAULT_CANDIDATES: tuple[str, ...] = ("src", "frontend", "backend", "server", "")


@dataclass(frozen=True)
class FrameworkProfile:
    """Detected framework tag plus the directory that should be scanned."""

    framework: str
    source_root: Path


class FrameworkDetector:
    """Infers the framework and the true source root of a project.

    Args:
        signatures: Ordered ``(framework, names)`` table
        candidates: Subdirectories to try, ``""`` meaning the root itself
        source_extensions: Extensions that make a directory count as source
    """

    def __init__(
        self,
        signatures: Sequence[tuple[str, Sequence[str]]] = DEFAULT_SIGNATURES,
        candidates: Sequence[str] = DEFAULT_CANDIDATES,
        source_extensions: Iterable[str] = (
            ".ts",
            ".js",
            ".tsx",
            ".jsx",
            ".vue",
            ".svelte",
        ),
    ):
        self.signatures = tuple((fw, frozenset(names)) for fw, names in signatures)
        self.candidates = tuple(candidates)
        self.source_extensions = frozenset(ext.lower() for ext in source_extensions)

    def detect(self, project_root: Path) -> FrameworkProfile:
        root = Path(project_root)
        for candidate in self.candidates:
            directory = root / candidate if candidate else root
            entries = self._list(directory)
            if entries is None:
                continue
            if not self._has_source(entries):
                continue
            framework = self.match(entries)
            if framework is not None:
                logger.info(f"Detected framework: {framework} (scanning {directory})")
                return FrameworkProfile(framework=framework, source_root=directory)

        logger.info(f"No framework signature matched, scanning {root} as {GENERIC_FRAMEWORK}")
        return FrameworkProfile(framework=GENERIC_FRAMEWORK, source_root=root)

    def match(self, entries: Iterable[str]) -> Optional[str]:
        """Return the first framework whose signature appears in ``entries``."""
        names = set(entries)
        for framework, signature in self.signatures:
            if names & signature:
                return framework
        return None

    def _has_source(self, entries: Iterable[str]) -> bool:
        return any(os.path.splitext(e)[1].lower() in self.source_extensions for e in entries)

    @staticmethod
    def _list(directory: Path) -> Optional[list[str]]:
        try:
            return os.listdir(directory)
        except OSError:
            return None
