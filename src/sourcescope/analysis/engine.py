"""Project-level orchestration.

Run sequence:
    1. Validate the root and detect framework + source root
    2. Build the lint configuration for that framework (once per run)
    3. Scan the source root for candidate files
    4. Analyze every file, reporting progress after each one
    5. Aggregate per-file results into project metrics

Only an unusable root aborts a run (:class:`InvalidPathError`); every
file-level failure is folded into that file's result.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Callable, Optional, Sequence, Union

from ..config import AnalysisConfig, DEFAULT_CONFIG
from ..logging_config import get_logger
from ..models import AnalysisResult, FileAnalysisResult
from ..scanning import FrameworkDetector, ParserAdapter, SourceTreeScanner
from ..security import validate_root_directory
from .complexity import ComplexityCalculator
from .detectors import Detector, default_detectors
from .file_analyzer import FileAnalyzer
from .lint import LintAdapter, LinterRegistry
from .metrics import aggregate_metrics, progress_percent

logger = get_logger(__name__)

ProgressCallback = Callable[[int], None]


class ProgressTracker:
    """Serializes completed-file counting and progress callbacks.

    Increment and callback happen under one lock, so reported percentages
    are non-decreasing even with many workers finishing at once. A failing
    callback is logged and otherwise ignored.
    """

    def __init__(self, total: int, callback: Optional[ProgressCallback] = None):
        self.total = total
        self.callback = callback
        self.completed = 0
        self._lock = Lock()

    def advance(self) -> None:
        with self._lock:
            self.completed += 1
            if self.callback is None:
                return
            percent = progress_percent(self.completed, self.total)
            try:
                self.callback(percent)
            except Exception as e:
                logger.warning(
                    f"Progress callback failed at {self.completed}/{self.total}: {e}"
                )


class AnalysisEngine:
    """Static analysis engine for JavaScript/TypeScript projects.

    Collaborators are injectable; anything not passed is built from
    ``config``. The engine owns its :class:`LinterRegistry` and releases it
    in :meth:`close` (or on leaving a ``with`` block).

    Example:
        >>> with AnalysisEngine(AnalysisConfig(workers=4)) as engine:
        ...     result = engine.analyze_codebase("./my-app")
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        parser: Optional[ParserAdapter] = None,
        linters: Optional[LinterRegistry] = None,
        detectors: Optional[Sequence[Detector]] = None,
        framework_detector: Optional[FrameworkDetector] = None,
        scanner: Optional[SourceTreeScanner] = None,
        complexity: Optional[ComplexityCalculator] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.parser = parser or ParserAdapter()
        self.linters = linters or LinterRegistry(self.config)
        self.detectors = list(detectors) if detectors is not None else default_detectors(self.config)
        self.framework_detector = framework_detector or FrameworkDetector(
            source_extensions=self.config.source_extensions
        )
        self.scanner = scanner or SourceTreeScanner(self.config)
        self.complexity = complexity or ComplexityCalculator()

    def __enter__(self) -> "AnalysisEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.linters.close()

    def analyze_codebase(
        self,
        root: Union[str, Path],
        on_progress: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """Analyze every source file under ``root``.

        Args:
            root: Project directory
            on_progress: Called with a 0-100 percentage after each file

        Returns:
            Immutable result for the whole run

        Raises:
            InvalidPathError: If ``root`` is missing, not a directory or unreadable
        """
        start = time.monotonic()
        project_root = validate_root_directory(Path(root))

        profile = self.framework_detector.detect(project_root)
        analyzer = FileAnalyzer(
            parser=self.parser,
            detectors=self.detectors,
            lint=LintAdapter(self.linters.get(profile.framework)),
            complexity=self.complexity,
        )

        scan = self.scanner.scan(profile.source_root)
        logger.info(
            f"Beginning {profile.framework} analysis of {len(scan.files)} files "
            f"in {profile.source_root}"
        )

        tracker = ProgressTracker(len(scan.files), on_progress)
        if self.config.parallel and len(scan.files) > 1:
            results = self._analyze_parallel(analyzer, scan.files, profile.source_root, tracker)
        else:
            results = self._analyze_sequential(analyzer, scan.files, profile.source_root, tracker)

        metrics = aggregate_metrics(results)
        duration = int((time.monotonic() - start) * 1000)

        logger.info(f"Analysis finished: {len(results)} files analyzed in {duration} ms")

        return AnalysisResult(
            project_path=str(profile.source_root),
            framework=profile.framework,
            total_files=scan.discovered,
            analyzed_files=len(results),
            issues=tuple(issue for result in results for issue in result.issues),
            metrics=metrics,
            file_analyses=tuple(results),
            duration=duration,
            timestamp=datetime.now(timezone.utc),
            warnings=tuple(scan.warnings),
        )

    @staticmethod
    def _analyze_sequential(
        analyzer: FileAnalyzer,
        files: Sequence[Path],
        root: Path,
        tracker: ProgressTracker,
    ) -> list[FileAnalysisResult]:
        results = []
        for path in files:
            results.append(analyzer.analyze(path, root))
            tracker.advance()
        return results

    def _analyze_parallel(
        self,
        analyzer: FileAnalyzer,
        files: Sequence[Path],
        root: Path,
        tracker: ProgressTracker,
    ) -> list[FileAnalysisResult]:
        ordered: list[Optional[FileAnalysisResult]] = [None] * len(files)

        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            futures = {executor.submit(analyzer.analyze, path, root): i for i, path in enumerate(files)}
            for future in as_completed(futures):
                ordered[futures[future]] = future.result()
                tracker.advance()

        # Back into scan order, whatever order the workers finished in
        return [result for result in ordered if result is not None]


def analyze_codebase(
    root: Union[str, Path],
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """Analyze ``root`` with a throwaway engine.

    Raises:
        InvalidPathError: If ``root`` is missing, not a directory or unreadable
    """
    with AnalysisEngine(config) as engine:
        return engine.analyze_codebase(root, on_progress)
