"""Job-worker boundary around the analysis engine.

A queue worker hands each job to :class:`AnalysisJobRunner`, which runs the
engine, persists the result, asks for suggestions and publishes progress.
Storage, suggestion generation and publishing are collaborators supplied by
the caller; this module only fixes their interfaces and the run order:

    processing -> analyze (progress 10..80) -> save result -> suggestions
    -> save suggestions -> completed (100)

A run that only hit file-level problems completes normally. An unusable
project root marks the job failed with the root cause message.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence, Union

from .analysis.engine import AnalysisEngine
from .exceptions import SourceScopeError
from .logging_config import get_logger
from .models import AnalysisResult, CodeIssue
from .suggestions import LocalSuggestionEngine, Suggestion

logger = get_logger(__name__)

COMPLETED = "completed"
FAILED = "failed"

# Job progress reserved around the engine's own 0-100
START_PROGRESS = 10
ANALYSIS_CEILING = 80


class ResultStore(Protocol):
    """Durable storage for job outcomes."""

    def save_result(self, job_id: str, result: AnalysisResult) -> None: ...

    def save_suggestions(self, job_id: str, suggestions: Sequence[Suggestion]) -> None: ...

    def mark_completed(self, job_id: str) -> None: ...

    def mark_failed(self, job_id: str, error: str) -> None: ...


class SuggestionGenerator(Protocol):
    def __call__(self, issues: Sequence[CodeIssue], context: str) -> list[Suggestion]: ...


class ProgressPublisher(Protocol):
    def __call__(self, job_id: str, event: dict[str, Any]) -> None: ...


def job_progress(percent: int) -> int:
    """Map engine progress (0-100) onto the job's 10-80 analysis window."""
    return min(ANALYSIS_CEILING, START_PROGRESS + math.floor(percent * 0.7))


@dataclass(frozen=True)
class JobOutcome:
    """What happened to one job."""

    job_id: str
    status: str
    result: Optional[AnalysisResult] = None
    suggestions: tuple[Suggestion, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == COMPLETED


class AnalysisJobRunner:
    """Runs analysis jobs end to end.

    Args:
        engine: Engine used for every job (its linters are reused)
        store: Where results and status go
        suggest: Suggestion generator; defaults to the offline local engine
        publish: Progress/complete/error event sink; optional
    """

    def __init__(
        self,
        engine: AnalysisEngine,
        store: ResultStore,
        suggest: Optional[SuggestionGenerator] = None,
        publish: Optional[ProgressPublisher] = None,
    ):
        self.engine = engine
        self.store = store
        self.suggest = suggest or LocalSuggestionEngine()
        self.publish = publish

    def run(self, job_id: str, project_path: Union[str, Path]) -> JobOutcome:
        """Process one job.

        Raises:
            Exception: Anything unexpected from the store, after the job has
                been marked failed, so the queue's retry policy can act
        """
        logger.info(f"[Job {job_id}] Starting analysis of {project_path}")
        self._publish(job_id, {"type": "progress", "progress": START_PROGRESS})

        try:
            result = self.engine.analyze_codebase(
                project_path,
                on_progress=lambda pct: self._publish(
                    job_id, {"type": "progress", "progress": job_progress(pct)}
                ),
            )
        except SourceScopeError as e:
            logger.error(f"[Job {job_id}] Analysis failed: {e}")
            return self._fail(job_id, e.summary)

        try:
            self.store.save_result(job_id, result)
            suggestions = self._suggestions(job_id, result)
            self.store.save_suggestions(job_id, suggestions)
            self.store.mark_completed(job_id)
        except Exception as e:
            logger.error(f"[Job {job_id}] Persisting results failed: {e}")
            self._fail(job_id, str(e))
            raise

        self._publish(
            job_id,
            {
                "type": "complete",
                "progress": 100,
                "totalFiles": result.total_files,
                "analyzedFiles": result.analyzed_files,
                "metrics": result.metrics.to_dict(),
            },
        )
        logger.info(f"[Job {job_id}] Analysis completed: {result.analyzed_files} files")
        return JobOutcome(
            job_id=job_id, status=COMPLETED, result=result, suggestions=tuple(suggestions)
        )

    def _suggestions(self, job_id: str, result: AnalysisResult) -> list[Suggestion]:
        try:
            return list(self.suggest(result.issues, f"Project path: {result.project_path}"))
        except Exception as e:
            logger.warning(f"[Job {job_id}] Suggestion generation failed: {e}")
            return []

    def _fail(self, job_id: str, message: str) -> JobOutcome:
        try:
            self.store.mark_failed(job_id, message)
        except Exception as e:
            logger.error(f"[Job {job_id}] Could not mark job failed: {e}")
        self._publish(job_id, {"type": "error", "error": message})
        return JobOutcome(job_id=job_id, status=FAILED, error=message)

    def _publish(self, job_id: str, event: dict[str, Any]) -> None:
        if self.publish is None:
            return
        try:
            self.publish(job_id, event)
        except Exception as e:
            logger.warning(f"[Job {job_id}] Publishing {event.get('type')} event failed: {e}")
