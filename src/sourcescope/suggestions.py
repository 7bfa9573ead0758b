"""Improvement suggestions derived from analysis issues.

Real deployments plug an AI-backed generator into the job layer. The
:class:`LocalSuggestionEngine` here needs no provider: it turns the first few
issues into low-priority placeholder suggestions so the pipeline always has
something to persist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from .logging_config import get_logger
from .models import CodeIssue

logger = get_logger(__name__)


@dataclass(frozen=True)
class Suggestion:
    """One improvement suggestion.

    Attributes:
        type: Category (general, performance, security, logic, style)
        title: Short headline
        description: Root cause and proposed change
        file: File the suggestion applies to
        code_before: Problematic snippet, if known
        code_after: Proposed replacement
        priority: low, medium or high
        confidence: 0.0 - 1.0
    """

    type: str
    title: str
    description: str
    file: str = "unknown"
    code_before: str = ""
    code_after: str = ""
    priority: str = "medium"
    confidence: float = 0.9

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "file": self.file,
            "codeBefore": self.code_before,
            "codeAfter": self.code_after,
            "priority": self.priority,
            "confidence": self.confidence,
        }


class LocalSuggestionEngine:
    """Offline suggestion generator.

    Args:
        limit: Maximum number of suggestions produced per call
    """

    def __init__(self, limit: int = 5):
        self.limit = limit

    def __call__(self, issues: Sequence[CodeIssue], context: str = "") -> list[Suggestion]:
        suggestions = []
        for i, issue in enumerate(issues[: self.limit], start=1):
            file = issue.file_path or "unknown"
            suggestions.append(
                Suggestion(
                    type="logic",
                    title=f"Suggestion for Issue #{i}",
                    description=f"Refactor code in {file} for clarity.",
                    file=file,
                    code_before=issue.code[:80],
                    code_after="// TODO: refactor code here.",
                    priority="low",
                    confidence=0.7,
                )
            )
        logger.debug(f"Local engine produced {len(suggestions)} suggestions")
        return suggestions
