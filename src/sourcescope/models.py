"""Result models produced by the analysis engine.

Every model is a frozen value record. ``to_dict()`` renders the camelCase
wire shape consumed by job workers and the JSON formatter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class IssueType(str, Enum):
    SYNTAX = "syntax"
    LOGIC = "logic"
    PERFORMANCE = "performance"
    SECURITY = "security"
    LINT = "lint"
    IO = "io"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class IssueFix:
    """A suggested fix: human description plus replacement snippet."""

    description: str
    code: str

    def to_dict(self) -> dict[str, str]:
        return {"description": self.description, "code": self.code}


@dataclass(frozen=True)
class CodeIssue:
    """One detected problem instance.

    Attributes:
        type: Detector category that produced the issue
        severity: error, warning or info
        message: Human readable text
        code: Short machine identifier, e.g. ``UNUSED_VARIABLE``
        file_path: Path relative to the analysis root (POSIX separators)
        line: 1-based line, 0 when unknown
        column: 1-based column, 0 when unknown
        fix: Optional suggested fix
    """

    type: IssueType
    severity: Severity
    message: str
    code: str
    file_path: str
    line: int = 0
    column: int = 0
    fix: Optional[IssueFix] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "code": self.code,
            "filePath": self.file_path,
            "line": self.line,
            "column": self.column,
        }
        if self.fix is not None:
            data["fix"] = self.fix.to_dict()
        return data


@dataclass(frozen=True)
class FileMetrics:
    """Per-file measurements.

    Only ``lines_of_code`` is always present. The structural counts are
    ``None`` when the file could not be read or parsed.
    """

    lines_of_code: int
    complexity: Optional[int] = None
    functions: Optional[int] = None
    classes: Optional[int] = None
    imports: Optional[int] = None

    def to_dict(self) -> dict[str, int]:
        data = {"linesOfCode": self.lines_of_code}
        optional = {
            "complexity": self.complexity,
            "functions": self.functions,
            "classes": self.classes,
            "imports": self.imports,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class FileAnalysisResult:
    """One file's outcome: issues in detector order plus metrics."""

    file_path: str
    issues: tuple[CodeIssue, ...]
    metrics: FileMetrics

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "issues": [issue.to_dict() for issue in self.issues],
            "metrics": self.metrics.to_dict(),
        }


def empty_breakdown() -> dict[str, int]:
    return {severity.value: 0 for severity in Severity}


@dataclass(frozen=True)
class ProjectMetrics:
    """Aggregate over all analyzed files."""

    total_lines_of_code: int = 0
    average_complexity: float = 0.0
    total_functions: int = 0
    total_classes: int = 0
    issue_breakdown: dict[str, int] = field(default_factory=empty_breakdown)
    maintainability_index: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalLinesOfCode": self.total_lines_of_code,
            "averageComplexity": self.average_complexity,
            "totalFunctions": self.total_functions,
            "totalClasses": self.total_classes,
            "issueBreakdown": dict(self.issue_breakdown),
            "maintainabilityIndex": self.maintainability_index,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """The engine's single return value per run.

    Attributes:
        project_path: Source root actually scanned (after framework detection)
        framework: Detected framework tag, e.g. ``react`` or ``node``
        total_files: Candidate source files discovered by the scanner
        analyzed_files: Files that went through the per-file analyzer
        issues: All issues across files, in scan order
        metrics: Project-level aggregate
        file_analyses: Per-file results, in scan order
        duration: Wall-clock milliseconds from scan start to aggregation end
        timestamp: Completion time (UTC)
        warnings: Scan-stage warnings (unreadable directories, skipped files)
    """

    project_path: str
    framework: str
    total_files: int
    analyzed_files: int
    issues: tuple[CodeIssue, ...]
    metrics: ProjectMetrics
    file_analyses: tuple[FileAnalysisResult, ...]
    duration: int
    timestamp: datetime
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectPath": self.project_path,
            "framework": self.framework,
            "totalFiles": self.total_files,
            "analyzedFiles": self.analyzed_files,
            "issues": [issue.to_dict() for issue in self.issues],
            "metrics": self.metrics.to_dict(),
            "fileAnalyses": [fa.to_dict() for fa in self.file_analyses],
            "duration": self.duration,
            "timestamp": self.timestamp.isoformat(),
            "warnings": list(self.warnings),
        }
