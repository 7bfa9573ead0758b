"""
SourceScope - static analysis and quality metrics for JavaScript/TypeScript

Walks a project, parses every source file with tree-sitter, runs a lint
pass and four heuristic issue detectors (syntax, logic, performance,
security), and aggregates per-file measurements into project metrics
including a maintainability index.
"""

__version__ = "0.1.0"

from .analysis import AnalysisEngine, analyze_codebase
from .config import AnalysisConfig, load_config
from .models import (
    AnalysisResult,
    CodeIssue,
    FileAnalysisResult,
    FileMetrics,
    IssueType,
    ProjectMetrics,
    Severity,
)

__all__ = [
    "analyze_codebase",  # Main entry point
    "AnalysisEngine",  # Reusable engine (injectable collaborators)
    "AnalysisConfig",
    "load_config",
    "AnalysisResult",
    "CodeIssue",
    "FileAnalysisResult",
    "FileMetrics",
    "IssueType",
    "ProjectMetrics",
    "Severity",
]
