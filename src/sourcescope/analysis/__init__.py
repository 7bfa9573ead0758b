"""Per-file analysis, project aggregation and the engine that ties them together."""

from .complexity import ComplexityCalculator
from .detectors import (
    Detector,
    LogicDetector,
    PerformanceDetector,
    SecurityDetector,
    SyntaxDetector,
    default_detectors,
)
from .engine import AnalysisEngine, ProgressTracker, analyze_codebase
from .file_analyzer import FileAnalyzer
from .lint import (
    EslintLinter,
    LintAdapter,
    LintMessage,
    LintProfile,
    LinterRegistry,
    NullLinter,
    profile_for,
)
from .metrics import aggregate_metrics, maintainability_index, round_half_up

__all__ = [
    "AnalysisEngine",
    "ComplexityCalculator",
    "Detector",
    "EslintLinter",
    "FileAnalyzer",
    "LintAdapter",
    "LintMessage",
    "LintProfile",
    "LinterRegistry",
    "LogicDetector",
    "NullLinter",
    "PerformanceDetector",
    "ProgressTracker",
    "SecurityDetector",
    "SyntaxDetector",
    "aggregate_metrics",
    "analyze_codebase",
    "default_detectors",
    "maintainability_index",
    "profile_for",
    "round_half_up",
]
