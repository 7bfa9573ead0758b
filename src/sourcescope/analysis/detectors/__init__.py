"""Heuristic issue detectors.

Detector order is part of the output contract: a file's issues list lint
findings first, then syntax, logic, performance and security findings.
"""

from typing import Optional

from ...config import AnalysisConfig, DEFAULT_CONFIG
from .base import DetectionContext, Detector
from .logic import LogicDetector
from .performance import PerformanceDetector
from .security import SecurityDetector
from .syntax import SyntaxDetector


def default_detectors(config: Optional[AnalysisConfig] = None) -> list[Detector]:
    """The four built-in detectors in reporting order."""
    config = config or DEFAULT_CONFIG
    return [
        SyntaxDetector(),
        LogicDetector(),
        PerformanceDetector(large_function_lines=config.large_function_lines),
        SecurityDetector(),
    ]


__all__ = [
    "DetectionContext",
    "Detector",
    "LogicDetector",
    "PerformanceDetector",
    "SecurityDetector",
    "SyntaxDetector",
    "default_detectors",
]
