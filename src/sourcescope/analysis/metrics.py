"""Project-level aggregation of per-file results."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from ..models import FileAnalysisResult, ProjectMetrics, empty_breakdown


def round_half_up(value: float, digits: int = 2) -> float:
    """Round with ties going up (2.345 -> 2.35), not to even like ``round``."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def progress_percent(done: int, total: int) -> int:
    """Whole-number completion percentage, rounding halves up."""
    if total <= 0:
        return 100
    return int(math.floor(100 * done / total + 0.5))


def maintainability_index(average_complexity: float, total_lines: int) -> float:
    """Maintainability index in [0, 100].

    ``((171 - 5.2 * ln(L * log2(L + 1)) - 0.23 * C) * 100) / 171``, clamped and
    rounded to two decimals. An empty project scores 0.
    """
    if total_lines <= 0:
        return 0.0
    volume = total_lines * math.log2(total_lines + 1)
    raw = ((171 - 5.2 * math.log(volume) - 0.23 * average_complexity) * 100) / 171
    return round_half_up(max(0.0, min(100.0, raw)))


def count_by_severity(results: Iterable[FileAnalysisResult]) -> dict[str, int]:
    breakdown = empty_breakdown()
    for result in results:
        for issue in result.issues:
            breakdown[issue.severity.value] += 1
    return breakdown


def aggregate_metrics(results: Sequence[FileAnalysisResult]) -> ProjectMetrics:
    """Sum and average per-file metrics. Missing counts contribute 0."""
    total_lines = 0
    total_complexity = 0
    total_functions = 0
    total_classes = 0
    for result in results:
        metrics = result.metrics
        total_lines += metrics.lines_of_code
        total_complexity += metrics.complexity or 0
        total_functions += metrics.functions or 0
        total_classes += metrics.classes or 0

    average = total_complexity / len(results) if results else 0.0

    return ProjectMetrics(
        total_lines_of_code=total_lines,
        average_complexity=round_half_up(average),
        total_functions=total_functions,
        total_classes=total_classes,
        issue_breakdown=count_by_severity(results),
        maintainability_index=maintainability_index(average, total_lines),
    )
