"""Tests for rounding, progress and project aggregation."""

from sourcescope.analysis.metrics import (
    aggregate_metrics,
    maintainability_index,
    progress_percent,
    round_half_up,
)
from sourcescope.models import CodeIssue, FileAnalysisResult, FileMetrics, IssueType, Severity


def _file(path, lines, complexity=None, functions=None, classes=None, severities=()):
    issues = tuple(
        CodeIssue(
            type=IssueType.SYNTAX,
            severity=severity,
            message="m",
            code="C",
            file_path=path,
        )
        for severity in severities
    )
    return FileAnalysisResult(
        file_path=path,
        issues=issues,
        metrics=FileMetrics(
            lines_of_code=lines, complexity=complexity, functions=functions, classes=classes
        ),
    )


class TestRounding:
    def test_half_rounds_up(self):
        assert round_half_up(0.125) == 0.13
        assert round_half_up(2.5, 0) == 3.0

    def test_plain_values(self):
        assert round_half_up(3.0) == 3.0
        assert round_half_up(1.234) == 1.23

    def test_progress_percent(self):
        assert progress_percent(1, 3) == 33
        assert progress_percent(2, 3) == 67
        assert progress_percent(1, 8) == 13
        assert progress_percent(3, 3) == 100

    def test_progress_with_no_work(self):
        assert progress_percent(0, 0) == 100


class TestMaintainabilityIndex:
    """MI = ((171 - 5.2 ln(L log2(L+1)) - 0.23 C) * 100) / 171, clamped to [0, 100]."""

    def test_known_value(self):
        assert maintainability_index(3.0, 100) == 79.83

    def test_empty_project(self):
        assert maintainability_index(0.0, 0) == 0.0

    def test_clamped_low(self):
        assert maintainability_index(1000.0, 10) == 0.0

    def test_clamped_high(self):
        assert maintainability_index(0.0, 1) == 100.0

    def test_idempotent(self):
        assert maintainability_index(4.2, 1234) == maintainability_index(4.2, 1234)


class TestAggregateMetrics:
    """Sums, averages and the severity breakdown."""

    def test_average_complexity(self):
        metrics = aggregate_metrics([_file("a.js", 10, 2), _file("b.js", 20, 4)])
        assert metrics.average_complexity == 3.0
        assert metrics.total_lines_of_code == 30

    def test_average_is_rounded(self):
        metrics = aggregate_metrics(
            [_file("a.js", 1, 1), _file("b.js", 1, 1), _file("c.js", 1, 2)]
        )
        assert metrics.average_complexity == 1.33

    def test_missing_counts_contribute_zero(self):
        metrics = aggregate_metrics(
            [
                _file("a.js", 10, complexity=4, functions=2, classes=1),
                _file("broken.js", 5),
            ]
        )
        assert metrics.average_complexity == 2.0
        assert metrics.total_functions == 2
        assert metrics.total_classes == 1
        assert metrics.total_lines_of_code == 15

    def test_issue_breakdown(self):
        metrics = aggregate_metrics(
            [
                _file("a.js", 1, 1, severities=(Severity.ERROR, Severity.INFO)),
                _file("b.js", 1, 1, severities=(Severity.WARNING, Severity.ERROR)),
            ]
        )
        assert metrics.issue_breakdown == {"error": 2, "warning": 1, "info": 1}

    def test_no_files(self):
        metrics = aggregate_metrics([])
        assert metrics.total_lines_of_code == 0
        assert metrics.average_complexity == 0.0
        assert metrics.maintainability_index == 0.0
        assert metrics.issue_breakdown == {"error": 0, "warning": 0, "info": 0}

    def test_mi_uses_unrounded_average(self):
        results = [_file("a.js", 50, 1), _file("b.js", 50, 1), _file("c.js", 50, 2)]
        metrics = aggregate_metrics(results)
        assert metrics.maintainability_index == maintainability_index(4 / 3, 150)
