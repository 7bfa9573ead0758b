"""Tests for output formatters."""

import csv
import io
import json
from datetime import datetime, timezone

import pytest
from rich.console import Console

from sourcescope.formatters import (
    CsvFormatter,
    GithubFormatter,
    JsonFormatter,
    QuietFormatter,
    RichFormatter,
    get_formatter,
)
from sourcescope.models import (
    AnalysisResult,
    CodeIssue,
    FileAnalysisResult,
    FileMetrics,
    IssueFix,
    IssueType,
    ProjectMetrics,
    Severity,
)


def _make_result(with_issues: bool = True) -> AnalysisResult:
    issues = (
        CodeIssue(
            type=IssueType.SECURITY,
            severity=Severity.ERROR,
            message="Use of eval() is dangerous and should be avoided",
            code="DANGEROUS_EVAL",
            file_path="src/run.js",
            line=3,
            column=5,
        ),
        CodeIssue(
            type=IssueType.LOGIC,
            severity=Severity.ERROR,
            message="Use Number.isNaN() instead of comparing with NaN",
            code="NAN_COMPARISON",
            file_path="src/run.js",
            line=7,
            column=1,
            fix=IssueFix(description="Compare with Number.isNaN()", code="Number.isNaN(x)"),
        ),
        CodeIssue(
            type=IssueType.IO,
            severity=Severity.WARNING,
            message="100% broken,\nreally",
            code="IO_ERROR",
            file_path="src/io.js",
        ),
    ) if with_issues else ()
    files = (
        FileAnalysisResult(
            file_path="src/run.js",
            issues=issues[:2],
            metrics=FileMetrics(lines_of_code=12, complexity=3, functions=1, classes=0, imports=0),
        ),
        FileAnalysisResult(
            file_path="src/io.js",
            issues=issues[2:],
            metrics=FileMetrics(lines_of_code=0),
        ),
        FileAnalysisResult(
            file_path="src/clean.js",
            issues=(),
            metrics=FileMetrics(lines_of_code=4, complexity=1, functions=0, classes=0, imports=1),
        ),
    )
    breakdown = {"error": 2, "warning": 1, "info": 0} if with_issues else {
        "error": 0,
        "warning": 0,
        "info": 0,
    }
    return AnalysisResult(
        project_path="/work/app",
        framework="react",
        total_files=4,
        analyzed_files=3,
        issues=issues,
        metrics=ProjectMetrics(
            total_lines_of_code=16,
            average_complexity=1.33,
            total_functions=1,
            total_classes=0,
            issue_breakdown=breakdown,
            maintainability_index=88.5,
        ),
        file_analyses=files,
        duration=42,
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        warnings=("Skipping /work/app/huge.js: 9000000 bytes exceeds size limit",),
    )


class TestJsonFormatter:
    def test_camel_case_wire_shape(self):
        data = json.loads(JsonFormatter().format(_make_result()))
        assert data["projectPath"] == "/work/app"
        assert data["totalFiles"] == 4
        assert data["analyzedFiles"] == 3
        assert data["metrics"]["averageComplexity"] == 1.33
        assert data["metrics"]["issueBreakdown"] == {"error": 2, "warning": 1, "info": 0}
        assert data["issues"][0]["filePath"] == "src/run.js"
        assert data["issues"][1]["fix"] == {
            "description": "Compare with Number.isNaN()",
            "code": "Number.isNaN(x)",
        }
        assert "fix" not in data["issues"][0]
        assert data["timestamp"] == "2024-05-01T12:00:00+00:00"

    def test_degraded_file_metrics_omit_counts(self):
        data = json.loads(JsonFormatter().format(_make_result()))
        assert data["fileAnalyses"][1]["metrics"] == {"linesOfCode": 0}


class TestCsvFormatter:
    def test_one_row_per_issue(self):
        rows = list(csv.reader(io.StringIO(CsvFormatter().format(_make_result()))))
        assert rows[0] == ["file", "line", "column", "severity", "type", "code", "message"]
        assert len(rows) == 4
        assert rows[1] == [
            "src/run.js",
            "3",
            "5",
            "error",
            "security",
            "DANGEROUS_EVAL",
            "Use of eval() is dangerous and should be avoided",
        ]
        assert rows[3][6] == "100% broken,\nreally"


class TestQuietFormatter:
    def test_lists_files_with_issues(self):
        assert QuietFormatter().format(_make_result()) == "src/run.js\nsrc/io.js"

    def test_clean_result_is_empty(self):
        assert QuietFormatter().format(_make_result(with_issues=False)) == ""


class TestGithubFormatter:
    def test_annotations(self):
        lines = GithubFormatter().format(_make_result()).splitlines()
        assert lines[0] == (
            "::error file=src/run.js,line=3,col=5,title=DANGEROUS_EVAL::"
            "Use of eval() is dangerous and should be avoided"
        )
        assert lines[2] == "::warning file=src/io.js,title=IO_ERROR::100%25 broken,%0Areally"

    def test_summary(self):
        output = GithubFormatter().format(_make_result())
        assert "## SourceScope" in output
        assert "| Files analyzed | 3 / 4 |" in output
        assert "**Issues:** 2 errors, 1 warnings, 0 info" in output


class TestRichFormatter:
    def _render(self, result):
        buffer = io.StringIO()
        RichFormatter(console=Console(file=buffer, width=120, color_system=None)).render(result)
        return buffer.getvalue()

    def test_renders_summary_and_issues(self):
        output = self._render(_make_result())
        assert "/work/app" in output
        assert "src/run.js" in output
        assert "DANGEROUS_EVAL" in output
        assert "huge.js" in output

    def test_clean_result(self):
        assert "No issues found." in self._render(_make_result(with_issues=False))

    def test_markup_in_text_is_printed_literally(self):
        issue = CodeIssue(
            type=IssueType.LINT,
            severity=Severity.ERROR,
            message="Parsing error: Unexpected token [/div]",
            code="[bold]LINT_ERROR",
            file_path="src/[red]odd.js",
            line=2,
            column=4,
        )
        result = AnalysisResult(
            project_path="/work/[app]",
            framework="node",
            total_files=1,
            analyzed_files=1,
            issues=(issue,),
            metrics=ProjectMetrics(issue_breakdown={"error": 1, "warning": 0, "info": 0}),
            file_analyses=(
                FileAnalysisResult(
                    file_path="src/[red]odd.js",
                    issues=(issue,),
                    metrics=FileMetrics(lines_of_code=2, complexity=1),
                ),
            ),
            duration=1,
            timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )
        output = self._render(result)
        assert "Unexpected token [/div]" in output
        assert "[bold]LINT_ERROR" in output
        assert "src/[red]odd.js" in output

    def test_format_returns_empty_string(self):
        formatter = RichFormatter(console=Console(file=io.StringIO()))
        assert formatter.format(_make_result()) == ""


class TestGetFormatter:
    @pytest.mark.parametrize(
        "name, cls",
        [
            ("rich", RichFormatter),
            ("json", JsonFormatter),
            ("csv", CsvFormatter),
            ("quiet", QuietFormatter),
            ("github", GithubFormatter),
        ],
    )
    def test_known_names(self, name, cls):
        assert isinstance(get_formatter(name), cls)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")
