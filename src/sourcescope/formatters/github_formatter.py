"""GitHub Actions formatter: workflow annotations plus a Markdown summary."""

from ..models import AnalysisResult, Severity
from .base import BaseFormatter

_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "notice",
}


def _escape(message: str) -> str:
    # Workflow commands treat %, CR and LF specially in the message part
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class GithubFormatter(BaseFormatter):
    """Output ``::error`` / ``::warning`` / ``::notice`` annotations.

    A Markdown summary follows the annotations, suitable for
    ``$GITHUB_STEP_SUMMARY`` or ``gh pr comment``.
    """

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result))

    def format(self, result: AnalysisResult) -> str:
        lines: list[str] = []
        for issue in result.issues:
            location = f"file={issue.file_path}"
            if issue.line:
                location += f",line={issue.line}"
            if issue.column:
                location += f",col={issue.column}"
            lines.append(
                f"::{_LEVELS[issue.severity]} {location},title={issue.code}::{_escape(issue.message)}"
            )

        metrics = result.metrics
        breakdown = metrics.issue_breakdown
        lines.append("")
        lines.append("## SourceScope")
        lines.append("")
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| Framework | {result.framework} |")
        lines.append(f"| Files analyzed | {result.analyzed_files} / {result.total_files} |")
        lines.append(f"| Lines of code | {metrics.total_lines_of_code} |")
        lines.append(f"| Average complexity | {metrics.average_complexity:.2f} |")
        lines.append(f"| Maintainability index | {metrics.maintainability_index:.2f} |")
        lines.append("")
        lines.append(
            f"**Issues:** {breakdown['error']} errors, "
            f"{breakdown['warning']} warnings, {breakdown['info']} info"
        )
        return "\n".join(lines)
