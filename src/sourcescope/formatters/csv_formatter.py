"""CSV formatter for SourceScope."""

import csv
import io

from .base import BaseFormatter
from ..models import AnalysisResult


class CsvFormatter(BaseFormatter):
    """Render one row per issue."""

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result), end="")

    def format(self, result: AnalysisResult) -> str:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["file", "line", "column", "severity", "type", "code", "message"])
        for issue in result.issues:
            writer.writerow([
                issue.file_path, issue.line, issue.column,
                issue.severity.value, issue.type.value, issue.code,
                issue.message,
            ])
        return output.getvalue()
