"""Quiet formatter: paths of files with issues only."""

from ..models import AnalysisResult
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render just the paths of files that have issues, one per line."""

    def render(self, result: AnalysisResult) -> None:
        output = self.format(result)
        if output:
            print(output)

    def format(self, result: AnalysisResult) -> str:
        return "\n".join(fa.file_path for fa in result.file_analyses if fa.issues)
