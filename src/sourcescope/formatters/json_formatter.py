"""JSON formatter for SourceScope."""

import json

from .base import BaseFormatter
from ..models import AnalysisResult


class JsonFormatter(BaseFormatter):
    """Render the full result in its camelCase wire shape."""

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result))

    def format(self, result: AnalysisResult) -> str:
        return json.dumps(result.to_dict(), indent=2)
