"""Per-file orchestration: read, parse, lint, detect, measure.

Every failure in here is local to the file. A read error becomes a single
``IO_ERROR`` issue, a hard parse failure a single ``PARSE_ERROR`` issue, and
a crashing linter, detector or complexity pass is logged and contributes
nothing. :meth:`FileAnalyzer.analyze` therefore always returns a result.
"""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path
from typing import Optional, Sequence

from tree_sitter import Node

from ..exceptions import FileAccessError
from ..logging_config import get_logger
from ..models import CodeIssue, FileAnalysisResult, FileMetrics, IssueType, Severity
from ..scanning.parser import ParseFailure, ParserAdapter
from .complexity import ComplexityCalculator
from .detectors import Detector
from .lint import LintAdapter, NullLinter
from .nodes import CLASS_DECLARATION_TYPES, FUNCTION_TYPES
from .walker import descendants

logger = get_logger(__name__)

IMPORT_TYPES = frozenset({"import_statement"})

_COUNTED_TYPES = FUNCTION_TYPES | CLASS_DECLARATION_TYPES | IMPORT_TYPES


def count_lines(text: str) -> int:
    """Newline-delimited line count; a missing trailing newline still counts."""
    return len(text.split("\n"))


def relative_path(path: Path, root: Path) -> str:
    return Path(os.path.relpath(path, root)).as_posix()


def structure_counts(root: Node) -> tuple[int, int, int]:
    """(functions, classes, imports) over the whole tree."""
    counts = Counter(node.type for node in descendants(root, _COUNTED_TYPES))
    functions = sum(counts[t] for t in FUNCTION_TYPES)
    classes = sum(counts[t] for t in CLASS_DECLARATION_TYPES)
    imports = sum(counts[t] for t in IMPORT_TYPES)
    return functions, classes, imports


class FileAnalyzer:
    """Analyzes one file at a time. Shareable across worker threads.

    Args:
        parser: Parser adapter (keeps per-thread tree-sitter parsers)
        lint: Lint adapter for the run's framework
        detectors: Detectors in reporting order
        complexity: Complexity calculator
    """

    def __init__(
        self,
        parser: ParserAdapter,
        detectors: Sequence[Detector],
        lint: Optional[LintAdapter] = None,
        complexity: Optional[ComplexityCalculator] = None,
    ):
        self.parser = parser
        self.detectors = list(detectors)
        self.lint = lint or LintAdapter(NullLinter())
        self.complexity = complexity or ComplexityCalculator()

    def analyze(self, path: Path, root: Path) -> FileAnalysisResult:
        rel = relative_path(path, root)

        try:
            text = self._read(path)
        except FileAccessError as e:
            logger.warning(f"{e}")
            return FileAnalysisResult(
                file_path=rel,
                issues=(
                    CodeIssue(
                        type=IssueType.IO,
                        severity=Severity.ERROR,
                        message="Failed to read file",
                        code="IO_ERROR",
                        file_path=rel,
                    ),
                ),
                metrics=FileMetrics(lines_of_code=0),
            )

        lines = count_lines(text)
        outcome = self.parser.parse(text, rel)
        if isinstance(outcome, ParseFailure):
            logger.warning(f"Parse failed for {rel}: {outcome.message}")
            return FileAnalysisResult(
                file_path=rel,
                issues=(
                    CodeIssue(
                        type=IssueType.SYNTAX,
                        severity=Severity.ERROR,
                        message=outcome.message,
                        code="PARSE_ERROR",
                        file_path=rel,
                        line=outcome.line,
                        column=outcome.column,
                    ),
                ),
                metrics=FileMetrics(lines_of_code=lines),
            )

        root_node = outcome.root_node
        issues: list[CodeIssue] = list(self.lint.lint(text, rel))

        for detector in self.detectors:
            try:
                issues.extend(detector.detect(root_node, outcome.source, rel))
            except Exception as e:
                logger.warning(f"{detector.name} detector failed for {rel}: {e}")

        try:
            complexity = self.complexity.calculate(root_node)
        except Exception as e:
            logger.warning(f"Complexity calculation failed for {rel}: {e}")
            complexity = 0

        functions, classes, imports = structure_counts(root_node)

        return FileAnalysisResult(
            file_path=rel,
            issues=tuple(issues),
            metrics=FileMetrics(
                lines_of_code=lines,
                complexity=complexity,
                functions=functions,
                classes=classes,
                imports=imports,
            ),
        )

    @staticmethod
    def _read(path: Path) -> str:
        """Read a file as UTF-8; undecodable bytes are replaced, not fatal.

        Raises:
            FileAccessError: If the file cannot be opened or read
        """
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FileAccessError(path, e.strerror or str(e))
        return data.decode("utf-8", errors="replace")
