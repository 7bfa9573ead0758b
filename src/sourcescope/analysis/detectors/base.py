"""Detector base class and the per-call detection context."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from tree_sitter import Node

from ...models import CodeIssue, IssueFix, IssueType, Severity
from ..nodes import position
from ..walker import TreeVisitor, descendants, walk

# Node types that count as a use of a binding name
REFERENCE_TYPES = frozenset({"identifier", "shorthand_property_identifier"})


@dataclass
class DetectionContext:
    """Mutable state for one ``detect`` call.

    Created fresh per call and discarded afterwards, so a detector instance
    never carries state between files and can be shared across threads.
    """

    file_path: str
    source: str
    root: Node
    issue_type: IssueType
    issues: list[CodeIssue] = field(default_factory=list)
    _references: Optional[dict[str, list[tuple[int, int]]]] = field(default=None, repr=False)

    def report(
        self,
        node: Node,
        severity: Severity,
        code: str,
        message: str,
        fix: Optional[IssueFix] = None,
    ) -> None:
        line, column = position(node)
        self.issues.append(
            CodeIssue(
                type=self.issue_type,
                severity=severity,
                message=message,
                code=code,
                file_path=self.file_path,
                line=line,
                column=column,
                fix=fix,
            )
        )

    def references(self, name: str) -> list[tuple[int, int]]:
        """Byte ranges of every identifier spelled ``name`` in the file.

        The index is built on first use; most files never need it.
        """
        if self._references is None:
            index: dict[str, list[tuple[int, int]]] = defaultdict(list)
            for node in descendants(self.root, REFERENCE_TYPES):
                if node.text is not None:
                    index[node.text.decode("utf-8", errors="replace")].append(
                        (node.start_byte, node.end_byte)
                    )
            self._references = index
        return self._references.get(name, [])


class Detector(TreeVisitor):
    """A heuristic issue detector.

    Subclasses set ``name`` and ``issue_type`` and implement
    ``visit_<node_type>`` handlers that call :meth:`DetectionContext.report`.
    Detectors hold configuration only; all per-file state lives on the
    context, which makes ``detect`` safe to call concurrently.
    """

    name: str = "detector"
    issue_type: IssueType = IssueType.SYNTAX

    def detect(self, root: Node, source: str, file_path: str) -> list[CodeIssue]:
        context = DetectionContext(
            file_path=file_path, source=source, root=root, issue_type=self.issue_type
        )
        walk(root, self, context)
        return context.issues

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
