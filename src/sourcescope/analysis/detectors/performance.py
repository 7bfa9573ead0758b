"""Performance smells in loops, array pipelines and async functions."""

from __future__ import annotations

from tree_sitter import Node

from ...models import IssueType, Severity
from ..nodes import (
    call_arguments,
    call_method,
    callee,
    is_async,
    line_span,
    member_object,
    member_property,
    operator,
    receiver_name,
)
from ..walker import descendants
from .base import DetectionContext, Detector
from .heuristics import FS_OBJECTS, ITERATION_METHODS, LOOP_TYPES, SYNC_SUFFIX

DEFAULT_LARGE_FUNCTION_LINES = 50


class PerformanceDetector(Detector):
    """Flags nested loops, loop concatenation, wasteful array use and blocking calls.

    Args:
        large_function_lines: Line span above which a function is reported
    """

    name = "performance"
    issue_type = IssueType.PERFORMANCE

    def __init__(self, large_function_lines: int = DEFAULT_LARGE_FUNCTION_LINES):
        self.large_function_lines = large_function_lines

    def visit_for_statement(self, node: Node, context: DetectionContext) -> None:
        nested = 0
        concatenates = False
        for inner in descendants(node):
            if inner.type in LOOP_TYPES:
                nested += 1
            elif inner.type == "binary_expression" and operator(inner) == "+":
                concatenates = True

        if nested >= 2:
            context.report(
                node,
                Severity.WARNING,
                "NESTED_LOOPS",
                f"O(n^{nested + 1}) complexity detected - consider optimization",
            )
        if concatenates:
            context.report(
                node,
                Severity.INFO,
                "STRING_CONCAT_LOOP",
                "String concatenation in loop - use array.join() or template literals",
            )

    def visit_call_expression(self, node: Node, context: DetectionContext) -> None:
        method = call_method(node)

        if method == "forEach":
            arguments = call_arguments(node)
            if arguments is not None and any(
                call_method(inner) == "push"
                for inner in descendants(arguments, ("call_expression",))
            ):
                context.report(
                    node,
                    Severity.INFO,
                    "INEFFICIENT_ARRAY_METHOD",
                    "Use .map() instead of .forEach() with .push()",
                )

        elif method in ITERATION_METHODS and self._is_chained(node):
            context.report(
                node,
                Severity.INFO,
                "MULTIPLE_ITERATIONS",
                "Multiple array iterations detected - consider combining operations",
            )

    def visit_function_declaration(self, node: Node, context: DetectionContext) -> None:
        self._check_function(node, context)

    def visit_generator_function_declaration(self, node: Node, context: DetectionContext) -> None:
        self._check_function(node, context)

    def _check_function(self, node: Node, context: DetectionContext) -> None:
        if is_async(node) and any(
            self._is_sync_fs_call(call) for call in descendants(node, ("call_expression",))
        ):
            context.report(
                node,
                Severity.WARNING,
                "SYNC_IN_ASYNC",
                "Synchronous operation in async function blocks the event loop",
            )

        span = line_span(node)
        if span > self.large_function_lines:
            context.report(
                node,
                Severity.INFO,
                "LARGE_FUNCTION",
                f"Large function ({span} lines) - consider refactoring",
            )

    @staticmethod
    def _is_chained(call: Node) -> bool:
        # arr.map(f).filter(g): the map call is the object of a member that is itself called
        parent = call.parent
        if parent is None or parent.type != "member_expression" or member_object(parent) != call:
            return False
        grandparent = parent.parent
        return grandparent is not None and grandparent.type == "call_expression" and (
            callee(grandparent) == parent
        )

    @staticmethod
    def _is_sync_fs_call(call: Node) -> bool:
        return receiver_name(call) in FS_OBJECTS and member_property(callee(call)).endswith(
            SYNC_SUFFIX
        )

    def __repr__(self) -> str:
        return f"PerformanceDetector(large_function_lines={self.large_function_lines})"
