"""Logic smells: unhandled promises, missing returns, runaway loops."""

from __future__ import annotations

from tree_sitter import Node

from ...models import IssueFix, IssueType, Severity
from ..nodes import (
    call_method,
    callee,
    callee_identifier,
    is_async,
    is_identifier,
    member_property,
    operator,
    parent_skipping_parens,
    receiver_name,
    text,
    unwrap_parens,
)
from ..walker import contains, descendants
from .base import DetectionContext, Detector
from .heuristics import (
    API_CALL_FRAGMENTS,
    API_CALL_NAMES,
    NAN_OPERATORS,
    PROMISE_HANDLERS,
    PROMISE_METHODS,
    PROMISE_RECEIVER_FRAGMENTS,
    name_contains,
)


class LogicDetector(Detector):
    """Flags likely logic errors around promises, returns, loops and NaN."""

    name = "logic"
    issue_type = IssueType.LOGIC

    def visit_call_expression(self, node: Node, context: DetectionContext) -> None:
        if not self.is_promise_call(node):
            return
        parent = parent_skipping_parens(node)
        if parent is not None and parent.type == "await_expression":
            return
        if self.is_handled(node):
            return
        context.report(
            node,
            Severity.ERROR,
            "UNHANDLED_PROMISE",
            "Unhandled promise - use await or .catch()",
        )

    def visit_function_declaration(self, node: Node, context: DetectionContext) -> None:
        self._check_function(node, context)

    def visit_generator_function_declaration(self, node: Node, context: DetectionContext) -> None:
        self._check_function(node, context)

    def visit_while_statement(self, node: Node, context: DetectionContext) -> None:
        condition = unwrap_parens(node.child_by_field_name("condition"))
        if condition is None or condition.type != "true":
            return
        if contains(node, ("break_statement", "return_statement")):
            return
        context.report(node, Severity.ERROR, "INFINITE_LOOP", "Potential infinite loop detected")

    def visit_for_statement(self, node: Node, context: DetectionContext) -> None:
        if not any(self.is_api_call(call) for call in descendants(node, ("call_expression",))):
            return
        context.report(
            node,
            Severity.WARNING,
            "API_CALL_IN_LOOP",
            "API call inside loop - consider batching or using Promise.all()",
        )

    def visit_binary_expression(self, node: Node, context: DetectionContext) -> None:
        if operator(node) not in NAN_OPERATORS:
            return
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if is_identifier(right, "NaN"):
            other = left
        elif is_identifier(left, "NaN"):
            other = right
        else:
            return
        context.report(
            node,
            Severity.ERROR,
            "NAN_COMPARISON",
            "Use Number.isNaN() instead of comparing with NaN",
            fix=IssueFix(
                description="Compare with Number.isNaN()",
                code=f"Number.isNaN({text(other)})",
            ),
        )

    def _check_function(self, node: Node, context: DetectionContext) -> None:
        body = node.child_by_field_name("body")

        if is_async(node) and (body is None or not contains(body, ("try_statement",))):
            context.report(
                node,
                Severity.WARNING,
                "ASYNC_NO_TRY_CATCH",
                "Async function without try-catch block",
            )

        if not contains(node, ("return_statement",)) and not self.is_void(node):
            context.report(
                node,
                Severity.WARNING,
                "MISSING_RETURN",
                "Function may not return a value in all code paths",
            )

    @staticmethod
    def is_promise_call(call: Node) -> bool:
        """``x.then()``, ``x.fetch()`` or any call on an axios/fetch-named receiver."""
        fn = callee(call)
        if fn is None or fn.type != "member_expression":
            return False
        if member_property(fn) in PROMISE_METHODS:
            return True
        receiver = receiver_name(call)
        return any(fragment in receiver for fragment in PROMISE_RECEIVER_FRAGMENTS)

    @staticmethod
    def is_handled(call: Node) -> bool:
        """True when ``.then``/``.catch`` is chained onto or inside the call."""
        parent = parent_skipping_parens(call)
        if (
            parent is not None
            and parent.type == "member_expression"
            and member_property(parent) in PROMISE_HANDLERS
            and parent.parent is not None
            and parent.parent.type == "call_expression"
        ):
            return True
        return any(
            call_method(inner) in PROMISE_HANDLERS
            for inner in descendants(call, ("call_expression",))
        )

    @staticmethod
    def is_api_call(call: Node) -> bool:
        name = callee_identifier(call) or receiver_name(call)
        if not name:
            return False
        return name in API_CALL_NAMES or name_contains(name, API_CALL_FRAGMENTS)

    @staticmethod
    def is_void(function: Node) -> bool:
        annotation = function.child_by_field_name("return_type")
        return annotation is not None and text(annotation).lstrip(":").strip() == "void"

