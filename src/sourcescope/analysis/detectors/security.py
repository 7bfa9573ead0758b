"""Security smells: code execution, injection, secrets, ReDoS and XSS sinks."""

from __future__ import annotations

from typing import Iterable, Optional

from tree_sitter import Node

from ...models import IssueType, Severity
from ..nodes import (
    call_arguments,
    callee,
    callee_identifier,
    is_identifier,
    member_object,
    member_property,
    string_value,
    text,
)
from ..walker import descendants
from .base import DetectionContext, Detector
from .heuristics import (
    COMMAND_METHODS,
    COMMAND_USER_INPUT_IDENTIFIERS,
    EVAL_FUNCTIONS,
    REDOS_PATTERNS,
    SECRET_MIN_LENGTH,
    SECRET_NAME_FRAGMENTS,
    SQL_METHODS,
    SQL_USER_INPUT_IDENTIFIERS,
    USER_INPUT_PROPERTIES,
    XSS_PROPERTIES,
    name_contains,
)


def contains_user_input(roots: Iterable[Optional[Node]], identifiers: frozenset) -> bool:
    """Whether any of ``roots`` (or their descendants) reads request-like data.

    Matches member accesses ending in body/params/query (``req.body``,
    ``ctx.request.query``) and bare identifiers listed in ``identifiers``.
    """
    for root in roots:
        if root is None:
            continue
        for node in (root, *descendants(root)):
            if node.type == "member_expression":
                if member_property(node).lower() in USER_INPUT_PROPERTIES:
                    return True
            elif node.type == "identifier" and text(node).lower() in identifiers:
                return True
    return False


def is_redos_prone(pattern: str) -> bool:
    return any(regex.search(pattern) for regex in REDOS_PATTERNS)


class SecurityDetector(Detector):
    """Flags eval, SQL/command injection, hardcoded secrets, ReDoS and innerHTML writes."""

    name = "security"
    issue_type = IssueType.SECURITY

    def visit_call_expression(self, node: Node, context: DetectionContext) -> None:
        fn = callee(node)
        plain_name = callee_identifier(node)
        name = (plain_name or member_property(fn)).lower()
        arguments = call_arguments(node)

        if plain_name in EVAL_FUNCTIONS:
            context.report(
                node,
                Severity.ERROR,
                "DANGEROUS_EVAL",
                "Use of eval() is dangerous and should be avoided",
            )

        # The callee's own property (".query") is not input; its receiver chain may be.
        if name in SQL_METHODS and contains_user_input(
            (arguments, member_object(fn)), SQL_USER_INPUT_IDENTIFIERS
        ):
            context.report(
                node,
                Severity.ERROR,
                "SQL_INJECTION",
                "Potential SQL injection - use parameterized queries",
            )

        if name in COMMAND_METHODS and contains_user_input(
            (arguments,), COMMAND_USER_INPUT_IDENTIFIERS
        ):
            context.report(
                node,
                Severity.ERROR,
                "COMMAND_INJECTION",
                "Command execution with user input - validate and sanitize",
            )

    def visit_variable_declarator(self, node: Node, context: DetectionContext) -> None:
        binding = node.child_by_field_name("name")
        if not is_identifier(binding):
            return
        value = string_value(node.child_by_field_name("value"))
        if value is None or len(value) <= SECRET_MIN_LENGTH:
            return
        if not name_contains(text(binding), SECRET_NAME_FRAGMENTS):
            return
        context.report(
            node,
            Severity.ERROR,
            "HARDCODED_SECRET",
            "Hardcoded secret detected - use environment variables",
        )

    def visit_new_expression(self, node: Node, context: DetectionContext) -> None:
        if not is_identifier(node.child_by_field_name("constructor"), "RegExp"):
            return
        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return
        first = next((arg for arg in arguments.named_children if arg.type != "comment"), None)
        pattern = string_value(first)
        if pattern is None or not is_redos_prone(pattern):
            return
        context.report(
            node,
            Severity.WARNING,
            "REDOS_VULNERABILITY",
            "Regular expression may be vulnerable to ReDoS attacks",
        )

    def visit_assignment_expression(self, node: Node, context: DetectionContext) -> None:
        self._check_html_sink(node, context)

    def visit_augmented_assignment_expression(self, node: Node, context: DetectionContext) -> None:
        self._check_html_sink(node, context)

    @staticmethod
    def _check_html_sink(node: Node, context: DetectionContext) -> None:
        if member_property(node.child_by_field_name("left")) not in XSS_PROPERTIES:
            return
        context.report(
            node,
            Severity.WARNING,
            "XSS_RISK",
            "innerHTML usage can lead to XSS - use textContent or sanitize",
        )
