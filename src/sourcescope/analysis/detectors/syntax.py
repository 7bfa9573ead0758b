"""Syntax-level smells: unused bindings, dead statements, leftovers."""

from __future__ import annotations

from typing import Optional

from tree_sitter import Node

from ...models import IssueFix, IssueType, Severity
from ..nodes import (
    FUNCTION_TYPES,
    STATEMENT_LIST_TYPES,
    callee,
    is_identifier,
    member_object,
    member_property,
    text,
)
from .base import DetectionContext, Detector

# Nearest ancestor that bounds a `var` binding
VAR_SCOPE_TYPES = FUNCTION_TYPES | {"method_definition", "class_static_block", "program"}

# Nearest ancestor that bounds a `let`/`const` binding
BLOCK_SCOPE_TYPES = frozenset(
    {
        "statement_block",
        "switch_body",
        "for_statement",
        "for_in_statement",
        "class_static_block",
        "program",
    }
)

# Declarations under these parents are visible outside the file
EXTERNAL_DECLARATION_PARENTS = frozenset({"export_statement", "ambient_declaration"})


class SyntaxDetector(Detector):
    """Flags unused variables, unreachable code, console/debugger leftovers and empty blocks."""

    name = "syntax"
    issue_type = IssueType.SYNTAX

    def visit_variable_declarator(self, node: Node, context: DetectionContext) -> None:
        binding = node.child_by_field_name("name")
        if not is_identifier(binding):
            return

        declaration = node.parent
        if declaration is None:
            return
        if declaration.parent is not None and declaration.parent.type in EXTERNAL_DECLARATION_PARENTS:
            return

        scope = self._binding_scope(declaration) or context.root
        own = (binding.start_byte, binding.end_byte)
        for start, end in context.references(text(binding)):
            if (start, end) == own:
                continue
            if scope.start_byte <= start and end <= scope.end_byte:
                return

        context.report(
            node, Severity.WARNING, "UNUSED_VARIABLE", f"Unused variable: {text(binding)}"
        )

    def visit_return_statement(self, node: Node, context: DetectionContext) -> None:
        parent = node.parent
        if parent is None or parent.type not in STATEMENT_LIST_TYPES:
            return

        sibling = node.next_named_sibling
        while sibling is not None and sibling.type == "comment":
            sibling = sibling.next_named_sibling
        if sibling is None:
            return

        context.report(
            sibling,
            Severity.WARNING,
            "UNREACHABLE_CODE",
            "Unreachable code detected after return statement",
        )

    def visit_call_expression(self, node: Node, context: DetectionContext) -> None:
        fn = callee(node)
        if not is_identifier(member_object(fn), "console"):
            return
        context.report(
            node,
            Severity.INFO,
            "CONSOLE_STATEMENT",
            f"Console.{member_property(fn)} statement detected",
        )

    def visit_debugger_statement(self, node: Node, context: DetectionContext) -> None:
        context.report(
            node,
            Severity.WARNING,
            "DEBUGGER_STATEMENT",
            "Debugger statement should be removed",
            fix=IssueFix(description="Remove the debugger statement", code=""),
        )

    def visit_statement_block(self, node: Node, context: DetectionContext) -> None:
        if any(child.type != "comment" for child in node.named_children):
            return
        context.report(node, Severity.INFO, "EMPTY_BLOCK", "Empty code block detected")

    @staticmethod
    def _binding_scope(declaration: Node) -> Optional[Node]:
        wanted = VAR_SCOPE_TYPES if declaration.type == "variable_declaration" else BLOCK_SCOPE_TYPES
        scope = declaration.parent
        while scope is not None and scope.type not in wanted:
            scope = scope.parent
        return scope
