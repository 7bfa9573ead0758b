"""Cyclomatic and cognitive complexity over a syntax tree.

Both scores are computed for the whole tree handed in (a file, or a single
function node). They only look at node types, so ``ERROR`` regions left by
error recovery are simply walked through.
"""

from __future__ import annotations

from dataclasses import dataclass

from tree_sitter import Node

from .nodes import operator
from .walker import TreeVisitor, walk

LOGICAL_OPERATORS = frozenset({"&&", "||"})

# for_in_statement covers both for-in and for-of
DECISION_TYPES = frozenset(
    {
        "if_statement",
        "for_statement",
        "for_in_statement",
        "while_statement",
        "do_statement",
        "catch_clause",
        "ternary_expression",
    }
)

NESTING_TYPES = frozenset({"if_statement", "for_statement", "while_statement", "switch_statement"})


@dataclass
class ComplexityContext:
    score: int = 0
    nesting: int = 0


class CyclomaticVisitor(TreeVisitor):
    """Flat count of decision points; no nesting weight."""

    def enter(self, node: Node, context: ComplexityContext) -> None:
        if node.type in DECISION_TYPES:
            context.score += 1
        elif node.type == "switch_case":
            # `default:` is a separate switch_default node
            context.score += 1
        elif node.type == "binary_expression" and operator(node) in LOGICAL_OPERATORS:
            context.score += 1

    def exit(self, node: Node, context: ComplexityContext) -> None:
        pass


class CognitiveVisitor(TreeVisitor):
    """Nesting-weighted score: each structure costs ``1 + current nesting``."""

    def enter(self, node: Node, context: ComplexityContext) -> None:
        if node.type in NESTING_TYPES:
            context.score += 1 + context.nesting
            context.nesting += 1
        elif node.type == "binary_expression" and operator(node) in LOGICAL_OPERATORS:
            context.score += 1

    def exit(self, node: Node, context: ComplexityContext) -> None:
        if node.type in NESTING_TYPES:
            context.nesting -= 1


class ComplexityCalculator:
    """Computes both complexity flavours. Stateless; safe to share."""

    def calculate(self, root: Node) -> int:
        """Cyclomatic complexity, starting at 1."""
        context = ComplexityContext(score=1)
        walk(root, CyclomaticVisitor(), context)
        return context.score

    def calculate_cognitive(self, root: Node) -> int:
        context = ComplexityContext()
        walk(root, CognitiveVisitor(), context)
        return context.score
