"""Explicit enter/exit tree walking.

Visitors never capture traversal state in closures. Everything a visitor
accumulates (issues, nesting depth, scores) lives on a context object passed
to every callback, so a visitor can be unit-tested by feeding it nodes and a
hand-built context.

Dispatch mirrors :class:`ast.NodeVisitor`: entering a node of type ``T``
calls ``visit_T(node, context)`` and leaving it calls ``leave_T``. The
generic :meth:`TreeVisitor.enter` / :meth:`TreeVisitor.exit` hooks run for
every node and can be overridden instead.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Optional

from tree_sitter import Node


class TreeVisitor:
    """Base visitor with type-name dispatch."""

    def enter(self, node: Node, context: Any) -> None:
        handler = getattr(self, f"visit_{node.type}", None)
        if handler is not None:
            handler(node, context)

    def exit(self, node: Node, context: Any) -> None:
        handler = getattr(self, f"leave_{node.type}", None)
        if handler is not None:
            handler(node, context)


def walk(root: Node, visitor: TreeVisitor, context: Any = None) -> None:
    """Depth-first, pre-order walk over named nodes.

    Iterative so very deep trees (minified bundles) cannot exhaust the
    Python recursion limit.
    """
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, leaving = stack.pop()
        if leaving:
            visitor.exit(node, context)
            continue
        visitor.enter(node, context)
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(node.named_children))


def descendants(
    node: Node,
    types: Optional[Iterable[str]] = None,
    prune: Optional[Callable[[Node], bool]] = None,
) -> Iterator[Node]:
    """Yield named descendants of ``node`` (excluding itself) in document order.

    Args:
        types: Only yield nodes of these types
        prune: Do not descend below nodes for which this returns True
    """
    wanted = frozenset(types) if types is not None else None
    stack = list(reversed(node.named_children))
    while stack:
        current = stack.pop()
        if wanted is None or current.type in wanted:
            yield current
        if prune is not None and prune(current):
            continue
        stack.extend(reversed(current.named_children))


def contains(node: Node, types: Iterable[str]) -> bool:
    return next(descendants(node, types), None) is not None
