"""Small helpers for reading tree-sitter nodes of the script grammars."""

from __future__ import annotations

from typing import Optional

from tree_sitter import Node

FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
    }
)

CLASS_DECLARATION_TYPES = frozenset({"class_declaration", "abstract_class_declaration"})

# Parents whose children form an ordered statement list
STATEMENT_LIST_TYPES = frozenset(
    {"program", "statement_block", "switch_case", "switch_default", "class_static_block"}
)


def text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def position(node: Node) -> tuple[int, int]:
    """1-based (line, column) of the node start."""
    row, column = node.start_point
    return row + 1, column + 1


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression":
        node = node.named_children[0] if node.named_child_count else None
    return node


def is_async(node: Node) -> bool:
    return any(child.type == "async" for child in node.children)


def operator(node: Node) -> str:
    op = node.child_by_field_name("operator")
    return op.type if op is not None else ""


def is_identifier(node: Optional[Node], name: Optional[str] = None) -> bool:
    if node is None or node.type != "identifier":
        return False
    return name is None or text(node) == name


def member_property(node: Optional[Node]) -> str:
    """Property name of a ``member_expression``, or ``""``."""
    if node is None or node.type != "member_expression":
        return ""
    return text(node.child_by_field_name("property"))


def member_object(node: Optional[Node]) -> Optional[Node]:
    if node is None or node.type != "member_expression":
        return None
    return node.child_by_field_name("object")


def callee(call: Node) -> Optional[Node]:
    return call.child_by_field_name("function")


def call_method(call: Node) -> str:
    """``x.method(...)`` -> ``"method"``; ``""`` for plain calls."""
    return member_property(callee(call))


def receiver_name(call: Node) -> str:
    """``obj.method(...)`` -> ``"obj"`` when the receiver is a bare identifier."""
    obj = member_object(callee(call))
    return text(obj) if is_identifier(obj) else ""


def callee_identifier(call: Node) -> str:
    """``name(...)`` -> ``"name"``; ``""`` when the callee is not an identifier."""
    fn = callee(call)
    return text(fn) if is_identifier(fn) else ""


def call_arguments(call: Node) -> Optional[Node]:
    return call.child_by_field_name("arguments")


def parent_skipping_parens(node: Node) -> Optional[Node]:
    parent = node.parent
    while parent is not None and parent.type == "parenthesized_expression":
        parent = parent.parent
    return parent


def string_value(node: Optional[Node]) -> Optional[str]:
    """Raw contents of a quoted string literal, without the quotes."""
    if node is None or node.type != "string":
        return None
    raw = text(node)
    if len(raw) >= 2 and raw[0] in "'\"" and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def line_span(node: Node) -> int:
    return node.end_point[0] - node.start_point[0]
