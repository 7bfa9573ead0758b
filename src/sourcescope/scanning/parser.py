"""Parser adapter: source text in, syntax tree or structured failure out.

tree-sitter never refuses input: it wraps damaged regions in ``ERROR``
nodes, inserts zero-width ``MISSING`` nodes, and always hands back a
``program``. A file with a typo therefore still yields a usable tree. The
adapter measures how much of the file sits in damaged regions (each
``ERROR`` node, plus the statement around each ``MISSING`` node) and treats
the parse as unrecoverable once that reaches :data:`MAX_DAMAGED_SHARE` of
the file's non-blank bytes.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Union

from tree_sitter import Node, Tree

from ..logging_config import get_logger
from .languages import grammar_for, is_template
from .templates import extract_scripts
from .treesitter_parser import TreeSitterParser

logger = get_logger(__name__)

# Damaged share of non-blank bytes at which a parse is a hard failure
MAX_DAMAGED_SHARE = 0.5

_BLANKS = b" \t\r\n\f\v"


@dataclass(frozen=True)
class SyntaxTree:
    """A parsed file. ``tree`` keeps the bytes it was parsed from alive."""

    tree: Tree
    source: str
    language: str

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return self.tree.root_node.has_error


@dataclass(frozen=True)
class ParseFailure:
    """Parser diagnostic for an unrecoverable file. Positions are 1-based."""

    message: str
    line: int = 0
    column: int = 0


ParseOutcome = Union[SyntaxTree, ParseFailure]


def iter_error_nodes(node: Node) -> Iterator[Node]:
    """Yield ``ERROR`` and ``MISSING`` nodes in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            yield current
            if current.is_error:
                continue
        if current.has_error:
            stack.extend(reversed(current.children))


def _enclosing_statement(node: Node) -> Optional[Node]:
    current = node.parent
    while current is not None and current.parent is not None:
        kind = current.type
        if kind == "statement_block" or kind.endswith(("_statement", "_declaration")):
            return current
        current = current.parent
    return None


def damaged_share(root: Node, data: bytes) -> float:
    """Fraction of non-blank bytes inside damaged regions of the tree."""
    total = len(data.translate(None, _BLANKS))
    if total == 0:
        return 0.0
    if root.is_error:
        return 1.0

    spans = []
    for node in iter_error_nodes(root):
        region = node if node.is_error else _enclosing_statement(node)
        if region is not None:
            spans.append((region.start_byte, region.end_byte))

    damaged = 0
    covered_to = 0
    for start, end in sorted(spans):
        start = max(start, covered_to)
        if end > start:
            damaged += len(data[start:end].translate(None, _BLANKS))
            covered_to = end
    return damaged / total


class ParserAdapter:
    """Turns raw source into a :class:`SyntaxTree` or :class:`ParseFailure`.

    Holds one :class:`TreeSitterParser` per thread, so a single adapter can
    be shared by a worker pool.
    """

    def __init__(self, parser_factory: Callable[[], TreeSitterParser] = TreeSitterParser):
        self._parser_factory = parser_factory
        self._local = threading.local()

    def _parser(self) -> TreeSitterParser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = self._parser_factory()
            self._local.parser = parser
        return parser

    def parse(self, source: str, file_path: str) -> ParseOutcome:
        if is_template(file_path):
            text, language = extract_scripts(source)
        else:
            text, language = source, grammar_for(file_path)

        parser = self._parser()
        if not parser.is_language_supported(language):
            return ParseFailure(message=f"No {language} grammar available for {file_path}")

        data = text.encode("utf-8")
        tree = parser.parse(data, language)
        if tree is None:
            return ParseFailure(message=f"Unable to parse {file_path} as {language}")

        syntax_tree = SyntaxTree(tree=tree, source=text, language=language)
        if not syntax_tree.has_errors:
            return syntax_tree

        first = self._first_error(tree.root_node)
        line = first.start_point[0] + 1 if first else 0
        column = first.start_point[1] + 1 if first else 0

        share = damaged_share(tree.root_node, data)
        if share >= MAX_DAMAGED_SHARE:
            logger.debug(f"Unrecoverable syntax in {file_path} ({share:.0%} damaged)")
            return ParseFailure(message=self._describe(first, data), line=line, column=column)

        logger.debug(f"Recovered from syntax error in {file_path} at {line}:{column}")
        return syntax_tree

    @staticmethod
    def _first_error(root: Node) -> Optional[Node]:
        # Prefer the earliest offender below the root for the diagnostic
        for node in iter_error_nodes(root):
            if node != root:
                return node
        return root if (root.is_error or root.is_missing) else None

    @staticmethod
    def _describe(node: Optional[Node], data: bytes) -> str:
        if node is None:
            return "Unexpected token"
        if node.is_missing:
            return f"Missing {node.type}"
        token = data[node.start_byte:node.end_byte].split(None, 1)
        if not token:
            return "Unexpected token"
        return f"Unexpected token {token[0].decode('utf-8', 'replace')[:40]!r}"
