"""Tree-sitter parser wrapper.

Provides a unified interface over the TypeScript and TSX grammars shipped by
``tree-sitter-typescript``.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "tsx")
"""

from __future__ import annotations

from typing import Any, Optional

import tree_sitter
import tree_sitter_typescript

from ..logging_config import get_logger
from .languages import TSX, TYPESCRIPT

logger = get_logger(__name__)

_GRAMMARS = {
    TYPESCRIPT: tree_sitter_typescript.language_typescript,
    TSX: tree_sitter_typescript.language_tsx,
}


class TreeSitterParser:
    """Wrapper around tree-sitter for the script grammars.

    tree-sitter parser objects are not thread-safe; create one instance per
    thread.
    """

    def __init__(self) -> None:
        self._parsers: dict[str, Any] = {}
        self._languages: dict[str, Any] = {}

        for lang_name, lang_fn in _GRAMMARS.items():
            try:
                # tree-sitter >= 0.23 returns PyCapsule; wrap in Language()
                lang_obj = tree_sitter.Language(lang_fn())
                self._parsers[lang_name] = tree_sitter.Parser(lang_obj)
                self._languages[lang_name] = lang_obj
            except Exception as e:
                logger.warning(f"Cannot load {lang_name} grammar: {e}")

    def parse(self, code: bytes, language: str) -> Optional[tree_sitter.Tree]:
        """Parse code and return syntax tree.

        Args:
            code: Source code as bytes
            language: Grammar name ("typescript" or "tsx")

        Returns:
            Tree object if successful, None if the grammar is unavailable
            or tree-sitter gave up
        """
        parser = self._parsers.get(language)
        if parser is None:
            return None

        try:
            return parser.parse(code)
        except Exception as e:
            logger.debug(f"tree-sitter failed on {language} input: {e}")
            return None

    def is_language_supported(self, language: str) -> bool:
        """Check if a grammar is loaded."""
        return language in self._parsers
