"""Extension to grammar mapping for the supported script family."""

from __future__ import annotations

from pathlib import PurePath

TYPESCRIPT = "typescript"
TSX = "tsx"

# Plain TypeScript cannot use the TSX grammar: `<T>value` casts clash with JSX.
TYPESCRIPT_EXTENSIONS = frozenset({".ts", ".mts", ".cts"})

# Component formats whose code lives inside <script> blocks
TEMPLATE_EXTENSIONS = frozenset({".vue", ".svelte"})


def grammar_for(path: str | PurePath) -> str:
    """Pick the tree-sitter grammar for a file.

    TSX is a superset of JavaScript, JSX and TypeScript, so every script
    variant that is not plain TypeScript parses with it.
    """
    suffix = PurePath(path).suffix.lower()
    if suffix in TYPESCRIPT_EXTENSIONS:
        return TYPESCRIPT
    return TSX


def is_template(path: str | PurePath) -> bool:
    return PurePath(path).suffix.lower() in TEMPLATE_EXTENSIONS
