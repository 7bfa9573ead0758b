"""Script extraction for component template formats (.vue, .svelte).

Only the ``<script>`` blocks of a component hold code the detectors
understand. Everything else is replaced by spaces, keeping newlines, so
line and column numbers reported on the extracted text still point at the
right place in the component file.
"""

from __future__ import annotations

import re

from .languages import TSX, TYPESCRIPT

_SCRIPT_BLOCK = re.compile(
    r"(?P<open><script\b(?P<attrs>[^>]*)>)(?P<body>.*?)</script\s*>",
    re.DOTALL | re.IGNORECASE,
)
_LANG_ATTR = re.compile(r"""\blang\s*=\s*["']?(?P<lang>[\w-]+)""", re.IGNORECASE)


def _blank(text: str) -> str:
    return re.sub(r"[^\n]", " ", text)


def extract_scripts(source: str) -> tuple[str, str]:
    """Return ``(script_text, grammar)`` for a component file.

    The grammar is ``typescript`` when any script block declares
    ``lang="ts"``, otherwise ``tsx``. A component without script blocks
    yields blank text, which parses to an empty program.
    """
    parts: list[str] = []
    grammar = TSX
    cursor = 0

    for match in _SCRIPT_BLOCK.finditer(source):
        parts.append(_blank(source[cursor : match.start("body")]))
        parts.append(match.group("body"))
        cursor = match.end("body")

        lang = _LANG_ATTR.search(match.group("attrs") or "")
        if lang and lang.group("lang").lower() in ("ts", "typescript"):
            grammar = TYPESCRIPT

    parts.append(_blank(source[cursor:]))
    return "".join(parts), grammar
