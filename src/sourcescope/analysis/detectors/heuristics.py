"""Name-matching tables used by the detectors.

The detectors are deliberately name-based: "user input", "API call" and
"filesystem object" are recognised from identifier spellings, not from
types or data flow. The tables live here, apart from the traversal code, so
they can be extended without touching any visitor.

All entries are lowercase unless noted; matching lowercases the candidate.
"""

import re

# Logic detector -------------------------------------------------------------

# Member calls with one of these property names produce a promise
PROMISE_METHODS = frozenset({"then", "fetch"})

# Receiver identifiers containing one of these substrings are HTTP clients
PROMISE_RECEIVER_FRAGMENTS = ("axios", "fetch")

# Chaining any of these onto a promise counts as handling it
PROMISE_HANDLERS = frozenset({"then", "catch"})

# Callee or receiver names that are network calls outright (exact match)
API_CALL_NAMES = frozenset({"fetch", "axios"})

# ... or that contain one of these substrings (case-insensitive)
API_CALL_FRAGMENTS = ("http", "api")

NAN_OPERATORS = frozenset({"==", "==="})

# Performance detector -------------------------------------------------------

LOOP_TYPES = frozenset({"for_statement", "while_statement"})

ITERATION_METHODS = frozenset({"map", "filter", "reduce"})

# Receivers treated as the filesystem module (exact, case-sensitive)
FS_OBJECTS = frozenset({"fs", "fse"})

SYNC_SUFFIX = "Sync"

# Security detector ----------------------------------------------------------

EVAL_FUNCTIONS = frozenset({"eval"})

SQL_METHODS = frozenset({"query", "execute", "raw"})

COMMAND_METHODS = frozenset({"exec", "spawn", "execsync", "spawnsync"})

# Member properties that expose request data, e.g. req.body, ctx.request.query
USER_INPUT_PROPERTIES = frozenset({"body", "params", "query"})

# Bare identifiers that look like user-provided values
SQL_USER_INPUT_IDENTIFIERS = frozenset({"body", "params", "query", "username", "email", "password"})
COMMAND_USER_INPUT_IDENTIFIERS = frozenset(
    {"body", "params", "query", "username", "password", "token"}
)

SECRET_NAME_FRAGMENTS = ("password", "secret", "key", "token")

# Literals longer than this are treated as real secrets, not placeholders
SECRET_MIN_LENGTH = 8

# Nested or repeated quantifiers: "(a+)+", "a**", "x{2}{3}"
REDOS_PATTERNS = (
    re.compile(r"(\([^\)]*\))?([+*{].*?[+*{])"),
    re.compile(r"(\*|\+|\{[0-9,]+\}){2,}"),
)

XSS_PROPERTIES = frozenset({"innerHTML"})


def name_contains(name: str, fragments) -> bool:
    lowered = name.lower()
    return any(fragment in lowered for fragment in fragments)
