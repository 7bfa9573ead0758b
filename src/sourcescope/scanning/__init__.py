"""File discovery, framework detection and parsing."""

from .frameworks import FrameworkDetector, FrameworkProfile, GENERIC_FRAMEWORK
from .parser import ParseFailure, ParserAdapter, SyntaxTree
from .scanner import ScanResult, SourceTreeScanner

__all__ = [
    "FrameworkDetector",
    "FrameworkProfile",
    "GENERIC_FRAMEWORK",
    "ParseFailure",
    "ParserAdapter",
    "SyntaxTree",
    "ScanResult",
    "SourceTreeScanner",
]
